"""Page controllers for the console queues."""
from .approvals import PendingRestaurantsController, ReceiptReviewsController
from .base import QueueController, QueueView
from .dashboard import DashboardController, StatCard
from .gatherings import FailedRefundsController, GatheringsController
from .reports import ChatReportsController, ReportsController

__all__ = [
    "QueueController",
    "QueueView",
    "DashboardController",
    "StatCard",
    "ReportsController",
    "ChatReportsController",
    "ReceiptReviewsController",
    "PendingRestaurantsController",
    "GatheringsController",
    "FailedRefundsController",
]
