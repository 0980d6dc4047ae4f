"""Query keys and the mutation -> invalidated-queries table.

Every cached list is keyed ``(root, page, status)``; the dashboard counts are
keyed ``(STATS,)``. A mutation marks stale every key under each root listed
for it, so both the queue it touched and the dashboard counts re-fetch on
their next read.
"""
from __future__ import annotations

from typing import Dict, Optional, Tuple

STATS = "admin-stats"
REPORTS = "reports"
CHAT_REPORTS = "chat-reports"
RECEIPT_REVIEWS = "receipt-reviews"
PENDING_RESTAURANTS = "pending-restaurants"
GATHERINGS = "gatherings"
FAILED_REFUNDS = "failed-refunds"

QueryKey = Tuple

INVALIDATIONS: Dict[str, Tuple[str, ...]] = {
    "reports.process": (REPORTS, STATS),
    "chat_reports.process": (CHAT_REPORTS, STATS),
    "receipt_reviews.approve": (RECEIPT_REVIEWS, STATS),
    "receipt_reviews.reject": (RECEIPT_REVIEWS, STATS),
    "restaurants.approve": (PENDING_RESTAURANTS, STATS),
    "restaurants.reject": (PENDING_RESTAURANTS, STATS),
    "refunds.complete": (FAILED_REFUNDS, STATS),
}


def stats_key() -> QueryKey:
    return (STATS,)


def list_key(root: str, page: int, status: Optional[str] = None) -> QueryKey:
    return (root, page, status or None)


def invalidated_roots(action: str) -> Tuple[str, ...]:
    """Roots to mark stale after ``action`` succeeds (KeyError for unknown actions)."""
    return INVALIDATIONS[action]
