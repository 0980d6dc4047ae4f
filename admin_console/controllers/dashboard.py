"""Dashboard: aggregate counts, recomputed by the backend on every fetch."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from admin_console.admin_api import AdminAPI
from admin_console.invalidation import stats_key
from admin_console.query_cache import QueryClient, QueryResult
from admin_console.schemas import AdminStats


@dataclass(frozen=True)
class StatCard:
    label: str
    value: int
    tone: str
    link: Optional[str] = None


class DashboardController:
    def __init__(self, api: AdminAPI, queries: QueryClient):
        self.api = api
        self.queries = queries

    async def load(self) -> QueryResult[AdminStats]:
        async def query() -> AdminStats:
            return (await self.api.get_stats()).unwrap()

        return await self.queries.fetch(stats_key(), query)

    @staticmethod
    def cards(stats: Optional[AdminStats]) -> List[StatCard]:
        stats = stats or AdminStats()
        return [
            StatCard("Total users", stats.total_users, "blue"),
            StatCard("Total reviews", stats.total_reviews, "green"),
            StatCard("Registered restaurants", stats.total_restaurants, "purple"),
            StatCard("Pending reports", stats.pending_reports, "red", "/reports"),
            StatCard("Pending chat reports", stats.pending_chat_reports, "red", "/chat-reports"),
            StatCard("Receipts to verify", stats.pending_receipt_reviews, "orange", "/receipt-reviews"),
            StatCard("Restaurants to approve", stats.pending_restaurants, "orange", "/restaurants"),
            StatCard("Failed refunds", stats.failed_refunds, "pink", "/refunds"),
        ]
