"""Meetup gatherings (read-only) and refunds that failed automated settlement."""
from __future__ import annotations

from admin_console.controllers.base import QueueController
from admin_console.invalidation import FAILED_REFUNDS, GATHERINGS
from admin_console.query_cache import MutationResult
from admin_console.schemas import FailedRefund, Gathering, GatheringStatus


class GatheringsController(QueueController[Gathering]):
    root = GATHERINGS
    title = "Gatherings"
    statuses = tuple(s.value for s in GatheringStatus)

    async def fetch_page(self, page, status):
        return await self.api.get_gatherings(status, page, self.page_size)


class FailedRefundsController(QueueController[FailedRefund]):
    root = FAILED_REFUNDS
    title = "Failed refunds"

    async def fetch_page(self, page, status):
        return await self.api.get_failed_refunds(page, self.page_size)

    async def mark_completed(self, participant_id: int) -> MutationResult:
        """Acknowledge a refund settled by hand; the row leaves the list on re-fetch."""
        return await self.run(
            "refunds.complete",
            lambda: self.api.mark_refund_completed(participant_id),
            participant_id=participant_id,
        )
