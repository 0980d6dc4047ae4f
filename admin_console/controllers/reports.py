"""Review reports and chat reports: filter by status, inspect, process."""
from __future__ import annotations

from typing import Optional

from admin_console.controllers.base import QueueController
from admin_console.invalidation import CHAT_REPORTS, REPORTS
from admin_console.query_cache import MutationResult, QueryResult
from admin_console.schemas import (
    ChatReport,
    ProcessAction,
    ProcessChatReportIn,
    ProcessReportIn,
    Report,
    ReportStatus,
)

REPORT_STATUSES = tuple(s.value for s in ReportStatus)


def _note(admin_note: Optional[str]) -> Optional[str]:
    return admin_note.strip() if admin_note and admin_note.strip() else None


class ReportsController(QueueController[Report]):
    root = REPORTS
    title = "Review reports"
    statuses = REPORT_STATUSES
    default_status = ReportStatus.PENDING.value

    async def fetch_page(self, page, status):
        return await self.api.get_reports(status, page, self.page_size)

    async def detail(self, report_id: int) -> QueryResult[Report]:
        return await self.cached_detail(report_id, lambda: self.api.get_report(report_id))

    async def process(
        self,
        report_id: int,
        action: ProcessAction | str,
        admin_note: Optional[str] = None,
        delete_review: bool = False,
    ) -> MutationResult:
        """RESOLVE (optionally deleting the review) or REJECT one report."""
        action = ProcessAction(action)
        data = ProcessReportIn(
            action=action,
            admin_note=_note(admin_note),
            delete_review=delete_review if action == ProcessAction.RESOLVE else None,
        )
        return await self.run(
            "reports.process",
            lambda: self.api.process_report(report_id, data),
            report_id=report_id,
            action=action.value,
            delete_review=bool(data.delete_review),
        )


class ChatReportsController(QueueController[ChatReport]):
    root = CHAT_REPORTS
    title = "Chat reports"
    statuses = REPORT_STATUSES
    default_status = ReportStatus.PENDING.value

    async def fetch_page(self, page, status):
        return await self.api.get_chat_reports(status, page, self.page_size)

    async def detail(self, report_id: int) -> QueryResult[ChatReport]:
        return await self.cached_detail(report_id, lambda: self.api.get_chat_report(report_id))

    async def process(
        self,
        report_id: int,
        action: ProcessAction | str,
        admin_note: Optional[str] = None,
    ) -> MutationResult:
        action = ProcessAction(action)
        data = ProcessChatReportIn(action=action, admin_note=_note(admin_note))
        return await self.run(
            "chat_reports.process",
            lambda: self.api.process_chat_report(report_id, data),
            report_id=report_id,
            action=action.value,
        )
