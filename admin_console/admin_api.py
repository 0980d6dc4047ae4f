"""
Domain API facade: one coroutine per backend operation.

Each function maps a request shape onto an endpoint of the backend REST
contract and parses the ``{success, data, message?}`` envelope into typed
models. No business logic lives here; the only local rule is that a
restaurant rejection needs a non-blank reason, checked before anything is
sent.
"""
from __future__ import annotations

from typing import Any, Optional

from admin_console.api_client import APIClient
from admin_console.errors import ValidationFailed
from admin_console.schemas import (
    AdminStats,
    ApiResponse,
    ChatReport,
    FailedRefund,
    Gathering,
    LoginIn,
    LoginResult,
    Page,
    PendingRestaurant,
    ProcessChatReportIn,
    ProcessReportIn,
    ReceiptReview,
    RejectRestaurantIn,
    Report,
    User,
)

DEFAULT_PAGE_SIZE = 10


def _page_params(page: int, size: int, status: Optional[str] = None) -> dict:
    # status=None means "all statuses" and is omitted from the query string
    return {"status": status or None, "page": page, "size": size}


def _body(model) -> dict:
    return model.model_dump(by_alias=True, exclude_none=True, mode="json")


class AdminAPI:
    """Typed access to auth and admin endpoints."""

    def __init__(self, client: APIClient):
        self.client = client

    # ============ AUTH ============

    async def login(self, email: str, password: str) -> ApiResponse[LoginResult]:
        payload = await self.client.post("/auth/login", json=_body(LoginIn(email=email, password=password)))
        return ApiResponse[LoginResult].model_validate(payload)

    async def get_current_user(self) -> ApiResponse[User]:
        payload = await self.client.get("/users/me")
        return ApiResponse[User].model_validate(payload)

    # ============ DASHBOARD ============

    async def get_stats(self) -> ApiResponse[AdminStats]:
        payload = await self.client.get("/admin/stats")
        return ApiResponse[AdminStats].model_validate(payload)

    # ============ REVIEW REPORTS ============

    async def get_reports(
        self,
        status: Optional[str] = None,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE
    ) -> ApiResponse[Page[Report]]:
        payload = await self.client.get("/admin/reports", params=_page_params(page, size, status))
        return ApiResponse[Page[Report]].model_validate(payload)

    async def get_report(self, report_id: int) -> ApiResponse[Report]:
        payload = await self.client.get(f"/admin/reports/{report_id}")
        return ApiResponse[Report].model_validate(payload)

    async def process_report(self, report_id: int, data: ProcessReportIn) -> ApiResponse[Any]:
        payload = await self.client.post(f"/admin/reports/{report_id}/process", json=_body(data))
        return ApiResponse[Any].model_validate(payload)

    # ============ CHAT REPORTS ============

    async def get_chat_reports(
        self,
        status: Optional[str] = None,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE
    ) -> ApiResponse[Page[ChatReport]]:
        payload = await self.client.get("/admin/chat-reports", params=_page_params(page, size, status))
        return ApiResponse[Page[ChatReport]].model_validate(payload)

    async def get_chat_report(self, report_id: int) -> ApiResponse[ChatReport]:
        payload = await self.client.get(f"/admin/chat-reports/{report_id}")
        return ApiResponse[ChatReport].model_validate(payload)

    async def process_chat_report(self, report_id: int, data: ProcessChatReportIn) -> ApiResponse[Any]:
        payload = await self.client.post(f"/admin/chat-reports/{report_id}/process", json=_body(data))
        return ApiResponse[Any].model_validate(payload)

    # ============ RECEIPT REVIEWS ============

    async def get_pending_receipt_reviews(
        self,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE
    ) -> ApiResponse[Page[ReceiptReview]]:
        payload = await self.client.get("/admin/receipt-reviews", params=_page_params(page, size))
        return ApiResponse[Page[ReceiptReview]].model_validate(payload)

    async def approve_receipt(self, review_id: int) -> ApiResponse[Any]:
        payload = await self.client.post(f"/admin/receipt-reviews/{review_id}/approve")
        return ApiResponse[Any].model_validate(payload)

    async def reject_receipt(self, review_id: int) -> ApiResponse[Any]:
        payload = await self.client.post(f"/admin/receipt-reviews/{review_id}/reject")
        return ApiResponse[Any].model_validate(payload)

    # ============ PENDING RESTAURANTS ============

    async def get_pending_restaurants(
        self,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE
    ) -> ApiResponse[Page[PendingRestaurant]]:
        payload = await self.client.get("/admin/restaurants/pending", params=_page_params(page, size))
        return ApiResponse[Page[PendingRestaurant]].model_validate(payload)

    async def approve_restaurant(self, restaurant_id: int) -> ApiResponse[Any]:
        payload = await self.client.post(f"/admin/restaurants/{restaurant_id}/approve")
        return ApiResponse[Any].model_validate(payload)

    async def reject_restaurant(self, restaurant_id: int, reason: str) -> ApiResponse[Any]:
        """
        Reject a pending restaurant.

        Raises:
            ValidationFailed: reason is empty or whitespace; no request is made.
        """
        if not reason or not reason.strip():
            raise ValidationFailed("Rejection reason is required")
        payload = await self.client.post(
            f"/admin/restaurants/{restaurant_id}/reject",
            json=_body(RejectRestaurantIn(reason=reason))
        )
        return ApiResponse[Any].model_validate(payload)

    # ============ GATHERINGS ============

    async def get_gatherings(
        self,
        status: Optional[str] = None,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE
    ) -> ApiResponse[Page[Gathering]]:
        payload = await self.client.get("/admin/gatherings", params=_page_params(page, size, status))
        return ApiResponse[Page[Gathering]].model_validate(payload)

    # ============ FAILED REFUNDS ============

    async def get_failed_refunds(
        self,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE
    ) -> ApiResponse[Page[FailedRefund]]:
        payload = await self.client.get("/admin/refunds/failed", params=_page_params(page, size))
        return ApiResponse[Page[FailedRefund]].model_validate(payload)

    async def mark_refund_completed(self, participant_id: int) -> ApiResponse[Any]:
        payload = await self.client.post(f"/admin/refunds/{participant_id}/complete")
        return ApiResponse[Any].model_validate(payload)
