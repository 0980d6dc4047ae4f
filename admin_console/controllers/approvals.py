"""Approval queues: receipt-verified reviews and newly registered restaurants."""
from __future__ import annotations

from admin_console.controllers.base import QueueController
from admin_console.invalidation import PENDING_RESTAURANTS, RECEIPT_REVIEWS
from admin_console.query_cache import MutationResult
from admin_console.schemas import PendingRestaurant, ReceiptReview


class ReceiptReviewsController(QueueController[ReceiptReview]):
    root = RECEIPT_REVIEWS
    title = "Receipt verification"

    async def fetch_page(self, page, status):
        return await self.api.get_pending_receipt_reviews(page, self.page_size)

    async def approve(self, review_id: int) -> MutationResult:
        return await self.run(
            "receipt_reviews.approve",
            lambda: self.api.approve_receipt(review_id),
            review_id=review_id,
        )

    async def reject(self, review_id: int) -> MutationResult:
        return await self.run(
            "receipt_reviews.reject",
            lambda: self.api.reject_receipt(review_id),
            review_id=review_id,
        )


class PendingRestaurantsController(QueueController[PendingRestaurant]):
    root = PENDING_RESTAURANTS
    title = "Restaurant approval"

    async def fetch_page(self, page, status):
        return await self.api.get_pending_restaurants(page, self.page_size)

    async def approve(self, restaurant_id: int) -> MutationResult:
        return await self.run(
            "restaurants.approve",
            lambda: self.api.approve_restaurant(restaurant_id),
            restaurant_id=restaurant_id,
        )

    async def reject(self, restaurant_id: int, reason: str) -> MutationResult:
        """A blank reason comes back as an invalid result; nothing is sent."""
        return await self.run(
            "restaurants.reject",
            lambda: self.api.reject_restaurant(restaurant_id, reason),
            restaurant_id=restaurant_id,
        )
