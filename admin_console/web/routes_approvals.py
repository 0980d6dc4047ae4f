"""Receipt verification and restaurant approval queues."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Request

from admin_console.controllers import PendingRestaurantsController, ReceiptReviewsController
from admin_console.web.deps import Console, require_admin
from admin_console.web.rendering import after_mutation, queue_url, render, render_page

router = APIRouter(tags=["approvals"])


def _receipts(console: Console) -> ReceiptReviewsController:
    return ReceiptReviewsController(console.api, console.queries, console.settings.PAGE_SIZE)


def _restaurants(console: Console) -> PendingRestaurantsController:
    return PendingRestaurantsController(console.api, console.queries, console.settings.PAGE_SIZE)


# ════════════════════════════════════════════════════════════════════════════
# Receipt-verified reviews
# ════════════════════════════════════════════════════════════════════════════
@router.get("/receipt-reviews")
async def receipt_reviews_page(request: Request, page: int = 0, console: Console = Depends(require_admin)):
    ctrl = _receipts(console)
    return render_page(request, console, "queue_page.html", {
        "title": ctrl.title,
        "subtitle": "Reviews whose receipt could not be verified automatically.",
        "base_path": "/receipt-reviews",
        "list_url": queue_url("/receipt-reviews/list", None, page),
    })


@router.get("/receipt-reviews/list")
async def receipt_reviews_list(request: Request, page: int = 0, console: Console = Depends(require_admin)):
    view = await _receipts(console).load(page)
    return render(request, "partials/receipts_list.html", {"view": view})


async def _receipt_modal_context(ctrl: ReceiptReviewsController, review_id: int, page: int) -> dict:
    review = await ctrl.find(review_id, page)
    return {
        "review": review,
        "load_error": None if review else "This review is no longer in the queue.",
        "page": page,
    }


@router.get("/receipt-reviews/{review_id}/modal")
async def receipt_review_modal(request: Request, review_id: int, page: int = 0,
                               console: Console = Depends(require_admin)):
    context = await _receipt_modal_context(_receipts(console), review_id, page)
    return render(request, "partials/receipt_modal.html", context)


@router.post("/receipt-reviews/{review_id}/approve")
async def receipt_review_approve(request: Request, review_id: int, page: int = Form(0),
                                 console: Console = Depends(require_admin)):
    ctrl = _receipts(console)
    result = await ctrl.approve(review_id)
    context = {} if result.ok else await _receipt_modal_context(ctrl, review_id, page)
    return after_mutation(
        request, console, result,
        back_to=queue_url("/receipt-reviews", None, page),
        modal="partials/receipt_modal.html",
        context=context,
        toast=f"Receipt #{review_id} approved",
    )


@router.post("/receipt-reviews/{review_id}/reject")
async def receipt_review_reject(request: Request, review_id: int, page: int = Form(0),
                                console: Console = Depends(require_admin)):
    ctrl = _receipts(console)
    result = await ctrl.reject(review_id)
    context = {} if result.ok else await _receipt_modal_context(ctrl, review_id, page)
    return after_mutation(
        request, console, result,
        back_to=queue_url("/receipt-reviews", None, page),
        modal="partials/receipt_modal.html",
        context=context,
        toast=f"Receipt #{review_id} rejected",
    )


# ════════════════════════════════════════════════════════════════════════════
# Newly registered restaurants
# ════════════════════════════════════════════════════════════════════════════
@router.get("/restaurants")
async def restaurants_page(request: Request, page: int = 0, console: Console = Depends(require_admin)):
    ctrl = _restaurants(console)
    return render_page(request, console, "queue_page.html", {
        "title": ctrl.title,
        "subtitle": "Restaurants registered by users, waiting for review.",
        "base_path": "/restaurants",
        "list_url": queue_url("/restaurants/list", None, page),
    })


@router.get("/restaurants/list")
async def restaurants_list(request: Request, page: int = 0, console: Console = Depends(require_admin)):
    view = await _restaurants(console).load(page)
    return render(request, "partials/restaurants_list.html", {"view": view})


async def _restaurant_modal_context(ctrl: PendingRestaurantsController, restaurant_id: int, page: int, **extra) -> dict:
    restaurant = await ctrl.find(restaurant_id, page)
    return {
        "restaurant": restaurant,
        "load_error": None if restaurant else "This restaurant is no longer in the queue.",
        "page": page,
        **extra,
    }


@router.get("/restaurants/{restaurant_id}/modal")
async def restaurant_modal(request: Request, restaurant_id: int, page: int = 0,
                           console: Console = Depends(require_admin)):
    context = await _restaurant_modal_context(_restaurants(console), restaurant_id, page)
    return render(request, "partials/restaurant_modal.html", context)


@router.get("/restaurants/{restaurant_id}/reject-modal")
async def restaurant_reject_modal(request: Request, restaurant_id: int, page: int = 0,
                                  console: Console = Depends(require_admin)):
    context = await _restaurant_modal_context(_restaurants(console), restaurant_id, page, reason="")
    return render(request, "partials/restaurant_reject_modal.html", context)


@router.post("/restaurants/{restaurant_id}/approve")
async def restaurant_approve(request: Request, restaurant_id: int, page: int = Form(0),
                             console: Console = Depends(require_admin)):
    ctrl = _restaurants(console)
    result = await ctrl.approve(restaurant_id)
    context = {} if result.ok else await _restaurant_modal_context(ctrl, restaurant_id, page)
    return after_mutation(
        request, console, result,
        back_to=queue_url("/restaurants", None, page),
        modal="partials/restaurant_modal.html",
        context=context,
        toast=f"Restaurant #{restaurant_id} approved",
    )


@router.post("/restaurants/{restaurant_id}/reject")
async def restaurant_reject(request: Request, restaurant_id: int, reason: str = Form(""), page: int = Form(0),
                            console: Console = Depends(require_admin)):
    ctrl = _restaurants(console)
    result = await ctrl.reject(restaurant_id, reason)
    context = {} if result.ok else await _restaurant_modal_context(ctrl, restaurant_id, page, reason=reason)
    return after_mutation(
        request, console, result,
        back_to=queue_url("/restaurants", None, page),
        modal="partials/restaurant_reject_modal.html",
        context=context,
        toast=f"Restaurant #{restaurant_id} rejected",
    )
