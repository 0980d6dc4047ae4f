"""Gatherings (read-only) and failed refunds."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Form, Request

from admin_console.controllers import FailedRefundsController, GatheringsController
from admin_console.labels import GATHERING_STATUS_LABELS
from admin_console.web.deps import Console, require_admin
from admin_console.web.rendering import (
    after_mutation,
    filter_options,
    filter_value,
    queue_url,
    render,
    render_page,
)

router = APIRouter(tags=["gatherings"])


def _gatherings(console: Console) -> GatheringsController:
    return GatheringsController(console.api, console.queries, console.settings.PAGE_SIZE)


def _refunds(console: Console) -> FailedRefundsController:
    return FailedRefundsController(console.api, console.queries, console.settings.PAGE_SIZE)


@router.get("/gatherings")
async def gatherings_page(request: Request, status: Optional[str] = None, page: int = 0,
                          console: Console = Depends(require_admin)):
    ctrl = _gatherings(console)
    status = ctrl.normalize_status(status)
    return render_page(request, console, "queue_page.html", {
        "title": ctrl.title,
        "subtitle": "Every meetup on the platform.",
        "base_path": "/gatherings",
        "filters": filter_options(ctrl.statuses, GATHERING_STATUS_LABELS),
        "active_filter": filter_value(status),
        "list_url": queue_url("/gatherings/list", status, page),
    })


@router.get("/gatherings/list")
async def gatherings_list(request: Request, status: Optional[str] = None, page: int = 0,
                          console: Console = Depends(require_admin)):
    view = await _gatherings(console).load(page, status)
    return render(request, "partials/gatherings_list.html", {"view": view})


@router.get("/gatherings/{gathering_id}/modal")
async def gathering_modal(request: Request, gathering_id: int, status: Optional[str] = None, page: int = 0,
                          console: Console = Depends(require_admin)):
    gathering = await _gatherings(console).find(gathering_id, page, status)
    return render(request, "partials/gathering_modal.html", {
        "gathering": gathering,
        "load_error": None if gathering else "This gathering is not on the current page.",
    })


@router.get("/refunds")
async def refunds_page(request: Request, page: int = 0, console: Console = Depends(require_admin)):
    ctrl = _refunds(console)
    return render_page(request, console, "queue_page.html", {
        "title": ctrl.title,
        "subtitle": "Deposit refunds that failed and need a manual transfer.",
        "base_path": "/refunds",
        "list_url": queue_url("/refunds/list", None, page),
    })


@router.get("/refunds/list")
async def refunds_list(request: Request, page: int = 0, console: Console = Depends(require_admin)):
    view = await _refunds(console).load(page)
    return render(request, "partials/refunds_list.html", {"view": view})


@router.post("/refunds/{participant_id}/complete")
async def refund_complete(request: Request, participant_id: int, page: int = Form(0),
                          console: Console = Depends(require_admin)):
    result = await _refunds(console).mark_completed(participant_id)
    return after_mutation(
        request, console, result,
        back_to=queue_url("/refunds", None, page),
        modal="partials/action_error.html",
        context={"title": "Mark refund completed"},
        toast=f"Refund #{participant_id} marked completed",
    )
