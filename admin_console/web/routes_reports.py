"""Review reports and chat reports: queue pages, list fragments, detail modals, processing."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Form, Request

from admin_console.controllers import ChatReportsController, ReportsController
from admin_console.labels import REPORT_STATUS_LABELS
from admin_console.schemas import ProcessAction
from admin_console.web.deps import Console, require_admin
from admin_console.web.rendering import (
    ALL_FILTER,
    after_mutation,
    filter_options,
    filter_value,
    queue_url,
    render,
    render_page,
)

router = APIRouter(tags=["reports"])


def _reports(console: Console) -> ReportsController:
    return ReportsController(console.api, console.queries, console.settings.PAGE_SIZE)


def _chat_reports(console: Console) -> ChatReportsController:
    return ChatReportsController(console.api, console.queries, console.settings.PAGE_SIZE)


# ════════════════════════════════════════════════════════════════════════════
# Review reports
# ════════════════════════════════════════════════════════════════════════════
@router.get("/reports")
async def reports_page(request: Request, status: Optional[str] = None, page: int = 0,
                       console: Console = Depends(require_admin)):
    ctrl = _reports(console)
    status = ctrl.normalize_status(status)
    return render_page(request, console, "queue_page.html", {
        "title": ctrl.title,
        "subtitle": "Reports users filed against reviews.",
        "base_path": "/reports",
        "filters": filter_options(ctrl.statuses, REPORT_STATUS_LABELS),
        "active_filter": filter_value(status),
        "list_url": queue_url("/reports/list", status, page),
    })


@router.get("/reports/list")
async def reports_list(request: Request, status: Optional[str] = None, page: int = 0,
                       console: Console = Depends(require_admin)):
    view = await _reports(console).load(page, status)
    return render(request, "partials/reports_list.html", {"view": view})


async def _report_modal_context(ctrl: ReportsController, report_id: int, status: Optional[str], page: int) -> dict:
    result = await ctrl.detail(report_id)
    return {
        "report": result.data,
        "load_error": result.error,
        "status": filter_value(ctrl.normalize_status(status)),
        "page": page,
    }


@router.get("/reports/{report_id}/modal")
async def report_modal(request: Request, report_id: int, status: Optional[str] = None, page: int = 0,
                       console: Console = Depends(require_admin)):
    context = await _report_modal_context(_reports(console), report_id, status, page)
    return render(request, "partials/report_modal.html", context)


@router.post("/reports/{report_id}/process")
async def report_process(
    request: Request,
    report_id: int,
    action: ProcessAction = Form(...),
    admin_note: str = Form(""),
    delete_review: bool = Form(False),
    status: str = Form(ALL_FILTER),
    page: int = Form(0),
    console: Console = Depends(require_admin),
):
    ctrl = _reports(console)
    result = await ctrl.process(report_id, action, admin_note, delete_review)
    context = {} if result.ok else await _report_modal_context(ctrl, report_id, status, page)
    return after_mutation(
        request, console, result,
        back_to=queue_url("/reports", ctrl.normalize_status(status), page),
        modal="partials/report_modal.html",
        context=context,
        toast=f"Report #{report_id} processed",
    )


# ════════════════════════════════════════════════════════════════════════════
# Chat reports
# ════════════════════════════════════════════════════════════════════════════
@router.get("/chat-reports")
async def chat_reports_page(request: Request, status: Optional[str] = None, page: int = 0,
                            console: Console = Depends(require_admin)):
    ctrl = _chat_reports(console)
    status = ctrl.normalize_status(status)
    return render_page(request, console, "queue_page.html", {
        "title": ctrl.title,
        "subtitle": "Reports users filed against chat messages.",
        "base_path": "/chat-reports",
        "filters": filter_options(ctrl.statuses, REPORT_STATUS_LABELS),
        "active_filter": filter_value(status),
        "list_url": queue_url("/chat-reports/list", status, page),
    })


@router.get("/chat-reports/list")
async def chat_reports_list(request: Request, status: Optional[str] = None, page: int = 0,
                            console: Console = Depends(require_admin)):
    view = await _chat_reports(console).load(page, status)
    return render(request, "partials/chat_reports_list.html", {"view": view})


async def _chat_modal_context(ctrl: ChatReportsController, report_id: int, status: Optional[str], page: int) -> dict:
    result = await ctrl.detail(report_id)
    return {
        "report": result.data,
        "load_error": result.error,
        "status": filter_value(ctrl.normalize_status(status)),
        "page": page,
    }


@router.get("/chat-reports/{report_id}/modal")
async def chat_report_modal(request: Request, report_id: int, status: Optional[str] = None, page: int = 0,
                            console: Console = Depends(require_admin)):
    context = await _chat_modal_context(_chat_reports(console), report_id, status, page)
    return render(request, "partials/chat_report_modal.html", context)


@router.post("/chat-reports/{report_id}/process")
async def chat_report_process(
    request: Request,
    report_id: int,
    action: ProcessAction = Form(...),
    admin_note: str = Form(""),
    status: str = Form(ALL_FILTER),
    page: int = Form(0),
    console: Console = Depends(require_admin),
):
    ctrl = _chat_reports(console)
    result = await ctrl.process(report_id, action, admin_note)
    context = {} if result.ok else await _chat_modal_context(ctrl, report_id, status, page)
    return after_mutation(
        request, console, result,
        back_to=queue_url("/chat-reports", ctrl.normalize_status(status), page),
        modal="partials/chat_report_modal.html",
        context=context,
        toast=f"Chat report #{report_id} processed",
    )
