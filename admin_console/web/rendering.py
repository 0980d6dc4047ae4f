"""Jinja2 environment and response helpers shared by the route modules."""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from admin_console import labels
from admin_console.query_cache import MutationResult
from admin_console.utils.audit import log_action
from admin_console.web.deps import Console
from admin_console.web.navigation import NAV_ITEMS

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

# Filter value meaning "every status"; a missing filter means the queue default
ALL_FILTER = "ALL"

# Custom event that makes the open queue fragment re-fetch itself
QUEUE_CHANGED = "queue-changed"


def format_datetime(value: Optional[datetime], fmt: str = "%Y-%m-%d %H:%M") -> str:
    if value is None:
        return "-"
    return value.strftime(fmt)


def format_money(value: Optional[int]) -> str:
    if value is None:
        return "-"
    return f"{value:,} KRW"


def format_score(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value * 100:.0f}%" if value <= 1 else f"{value:.0f}"


def is_htmx(request: Request) -> bool:
    return request.headers.get("HX-Request") == "true"


def filter_value(status: Optional[str]) -> str:
    """URL value for a normalized status filter (None -> all)."""
    return status or ALL_FILTER


def queue_url(path: str, status: Optional[str], page: int = 0, **extra) -> str:
    params = {"status": filter_value(status), "page": page, **extra}
    return f"{path}?{urlencode(params)}"


def filter_options(statuses, mapping: Dict[str, str]):
    """(value, label) pairs for the filter bar, "All" first."""
    return [(ALL_FILTER, "All")] + [(s, mapping.get(s, s)) for s in statuses]


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["datetime"] = format_datetime
templates.env.filters["money"] = format_money
templates.env.filters["score"] = format_score
templates.env.globals.update(
    label=labels.label,
    queue_url=queue_url,
    filter_value=filter_value,
    REPORT_STATUS_LABELS=labels.REPORT_STATUS_LABELS,
    REPORT_REASON_LABELS=labels.REPORT_REASON_LABELS,
    CHAT_REPORT_REASON_LABELS=labels.CHAT_REPORT_REASON_LABELS,
    GATHERING_STATUS_LABELS=labels.GATHERING_STATUS_LABELS,
    NAV_ITEMS=NAV_ITEMS,
    ALL_FILTER=ALL_FILTER,
)


def render(
    request: Request,
    name: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> HTMLResponse:
    ctx = {"settings": request.app.state.settings, **(context or {})}
    return templates.TemplateResponse(request, name, ctx, status_code=status_code, headers=headers)


def render_page(request: Request, console: Console, name: str, context: Optional[Dict[str, Any]] = None) -> HTMLResponse:
    """Full page inside the layout (sidebar, user block, modal slot)."""
    ctx = {
        "user": console.user,
        "current_path": request.url.path,
        "flash_error": request.query_params.get("error"),
        **(context or {}),
    }
    return render(request, name, ctx)


def login_redirect(request: Request) -> HTMLResponse:
    """Send the browser to /login; HTMX requests get an HX-Redirect instead of a 303."""
    if is_htmx(request):
        return HTMLResponse("", headers={"HX-Redirect": "/login"})
    return RedirectResponse("/login", status_code=303)


def after_mutation(
    request: Request,
    console: Console,
    result: MutationResult,
    *,
    back_to: str,
    modal: str,
    context: Dict[str, Any],
    toast: str,
) -> HTMLResponse:
    """
    Common response for queue actions.

    Success:  HTMX -> empty modal + queue-changed trigger (the queue fragment
              re-fetches after invalidation); plain form -> 303 to the queue.
    Failure:  HTMX -> the same modal re-rendered with the error;
              plain form -> 303 to the queue with ?error=.
    """
    actor = console.user.email if console.user else "unknown"
    log_action(actor, result.action, outcome="accepted" if result.ok else ("invalid" if result.invalid else "failed"))

    if result.ok:
        if is_htmx(request):
            return HTMLResponse("", headers={"HX-Trigger": QUEUE_CHANGED, "X-Toast": toast})
        return RedirectResponse(back_to, status_code=303)

    logger.info(f"{result.action} not applied: {result.error}")
    if is_htmx(request):
        return render(request, modal, {**context, "error": result.error}, headers={"X-Toast": "Action failed"})
    sep = "&" if "?" in back_to else "?"
    return RedirectResponse(f"{back_to}{sep}{urlencode({'error': result.error or 'Failed'})}", status_code=303)
