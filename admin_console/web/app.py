"""FastAPI application factory for the admin console."""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles

from admin_console import __version__
from admin_console.config import Settings, settings as default_settings
from admin_console.errors import AuthenticationError
from admin_console.sessions import SessionRegistry
from admin_console.utils.audit import record_metric, set_logs_dir
from admin_console.web import (
    routes_approvals,
    routes_auth,
    routes_dashboard,
    routes_gatherings,
    routes_reports,
)
from admin_console.web.deps import LoginRequired
from admin_console.web.rendering import login_redirect

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

ROUTE_KIND_OVERRIDES = {
    "/": "http.dashboard",
    "/stats": "http.dashboard",
    "/login": "http.login",
    "/logout": "http.logout",
}


def _route_kind(path: str) -> str:
    if path in ROUTE_KIND_OVERRIDES:
        return ROUTE_KIND_OVERRIDES[path]
    head = path.strip("/").split("/", 1)[0]
    return f"http.{head}" if head else "http.other"


def create_app(settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """
    Build the console app.

    Args:
        settings: Console settings (defaults to the environment-loaded ones)
        transport: Optional httpx transport for backend calls (tests mount a
            fake backend through httpx.ASGITransport)
    """
    settings = settings or default_settings
    app = FastAPI(title=settings.APP_TITLE, version=__version__, docs_url=None, redoc_url=None)
    app.state.settings = settings
    app.state.transport = transport
    app.state.sessions = SessionRegistry(stale_time=settings.QUERY_STALE_S, retry=settings.QUERY_RETRY)
    set_logs_dir(settings.LOGS_DIR)

    @app.middleware("http")
    async def latency_metrics(request: Request, call_next):
        t0 = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            dt_ms = round((time.perf_counter() - t0) * 1000.0, 2)
            path = request.url.path
            if not path.startswith("/static"):
                status_code = getattr(response, "status_code", 0) if response else 500
                record_metric(_route_kind(path), {"path": path, "method": request.method, "status": status_code}, latency_ms=dt_ms)

    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired):
        response = login_redirect(request)
        response.delete_cookie(settings.TOKEN_COOKIE)
        return response

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        # the session was already dropped by the client's on_auth_failure hook
        logger.warning(f"Session expired during {request.method} {request.url.path}")
        response = login_redirect(request)
        response.delete_cookie(settings.TOKEN_COOKIE)
        return response

    app.include_router(routes_auth.router)
    app.include_router(routes_dashboard.router)
    app.include_router(routes_reports.router)
    app.include_router(routes_approvals.router)
    app.include_router(routes_gatherings.router)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    logger.info(f"Admin console app created (backend {settings.API_BASE_URL})")
    return app
