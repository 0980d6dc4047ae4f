"""
Request-scoped wiring for the web shell.

Every request gets:
- a cookie-backed TokenStorage (the browser's client-local storage),
- an APIClient whose on_auth_failure drops the session,
- the AuthStore bound to the session's persistent AuthState.

require_admin() is the rendering gate: it resolves LOADING once per session
and raises LoginRequired for anything but an authenticated admin.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Request
from starlette.responses import Response

from admin_console.admin_api import AdminAPI
from admin_console.api_client import APIClient
from admin_console.auth_store import AuthStore
from admin_console.config import Settings
from admin_console.query_cache import QueryClient
from admin_console.sessions import ConsoleSession, SessionRegistry

logger = logging.getLogger(__name__)

_UNSET = object()


class LoginRequired(Exception):
    """No authenticated admin session; the shell redirects to /login."""


class CookieTokenStorage:
    """Token slot backed by the request cookie; writes are applied to a response."""

    def __init__(self, request: Request, cookie_name: str, secure: bool = False):
        self.cookie_name = cookie_name
        self.secure = secure
        self._initial = request.cookies.get(cookie_name) or None
        self._pending = _UNSET

    @property
    def initial(self) -> Optional[str]:
        return self._initial

    def get(self) -> Optional[str]:
        if self._pending is _UNSET:
            return self._initial
        return self._pending

    def set(self, token: str) -> None:
        self._pending = token

    def clear(self) -> None:
        self._pending = None

    def apply(self, response: Response) -> Response:
        """Write pending changes as Set-Cookie headers."""
        if self._pending is _UNSET:
            return response
        if self._pending:
            response.set_cookie(
                self.cookie_name,
                self._pending,
                httponly=True,
                samesite="lax",
                secure=self.secure,
            )
        else:
            response.delete_cookie(self.cookie_name)
        return response


class Console:
    """Everything a route needs to talk to the backend on behalf of one browser."""

    def __init__(self, request: Request, settings: Settings, registry: SessionRegistry):
        self.request = request
        self.settings = settings
        self.registry = registry
        self.storage = CookieTokenStorage(request, settings.TOKEN_COOKIE, settings.COOKIE_SECURE)
        self.token = self.storage.initial

        session = registry.get(self.token)
        if session is None:
            session = registry.new_session()
            if self.token:
                registry.put(self.token, session)
        self.session: ConsoleSession = session

        client = APIClient(
            base_url=settings.API_BASE_URL,
            storage=self.storage,
            on_auth_failure=self.handle_auth_failure,
            timeout=settings.API_TIMEOUT_S,
            transport=getattr(request.app.state, "transport", None),
        )
        self.api = AdminAPI(client)
        self.store = AuthStore(self.api, self.storage, session.state, settings.PRIVILEGED_ROLE)

    @property
    def queries(self) -> QueryClient:
        return self.session.queries

    @property
    def user(self):
        return self.store.user

    def handle_auth_failure(self) -> None:
        self.registry.discard(self.token)
        self.store.handle_auth_failure()

    def begin_session(self) -> None:
        """After a successful login: register a fresh session under the new token."""
        self.registry.discard(self.token)
        new_token = self.storage.get()
        if new_token:
            self.session = self.registry.start(new_token, self.store.state)
            self.token = new_token

    def end_session(self) -> None:
        self.store.logout()
        self.registry.discard(self.token)


def get_console(request: Request) -> Console:
    return Console(request, request.app.state.settings, request.app.state.sessions)


async def require_admin(console: Console = Depends(get_console)) -> Console:
    await console.store.check_auth()
    if not console.store.is_authenticated:
        console.registry.discard(console.token)
        raise LoginRequired()
    return console
