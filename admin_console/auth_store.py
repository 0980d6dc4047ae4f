"""
Authentication state for one console session.

Lifecycle:
    LOADING ──check_auth()──▶ AUTHENTICATED | UNAUTHENTICATED
    AUTHENTICATED ──logout() / 401──▶ UNAUTHENTICATED

Role authorization is a second network decision: the login token does not
carry the role, so login() always fetches /users/me and keeps the token only
for the privileged role.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import ValidationError

from admin_console.admin_api import AdminAPI
from admin_console.errors import ConsoleError
from admin_console.schemas import User, UserRole
from admin_console.token_storage import TokenStorage
from admin_console.utils.audit import record_metric

logger = logging.getLogger(__name__)


class AuthPhase(str, Enum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass
class AuthState:
    user: Optional[User] = None
    is_loading: bool = True
    is_authenticated: bool = False

    @property
    def phase(self) -> AuthPhase:
        if self.is_loading:
            return AuthPhase.LOADING
        if self.is_authenticated:
            return AuthPhase.AUTHENTICATED
        return AuthPhase.UNAUTHENTICATED


class AuthStore:
    """Login/logout/check-session operations over an injectable AuthState."""

    def __init__(
        self,
        api: AdminAPI,
        storage: TokenStorage,
        state: Optional[AuthState] = None,
        privileged_role: UserRole | str = UserRole.ADMIN,
    ):
        self.api = api
        self.storage = storage
        self.state = state if state is not None else AuthState()
        self.privileged_role = UserRole(privileged_role)

    @property
    def user(self) -> Optional[User]:
        return self.state.user

    @property
    def is_authenticated(self) -> bool:
        return self.state.is_authenticated

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    async def _fetch_privileged_user(self) -> Optional[User]:
        response = await self.api.get_current_user()
        if response.success and response.data and response.data.role == self.privileged_role:
            return response.data
        return None

    def _deny(self) -> None:
        self.storage.clear()
        self.state.user = None
        self.state.is_authenticated = False

    async def login(self, email: str, password: str) -> bool:
        """
        Exchange credentials for a token, then authorize by role.

        Returns:
            True only when the credentials are valid AND the fetched user has
            the privileged role. On False no token remains in storage.
        """
        try:
            response = await self.api.login(email, password)
            if not response.success or response.data is None:
                record_metric("auth.login", {"email": email}, outcome="failed")
                return False

            self.storage.set(response.data.token)
            user = await self._fetch_privileged_user()
        except (ConsoleError, ValidationError) as e:
            logger.warning(f"Login failed for {email}: {e}")
            self._deny()
            record_metric("auth.login", {"email": email}, outcome="failed")
            return False

        if user is None:
            logger.warning(f"Login denied for {email}: role is not {self.privileged_role.value}")
            self._deny()
            record_metric("auth.login", {"email": email}, outcome="denied")
            return False

        self.state.user = user
        self.state.is_authenticated = True
        self.state.is_loading = False
        logger.info(f"Admin logged in: {user.email}")
        record_metric("auth.login", {"email": email, "user_id": user.id}, outcome="accepted")
        return True

    def logout(self) -> None:
        """Drop the token and reset state. No backend call."""
        email = self.state.user.email if self.state.user else None
        self._deny()
        self.state.is_loading = False
        record_metric("auth.logout", {"email": email})

    async def check_auth(self) -> None:
        """
        Resolve the LOADING phase once per session.

        - no stored token: UNAUTHENTICATED, no network call
        - stored token: GET /users/me, AUTHENTICATED only for the privileged role
        - any failure: token cleared, UNAUTHENTICATED
        """
        if not self.state.is_loading:
            return

        if not self.storage.get():
            self.state.is_authenticated = False
            self.state.is_loading = False
            return

        try:
            user = await self._fetch_privileged_user()
        except (ConsoleError, ValidationError) as e:
            logger.warning(f"Session check failed: {e}")
            user = None

        if user is None:
            self._deny()
        else:
            self.state.user = user
            self.state.is_authenticated = True
        self.state.is_loading = False

    def handle_auth_failure(self) -> None:
        """AUTHENTICATED -> UNAUTHENTICATED after a 401 from any endpoint."""
        self._deny()
        self.state.is_loading = False
