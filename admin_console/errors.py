"""Error taxonomy shared by the API client, the stores and the web shell.

- APIError: the backend (or the network) failed the request.
- AuthenticationError: the backend answered 401. Raised only after the
  client has cleared the stored token and fired its auth-failure callback.
- ValidationFailed: input rejected locally, before any request is sent.

Authorization failures (valid credentials, wrong role) are not exceptions:
AuthStore.login() reports them as a plain ``False``.
"""
from __future__ import annotations


class ConsoleError(Exception):
    """Base class for admin console errors."""


class APIError(ConsoleError):
    """Backend or transport failure."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        self.message = message
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.status_code is None or self.status_code >= 500


class AuthenticationError(APIError):
    """Backend rejected the session token (HTTP 401)."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class ValidationFailed(ConsoleError, ValueError):
    """Local precondition failed; nothing was sent to the backend."""
