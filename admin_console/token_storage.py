"""Where the opaque session token is kept between requests."""
from __future__ import annotations

from typing import Optional, Protocol


class TokenStorage(Protocol):
    """Minimal key/value slot for the session token."""

    def get(self) -> Optional[str]:
        ...

    def set(self, token: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryTokenStorage:
    """In-process token slot (scripts and tests)."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None
