"""Per-browser console sessions: auth state plus query cache, keyed by token."""
from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from admin_console.auth_store import AuthState
from admin_console.query_cache import QueryClient

logger = logging.getLogger(__name__)


@dataclass
class ConsoleSession:
    state: AuthState = field(default_factory=AuthState)
    queries: QueryClient = field(default_factory=QueryClient)


def _token_key(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class SessionRegistry:
    """
    Sessions indexed by a hash of their token.

    A session is created in the LOADING phase the first time a token is
    seen, replaced on login and dropped on logout or authentication failure.
    """

    def __init__(self, stale_time: float = 30.0, retry: int = 0, max_sessions: int = 500):
        self.stale_time = stale_time
        self.retry = retry
        self.max_sessions = max_sessions
        self._sessions: Dict[str, ConsoleSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, token: str) -> bool:
        return _token_key(token) in self._sessions

    def new_session(self, state: Optional[AuthState] = None) -> ConsoleSession:
        return ConsoleSession(
            state=state if state is not None else AuthState(),
            queries=QueryClient(stale_time=self.stale_time, retry=self.retry),
        )

    def get(self, token: Optional[str]) -> Optional[ConsoleSession]:
        if not token:
            return None
        return self._sessions.get(_token_key(token))

    def put(self, token: str, session: ConsoleSession) -> ConsoleSession:
        key = _token_key(token)
        if key not in self._sessions and len(self._sessions) >= self.max_sessions:
            oldest = next(iter(self._sessions))
            del self._sessions[oldest]
            logger.info("Session registry full, evicted oldest session")
        self._sessions[key] = session
        return session

    def start(self, token: str, state: AuthState) -> ConsoleSession:
        """Register a fresh session (empty cache) for a newly issued token."""
        return self.put(token, self.new_session(state))

    def discard(self, token: Optional[str]) -> None:
        if token:
            self._sessions.pop(_token_key(token), None)
