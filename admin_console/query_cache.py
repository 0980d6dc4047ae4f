"""
Per-session query cache with explicit invalidation.

fetch():   serve a fresh cached value or await the query function.
           On failure the last good value stays available next to the error.
mutate():  run a mutation; on success invalidate every root declared for it
           in INVALIDATIONS before returning, so the next read re-fetches.

AuthenticationError is never absorbed here: it must reach the shell, which
redirects to the login page.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, Tuple, TypeVar

from pydantic import ValidationError

from admin_console.errors import APIError, AuthenticationError, ConsoleError, ValidationFailed
from admin_console.invalidation import QueryKey, invalidated_roots
from admin_console.utils.audit import record_metric

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class QueryEntry:
    data: Any = None
    has_data: bool = False
    error: Optional[str] = None
    updated_at: float = 0.0
    stale: bool = True


@dataclass
class QueryResult(Generic[T]):
    key: QueryKey
    data: Optional[T] = None
    error: Optional[str] = None
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class MutationResult:
    action: str
    ok: bool
    data: Any = None
    error: Optional[str] = None
    invalid: bool = False
    invalidated: Tuple[str, ...] = field(default_factory=tuple)


class QueryClient:
    """Cache of query results keyed by tuples whose first item is the queue root."""

    def __init__(
        self,
        stale_time: float = 30.0,
        retry: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.stale_time = stale_time
        self.retry = max(0, retry)
        self._clock = clock
        self._entries: Dict[QueryKey, QueryEntry] = {}

    # ════════════════════════════════════════════════════════════════════════
    # Queries
    # ════════════════════════════════════════════════════════════════════════
    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        if entry is None or entry.stale or not entry.has_data:
            return True
        return (self._clock() - entry.updated_at) > self.stale_time

    def get_data(self, key: QueryKey) -> Any:
        entry = self._entries.get(key)
        return entry.data if entry else None

    def keys(self) -> list:
        return list(self._entries)

    async def fetch(self, key: QueryKey, fn: Callable[[], Awaitable[T]]) -> QueryResult[T]:
        entry = self._entries.setdefault(key, QueryEntry())
        if not self.is_stale(key):
            return QueryResult(key=key, data=entry.data, from_cache=True)

        attempts = self.retry + 1
        for attempt in range(1, attempts + 1):
            try:
                data = await fn()
            except AuthenticationError:
                raise
            except APIError as e:
                if e.is_retryable and attempt < attempts:
                    logger.info(f"Retrying query {key} after error: {e}")
                    continue
                return self._fail(key, entry, e.message)
            except (ConsoleError, ValidationError) as e:
                return self._fail(key, entry, str(e))

            entry.data = data
            entry.has_data = True
            entry.error = None
            entry.updated_at = self._clock()
            entry.stale = False
            return QueryResult(key=key, data=data)

    def _fail(self, key: QueryKey, entry: QueryEntry, message: str) -> QueryResult:
        logger.error(f"Query {key} failed: {message}")
        entry.error = message
        # last good value (if any) stays visible next to the error
        return QueryResult(key=key, data=entry.data if entry.has_data else None, error=message)

    def invalidate(self, root: str) -> list:
        """Mark stale every cached key under ``root``. Returns the affected keys."""
        affected = [k for k in self._entries if k and k[0] == root]
        for k in affected:
            self._entries[k].stale = True
        return affected

    def clear(self) -> None:
        self._entries.clear()

    # ════════════════════════════════════════════════════════════════════════
    # Mutations
    # ════════════════════════════════════════════════════════════════════════
    async def mutate(self, action: str, fn: Callable[[], Awaitable[Any]], /, **fields) -> MutationResult:
        """
        Run one mutation and apply the declared invalidations.

        Failure leaves the cache untouched, so the record shows its old state
        and the caller can keep its modal open for a retry.
        """
        roots = invalidated_roots(action)
        try:
            data = await fn()
            if hasattr(data, "unwrap"):
                data = data.unwrap()
        except AuthenticationError:
            raise
        except ValidationFailed as e:
            record_metric(f"mutation.{action}", fields, outcome="invalid")
            return MutationResult(action=action, ok=False, error=str(e), invalid=True)
        except APIError as e:
            logger.error(f"Mutation {action} failed: {e.message}")
            record_metric(f"mutation.{action}", {**fields, "status": e.status_code}, outcome="failed")
            return MutationResult(action=action, ok=False, error=e.message)
        except ValidationError as e:
            logger.error(f"Mutation {action} returned an unexpected payload: {e}")
            record_metric(f"mutation.{action}", fields, outcome="failed")
            return MutationResult(action=action, ok=False, error="Malformed backend response")

        for root in roots:
            self.invalidate(root)
        record_metric(f"mutation.{action}", fields, outcome="accepted")
        return MutationResult(action=action, ok=True, data=data, invalidated=roots)
