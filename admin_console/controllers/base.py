"""
List-and-act controller shared by every moderation queue.

A controller owns:
1. the cached list query keyed (root, page, status),
2. zero or more mutations routed through QueryClient.mutate(), which
   applies the INVALIDATIONS table on success.

UI state (page index, status filter, selected record, open modal) is passed
in by the caller on every call; controllers keep none of it.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, ClassVar, Generic, List, Optional, Tuple, TypeVar

from admin_console.admin_api import AdminAPI
from admin_console.invalidation import list_key
from admin_console.pagination import Pager
from admin_console.query_cache import MutationResult, QueryClient, QueryResult
from admin_console.schemas import ApiResponse, Page

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class QueueView(Generic[T]):
    root: str
    page_index: int
    status: Optional[str]
    page: Optional[Page[T]] = None
    error: Optional[str] = None

    @property
    def items(self) -> List[T]:
        return list(self.page.content) if self.page else []

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_elements(self) -> int:
        return self.page.total_elements if self.page else 0

    @property
    def pager(self) -> Pager:
        return Pager(page=self.page_index, total_pages=self.page.total_pages if self.page else 0)


class QueueController(ABC, Generic[T]):
    """Paginated, filterable queue plus its mutations."""

    root: ClassVar[str]
    title: ClassVar[str] = ""
    statuses: ClassVar[Tuple[str, ...]] = ()
    default_status: ClassVar[Optional[str]] = None

    def __init__(self, api: AdminAPI, queries: QueryClient, page_size: int = 10):
        self.api = api
        self.queries = queries
        self.page_size = page_size

    def normalize_status(self, status: Optional[str]) -> Optional[str]:
        """
        None -> the queue's default filter; "" -> all statuses;
        unknown values fall back to all statuses.
        """
        if status is None:
            return self.default_status
        status = status.strip().upper()
        return status if status in self.statuses else None

    @abstractmethod
    async def fetch_page(self, page: int, status: Optional[str]) -> ApiResponse[Page[T]]:
        """One page of the queue from the backend."""

    async def load(self, page: int = 0, status: Optional[str] = None) -> QueueView[T]:
        page = max(0, page)
        status = self.normalize_status(status)
        key = list_key(self.root, page, status)

        async def query() -> Page[T]:
            return (await self.fetch_page(page, status)).unwrap()

        result = await self.queries.fetch(key, query)
        return QueueView(root=self.root, page_index=page, status=status, page=result.data, error=result.error)

    async def find(self, record_id: int, page: int = 0, status: Optional[str] = None) -> Optional[T]:
        """Record with ``record_id`` on the given page (detail views without a detail endpoint)."""
        view = await self.load(page, status)
        return next((item for item in view.items if getattr(item, "id", None) == record_id), None)

    async def cached_detail(self, record_id: int, fn: Callable[[], Awaitable[ApiResponse[Any]]]) -> QueryResult:
        async def query():
            return (await fn()).unwrap()

        return await self.queries.fetch((self.root, "detail", record_id), query)

    async def run(self, action: str, fn: Callable[[], Awaitable[Any]], /, **fields) -> MutationResult:
        result = await self.queries.mutate(action, fn, **fields)
        if result.ok:
            logger.info(f"{action} succeeded: {fields}")
        return result
