"""Previous/next pager for zero-based pages."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Pager:
    page: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages - 1

    @property
    def previous_page(self) -> int:
        return max(0, self.page - 1)

    @property
    def next_page(self) -> int:
        return max(0, min(self.total_pages - 1, self.page + 1))

    @property
    def label(self) -> str:
        return f"{self.page + 1} / {self.total_pages}"

    @property
    def visible(self) -> bool:
        return self.total_pages > 1

    @classmethod
    def from_page(cls, page) -> "Pager":
        return cls(page=page.page, total_pages=page.total_pages)
