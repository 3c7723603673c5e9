"""Offset pagination shared by every list endpoint."""

import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Query

from core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from core.errors import BadRequestError


@dataclass(frozen=True)
class PageRequest:
    """A validated ``page``/``limit`` pair. ``page`` is 1-based."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        if self.page < 1:
            raise BadRequestError("Page must be at least 1")
        if not 1 <= self.limit <= MAX_PAGE_SIZE:
            raise BadRequestError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page:
    data: list[Any]
    total: int
    current_page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.current_page > 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": self.data,
            "total": self.total,
            "totalPages": self.total_pages,
            "currentPage": self.current_page,
            "limit": self.limit,
            "hasNextPage": self.has_next_page,
            "hasPrevPage": self.has_prev_page,
        }


def build_page(items: list[Any], total: int, request: PageRequest) -> Page:
    return Page(data=items, total=total, current_page=request.page, limit=request.limit)


def paginate_query(query: Query, request: PageRequest) -> tuple[list[Any], int]:
    """
    Run a count and a page query for ``query``.

    The count wraps the unordered query in a subquery so joins and EXISTS
    filters are counted once per row.
    """
    total = query.session.query(func.count()).select_from(query.order_by(None).subquery()).scalar()
    items = query.offset(request.offset).limit(request.limit).all()
    return items, total or 0


__all__ = ["PageRequest", "Page", "build_page", "paginate_query"]
