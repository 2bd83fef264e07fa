"""Pagination parameters and the paginated response envelope."""
from __future__ import annotations
import math
from typing import Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel

from app.config import settings

T = TypeVar("T")


def total_pages(total: int, limit: int) -> int:
    """ceil(total / limit); zero when there is nothing to page through."""
    if total <= 0:
        return 0
    return math.ceil(total / limit)


class PageParams(BaseModel):
    page: int = 1
    limit: int = settings.DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> PageParams:
    """FastAPI dependency — validated ``?page=&limit=`` query parameters."""
    return PageParams(page=page, limit=limit)


class Page(BaseModel, Generic[T]):
    data: list[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, data: list[T], total: int, params: PageParams) -> Page[T]:
        return cls(
            data=data,
            total=total,
            page=params.page,
            limit=params.limit,
            total_pages=total_pages(total, params.limit),
        )
