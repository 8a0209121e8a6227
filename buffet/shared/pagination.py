"""Pagination helpers shared by the list endpoints"""

from typing import Literal

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy.orm import Query as SAQuery

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

SortOrder = Literal["asc", "desc"]


class PageParams(BaseModel):
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrev: bool


def page_params(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
) -> PageParams:
    """FastAPI dependency parsing ?page=&limit="""
    return PageParams(page=page, limit=limit)


def build_pagination(params: PageParams, total: int) -> PaginationMeta:
    total_pages = (total + params.limit - 1) // params.limit
    return PaginationMeta(
        page=params.page,
        limit=params.limit,
        total=total,
        totalPages=total_pages,
        hasNext=params.page < total_pages,
        hasPrev=params.page > 1,
    )


def paginate(query: SAQuery, params: PageParams) -> tuple[list, PaginationMeta]:
    """Run a filtered/sorted query for one page; returns (rows, pagination)"""
    total = query.order_by(None).count()
    rows = query.offset(params.offset).limit(params.limit).all()
    return rows, build_pagination(params, total)
