"""
Pagination contract shared by every repository.

    {
      "data": [...],
      "pagination": {"page": 2, "limit": 10, "totalItems": 45,
                     "totalPages": 5, "hasNext": true, "hasPrev": true}
    }

Invariants:
    totalPages = ceil(totalItems / limit)
    hasNext    = page < totalPages
    hasPrev    = page > 1
"""

import logging
import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

T = TypeVar("T")

# skip is sent as a BSON int64
MAX_SKIP = 2**63 - 1


class PageOptions(BaseModel):
    """Normalized page/limit pair; always positive and within the ceiling."""

    page: int = Field(ge=1)
    limit: int = Field(ge=1)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    limit: int
    total_items: int
    total_pages: int
    has_next: bool
    has_prev: bool


class PaginationResult(BaseModel, Generic[T]):
    data: list[T]
    pagination: PaginationMeta

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def normalize_page_options(
    page: int | None,
    limit: int | None,
    *,
    default_limit: int,
    max_limit: int,
) -> PageOptions:
    """
    Apply the defaults and the ceiling policy.

    - page omitted or non-positive  -> 1
    - limit omitted or non-positive -> default_limit
    - limit above max_limit         -> clamped to max_limit
    - page whose skip overflows     -> clamped to the last addressable page
    """
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else default_limit
    if limit > max_limit:
        logger.debug("pagination.limit_clamped", extra={"requested": limit, "max_limit": max_limit})
        limit = max_limit
    max_page = MAX_SKIP // limit + 1
    if page > max_page:
        logger.debug("pagination.page_clamped", extra={"requested": page, "max_page": max_page})
        page = max_page
    return PageOptions(page=page, limit=limit)


def build_pagination_meta(total_items: int, options: PageOptions) -> PaginationMeta:
    total_pages = math.ceil(total_items / options.limit) if total_items > 0 else 0
    return PaginationMeta(
        page=options.page,
        limit=options.limit,
        total_items=total_items,
        total_pages=total_pages,
        has_next=options.page < total_pages,
        has_prev=options.page > 1,
    )
