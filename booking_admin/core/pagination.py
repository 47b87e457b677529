"""
Core pagination helpers.

- `normalize_pagination` cleans up page/size inputs using defaults and clamping.
- `build_list_response` maps rows to schemas, numbers them and wraps them in
  a `ListResponse`.
"""
from __future__ import annotations

from typing import Callable, List, Optional, Sequence, TypeVar

from booking_admin.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from booking_admin.schemas.common import ListResponse, PaginationParams

TModel = TypeVar("TModel")
TSchema = TypeVar("TSchema")


def normalize_pagination(page: Optional[int], size: Optional[int]) -> PaginationParams:
    """
    Rules:
        - page < 1 or None -> DEFAULT_PAGE
        - size < 1 or None -> DEFAULT_PAGE_SIZE
        - size > MAX_PAGE_SIZE -> MAX_PAGE_SIZE
    """
    if page is None or page < 1:
        page = DEFAULT_PAGE
    if size is None or size < 1:
        size = DEFAULT_PAGE_SIZE
    if size > MAX_PAGE_SIZE:
        size = MAX_PAGE_SIZE
    return PaginationParams(page=page, size=size)


def build_list_response(
    *,
    items: Sequence[TModel],
    total: int,
    params: PaginationParams,
    mapper: Callable[[TModel], TSchema],
) -> ListResponse[TSchema]:
    """
    Map items and give each a descending ``index``.

    The first item of the first page gets ``total``, the last item overall gets 1.
    """
    mapped: List[TSchema] = []
    for position, item in enumerate(items):
        schema = mapper(item)
        if hasattr(schema, "index"):
            schema.index = total - params.offset - position
        mapped.append(schema)
    return ListResponse(data=mapped, count=total)
