"""Pagination bookkeeping shared by the search operations."""

from typing import List, TypeVar

from uiregistry.models.schemas import SearchResult, PaginationMetadata

T = TypeVar("T")


def has_more(offset: int, limit: int, total_count: int) -> bool:
    """True when rows exist beyond the current page."""
    return offset + limit < total_count


def paginate(items: List[T], total_count: int, limit: int, offset: int = 0) -> SearchResult:
    """Wrap one fetched page and its separately counted total."""
    return SearchResult(
        items=items,
        total_count=total_count,
        limit=limit,
        offset=offset,
        has_more=has_more(offset, limit, total_count),
    )


def empty_page(limit: int, offset: int = 0) -> SearchResult:
    """A valid result with no rows; used when the filter can match nothing."""
    return SearchResult(items=[], total_count=0, limit=limit, offset=offset, has_more=False)


def pagination_metadata(result: SearchResult) -> PaginationMetadata:
    """Pagination envelope for the HTTP listing."""
    return PaginationMetadata(
        total_count=result.total_count,
        limit=result.limit,
        offset=result.offset,
        has_more=result.has_more,
    )


def validate_page(limit: int, offset: int) -> None:
    """Reject page parameters the store cannot honour."""
    if limit < 1:
        raise ValueError("limit must be a positive integer")
    if offset < 0:
        raise ValueError("offset must not be negative")
