"""Page windowing and page metadata for search results."""

from __future__ import annotations

from dataclasses import dataclass

from src.data.schemas import PetSearchResponse, PetSummary


@dataclass(frozen=True)
class PageRequest:
    """A validated 1-based page request."""

    page: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def count_total_pages(total_count: int, page_size: int) -> int:
    """Ceiling division; zero matches means zero pages."""
    if total_count <= 0:
        return 0
    return -(-total_count // page_size)


def build_page(
    items: list[PetSummary],
    total_count: int,
    request: PageRequest,
) -> PetSearchResponse:
    """Wrap one page of items with metadata describing the full result set.

    Args:
        items: Items of the requested page, already ordered.
        total_count: Number of matches ignoring pagination.
        request: The page that was fetched.

    Returns:
        PetSearchResponse; a page past the end has no items but the same
        totals as any other page.
    """
    total_pages = count_total_pages(total_count, request.page_size)
    return PetSearchResponse(
        items=items,
        page=request.page,
        page_size=request.page_size,
        total_count=total_count,
        total_pages=total_pages,
        has_previous_page=request.page > 1,
        has_next_page=request.page < total_pages,
    )
