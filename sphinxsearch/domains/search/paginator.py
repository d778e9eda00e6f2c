"""
Search Paginator - Page window arithmetic over search results.

Example:
    >>> paginator = Paginator(page_size=100, requested_page=3)
    >>> paginator.offset
    200
    >>> paginator.total_found = 250
    >>> paginator.num_pages
    3
"""

from __future__ import annotations

from .models import MAX_MATCHES

__all__ = ["Paginator"]


class Paginator:
    """
    Converts a requested page into a result window and navigation state.

    The requested page is clamped to the pages reachable within
    ``max_results``, never rejected. Everything except ``total_found`` is
    fixed at construction; derived values are recomputed on each access.
    """

    def __init__(
        self,
        page_size: int,
        requested_page: int,
        max_results: int = MAX_MATCHES,
    ) -> None:
        """
        Initialize paginator.

        Args:
            page_size: Results per page, must be positive
            requested_page: 1-based page number; 0 means the first page
            max_results: Upper bound the daemon can ever return
        """
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        if max_results <= 0:
            raise ValueError(f"max_results must be positive, got {max_results}")

        max_pages = max_results // page_size
        current_page = 1 if requested_page == 0 else requested_page

        self._page_size = page_size
        self._max_results = max_results
        self._current_page = min(current_page, max_pages)
        self._total_found = 0

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def max_results(self) -> int:
        return self._max_results

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def total_found(self) -> int:
        return self._total_found

    @total_found.setter
    def total_found(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"total_found cannot be negative, got {value}")
        self._total_found = value

    @property
    def offset(self) -> int:
        """Search offset for the current page."""
        if self._current_page <= 0:
            return 0
        return (self._current_page - 1) * self._page_size

    @property
    def num_pages(self) -> int:
        """Pages needed to show every match, rounding up."""
        if self._page_size <= 0:
            return 0
        pages, remainder = divmod(self._total_found, self._page_size)
        if remainder > 0:
            pages += 1
        return pages

    @property
    def has_next_page(self) -> bool:
        return self._current_page < self.num_pages

    @property
    def has_previous_page(self) -> bool:
        return self._current_page > 1

    @property
    def is_paginating(self) -> bool:
        """Whether there are any page links worth showing."""
        return self.num_pages > 1

    @property
    def next_page(self) -> int | None:
        return self._current_page + 1 if self.has_next_page else None

    @property
    def previous_page(self) -> int | None:
        return self._current_page - 1 if self.has_previous_page else None

    def page_list(self, max_pages: int) -> list[int]:
        """Page numbers from 1, up to ``max_pages`` of them."""
        return list(range(1, min(max_pages, self.num_pages) + 1))

    def __repr__(self) -> str:
        return (
            f"Paginator(current_page={self._current_page}, "
            f"page_size={self._page_size}, total_found={self._total_found})"
        )
