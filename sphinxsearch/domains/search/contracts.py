"""
Search Contracts - Interfaces for search domain.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Protocol, runtime_checkable

from .models import MatchMode, QueryResult, ResultSet, SearchRequest, SortMode


@runtime_checkable
class SearchClient(Protocol):
    """
    Contract for the search daemon client.

    Settings accumulate on the client and are sent together by ``query``.
    A client is used for one query only.
    """

    def set_server(self, host: str, port: int) -> None: ...

    def set_field_weights(self, weights: Mapping[str, int]) -> None: ...

    def set_match_mode(self, mode: MatchMode) -> None: ...

    def set_limits(self, offset: int, limit: int, max_matches: int = 0) -> None: ...

    def set_sort_mode(self, mode: SortMode, expression: str = "") -> None: ...

    def set_filter(
        self,
        attribute: str,
        values: Sequence[int],
        exclude: bool = False,
    ) -> None: ...

    def set_filter_range(
        self,
        attribute: str,
        min_value: int,
        max_value: int,
        exclude: bool = False,
    ) -> None: ...

    def reset_filters(self) -> None: ...

    async def query(self, phrase: str, index_names: str = "*") -> QueryResult | None:
        """Run the query; None when the daemon could not answer."""
        ...

    def get_last_error(self) -> str: ...

    def get_last_warning(self) -> str: ...


@runtime_checkable
class Searcher(Protocol):
    """Contract for search implementations."""

    async def search(self, request: SearchRequest) -> ResultSet:
        """Execute search and return normalized results."""
        ...


ClientFactory = Callable[[], SearchClient]
FilterHook = Callable[[SearchRequest, SearchClient], None]
