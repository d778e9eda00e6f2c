"""
Search Engine - Composes searchd queries and normalizes their results.

Features:
- Per-field relevance weighting
- Relevance or attribute sort selection per request
- Offset clamping against the daemon's result window
- Caller-supplied filter hook
- Delta index re-indexing
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from sphinxsearch.config.errors import ConfigurationError, SearchExecutionError
from sphinxsearch.domains.indexing import Reindexer

from .contracts import ClientFactory, FilterHook
from .models import MAX_MATCHES, MatchMode, ResultSet, SearchRequest, SortMode, SortOrder

if TYPE_CHECKING:
    from sphinxsearch.config.settings import Settings
    from sphinxsearch.domains.indexing import ReindexOutcome

logger = logging.getLogger(__name__)

__all__ = ["SearchEngine"]


class SearchEngine:
    """
    Search service over a Sphinx daemon.

    The engine only holds configuration; every search gets its own client
    from ``client_factory``, so concurrent searches share no state.

    Example:
        >>> engine = SearchEngine(settings, SphinxHttpClient, field_weights={"title": 10})
        >>> results = await engine.search(SearchRequest(phrase="door fault"))
        >>> results.ids, results.total_found
    """

    MAX_MATCHES = MAX_MATCHES

    def __init__(
        self,
        settings: Settings,
        client_factory: ClientFactory,
        *,
        field_weights: Mapping[str, int] | None = None,
        apply_filters: FilterHook | None = None,
        delta_index_name: str | None = None,
        reindexer: Reindexer | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        """
        Initialize search engine.

        Args:
            settings: Daemon host/port and indexing configuration
            client_factory: Creates a fresh search client per query
            field_weights: Relevance multiplier per full-text field
            apply_filters: Called with each request and its client before the
                query runs, to attach attribute filters
            delta_index_name: Index rebuilt by ``reindex_delta`` (defaults to
                ``settings.sphinx_delta_index``)
            reindexer: Runs the index command (built from settings if omitted)
            log: Logger to report through (module logger if omitted)
        """
        weights = dict(field_weights or {})
        bad = {name: weight for name, weight in weights.items() if weight <= 0}
        if bad:
            raise ConfigurationError(
                "Field weights must be positive integers",
                details={"invalid": bad},
            )

        self._settings = settings
        self._client_factory = client_factory
        self._field_weights = weights
        self._apply_filters = apply_filters
        self._delta_index_name = delta_index_name or settings.sphinx_delta_index
        self._log = log or logger

        if reindexer is None:
            reindexer = Reindexer(
                settings.sphinx_index_command,
                settings.sphinx_config_file,
                verbose=settings.verbose,
                log=self._log,
            )
        self._reindexer = reindexer

    @property
    def delta_index_name(self) -> str:
        return self._delta_index_name

    def field_weights(self) -> dict[str, int]:
        """Copy of the field weightings sent with every query."""
        return dict(self._field_weights)

    async def search(self, request: SearchRequest) -> ResultSet:
        """
        Execute a search.

        Args:
            request: Search parameters

        Returns:
            Matched ids in daemon order plus the total match count

        Raises:
            SearchExecutionError: If the client rejects the query settings
                or the daemon returns no result
        """
        limit = request.page_size
        offset = self.clamp_offset(request.offset, limit)

        client = self._client_factory()
        try:
            client.set_server(self._settings.sphinx_host, self._settings.sphinx_port)
            client.set_field_weights(self.field_weights())
            client.set_match_mode(MatchMode.ALL)
            client.set_limits(offset, limit, self.MAX_MATCHES)

            mode, expression = self.sort_mode_for(request)
            client.set_sort_mode(mode, expression)
        except ValueError as e:
            raise SearchExecutionError(
                f"Invalid query settings: {e}",
                details={"offset": offset, "limit": limit},
            ) from e

        if self._apply_filters is not None:
            self._apply_filters(request, client)

        result = await client.query(request.phrase or "", request.index_names)
        if result is None:
            error = client.get_last_error()
            raise SearchExecutionError(
                f"Sphinx error: {error}",
                details={"phrase": request.phrase, "index_names": request.index_names},
            )

        warning = client.get_last_warning()
        if warning:
            self._log.warning("Sphinx warning for query '%s': %s", request.phrase, warning)

        self._log.debug(
            "Query '%s' retrieved %d of %d matches in %.3f sec.",
            request.phrase,
            result.total,
            result.total_found,
            result.time,
        )

        ids = [int(match.doc_id) for match in result.matches[:limit]]
        return ResultSet(ids=ids, total_found=result.total_found)

    def clamp_offset(self, offset: int, limit: int) -> int:
        """
        Effective offset for a window of ``limit`` results.

        Offsets beyond the daemon's window are pulled back to the last full
        page rather than rejected.
        """
        if offset > self.MAX_MATCHES:
            return self.MAX_MATCHES - limit
        return offset

    @staticmethod
    def sort_mode_for(request: SearchRequest) -> tuple[SortMode, str]:
        """Pick the daemon sort mode and expression for a request."""
        if not request.sort_field:
            # Nothing to sort on; leave ordering to the daemon
            return SortMode.RELEVANCE, ""

        if request.sort_by_relevance:
            return (
                SortMode.EXTENDED,
                f"@relevance DESC, {request.sort_field} {request.sort_order.value}",
            )

        if request.sort_order is SortOrder.ASCENDING:
            return SortMode.ATTR_ASC, request.sort_field
        return SortMode.ATTR_DESC, request.sort_field

    def reindex_delta(self, index_name: str | None = None) -> ReindexOutcome:
        """
        Re-index the delta index.

        Blocks until the index command exits. Calls for the same index must
        not overlap, since the daemon rotates the index.

        Raises:
            ReindexError: If the index command fails
        """
        return self._reindexer.reindex_delta(index_name or self._delta_index_name)
