"""
Sphinx Client - searchd access over the HTTP JSON ``/search`` endpoint.

Features:
- Async HTTP client
- Stateful query settings in the style of the classic Sphinx API
- Match, sort, weighting and filter translation to JSON queries
- Errors and warnings reported through ``get_last_error``/``get_last_warning``
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

import httpx

from sphinxsearch.domains.search.models import (
    DocumentMatch,
    MatchMode,
    QueryResult,
    SortMode,
)

if TYPE_CHECKING:
    from sphinxsearch.config.settings import Settings

logger = logging.getLogger(__name__)

__all__ = ["SphinxHttpClient", "client_factory"]

# Sphinx sort expression names with a JSON equivalent
_SPECIAL_SORT_KEYS = {
    "@relevance": "_score",
    "@weight": "_score",
    "@rank": "_score",
    "@id": "id",
}


class SphinxHttpClient:
    """
    searchd client for a single query.

    Settings accumulate through the ``set_*`` methods and are sent together
    when ``query`` runs. Create one client per query.

    Example:
        >>> client = SphinxHttpClient()
        >>> client.set_server("localhost", 9313)
        >>> client.set_limits(0, 20)
        >>> result = await client.query("door fault", "posts")
        >>> [m.doc_id for m in result.matches]
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 9313,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Sphinx client.

        Args:
            host: searchd host
            port: searchd HTTP listener port
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used for testing)
        """
        self._host = host
        self._port = port
        self._timeout = timeout
        self._transport = transport

        self._offset = 0
        self._limit = 20
        self._max_matches = 0
        self._match_mode = MatchMode.ALL
        self._sort_mode = SortMode.RELEVANCE
        self._sort_expression = ""
        self._field_weights: dict[str, int] = {}
        self._filters: list[tuple[bool, dict[str, Any]]] = []

        self._last_error = ""
        self._last_warning = ""

    @property
    def base_url(self) -> str:
        return f"http://{self._host}:{self._port}"

    def set_server(self, host: str, port: int) -> None:
        if not host:
            raise ValueError("host must not be empty")
        if port <= 0:
            raise ValueError(f"port must be positive, got {port}")
        self._host = host
        self._port = port

    def set_field_weights(self, weights: Mapping[str, int]) -> None:
        self._field_weights = dict(weights)

    def set_match_mode(self, mode: MatchMode) -> None:
        self._match_mode = MatchMode(mode)

    def set_limits(self, offset: int, limit: int, max_matches: int = 0) -> None:
        if offset < 0:
            raise ValueError(f"offset must not be negative, got {offset}")
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")
        if max_matches < 0:
            raise ValueError(f"max_matches must not be negative, got {max_matches}")
        self._offset = offset
        self._limit = limit
        self._max_matches = max_matches

    def set_sort_mode(self, mode: SortMode, expression: str = "") -> None:
        mode = SortMode(mode)
        if mode in (SortMode.TIME_SEGMENTS, SortMode.EXPR):
            raise ValueError(f"Sort mode {mode.name} is not available over HTTP")
        if mode is not SortMode.RELEVANCE and not expression:
            raise ValueError(f"Sort mode {mode.name} needs a sort expression")
        self._sort_mode = mode
        self._sort_expression = expression

    def set_filter(
        self,
        attribute: str,
        values: Sequence[int],
        exclude: bool = False,
    ) -> None:
        """Keep only matches whose ``attribute`` is one of ``values``."""
        if not values:
            raise ValueError(f"Filter on {attribute!r} needs at least one value")
        self._filters.append((exclude, {"in": {attribute: [int(v) for v in values]}}))

    def set_filter_range(
        self,
        attribute: str,
        min_value: int,
        max_value: int,
        exclude: bool = False,
    ) -> None:
        """Keep only matches whose ``attribute`` lies in ``[min_value, max_value]``."""
        if min_value > max_value:
            raise ValueError(f"Empty range for {attribute!r}: {min_value} > {max_value}")
        self._filters.append(
            (exclude, {"range": {attribute: {"gte": min_value, "lte": max_value}}})
        )

    def reset_filters(self) -> None:
        self._filters = []

    def get_last_error(self) -> str:
        return self._last_error

    def get_last_warning(self) -> str:
        return self._last_warning

    def build_payload(self, phrase: str, index_names: str = "*") -> dict[str, Any]:
        """
        Translate the accumulated settings into a ``/search`` request body.

        Args:
            phrase: Full-text query; empty matches every document
            index_names: Space separated index names

        Returns:
            JSON-serializable request body
        """
        payload: dict[str, Any] = {
            "index": ",".join(index_names.split()) or "*",
            "query": self._query_clause(phrase),
            "offset": self._offset,
            "limit": self._limit,
        }

        sort = self._sort_clause()
        if sort:
            payload["sort"] = sort

        options: dict[str, Any] = {}
        if self._field_weights:
            options["field_weights"] = dict(self._field_weights)
        if self._max_matches:
            options["max_matches"] = self._max_matches
        if options:
            payload["options"] = options

        return payload

    async def query(self, phrase: str, index_names: str = "*") -> QueryResult | None:
        """
        Run the query.

        Args:
            phrase: Full-text query
            index_names: Space separated index names ("*" for all)

        Returns:
            Query result, or None on failure (see ``get_last_error``)
        """
        self._last_error = ""
        self._last_warning = ""
        payload = self.build_payload(phrase, index_names)
        logger.debug("POST %s/search %s", self.base_url, payload)

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as http:
                response = await http.post("/search", json=payload)
        except httpx.HTTPError as e:
            self._last_error = f"connection to {self._host}:{self._port} failed: {e}"
            return None

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error or not isinstance(data, dict) or "error" in data:
            self._last_error = _error_text(data, response)
            return None

        self._last_warning = _message_text(data.get("warning"))
        try:
            return _parse_result(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            self._last_error = f"malformed search response: {e!r}"
            return None

    def _query_clause(self, phrase: str) -> dict[str, Any]:
        if not phrase or self._match_mode is MatchMode.FULLSCAN:
            clause: dict[str, Any] = {"match_all": {}}
        elif self._match_mode is MatchMode.ALL:
            clause = {"match": {"*": {"query": phrase, "operator": "and"}}}
        elif self._match_mode is MatchMode.ANY:
            clause = {"match": {"*": {"query": phrase, "operator": "or"}}}
        elif self._match_mode is MatchMode.PHRASE:
            clause = {"match_phrase": {"*": phrase}}
        else:
            clause = {"query_string": phrase}

        if not self._filters:
            return clause

        must = [clause] + [f for exclude, f in self._filters if not exclude]
        must_not = [f for exclude, f in self._filters if exclude]
        boolean: dict[str, Any] = {"must": must}
        if must_not:
            boolean["must_not"] = must_not
        return {"bool": boolean}

    def _sort_clause(self) -> list[dict[str, str]]:
        if self._sort_mode is SortMode.RELEVANCE:
            return []
        if self._sort_mode is SortMode.ATTR_DESC:
            return [{self._sort_expression: "desc"}]
        if self._sort_mode is SortMode.ATTR_ASC:
            return [{self._sort_expression: "asc"}]
        return _parse_sort_expression(self._sort_expression)


def _parse_sort_expression(expression: str) -> list[dict[str, str]]:
    """Turn ``"@relevance DESC, updated ASC"`` into JSON sort clauses."""
    clauses = []
    for part in expression.split(","):
        tokens = part.split()
        if not tokens:
            continue
        if len(tokens) > 2 or (len(tokens) == 2 and tokens[1].upper() not in ("ASC", "DESC")):
            raise ValueError(f"Malformed sort expression: {expression!r}")
        key = _SPECIAL_SORT_KEYS.get(tokens[0].lower(), tokens[0])
        order = tokens[1].lower() if len(tokens) == 2 else "asc"
        clauses.append({key: order})
    return clauses


def _parse_result(data: dict[str, Any]) -> QueryResult:
    hits = data.get("hits") or {}
    matches = [
        DocumentMatch(
            doc_id=int(hit["_id"]),
            weight=float(hit.get("_score", 0) or 0),
            attrs=hit.get("_source") or {},
        )
        for hit in hits.get("hits", [])
    ]
    total_found = hits.get("total", len(matches))
    return QueryResult(
        matches=matches,
        total=len(matches),
        total_found=int(total_found),
        time=float(data.get("took", 0)) / 1000.0,
    )


def _message_text(value: Any) -> str:
    if not value:
        return ""
    if isinstance(value, dict):
        return str(value.get("reason") or value.get("message") or value)
    return str(value)


def _error_text(data: Any, response: httpx.Response) -> str:
    if isinstance(data, dict) and data.get("error"):
        return _message_text(data["error"])
    return f"HTTP {response.status_code}: {response.text[:200]}"


def client_factory(settings: Settings) -> Callable[[], SphinxHttpClient]:
    """Factory producing a fresh client per query, wired from settings."""

    def create() -> SphinxHttpClient:
        return SphinxHttpClient(
            host=settings.sphinx_host,
            port=settings.sphinx_port,
            timeout=settings.sphinx_timeout,
        )

    return create
