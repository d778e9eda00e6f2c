"""
Tests for the Sphinx HTTP client adapter.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from sphinxsearch.config import load_settings
from sphinxsearch.domains.search import MatchMode, SearchClient, SortMode

from .client import SphinxHttpClient, client_factory


def _transport(
    body: dict[str, Any] | str,
    status_code: int = 200,
    seen: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if isinstance(body, str):
            return httpx.Response(status_code, text=body)
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)


SEARCH_RESPONSE = {
    "took": 12,
    "timed_out": False,
    "hits": {
        "total": 250,
        "hits": [
            {"_id": "30", "_score": 2500, "_source": {"updated": 1700000000}},
            {"_id": 10, "_score": 1800, "_source": {}},
        ],
    },
}


@pytest.fixture
def client() -> SphinxHttpClient:
    return SphinxHttpClient()


# --- Payload Tests ---


def test_implements_search_client_contract(client: SphinxHttpClient) -> None:
    assert isinstance(client, SearchClient)
    assert callable(getattr(SearchClient, "reset_filters", None))


def test_payload_defaults(client: SphinxHttpClient) -> None:
    """Test an unconfigured query matches everything."""
    payload = client.build_payload("")
    assert payload == {"index": "*", "query": {"match_all": {}}, "offset": 0, "limit": 20}


def test_payload_match_all_terms(client: SphinxHttpClient) -> None:
    client.set_match_mode(MatchMode.ALL)
    payload = client.build_payload("door fault", "posts posts_delta")

    assert payload["index"] == "posts,posts_delta"
    assert payload["query"] == {"match": {"*": {"query": "door fault", "operator": "and"}}}


@pytest.mark.parametrize(
    ("mode", "expected"),
    [
        (MatchMode.ANY, {"match": {"*": {"query": "door", "operator": "or"}}}),
        (MatchMode.PHRASE, {"match_phrase": {"*": "door"}}),
        (MatchMode.EXTENDED2, {"query_string": "door"}),
        (MatchMode.FULLSCAN, {"match_all": {}}),
    ],
)
def test_payload_match_modes(
    client: SphinxHttpClient, mode: MatchMode, expected: dict[str, Any]
) -> None:
    client.set_match_mode(mode)
    assert client.build_payload("door")["query"] == expected


def test_payload_limits_and_weights(client: SphinxHttpClient) -> None:
    client.set_limits(900, 100, 1000)
    client.set_field_weights({"title": 10, "text": 5})
    payload = client.build_payload("door")

    assert payload["offset"] == 900
    assert payload["limit"] == 100
    assert payload["options"] == {"field_weights": {"title": 10, "text": 5}, "max_matches": 1000}


def test_payload_extended_sort(client: SphinxHttpClient) -> None:
    client.set_sort_mode(SortMode.EXTENDED, "@relevance DESC, updated ASC")
    assert client.build_payload("door")["sort"] == [{"_score": "desc"}, {"updated": "asc"}]


def test_payload_attribute_sort(client: SphinxHttpClient) -> None:
    client.set_sort_mode(SortMode.ATTR_DESC, "updated")
    assert client.build_payload("")["sort"] == [{"updated": "desc"}]

    client.set_sort_mode(SortMode.ATTR_ASC, "updated")
    assert client.build_payload("")["sort"] == [{"updated": "asc"}]


def test_payload_relevance_sort_has_no_sort_clause(client: SphinxHttpClient) -> None:
    client.set_sort_mode(SortMode.RELEVANCE)
    assert "sort" not in client.build_payload("door")


def test_payload_filters(client: SphinxHttpClient) -> None:
    client.set_filter("category_id", [3, 5])
    client.set_filter("author_id", [9], exclude=True)
    client.set_filter_range("updated", 100, 200)

    query = client.build_payload("door")["query"]
    assert query == {
        "bool": {
            "must": [
                {"match": {"*": {"query": "door", "operator": "and"}}},
                {"in": {"category_id": [3, 5]}},
                {"range": {"updated": {"gte": 100, "lte": 200}}},
            ],
            "must_not": [{"in": {"author_id": [9]}}],
        }
    }

    client.reset_filters()
    assert "bool" not in client.build_payload("door")["query"]


# --- Validation Tests ---


def test_invalid_settings_rejected(client: SphinxHttpClient) -> None:
    with pytest.raises(ValueError):
        client.set_limits(-1, 10)
    with pytest.raises(ValueError):
        client.set_limits(0, 0)
    with pytest.raises(ValueError):
        client.set_server("", 9313)
    with pytest.raises(ValueError):
        client.set_sort_mode(SortMode.ATTR_DESC, "")
    with pytest.raises(ValueError):
        client.set_sort_mode(SortMode.TIME_SEGMENTS, "updated")
    with pytest.raises(ValueError):
        client.set_filter("category_id", [])
    with pytest.raises(ValueError):
        client.set_filter_range("updated", 5, 1)


def test_malformed_sort_expression(client: SphinxHttpClient) -> None:
    client.set_sort_mode(SortMode.EXTENDED, "updated SIDEWAYS")
    with pytest.raises(ValueError):
        client.build_payload("door")


# --- Query Tests ---


async def test_query_parses_response() -> None:
    seen: list[httpx.Request] = []
    client = SphinxHttpClient(transport=_transport(SEARCH_RESPONSE, seen=seen))
    client.set_server("search.internal", 9400)

    result = await client.query("door", "posts")

    assert result is not None
    assert [m.doc_id for m in result.matches] == [30, 10]
    assert result.matches[0].attrs == {"updated": 1700000000}
    assert result.total == 2
    assert result.total_found == 250
    assert result.time == pytest.approx(0.012)
    assert client.get_last_error() == ""

    assert str(seen[0].url) == "http://search.internal:9400/search"
    assert json.loads(seen[0].content)["index"] == "posts"


async def test_query_reports_warning() -> None:
    body = {**SEARCH_RESPONSE, "warning": {"reason": "index posts_delta: no such index"}}
    client = SphinxHttpClient(transport=_transport(body))

    result = await client.query("door")

    assert result is not None
    assert client.get_last_warning() == "index posts_delta: no such index"


async def test_query_daemon_error_returns_none() -> None:
    body = {"error": "query parse error: unexpected $end"}
    client = SphinxHttpClient(transport=_transport(body, status_code=400))

    assert await client.query("door (") is None
    assert client.get_last_error() == "query parse error: unexpected $end"


async def test_query_non_json_error() -> None:
    client = SphinxHttpClient(transport=_transport("Bad Gateway", status_code=502))

    assert await client.query("door") is None
    assert client.get_last_error().startswith("HTTP 502")


async def test_query_malformed_hit_returns_none() -> None:
    """Test a hit without a document id is reported, not raised."""
    body = {"took": 3, "hits": {"total": 1, "hits": [{"_score": 1500, "_source": {}}]}}
    client = SphinxHttpClient(transport=_transport(body))

    assert await client.query("door") is None
    assert client.get_last_error().startswith("malformed search response")


async def test_query_connection_error_returns_none() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    client = SphinxHttpClient(transport=httpx.MockTransport(refuse))

    assert await client.query("door") is None
    assert "localhost:9313" in client.get_last_error()


def test_client_factory_uses_settings() -> None:
    settings = load_settings(
        {
            "sphinxHost": "search.internal",
            "sphinxPort": 9400,
            "sphinxIndexCommand": "indexer",
            "sphinxConfigFile": "sphinx.conf",
        }
    )
    create = client_factory(settings)

    first, second = create(), create()
    assert first is not second
    assert first.base_url == "http://search.internal:9400"
