"""End-to-end scenarios: reader client -> Flask proxy -> fake TheNewsApi."""

from __future__ import annotations

import httpx
import pytest

from flipnews.client.cache import ResponseCache
from flipnews.client.favorites import FavoritesStore, MemoryFavorites
from flipnews.client.navigation import Navigator
from flipnews.client.news_client import NewsApiClient, NewsFeed
from flipnews.client.reader import Reader

from .conftest import make_response


def through_proxy(flask_client) -> httpx.MockTransport:
    """Route httpx requests into the Flask test client."""

    def handler(request: httpx.Request) -> httpx.Response:
        resp = flask_client.get(request.url.path, query_string=request.url.query.decode())
        return httpx.Response(resp.status_code, content=resp.data, headers={"Content-Type": resp.content_type})

    return httpx.MockTransport(handler)


def build(http) -> tuple[Navigator, NewsApiClient]:
    client = NewsApiClient("http://proxy.test", transport=through_proxy(http))
    return Navigator(NewsFeed(client, ResponseCache())), client


@pytest.mark.asyncio
async def test_sports_pages_one_to_three(http, upstream):
    nav, client = build(http)
    await nav.set_category("sports")
    assert nav.state.position == (1, 0)
    assert len(nav.state.articles) == 3

    await nav.next()
    await nav.next()
    await nav.next()
    assert nav.state.position == (2, 0)
    await nav.next()
    await nav.next()
    await nav.next()
    assert nav.state.position == (3, 0)
    assert nav.current().uuid == "sports-3-0"
    assert nav.state.error is None

    await nav.drain()
    assert all(c["categories"] == "sports" and "search" not in c for c in upstream.calls)
    assert {c["limit"] for c in upstream.calls} == {3}
    await nav.aclose()
    await client.aclose()


@pytest.mark.asyncio
async def test_search_never_sends_categories_upstream(http, upstream):
    nav, client = build(http)
    await nav.set_category("business")
    await nav.set_search("climate")
    await nav.next()
    await nav.drain()
    search_calls = [c for c in upstream.calls if "search" in c]
    assert search_calls
    assert all("categories" not in c for c in search_calls)
    await nav.aclose()
    await client.aclose()


@pytest.mark.asyncio
async def test_invalid_token_surfaces_error_state(http, upstream):
    upstream.handler = lambda params: make_response(401, {"error": {"code": "invalid_api_token"}})
    nav, client = build(http)
    reader = Reader(nav, FavoritesStore(MemoryFavorites()))

    await reader.search("election")
    assert nav.state.error == "TheNewsApi authentication failed."
    assert "Oops!" in reader.render()
    assert nav.current() is None
    await client.aclose()


@pytest.mark.asyncio
async def test_rate_limit_falls_back_to_cached_page(http, upstream):
    nav, client = build(http)
    await nav.set_category("tech")
    first = nav.current()
    calls = len(upstream.calls)

    upstream.handler = lambda params: make_response(429, {"error": {"code": "usage_limit_reached"}})
    direct = http.get("/api/news/all?categories=tech")
    assert direct.status_code == 429
    assert direct.get_json()["error"] == "Rate Limit"
    calls += 1

    await nav.retry()
    assert nav.state.error is None
    assert nav.current() == first
    assert len(upstream.calls) == calls
    await client.aclose()
