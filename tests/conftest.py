"""Shared fixtures: sample articles, a fake upstream, a Flask app and fake feeds."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable

import pytest
import requests

from flipnews import create_app
from flipnews.client.filters import FilterContext
from flipnews.client.news_client import NewsFetchError
from flipnews.config import BaseConfig
from flipnews.models import Article, NewsResponse, PageMeta


def make_article(uuid: str, **overrides: Any) -> Article:
    data = {
        "uuid": uuid,
        "title": f"Title {uuid}",
        "description": f"Description {uuid}",
        "snippet": f"Snippet {uuid}",
        "url": f"https://example.com/{uuid}",
        "image_url": f"https://example.com/{uuid}.jpg",
        "language": "en",
        "published_at": "2026-10-01T10:00:00.000000Z",
        "source": "example.com",
        "categories": ["tech"],
    }
    data.update(overrides)
    return Article(**data)


def make_page(articles: list[Article], page: int = 1, found: int = 100) -> NewsResponse:
    return NewsResponse(
        meta=PageMeta(found=found, returned=len(articles), limit=3, page=page),
        data=articles,
    )


def upstream_body(prefix: str, page: int, count: int = 3) -> dict:
    return make_page([make_article(f"{prefix}-{page}-{i}") for i in range(count)], page).model_dump()


def make_response(status: int, body: Any) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = json.dumps(body).encode() if not isinstance(body, bytes) else body
    resp.headers["Content-Type"] = "application/json"
    return resp


class FakeUpstream:
    """Stand-in for ``requests.Session.get`` against TheNewsApi."""

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self.handler: Callable[[dict], requests.Response] = self.ok

    @staticmethod
    def ok(params: dict) -> requests.Response:
        prefix = params.get("search") or params.get("categories")
        return make_response(200, upstream_body(prefix, int(params["page"]), int(params["limit"])))

    def __call__(self, url, params=None, **kwargs) -> requests.Response:
        self.calls.append(dict(params or {}))
        return self.handler(dict(params or {}))


@pytest.fixture
def upstream(monkeypatch: pytest.MonkeyPatch) -> FakeUpstream:
    fake = FakeUpstream()
    monkeypatch.setattr(requests.Session, "get", fake)
    return fake


@pytest.fixture
def app(upstream: FakeUpstream):
    app = create_app(BaseConfig(THENEWSAPI_TOKEN="test-token", FRONTEND_ORIGIN="*"))
    app.config["TESTING"] = True
    return app


@pytest.fixture
def http(app):
    return app.test_client()


class FakeNewsClient:
    """Stand-in for ``NewsApiClient.fetch_page`` serving numbered pages."""

    def __init__(self, pages: int = 10, per_page: int = 3) -> None:
        self.pages = pages
        self.per_page = per_page
        self.calls: list[tuple[FilterContext, int]] = []
        self.fail: dict[int, str] = {}
        self.gates: dict[tuple[FilterContext, int], asyncio.Event] = {}

    async def fetch_page(self, filter: FilterContext, page: int) -> NewsResponse:
        self.calls.append((filter, page))
        gate = self.gates.get((filter, page))
        if gate is not None:
            await gate.wait()
        if page in self.fail:
            raise NewsFetchError(self.fail[page], 500)
        if page > self.pages:
            return make_page([], page)
        return make_page(
            [make_article(f"{filter.value}-{page}-{i}") for i in range(self.per_page)], page
        )

    def count(self, page: int) -> int:
        return sum(1 for _, p in self.calls if p == page)
