"""Async client for the proxy's ``/api/news/all`` plus cache-or-fetch."""
from __future__ import annotations

from typing import Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from ..models import PAGE_SIZE, NewsResponse
from .cache import ResponseCache, cache_key
from .filters import FilterContext


class NewsFetchError(Exception):
    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"API Error: {resp.status_code}"


class NewsApiClient:
    """Talks to the FlipNews proxy; the upstream token never reaches this side.

    Args:
        base_url: Proxy origin, e.g. ``http://localhost:5177``.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def fetch_page(self, filter: FilterContext, page: int) -> NewsResponse:
        params: dict[str, str | int] = {"page": page, "limit": PAGE_SIZE, **filter.query_params()}
        try:
            resp = await self._client.get("/api/news/all", params=params)
        except httpx.HTTPError as e:
            raise NewsFetchError(f"Network error: {e}") from e

        if resp.is_error:
            raise NewsFetchError(_error_message(resp), resp.status_code)
        try:
            return NewsResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise NewsFetchError(f"Malformed response: {e}", resp.status_code) from e

    async def aclose(self) -> None:
        await self._client.aclose()


class NewsFeed:
    """Cache-or-fetch front for ``NewsApiClient``; only non-empty successes are cached."""

    def __init__(self, client: NewsApiClient, cache: Optional[ResponseCache] = None) -> None:
        self.client = client
        self.cache = cache if cache is not None else ResponseCache()

    async def fetch(self, filter: FilterContext, page: int) -> NewsResponse:
        key = cache_key(filter, page)
        hit = self.cache.get(key)
        if hit is not None:
            logger.debug(f"[Cache Hit] {key}")
            return hit

        logger.debug(f"[Cache Miss] {key}")
        try:
            result = await self.client.fetch_page(filter, page)
        except NewsFetchError as e:
            logger.error(f"Fetch error for {key}: {e.message}")
            raise
        # Empty pages mark the current end of the stream; keep asking upstream.
        if result.data:
            self.cache.put(key, result)
        return result
