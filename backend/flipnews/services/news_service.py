"""News proxy service: query normalization, credential injection, upstream delegation."""
from __future__ import annotations

from typing import Any, Dict, Optional

from loguru import logger

from ..errors import LocalFault, Misconfigured, ProxyError
from ..integrations.thenewsapi import TheNewsApiClient
from ..models import NewsQuery

DEFAULT_CATEGORY = "tech"


def upstream_params(query: NewsQuery, token: str) -> Dict[str, Any]:
    """Build TheNewsApi params; a search always wins over categories."""
    params: Dict[str, Any] = {
        "api_token": token,
        "language": query.language or "en",
        "limit": query.limit,
        "page": query.page,
    }
    if query.search:
        params["search"] = query.search
    elif query.categories:
        params["categories"] = query.categories
    else:
        params["categories"] = DEFAULT_CATEGORY
    return params


class NewsProxyService:
    def __init__(self, client: TheNewsApiClient, token: Optional[str]) -> None:
        self.client = client
        self.token = token

    def get_news(self, query: NewsQuery) -> Any:
        if not self.token:
            raise Misconfigured()
        try:
            params = upstream_params(query, self.token)
            return self.client.get_all(params)
        except ProxyError:
            raise
        except Exception as e:
            logger.error(f"Proxy Error: {e}")
            raise LocalFault(str(e)) from e
