"""Thin TheNewsApi client over a shared ``requests.Session``."""
from __future__ import annotations

from typing import Any, Dict, Optional

import requests
from flask import Flask
from loguru import logger

from ..errors import BadGateway, RateLimited, Unauthorized, UpstreamError

DEFAULT_ENDPOINT = "https://api.thenewsapi.com/v1/news/all"


def _masked(params: Dict[str, Any]) -> Dict[str, Any]:
    return {**params, "api_token": "***"} if "api_token" in params else dict(params)


def _body(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return {"error": "Upstream Error", "message": resp.text}


class TheNewsApiClient:
    """
    Issues GET requests against TheNewsApi and classifies the outcome.

    Success returns the decoded JSON body untouched. Failures raise one of the
    ``ProxyError`` subclasses so the HTTP layer can translate them.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def get_all(self, params: Dict[str, Any]) -> Any:
        logger.info(f"Proxying request to: {self.endpoint} (params: {_masked(params)})")
        try:
            resp = self.session.get(self.endpoint, params=params, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.error(f"Upstream API No Response: {e}")
            raise BadGateway() from e

        if resp.ok:
            return resp.json()

        status = resp.status_code
        body = _body(resp)
        logger.error(f"Upstream API Error: {status} {body}")
        if status in (401, 403):
            raise Unauthorized(status=status)
        if status == 429:
            raise RateLimited()
        raise UpstreamError(status, body)

    def close(self) -> None:
        self.session.close()


class TheNewsApiExt:
    """Flask extension owning the process-wide upstream client and token."""

    def __init__(self) -> None:
        self.client: Optional[TheNewsApiClient] = None
        self.token: Optional[str] = None

    def init_app(self, app: Flask) -> None:
        self.token = app.config.get("THENEWSAPI_TOKEN") or None
        self.client = TheNewsApiClient(
            endpoint=app.config.get("THENEWSAPI_URL") or DEFAULT_ENDPOINT,
            timeout=float(app.config.get("UPSTREAM_TIMEOUT", 10.0)),
        )
        if not self.token:
            logger.warning("WARNING: THENEWSAPI_TOKEN is not set; news queries will fail.")
        app.extensions["thenewsapi"] = self
