"""Proxy error taxonomy, global HTTP error handling and JSON response helpers."""
from __future__ import annotations

from typing import Any

from flask import Flask, jsonify
from loguru import logger
from pydantic import ValidationError


class ProxyError(Exception):
    """Base class for failures surfaced to proxy callers as ``{error, message}``."""

    status: int = 500
    error: str = "Internal Server Error"
    message: str = "unexpected error"

    def __init__(self, message: str | None = None, status: int | None = None) -> None:
        if message is not None:
            self.message = message
        if status is not None:
            self.status = status
        super().__init__(self.message)

    def to_response(self):
        return error_response(self.error, self.message, self.status)


class Misconfigured(ProxyError):
    error = "Server Misconfiguration"
    message = "API Token missing on server."


class Unauthorized(ProxyError):
    status = 401
    error = "Auth Error"
    message = "TheNewsApi authentication failed."


class RateLimited(ProxyError):
    status = 429
    error = "Rate Limit"
    message = "Daily request limit reached."


class BadGateway(ProxyError):
    status = 502
    error = "Bad Gateway"
    message = "No response from news API."


class UpstreamError(ProxyError):
    """Any other non-2xx upstream answer; status and body are passed through."""

    error = "Upstream Error"

    def __init__(self, status: int, body: Any) -> None:
        self.body = body
        super().__init__(f"Upstream responded with {status}", status)

    def to_response(self):
        return jsonify(self.body), self.status


class LocalFault(ProxyError):
    error = "Internal Server Error"


def error_response(error: str, message: str, status: int):
    return jsonify({"error": error, "message": message}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ProxyError)
    def proxy_error(err: ProxyError):  # type: ignore[override]
        return err.to_response()

    @app.errorhandler(ValidationError)
    def invalid_query(err: ValidationError):  # type: ignore[override]
        fields = ", ".join(".".join(str(p) for p in e["loc"]) for e in err.errors())
        return error_response("Bad Request", f"Invalid query parameters: {fields}", 400)

    @app.errorhandler(400)
    def bad_request(err: Exception):  # type: ignore[override]
        return error_response("Bad Request", str(err), 400)

    @app.errorhandler(404)
    def not_found(err: Exception):  # type: ignore[override]
        return error_response("Not Found", str(err), 404)

    @app.errorhandler(422)
    def unprocessable(err: Exception):  # type: ignore[override]
        return error_response("Unprocessable Entity", str(err), 422)

    @app.errorhandler(500)
    def internal(err: Exception):  # type: ignore[override]
        logger.exception("Unhandled error: {}", err)
        return error_response("Internal Server Error", "unexpected error", 500)
