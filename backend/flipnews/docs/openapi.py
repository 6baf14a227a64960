"""Builds a minimal OpenAPI spec from existing Pydantic schemas."""
from __future__ import annotations

from typing import Any, Dict
from flask import request

from .. import __version__
from ..models import NewsQuery, NewsResponse

API_TITLE = "FlipNews Proxy API"
SWAGGER_UI_CDN = "https://unpkg.com/swagger-ui-dist@5"


def _schemas() -> Dict[str, Any]:
    ref = "#/components/schemas/{model}"
    schemas = NewsResponse.model_json_schema(ref_template=ref)
    defs = schemas.pop("$defs", {})
    return {
        **defs,
        "NewsResponse": schemas,
        "Error": {
            "type": "object",
            "properties": {"error": {"type": "string"}, "message": {"type": "string"}},
            "required": ["error", "message"],
        },
    }


def _query_parameters() -> list[Dict[str, Any]]:
    props = NewsQuery.model_json_schema()["properties"]
    return [
        {"name": name, "in": "query", "required": False, "schema": schema}
        for name, schema in props.items()
    ]


def _error(description: str) -> Dict[str, Any]:
    return {
        "description": description,
        "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Error"}}},
    }


def build_openapi() -> Dict[str, Any]:
    base_url = f"{request.scheme}://{request.host}"
    return {
        "openapi": "3.0.3",
        "info": {"title": API_TITLE, "version": __version__},
        "servers": [{"url": base_url}],
        "tags": [{"name": "Health"}, {"name": "News"}],
        "paths": {
            "/api/health": {
                "get": {"tags": ["Health"], "summary": "Liveness check", "responses": {"200": {"description": "OK"}}}
            },
            "/api/news/all": {
                "get": {
                    "tags": ["News"],
                    "summary": "Proxy TheNewsApi /v1/news/all; search takes precedence over categories",
                    "parameters": _query_parameters(),
                    "responses": {
                        "200": {
                            "description": "Upstream body, verbatim",
                            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/NewsResponse"}}},
                        },
                        "400": _error("Invalid query parameters"),
                        "401": _error("Auth Error"),
                        "403": _error("Auth Error"),
                        "429": _error("Rate Limit"),
                        "500": _error("Server Misconfiguration or Internal Server Error"),
                        "502": _error("Bad Gateway"),
                    },
                }
            },
        },
        "components": {"schemas": _schemas()},
    }
