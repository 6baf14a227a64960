"""News proxy blueprint."""
from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ...integrations.thenewsapi import TheNewsApiExt
from ...models import NewsQuery
from ...services.news_service import NewsProxyService


bp = Blueprint("news", __name__)

ALLOWED_PARAMS = ("categories", "search", "page", "limit", "language")


def _service() -> NewsProxyService:
    ext: TheNewsApiExt = current_app.extensions["thenewsapi"]
    assert ext.client is not None, "TheNewsApi client is not initialized"
    return NewsProxyService(ext.client, ext.token)


@bp.get("/all")
def all_news():
    raw = {k: request.args.get(k) for k in ALLOWED_PARAMS if request.args.get(k) is not None}
    query = NewsQuery.model_validate(raw)
    return jsonify(_service().get_news(query))
