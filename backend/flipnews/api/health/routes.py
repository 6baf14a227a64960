"""Health check endpoints."""
from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, jsonify


bp = Blueprint("health", __name__)


@bp.get("")
def alive():
    now = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return jsonify({"status": "ok", "timestamp": now})
