"""Docs blueprint: the OpenAPI document and a Swagger UI page rendering it."""
from __future__ import annotations

from string import Template

from flask import Blueprint, Response, jsonify, url_for

from .. import __version__
from .openapi import API_TITLE, SWAGGER_UI_CDN, build_openapi

bp = Blueprint("docs", __name__)

_PAGE = Template("""<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <title>$title $version</title>
  <link rel="stylesheet" href="$cdn/swagger-ui.css"/>
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="$cdn/swagger-ui-bundle.js"></script>
  <script>SwaggerUIBundle({url: "$spec_url", dom_id: "#swagger-ui", deepLinking: true});</script>
</body>
</html>
""")


@bp.get("/openapi.json")
def openapi_json() -> Response:
    return jsonify(build_openapi())


@bp.get("/docs")
def swagger_ui() -> Response:
    page = _PAGE.substitute(
        title=API_TITLE,
        version=__version__,
        cdn=SWAGGER_UI_CDN,
        spec_url=url_for("docs.openapi_json"),
    )
    return Response(page, mimetype="text/html")
