"""Application factory and blueprint registration."""
from __future__ import annotations

from dataclasses import asdict

from flask import Flask
from flask_cors import CORS

__version__ = "0.1.0"

from .config import BaseConfig
from .api.health.routes import bp as health_bp
from .api.news.routes import bp as news_bp
from .docs.routes import bp as docs_bp
from .errors import register_error_handlers
from .integrations.thenewsapi import TheNewsApiExt


def create_app(config: BaseConfig | None = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    config = config or BaseConfig()
    app.config.from_mapping(asdict(config))
    CORS(app, resources={r"/api/*": {"origins": app.config["FRONTEND_ORIGIN"]}})

    # Init extensions
    TheNewsApiExt().init_app(app)

    # Register blueprints
    app.register_blueprint(health_bp, url_prefix="/api/health")
    app.register_blueprint(news_bp, url_prefix="/api/news")
    app.register_blueprint(docs_bp)

    # Global error handlers
    register_error_handlers(app)
    return app
