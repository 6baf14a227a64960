"""Application configuration objects."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

load_dotenv()


def _env_str(name: str, default: str | None = None) -> str | None:
    return os.getenv(name) or default


def _env_num(name: str, default: float, cast: type = float):
    raw = os.getenv(name)
    if not raw:
        return cast(default)
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a valid {cast.__name__}, using {default}")
        return cast(default)


@dataclass
class BaseConfig:
    # TheNewsApi
    THENEWSAPI_TOKEN: str | None = field(default_factory=lambda: _env_str("THENEWSAPI_TOKEN"))
    THENEWSAPI_URL: str = field(
        default_factory=lambda: _env_str("THENEWSAPI_URL", "https://api.thenewsapi.com/v1/news/all")
    )
    UPSTREAM_TIMEOUT: float = field(default_factory=lambda: _env_num("UPSTREAM_TIMEOUT", 10))

    # Server
    FRONTEND_ORIGIN: str = field(default_factory=lambda: _env_str("FRONTEND_ORIGIN", "*"))
    PORT: int = field(default_factory=lambda: _env_num("PORT", 5177, int))


@dataclass
class ReaderConfig:
    API_BASE: str = field(default_factory=lambda: _env_str("FLIPNEWS_API_BASE", "http://localhost:5177"))
    STORAGE_PATH: Path = field(
        default_factory=lambda: Path(
            _env_str("FLIPNEWS_STORAGE", str(Path.home() / ".flipnews" / "storage.json"))
        ).expanduser()
    )
    REQUEST_TIMEOUT: float = field(default_factory=lambda: _env_num("FLIPNEWS_TIMEOUT", 15))
    PERSIST_CACHE: bool = field(
        default_factory=lambda: os.getenv("FLIPNEWS_PERSIST_CACHE", "false").lower() == "true"
    )
    REFETCH_PAST_END: bool = field(
        default_factory=lambda: os.getenv("FLIPNEWS_REFETCH_PAST_END", "true").lower() == "true"
    )
