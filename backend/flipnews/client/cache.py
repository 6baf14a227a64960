"""Session-lifetime response cache keyed by (filter mode, filter value, page)."""
from __future__ import annotations

from typing import Dict, Optional

from loguru import logger
from pydantic import ValidationError

from ..models import NewsResponse
from .filters import FilterContext
from .storage import LocalStorage

CACHE_KEY_PREFIX = "news_cache_"


def cache_key(filter: FilterContext, page: int) -> str:
    return f"{CACHE_KEY_PREFIX}{filter}_p{page}"


class ResponseCache:
    """
    Plain key -> page mapping with no expiry and no eviction.

    When ``storage`` is given, every ``put`` is mirrored to it and misses fall
    back to it, so pages survive a restart.
    """

    def __init__(self, storage: Optional[LocalStorage] = None) -> None:
        self._entries: Dict[str, NewsResponse] = {}
        self.storage = storage

    def get(self, key: str) -> Optional[NewsResponse]:
        hit = self._entries.get(key)
        if hit is None and self.storage is not None:
            hit = self._load(key)
        return hit

    def put(self, key: str, value: NewsResponse) -> None:
        self._entries[key] = value
        if self.storage is not None:
            self.storage.set_item(key, value.model_dump_json())

    def _load(self, key: str) -> Optional[NewsResponse]:
        raw = self.storage.get_item(key) if self.storage is not None else None
        if raw is None:
            return None
        try:
            value = NewsResponse.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Dropping unreadable cache entry {key}: {e}")
            self.storage.remove_item(key)
            return None
        self._entries[key] = value
        return value

    def clear(self) -> None:
        self._entries.clear()
        if self.storage is not None:
            for key in self.storage.keys():
                if key.startswith(CACHE_KEY_PREFIX):
                    self.storage.remove_item(key)

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None if isinstance(key, str) else False

    def __len__(self) -> int:
        keys = set(self._entries)
        if self.storage is not None:
            keys.update(k for k in self.storage.keys() if k.startswith(CACHE_KEY_PREFIX))
        return len(keys)
