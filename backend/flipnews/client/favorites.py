"""Durable favorites: a uuid-unique, display-ordered list of saved articles."""
from __future__ import annotations

import json
from typing import Iterator, List, Protocol

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from ..models import Article
from .storage import LocalStorage

FAVORITES_KEY = "news_favorites"

_articles = TypeAdapter(List[Article])


class FavoritesBackend(Protocol):
    def load(self) -> List[Article]: ...

    def save(self, articles: List[Article]) -> None: ...


class LocalStorageFavorites:
    """Stores the favorites list as JSON under ``news_favorites``."""

    def __init__(self, storage: LocalStorage, key: str = FAVORITES_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> List[Article]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            return _articles.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Saved favorites are corrupt, starting empty: {e.error_count()} errors")
            return []

    def save(self, articles: List[Article]) -> None:
        self.storage.set_item(self.key, json.dumps([a.model_dump() for a in articles], ensure_ascii=False))


class MemoryFavorites:
    def __init__(self, articles: List[Article] | None = None) -> None:
        self.saved: List[Article] = list(articles or [])

    def load(self) -> List[Article]:
        return list(self.saved)

    def save(self, articles: List[Article]) -> None:
        self.saved = list(articles)


class FavoritesStore:
    def __init__(self, backend: FavoritesBackend) -> None:
        self.backend = backend
        self._items: List[Article] = self._dedupe(backend.load())

    @staticmethod
    def _dedupe(articles: List[Article]) -> List[Article]:
        seen: set[str] = set()
        unique: List[Article] = []
        for a in articles:
            if a.uuid not in seen:
                seen.add(a.uuid)
                unique.append(a)
        return unique

    @property
    def items(self) -> List[Article]:
        return list(self._items)

    def is_favorite(self, uuid: str) -> bool:
        return any(a.uuid == uuid for a in self._items)

    def toggle(self, article: Article) -> bool:
        """Add ``article`` if absent, remove it if present. Returns True when added."""
        if self.is_favorite(article.uuid):
            self._items = [a for a in self._items if a.uuid != article.uuid]
            added = False
        else:
            self._items = [*self._items, article]
            added = True
        self.backend.save(self.items)
        logger.debug(f"Favorite {'added' if added else 'removed'}: {article.uuid}")
        return added

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Article]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Article:
        return self._items[index]
