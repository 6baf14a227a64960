"""Filter context: a category or a free-text search, never both."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_CATEGORY = "tech"

CATEGORIES = (
    "tech", "general", "science", "sports", "business",
    "health", "entertainment", "politics", "food", "travel",
)


class FilterMode(str, Enum):
    CATEGORY = "category"
    SEARCH = "search"


@dataclass(frozen=True, slots=True)
class FilterContext:
    mode: FilterMode = FilterMode.CATEGORY
    value: str = DEFAULT_CATEGORY

    @classmethod
    def category(cls, name: str | None = None) -> "FilterContext":
        name = (name or "").strip()
        return cls(FilterMode.CATEGORY, name or DEFAULT_CATEGORY)

    @classmethod
    def search(cls, query: str | None) -> "FilterContext":
        """A blank query falls back to the default category."""
        query = (query or "").strip()
        if not query:
            return cls.category()
        return cls(FilterMode.SEARCH, query)

    @property
    def is_search(self) -> bool:
        return self.mode is FilterMode.SEARCH

    def query_params(self) -> dict[str, str]:
        if self.is_search:
            return {"search": self.value}
        return {"categories": self.value}

    def __str__(self) -> str:
        return f"{self.mode.value}:{self.value}"
