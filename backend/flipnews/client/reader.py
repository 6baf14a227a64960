"""Terminal presentation: one article card at a time over news or favorites."""
from __future__ import annotations

import asyncio
import textwrap
import webbrowser
from enum import Enum
from typing import Optional

from loguru import logger

from ..config import ReaderConfig
from ..models import PAGE_SIZE, Article
from .cache import ResponseCache
from .favorites import FavoritesStore, LocalStorageFavorites
from .filters import CATEGORIES
from .navigation import Navigator
from .news_client import NewsApiClient, NewsFeed
from .storage import LocalStorage

WIDTH = 72

HELP = (
    "n next | p prev | f save/unsave | v favorites/news | o open\n"
    "c <category> | s <query> | r retry | h help | q quit\n"
    f"categories: {', '.join(CATEGORIES)}"
)


class View(str, Enum):
    NEWS = "news"
    FAVORITES = "favorites"


class Reader:
    """Presentation state over a ``Navigator`` and a ``FavoritesStore``.

    News mode delegates to the navigator. Favorites mode walks the saved list
    with strict bounds and never touches the network.
    """

    def __init__(self, navigator: Navigator, favorites: FavoritesStore) -> None:
        self.navigator = navigator
        self.favorites = favorites
        self.view = View.NEWS
        self.fav_index = 0

    @property
    def showing_favorites(self) -> bool:
        return self.view is View.FAVORITES

    @property
    def current(self) -> Optional[Article]:
        if self.showing_favorites:
            if 0 <= self.fav_index < len(self.favorites):
                return self.favorites[self.fav_index]
            return None
        return self.navigator.current()

    @property
    def can_next(self) -> bool:
        if self.showing_favorites:
            return self.fav_index < len(self.favorites) - 1
        return self.navigator.can_next

    @property
    def can_prev(self) -> bool:
        if self.showing_favorites:
            return self.fav_index > 0
        return self.navigator.can_prev

    async def next(self) -> bool:
        if self.showing_favorites:
            if not self.can_next:
                return False
            self.fav_index += 1
            return True
        return await self.navigator.next()

    async def prev(self) -> bool:
        if self.showing_favorites:
            if not self.can_prev:
                return False
            self.fav_index -= 1
            return True
        return await self.navigator.prev()

    def toggle_favorite(self) -> Optional[bool]:
        article = self.current
        if article is None:
            return None
        added = self.favorites.toggle(article)
        if self.showing_favorites:
            self.fav_index = max(0, min(self.fav_index, len(self.favorites) - 1))
        return added

    async def show_favorites(self) -> None:
        self.view = View.FAVORITES
        self.fav_index = 0

    async def show_news(self) -> None:
        self.view = View.NEWS
        await self.navigator.retry()

    async def toggle_view(self) -> None:
        if self.showing_favorites:
            await self.show_news()
        else:
            await self.show_favorites()

    async def select_category(self, name: str) -> None:
        self.view = View.NEWS
        await self.navigator.set_category(name)

    async def search(self, query: str) -> None:
        self.view = View.NEWS
        await self.navigator.set_search(query)

    async def retry(self) -> None:
        if not self.showing_favorites:
            await self.navigator.retry()

    # -- rendering --

    def _header(self) -> str:
        if self.showing_favorites:
            return f"FlipNews | Favorites ({len(self.favorites)})"
        return f"FlipNews | {self.navigator.state.filter}"

    def _pager(self) -> str:
        prev = "<" if self.can_prev else " "
        nxt = ">" if self.can_next else " "
        if self.showing_favorites:
            return f"{prev} {self.fav_index + 1}/{len(self.favorites)} {nxt}"
        state = self.navigator.state
        dots = " ".join("●" if state.index == i else "○" for i in range(PAGE_SIZE))
        absolute = (state.page - 1) * PAGE_SIZE + state.index + 1
        return f"{prev} {dots} {nxt}   Page {state.page} (article {absolute})"

    def _card(self, article: Article) -> str:
        saved = "♥ Saved" if self.favorites.is_favorite(article.uuid) else "♡ Save"
        lines = [textwrap.fill(article.title or "(untitled)", WIDTH), ""]
        body = article.description or article.snippet
        if body:
            lines += [textwrap.fill(body, WIDTH), ""]
        meta = " · ".join(x for x in (article.source, article.published_at) if x)
        if meta:
            lines.append(meta)
        if article.url:
            lines.append(article.url)
        lines.append(saved)
        return "\n".join(lines)

    def render(self) -> str:
        rule = "-" * WIDTH
        out = [self._header(), rule]
        state = self.navigator.state
        if not self.showing_favorites and state.error:
            out += ["Oops!", state.error, "Press r to retry."]
            return "\n".join(out)
        if not self.showing_favorites and state.loading:
            out.append("Loading...")
            return "\n".join(out)

        article = self.current
        if article is None:
            out.append("No favorites saved yet." if self.showing_favorites else "No articles found.")
            return "\n".join(out)
        out += [self._card(article), rule, self._pager()]
        return "\n".join(out)


async def handle_command(reader: Reader, line: str) -> bool:
    """Apply one command line; returns False when the user asked to quit."""
    cmd, _, arg = line.strip().partition(" ")
    cmd = cmd.lower()
    if cmd in ("q", "quit", "exit"):
        return False
    if cmd in ("", "n", "next"):
        if not await reader.next():
            logger.info("No more articles")
    elif cmd in ("p", "prev"):
        await reader.prev()
    elif cmd in ("f", "fav"):
        reader.toggle_favorite()
    elif cmd in ("v", "view"):
        await reader.toggle_view()
    elif cmd in ("c", "category"):
        await reader.select_category(arg)
    elif cmd in ("s", "search"):
        await reader.search(arg)
    elif cmd in ("r", "retry"):
        await reader.retry()
    elif cmd in ("o", "open"):
        if reader.current is not None and reader.current.url:
            webbrowser.open(reader.current.url)
    else:
        print(HELP)
    return True


async def run_reader(config: Optional[ReaderConfig] = None, *, category: Optional[str] = None,
                     search: Optional[str] = None) -> None:
    config = config or ReaderConfig()
    storage = LocalStorage(config.STORAGE_PATH)
    client = NewsApiClient(config.API_BASE, timeout=config.REQUEST_TIMEOUT)
    cache = ResponseCache(storage if config.PERSIST_CACHE else None)
    navigator = Navigator(NewsFeed(client, cache), refetch_past_end=config.REFETCH_PAST_END)
    reader = Reader(navigator, FavoritesStore(LocalStorageFavorites(storage)))

    try:
        if search:
            await reader.search(search)
        elif category:
            await reader.select_category(category)
        else:
            await navigator.start()
        print(HELP)
        while True:
            print()
            print(reader.render())
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            if not await handle_command(reader, line):
                break
    finally:
        await navigator.aclose()
        await client.aclose()
