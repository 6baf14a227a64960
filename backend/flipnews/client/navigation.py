"""
Pagination/navigation engine for browsing one article at a time.

The engine is split in two:

* ``transition(state, intent)`` is a pure reducer returning the next
  ``NavigationState`` and the effects (page loads, prefetches) to perform.
* ``Navigator`` is the asyncio driver: it performs effects through a
  ``NewsFeed``, feeds the outcome back as ``Loaded``/``LoadFailed`` intents and
  notifies subscribers whenever the state changes.

Every ``Load`` carries the filter and epoch that were current when it was
issued. A load result is applied only while it is still the pending load, so a
slow answer for an old filter can never overwrite a newer view.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from loguru import logger

from ..models import Article
from .filters import FilterContext, FilterMode
from .news_client import NewsFeed, NewsFetchError

__all__ = [
    "FilterContext", "FilterMode", "LoadReason", "Load", "Prefetch",
    "SetCategory", "SetSearch", "Next", "Prev", "Retry", "Loaded", "LoadFailed",
    "NavigationState", "transition", "Navigator",
]


class LoadReason(str, Enum):
    RESET = "reset"
    NEXT = "next"
    PREV = "prev"


# -- effects --


@dataclass(frozen=True, slots=True)
class Load:
    filter: FilterContext
    page: int
    epoch: int
    reason: LoadReason


@dataclass(frozen=True, slots=True)
class Prefetch:
    filter: FilterContext
    page: int


Effect = Union[Load, Prefetch]


# -- intents --


@dataclass(frozen=True, slots=True)
class SetCategory:
    name: str


@dataclass(frozen=True, slots=True)
class SetSearch:
    query: str


@dataclass(frozen=True, slots=True)
class Next:
    pass


@dataclass(frozen=True, slots=True)
class Prev:
    pass


@dataclass(frozen=True, slots=True)
class Retry:
    pass


@dataclass(frozen=True, slots=True)
class Loaded:
    load: Load
    articles: Tuple[Article, ...]


@dataclass(frozen=True, slots=True)
class LoadFailed:
    load: Load
    message: str


Intent = Union[SetCategory, SetSearch, Next, Prev, Retry, Loaded, LoadFailed]


@dataclass(frozen=True, slots=True)
class NavigationState:
    filter: FilterContext = field(default_factory=FilterContext)
    page: int = 1
    index: int = 0
    articles: Tuple[Article, ...] = ()
    loading: bool = False
    pending: Optional[Load] = None
    error: Optional[str] = None
    exhausted: bool = False
    epoch: int = 0

    @property
    def current(self) -> Optional[Article]:
        if 0 <= self.index < len(self.articles):
            return self.articles[self.index]
        return None

    @property
    def position(self) -> Tuple[int, int]:
        return self.page, self.index

    def can_prev(self) -> bool:
        return self.page > 1 or self.index > 0

    def can_next(self, refetch_past_end: bool = True) -> bool:
        if self.error or not self.articles:
            return False
        if self.index + 1 < len(self.articles):
            return True
        return refetch_past_end or not self.exhausted


def _prefetches(state: NavigationState) -> List[Effect]:
    if not state.articles:
        return []
    effects: List[Effect] = []
    if state.index == 1:
        effects.append(Prefetch(state.filter, state.page + 1))
    if state.index == 0 and state.page > 1:
        effects.append(Prefetch(state.filter, state.page - 1))
    return effects


def _reset(state: NavigationState, filter: FilterContext) -> Tuple[NavigationState, List[Effect]]:
    epoch = state.epoch + 1
    load = Load(filter, 1, epoch, LoadReason.RESET)
    return NavigationState(filter=filter, epoch=epoch, loading=True, pending=load), [load]


def _apply_loaded(state: NavigationState, load: Load, articles: Tuple[Article, ...]) -> NavigationState:
    if load.reason is LoadReason.RESET:
        return replace(
            state, articles=articles, page=load.page, index=0,
            loading=False, pending=None, error=None, exhausted=False,
        )
    if not articles:
        # End of stream going forward; an empty previous page is left alone too.
        return replace(state, pending=None, exhausted=state.exhausted or load.reason is LoadReason.NEXT)
    index = 0 if load.reason is LoadReason.NEXT else len(articles) - 1
    return replace(state, articles=articles, page=load.page, index=index, pending=None, exhausted=False)


def transition(
    state: NavigationState, intent: Intent, *, refetch_past_end: bool = True
) -> Tuple[NavigationState, List[Effect]]:
    if isinstance(intent, SetCategory):
        return _reset(state, FilterContext.category(intent.name))
    if isinstance(intent, SetSearch):
        if not intent.query.strip() and not state.filter.is_search:
            return state, []
        return _reset(state, FilterContext.search(intent.query))
    if isinstance(intent, Retry):
        return _reset(state, state.filter)

    if isinstance(intent, Next):
        if state.pending is not None or state.error or not state.articles:
            return state, []
        if state.index + 1 < len(state.articles):
            new = replace(state, index=state.index + 1)
            return new, _prefetches(new)
        if state.exhausted and not refetch_past_end:
            return state, []
        load = Load(state.filter, state.page + 1, state.epoch, LoadReason.NEXT)
        return replace(state, pending=load), [load]

    if isinstance(intent, Prev):
        if state.pending is not None or state.error:
            return state, []
        if state.index > 0:
            new = replace(state, index=state.index - 1)
            return new, _prefetches(new)
        if state.page > 1:
            load = Load(state.filter, state.page - 1, state.epoch, LoadReason.PREV)
            return replace(state, pending=load), [load]
        return state, []

    if isinstance(intent, (Loaded, LoadFailed)):
        load = intent.load
        if load != state.pending or load.epoch != state.epoch or load.filter != state.filter:
            logger.debug(f"Discarding stale result for {load.filter} page {load.page}")
            return state, []
        if isinstance(intent, LoadFailed):
            return replace(state, loading=False, pending=None, error=intent.message), []
        new = _apply_loaded(state, load, tuple(intent.articles))
        return new, (_prefetches(new) if new.position != state.position or load.reason is LoadReason.RESET else [])

    raise TypeError(f"unknown intent: {intent!r}")


Listener = Callable[[NavigationState], None]


class Navigator:
    """Drives ``transition`` on an event loop and performs its effects.

    Args:
        feed: Cache-or-fetch source of pages.
        refetch_past_end: Keep ``can_next`` true after an empty page and ask
            upstream again on every ``next()``. When False, an empty page
            disables forward navigation until the filter changes.
        initial: Starting filter (defaults to the "tech" category).
    """

    def __init__(
        self,
        feed: NewsFeed,
        *,
        refetch_past_end: bool = True,
        initial: Optional[FilterContext] = None,
    ) -> None:
        self.feed = feed
        self.refetch_past_end = refetch_past_end
        self.state = NavigationState(filter=initial or FilterContext())
        self._listeners: List[Listener] = []
        self._prefetch_tasks: set[asyncio.Task] = set()

    # -- subscriptions --

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

    # -- dispatch --

    async def dispatch(self, intent: Intent) -> NavigationState:
        before = self.state
        self.state, effects = transition(before, intent, refetch_past_end=self.refetch_past_end)
        if self.state is not before:
            self._notify()
        for effect in effects:
            if isinstance(effect, Prefetch):
                self._spawn_prefetch(effect)
        for effect in effects:
            if isinstance(effect, Load):
                await self._run_load(effect)
        return self.state

    async def _run_load(self, load: Load) -> None:
        try:
            result = await self.feed.fetch(load.filter, load.page)
        except NewsFetchError as e:
            await self.dispatch(LoadFailed(load, e.message))
            return
        except Exception as e:
            logger.exception(f"Load of {load.filter} page {load.page} crashed")
            await self.dispatch(LoadFailed(load, str(e) or type(e).__name__))
            return
        await self.dispatch(Loaded(load, tuple(result.data)))

    def _spawn_prefetch(self, effect: Prefetch) -> None:
        task = asyncio.create_task(self._prefetch(effect))
        self._prefetch_tasks.add(task)
        task.add_done_callback(self._prefetch_tasks.discard)

    async def _prefetch(self, effect: Prefetch) -> None:
        try:
            await self.feed.fetch(effect.filter, effect.page)
        except NewsFetchError as e:
            logger.warning(f"Prefetch of {effect.filter} page {effect.page} failed: {e.message}")
        except Exception:
            logger.exception(f"Prefetch of {effect.filter} page {effect.page} crashed")

    async def drain(self) -> None:
        """Wait for all in-flight prefetches."""
        while self._prefetch_tasks:
            await asyncio.gather(*list(self._prefetch_tasks), return_exceptions=True)

    async def aclose(self) -> None:
        for task in list(self._prefetch_tasks):
            task.cancel()
        await asyncio.gather(*list(self._prefetch_tasks), return_exceptions=True)

    # -- intents --

    async def start(self) -> NavigationState:
        return await self.dispatch(Retry())

    async def set_category(self, name: str) -> NavigationState:
        return await self.dispatch(SetCategory(name))

    async def set_search(self, query: str) -> NavigationState:
        return await self.dispatch(SetSearch(query))

    async def retry(self) -> NavigationState:
        return await self.dispatch(Retry())

    async def next(self) -> bool:
        """Advance one article; False when nothing moved (end of stream, busy, error)."""
        before = self.state.position
        await self.dispatch(Next())
        return self.state.position != before

    async def prev(self) -> bool:
        before = self.state.position
        await self.dispatch(Prev())
        return self.state.position != before

    # -- reads --

    def current(self) -> Optional[Article]:
        return self.state.current

    @property
    def can_next(self) -> bool:
        return self.state.can_next(self.refetch_past_end)

    @property
    def can_prev(self) -> bool:
        return self.state.can_prev()
