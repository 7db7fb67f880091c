"""Search session state machine.

``SearchSession`` owns one mutable ``SessionState`` and drives the
``SearchClient`` on behalf of a presentation layer. Errors never leave the
session: they are recorded on the state.

Each outgoing call captures the session generation. ``start_search`` and
``clear`` bump it, so a response belonging to an older generation is dropped
instead of being applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Callable, Protocol

from alketab.domain.models import NormalizedPage, NormalizedVerse, SortOrder, WordStats
from alketab.logging import logger
from alketab.services.exceptions import ErrorKind, SearchError


class Phase(str, Enum):
    idle = "idle"
    loading = "loading"
    loading_more = "loading_more"
    success = "success"
    error = "error"


class SearchBackend(Protocol):
    async def search_initial(self, query: str) -> NormalizedPage: ...

    async def search_continuation(
        self, token: str, page: int, sort: SortOrder = SortOrder.mushaf
    ) -> NormalizedPage: ...


@dataclass(slots=True)
class SessionState:
    query: str = ""
    verses: list[NormalizedVerse] = field(default_factory=list)
    current_page: int = 1
    total_pages: int = 1
    total_results: int = 0
    continuation_token: str | None = None
    sort_order: SortOrder = SortOrder.mushaf
    phase: Phase = Phase.idle
    last_error: ErrorKind | None = None
    last_error_message: str | None = None
    ai_explanation: str | None = None
    word_stats: WordStats | None = None

    @property
    def has_more_pages(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def is_loading(self) -> bool:
        return self.phase is Phase.loading

    @property
    def is_loading_more(self) -> bool:
        return self.phase is Phase.loading_more

    def reset(self) -> None:
        """Restore every field to its initial value in place."""

        initial = SessionState()
        for item in fields(self):
            setattr(self, item.name, getattr(initial, item.name))

    def reset_results(self) -> None:
        """Drop results, pagination and AI data but keep query and sort order."""

        self.verses = []
        self.current_page = 1
        self.total_pages = 1
        self.total_results = 0
        self.continuation_token = None
        self.ai_explanation = None
        self.word_stats = None
        self.last_error = None
        self.last_error_message = None


StateListener = Callable[[SessionState], None]


class SearchSession:
    def __init__(self, client: SearchBackend) -> None:
        self._client = client
        self.state = SessionState()
        self._generation = 0
        self._listeners: list[StateListener] = []

    @property
    def generation(self) -> int:
        return self._generation

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def start_search(self, query: str | None = None) -> None:
        """Run a fresh primary search, replacing any accumulated results.

        ``query`` defaults to the stored query, which is how sort changes
        re-run the last search.
        """

        state = self.state
        if query is not None:
            state.query = query.strip()

        self._generation += 1
        generation = self._generation
        state.reset_results()
        state.phase = Phase.loading
        self._notify()

        logger.info("search_session_started", query=state.query, generation=generation)
        try:
            page = await self._client.search_initial(state.query)
        except SearchError as exc:
            if self._is_stale(generation, "search"):
                return
            state.reset_results()
            state.last_error = exc.kind
            state.last_error_message = exc.user_message
            state.phase = Phase.error
            logger.warning(
                "search_session_failed",
                generation=generation,
                error_kind=exc.kind.value,
                error=exc.user_message,
            )
            self._notify()
            return

        if self._is_stale(generation, "search"):
            return
        state.verses = list(page.verses)
        state.continuation_token = page.continuation_token
        state.sort_order = page.sort_order
        state.ai_explanation = page.ai_explanation
        state.word_stats = page.word_stats
        state.current_page = page.page
        state.total_pages = page.total_pages
        state.total_results = page.total_results
        state.phase = Phase.success
        logger.info(
            "search_session_succeeded",
            generation=generation,
            verses=len(state.verses),
            page=state.current_page,
            total_pages=state.total_pages,
        )
        self._notify()

    async def load_more(self) -> None:
        """Fetch and append the next page; silently ignored when not possible."""

        state = self.state
        if (
            state.phase is not Phase.success
            or not state.has_more_pages
            or not state.continuation_token
        ):
            logger.debug(
                "search_session_load_more_skipped",
                phase=state.phase.value,
                has_more_pages=state.has_more_pages,
            )
            return

        generation = self._generation
        next_page = state.current_page + 1
        state.phase = Phase.loading_more
        state.last_error = None
        state.last_error_message = None
        self._notify()

        logger.info("search_session_load_more", page=next_page, generation=generation)
        try:
            page = await self._client.search_continuation(
                state.continuation_token, next_page, state.sort_order
            )
        except SearchError as exc:
            if self._is_stale(generation, "load_more"):
                return
            state.last_error = exc.kind
            state.last_error_message = exc.user_message
            state.phase = Phase.success
            logger.warning(
                "search_session_load_more_failed",
                generation=generation,
                error_kind=exc.kind.value,
                error=exc.user_message,
            )
            self._notify()
            return

        if self._is_stale(generation, "load_more"):
            return
        state.verses.extend(page.verses)
        state.current_page = page.page
        state.total_pages = page.total_pages
        state.phase = Phase.success
        self._notify()

    async def change_sort_order(self, sort: SortOrder) -> None:
        state = self.state
        if state.sort_order == sort:
            return
        state.sort_order = sort
        logger.info("search_session_sort_changed", sort_order=sort.value)
        if state.verses:
            await self.start_search()
        else:
            self._notify()

    def clear(self) -> None:
        self._generation += 1
        self.state.reset()
        logger.info("search_session_cleared", generation=self._generation)
        self._notify()

    def _is_stale(self, generation: int, operation: str) -> bool:
        if generation == self._generation:
            return False
        logger.debug(
            "search_session_discarded_response",
            operation=operation,
            generation=generation,
            current_generation=self._generation,
        )
        return True

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.state)
            except Exception:
                logger.exception("search_session_listener_failed")


__all__ = ["Phase", "SearchBackend", "SearchSession", "SessionState", "StateListener"]
