"""Registry search: query text, results, loading mode and debounce timing.

The most recent query wins. Submitting while a search is loading cancels it
and bumps the generation, so a late answer to the older query is dropped.
"""

from ..errors import describe
from .events import RunSearch
from .models import SearchMode, SearchResult, StatusMessage
from .pending import CancelHandle, GenerationCounter, PendingRequest
from .scroll import ScrollState


class SearchSession:
    """Search tab state."""

    def __init__(self, debounce: float | None = None) -> None:
        self.query = ""
        self.results: list[SearchResult] = []
        self.scroll = ScrollState()
        self.mode = SearchMode.IDLE
        self.error: str | None = None
        self.last_query: str | None = None
        self.pending: PendingRequest | None = None
        self.status: StatusMessage | None = None
        self.debounce = debounce
        self.edited_at: float | None = None
        self._generations = GenerationCounter()

    @property
    def selected_result(self) -> SearchResult | None:
        if not self.results:
            return None
        return self.results[self.scroll.selected]

    # Query editing

    def type_text(self, text: str, now: float | None = None) -> None:
        self.query += text
        self._edited(now)

    def backspace(self, now: float | None = None) -> None:
        if self.query:
            self.query = self.query[:-1]
            self._edited(now)

    def _edited(self, now: float | None) -> None:
        if self.debounce is not None and now is not None:
            self.edited_at = now

    def debounce_due(self, now: float) -> bool:
        """True once the query has been left alone for ``debounce`` seconds."""
        if self.debounce is None or self.edited_at is None:
            return False
        return now - self.edited_at >= self.debounce

    # Requests

    def submit(self, query: str | None = None) -> RunSearch:
        """Start a search for ``query`` (the current text when omitted).

        An empty query asks for the trending set.
        """
        if query is None:
            query = self.query
        query = query.strip()
        if self.pending is not None:
            self.pending.cancel()
        generation = self._generations.next()
        self.pending = PendingRequest(generation)
        self.mode = SearchMode.LOADING
        self.edited_at = None
        self.status = None
        return RunSearch(generation=generation, query=query)

    def attach(self, generation: int, handle: CancelHandle) -> None:
        if self.pending is not None and self.pending.generation == generation:
            self.pending.handle = handle

    def apply_results(self, generation: int, query: str, results: list[SearchResult]) -> bool:
        if self.pending is None or self.pending.generation != generation:
            return False
        self.pending = None
        self.results = list(results)
        self.scroll.reset()
        self.mode = SearchMode.LOADED
        self.error = None
        self.last_query = query
        return True

    def apply_failed(self, generation: int, query: str, error: Exception) -> bool:
        if self.pending is None or self.pending.generation != generation:
            return False
        self.pending = None
        self.results = []
        self.scroll.reset()
        self.mode = SearchMode.ERRORED
        self.error = describe(error)
        self.last_query = query
        self.status = StatusMessage(self.error, level="error")
        return True

    def cancel(self) -> None:
        if self.pending is not None:
            self.pending.cancel()
            self.pending = None
            if self.error is not None:
                self.mode = SearchMode.ERRORED
            elif self.last_query is not None:
                self.mode = SearchMode.LOADED
            else:
                self.mode = SearchMode.IDLE

    # Navigation

    def move(self, delta: int) -> None:
        self.scroll.move(delta, len(self.results))

    def first(self) -> None:
        self.scroll.first(len(self.results))

    def last(self) -> None:
        self.scroll.last(len(self.results))
