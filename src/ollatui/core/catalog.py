"""Locally installed models and the selection cursor over them."""

from ..errors import describe
from .events import LoadModels
from .models import ModelEntry, StatusMessage
from .pending import CancelHandle, GenerationCounter, PendingRequest
from .scroll import ScrollState


class ModelCatalog:
    """Installed-model list in server order.

    A failed reload keeps the previous list; a successful one replaces it
    wholesale and resets the cursor.
    """

    def __init__(self) -> None:
        self.entries: list[ModelEntry] = []
        self.scroll = ScrollState()
        self.loaded = False
        self.pending: PendingRequest | None = None
        self.status: StatusMessage | None = None
        self._generations = GenerationCounter()

    @property
    def is_loading(self) -> bool:
        return self.pending is not None

    @property
    def selected_entry(self) -> ModelEntry | None:
        if not self.entries:
            return None
        return self.entries[self.scroll.selected]

    def begin_load(self) -> LoadModels:
        """Start a reload, superseding any reload still in flight."""
        if self.pending is not None:
            self.pending.cancel()
        generation = self._generations.next()
        self.pending = PendingRequest(generation)
        return LoadModels(generation=generation)

    def attach(self, generation: int, handle: CancelHandle) -> None:
        if self.pending is not None and self.pending.generation == generation:
            self.pending.handle = handle

    def apply_loaded(self, generation: int, entries: list[ModelEntry]) -> bool:
        if self.pending is None or self.pending.generation != generation:
            return False
        self.pending = None
        self.entries = list(entries)
        self.scroll.reset()
        self.loaded = True
        self.status = None
        return True

    def apply_failed(self, generation: int, error: Exception) -> bool:
        if self.pending is None or self.pending.generation != generation:
            return False
        self.pending = None
        self.status = StatusMessage(describe(error), level="error")
        return True

    def cancel(self) -> None:
        if self.pending is not None:
            self.pending.cancel()
            self.pending = None

    # Navigation

    def move(self, delta: int) -> None:
        self.scroll.move(delta, len(self.entries))

    def first(self) -> None:
        self.scroll.first(len(self.entries))

    def last(self) -> None:
        self.scroll.last(len(self.entries))
