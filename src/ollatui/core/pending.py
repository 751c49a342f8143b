"""Bookkeeping for the one request each session may have in flight."""

from dataclasses import dataclass
from typing import Any, Protocol


class CancelHandle(Protocol):
    """Anything that can be cancelled; ``asyncio.Task`` in practice."""

    def cancel(self, msg: Any | None = None) -> bool: ...


@dataclass
class PendingRequest:
    """A request in flight, tagged with the generation it was issued under."""

    generation: int
    handle: CancelHandle | None = None
    cancelling: bool = False

    def cancel(self) -> None:
        self.cancelling = True
        if self.handle is not None:
            self.handle.cancel()


class GenerationCounter:
    """Monotonically increasing request tags for one session."""

    def __init__(self) -> None:
        self._value = 0

    @property
    def current(self) -> int:
        return self._value

    def next(self) -> int:
        self._value += 1
        return self._value
