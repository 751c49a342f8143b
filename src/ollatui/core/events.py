"""Events entering the loop and commands leaving the handlers.

Everything the loop reacts to arrives as one of the inbound event types on a
single queue. Handlers never touch the network; they return commands that the
loop turns into tasks.
"""

from dataclasses import dataclass, field

from .models import ModelEntry, SearchResult

# Inbound events


@dataclass(frozen=True)
class KeyPressed:
    """A key press, normalised by the terminal adapter.

    ``name`` is the key name for special keys ("enter", "tab", "up",
    "backspace", "escape", ...) and the character itself for printable keys.
    """

    name: str
    char: str | None = None

    @property
    def is_printable(self) -> bool:
        return self.char is not None and len(self.char) == 1 and self.char.isprintable()


@dataclass(frozen=True)
class Tick:
    """Redraw timer tick; ``now`` is a monotonic timestamp."""

    now: float


@dataclass(frozen=True)
class Resize:
    """Size of the content area changed."""

    width: int
    height: int


@dataclass(frozen=True)
class ChatToken:
    generation: int
    text: str


@dataclass(frozen=True)
class ChatFinished:
    generation: int


@dataclass(frozen=True)
class ChatFailed:
    generation: int
    error: Exception


@dataclass(frozen=True)
class ModelsLoaded:
    generation: int
    entries: list[ModelEntry]


@dataclass(frozen=True)
class ModelsFailed:
    generation: int
    error: Exception


@dataclass(frozen=True)
class SearchLoaded:
    generation: int
    query: str
    results: list[SearchResult]


@dataclass(frozen=True)
class SearchFailed:
    generation: int
    query: str
    error: Exception


Event = (
    KeyPressed | Tick | Resize
    | ChatToken | ChatFinished | ChatFailed
    | ModelsLoaded | ModelsFailed
    | SearchLoaded | SearchFailed
)


# Outbound commands


@dataclass(frozen=True)
class StreamChat:
    generation: int
    model: str
    messages: list[dict[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class LoadModels:
    generation: int


@dataclass(frozen=True)
class RunSearch:
    generation: int
    query: str


@dataclass(frozen=True)
class Quit:
    pass


Command = StreamChat | LoadModels | RunSearch | Quit
