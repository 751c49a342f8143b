"""Data structures of the interaction core.

List entries coming from the network are immutable pydantic models;
chat messages are mutable because streamed tokens are appended in place.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Tab(str, Enum):
    """The three mutually exclusive UI contexts, in cycling order."""

    CHAT = "chat"
    MODELS = "models"
    SEARCH = "search"

    def next(self) -> "Tab":
        order = list(Tab)
        return order[(order.index(self) + 1) % len(order)]

    @property
    def title(self) -> str:
        return self.value.capitalize()


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    ERROR = "error"


class SearchMode(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


@dataclass
class ChatMessage:
    """One transcript entry."""

    role: Role
    content: str = ""
    complete: bool = True
    interrupted: bool = False  # cut short by cancellation
    failed: bool = False  # ended by a stream error

    def to_wire(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class ModelEntry(BaseModel):
    """A locally installed model as reported by the server."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Model identifier, e.g. 'llama3.2:latest'")
    size: int = Field(default=0, ge=0, description="Size on disk in bytes")
    last_modified: datetime | None = Field(
        default=None,
        description="When the model was last pulled or modified"
    )
    digest: str | None = Field(default=None, description="Content digest")
    family: str | None = Field(default=None, description="Model family")
    parameter_size: str | None = Field(default=None, description="e.g. '8B'")


class SearchResult(BaseModel):
    """A model found in the remote registry."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Registry model name")
    description: str = Field(default="", description="Short summary")
    tags: frozenset[str] = Field(default_factory=frozenset, description="Capabilities and sizes")
    url: str | None = Field(default=None, description="Registry page for the model")


@dataclass
class StatusMessage:
    """Inline, dismissible banner shown in one tab."""

    text: str
    level: str = "info"  # "info" or "error"
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_error(self) -> bool:
        return self.level == "error"
