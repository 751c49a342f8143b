"""Wire formats of the Ollama HTTP API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.models import ModelEntry


class OllamaModelDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    family: str | None = None
    parameter_size: str | None = None
    quantization_level: str | None = None


class OllamaModel(BaseModel):
    """One entry of ``GET /api/tags``."""

    model_config = ConfigDict(extra="ignore")

    name: str
    size: int = 0
    modified_at: datetime | None = None
    digest: str | None = None
    details: OllamaModelDetails | None = None

    def to_entry(self) -> ModelEntry:
        details = self.details or OllamaModelDetails()
        return ModelEntry(
            name=self.name,
            size=self.size,
            last_modified=self.modified_at,
            digest=self.digest,
            family=details.family,
            parameter_size=details.parameter_size,
        )


class TagsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    models: list[OllamaModel] = Field(default_factory=list)


class ChatRequest(BaseModel):
    """Body of ``POST /api/chat``."""

    model: str
    messages: list[dict[str, str]]
    stream: bool = True
    options: dict[str, Any] | None = None


class ChunkMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str = "assistant"
    content: str = ""


class ChatChunk(BaseModel):
    """One newline-delimited JSON object of a streamed chat reply."""

    model_config = ConfigDict(extra="ignore")

    message: ChunkMessage | None = None
    done: bool = False
    error: str | None = None
