"""Pytest configuration and shared fixtures."""
import asyncio
from collections.abc import Callable
from datetime import datetime, timezone

import pytest

from ollatui.client.base import ModelRegistry, ModelServer
from ollatui.core.models import ModelEntry, SearchResult
from ollatui.core.state import AppState


class FakeServer(ModelServer):
    """In-memory model server.

    ``hold`` makes the stream wait on ``release`` before each token so
    tests can act while a reply is in flight. ``delay`` spaces tokens out
    in time.
    """

    def __init__(
        self,
        models: list[ModelEntry] | None = None,
        tokens: list[str] | None = None,
        error: Exception | None = None,
        list_error: Exception | None = None,
        hold: bool = False,
        delay: float = 0.0,
    ):
        self.models = models or []
        self.tokens = tokens or []
        self.error = error
        self.list_error = list_error
        self.release = asyncio.Event() if hold else None
        self.delay = delay
        self.requests: list[tuple[str, list[dict[str, str]]]] = []
        self.list_calls = 0
        self.closed = False

    async def list_models(self) -> list[ModelEntry]:
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return list(self.models)

    async def chat_stream(self, model, messages):
        self.requests.append((model, messages))
        for token in self.tokens:
            if self.release is not None:
                await self.release.wait()
            if self.delay:
                await asyncio.sleep(self.delay)
            yield token
        if self.error is not None:
            raise self.error

    async def close(self) -> None:
        self.closed = True


class FakeRegistry(ModelRegistry):
    """In-memory registry keyed by query; ``gates`` delay chosen queries."""

    def __init__(
        self,
        results: dict[str, list[SearchResult]] | None = None,
        error: Exception | None = None,
    ):
        self.results = results or {}
        self.error = error
        self.gates: dict[str, asyncio.Event] = {}
        self.queries: list[str] = []
        self.closed = False

    async def search(self, query: str) -> list[SearchResult]:
        self.queries.append(query)
        if query in self.gates:
            await self.gates[query].wait()
        if self.error is not None:
            raise self.error
        return list(self.results.get(query, []))

    async def close(self) -> None:
        self.closed = True


class FakeHandle:
    """Cancel handle that only records the call."""

    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self, msg=None) -> bool:
        self.cancelled = True
        return True


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until ``predicate`` holds."""
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout)


def make_entry(name: str, size: int = 4_000_000_000) -> ModelEntry:
    return ModelEntry(
        name=name,
        size=size,
        last_modified=datetime(2024, 5, 1, tzinfo=timezone.utc),
        family="llama",
        parameter_size="8B",
    )


def make_result(name: str, description: str = "", tags: tuple[str, ...] = ()) -> SearchResult:
    return SearchResult(name=name, description=description, tags=frozenset(tags))


@pytest.fixture
def entries():
    """Return three installed models in server order."""
    return [make_entry("llama3.2:latest"), make_entry("mistral:7b"), make_entry("qwen2.5:14b")]


@pytest.fixture
def state():
    """Return a fresh application state with a small viewport."""
    return AppState(viewport=(40, 5))


@pytest.fixture
def fake_server(entries):
    """Return a fake server with installed models and a short reply."""
    return FakeServer(models=entries, tokens=["Hel", "lo", "!"])


@pytest.fixture
def fake_registry():
    """Return a fake registry with trending and two searchable queries."""
    return FakeRegistry(
        results={
            "": [make_result("llama3.2"), make_result("gemma2"), make_result("phi3")],
            "llama": [make_result("llama3.2", "Meta's model", ("tools", "8b"))],
            "mistral": [make_result("mistral", "Mistral 7B"), make_result("mistral-nemo")],
        }
    )
