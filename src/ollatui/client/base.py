from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

import httpx

from ..core.models import ModelEntry, SearchResult


class _AsyncClosable:
    """Shared plumbing for the HTTP clients: async context manager support
    and request tracing through a debug callback.
    """

    _debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    def _event_hooks(self) -> dict[str, list[Any]]:
        """httpx event hooks reporting every request under ``HTTP``."""
        async def log_request(request: httpx.Request) -> None:
            self._debug("debug", "HTTP", f"{request.method} {request.url}")

        async def log_response(response: httpx.Response) -> None:
            request = response.request
            level = "warning" if response.status_code >= 400 else "debug"
            self._debug(level, "HTTP", f"{response.status_code} {request.method} {request.url.path}")

        return {"request": [log_request], "response": [log_response]}

    async def __aenter__(self) -> Any:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Close on exit.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise


class ModelServer(_AsyncClosable, ABC):
    """Abstract base class for the local language-model server.

    This module hides the design decision of which server API is spoken.
    Implementations must translate transport and parsing failures into
    ``ollatui.errors`` types:
    - NetworkUnavailable: connection refused, timeouts
    - MalformedResponse: unparseable bodies or stream chunks
    - ServerError: error status codes and error payloads
    """

    @abstractmethod
    async def list_models(self) -> list[ModelEntry]:
        """List the installed models in server order."""
        pass

    @abstractmethod
    def chat_stream(
        self,
        model: str,
        messages: list[dict[str, str]],
    ) -> AsyncIterator[str]:
        """Stream a chat reply.

        Args:
            model: Model identifier
            messages: Ordered transcript of ``{"role", "content"}`` dicts

        Returns:
            Async iterator of content chunks. Iteration ends normally only
            after the server's terminal "done" chunk.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass


class ModelRegistry(_AsyncClosable, ABC):
    """Abstract base class for the remote model registry.

    Hidden design decisions:
    - Registry URL layout and query parameters
    - Response format (HTML page or JSON document)
    - Result limits and de-duplication
    """

    @abstractmethod
    async def search(self, query: str) -> list[SearchResult]:
        """Search the registry.

        Args:
            query: Search text; empty string requests the trending set

        Returns:
            Ordered list of results
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass
