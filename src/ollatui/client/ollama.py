import json
from collections.abc import AsyncIterator
from typing import Any

import httpx
from pydantic import ValidationError

from ..errors import MalformedResponse, NetworkUnavailable, ServerError
from ..core.models import ModelEntry
from .base import ModelServer
from .models import ChatChunk, ChatRequest, TagsResponse

DEFAULT_HOST = "http://127.0.0.1:11434"


def sanitize_host(host: str) -> str:
    host = host.strip().rstrip("/")
    if host and "://" not in host:
        host = f"http://{host}"
    return host


def _network_error(error: httpx.HTTPError) -> NetworkUnavailable:
    detail = str(error) or type(error).__name__
    return NetworkUnavailable(detail)


def _raise_for_status(response: httpx.Response) -> None:
    """Raise ServerError for error statuses, preferring Ollama's error text."""
    if response.status_code < 400:
        return
    message = response.reason_phrase or f"HTTP {response.status_code}"
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None
    if isinstance(payload, dict) and payload.get("error"):
        message = str(payload["error"])
    raise ServerError(message, status_code=response.status_code)


def parse_chunk(line: str) -> ChatChunk:
    """Parse one line of a streamed chat reply."""
    try:
        return ChatChunk.model_validate_json(line)
    except ValidationError as e:
        raise MalformedResponse(f"bad stream chunk: {line[:80]!r}") from e


class OllamaClient(ModelServer):
    """Ollama HTTP API client.

    Hidden design decisions:
    - Endpoint paths and request bodies
    - Newline-delimited JSON streaming
    - Mapping of httpx failures onto the ollatui error taxonomy
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        timeout: float = 10.0,
        options: dict[str, Any] | None = None,
        **client_kwargs: Any
    ):
        """Initialize the client.

        Args:
            host: Server base address, e.g. http://127.0.0.1:11434
            timeout: Connect/request timeout in seconds. Streaming reads
                wait indefinitely for the next token.
            options: Model options sent with every chat request
            **client_kwargs: Additional kwargs for httpx.AsyncClient
                (``transport`` is used by the tests)
        """
        self._host = sanitize_host(host) or DEFAULT_HOST
        self._timeout = timeout
        self._options = options
        self._client = httpx.AsyncClient(
            base_url=self._host,
            timeout=httpx.Timeout(timeout),
            event_hooks=self._event_hooks(),
            **client_kwargs
        )

    @property
    def host(self) -> str:
        return self._host

    async def list_models(self) -> list[ModelEntry]:
        try:
            response = await self._client.get("/api/tags")
        except httpx.HTTPError as e:
            raise _network_error(e) from e
        _raise_for_status(response)
        try:
            payload = TagsResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise MalformedResponse("unexpected model list format") from e
        return [model.to_entry() for model in payload.models]

    async def chat_stream(
        self,
        model: str,
        messages: list[dict[str, str]],
    ) -> AsyncIterator[str]:
        request = ChatRequest(model=model, messages=messages, options=self._options)
        body = request.model_dump(exclude_none=True)
        stream_timeout = httpx.Timeout(self._timeout, read=None)
        try:
            async with self._client.stream(
                "POST", "/api/chat", json=body, timeout=stream_timeout
            ) as response:
                if response.status_code >= 400:
                    await response.aread()
                    _raise_for_status(response)
                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    chunk = parse_chunk(line)
                    if chunk.error:
                        raise ServerError(chunk.error)
                    if chunk.message is not None and chunk.message.content:
                        yield chunk.message.content
                    if chunk.done:
                        return
        except httpx.HTTPError as e:
            raise _network_error(e) from e
        raise MalformedResponse("stream ended before the final chunk")

    async def close(self) -> None:
        await self._client.aclose()
