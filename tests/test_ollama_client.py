"""Unit tests for the Ollama HTTP client."""
import json

import httpx
import pytest

from ollatui.client import OllamaClient, create_model_server
from ollatui.client.ollama import parse_chunk, sanitize_host
from ollatui.errors import MalformedResponse, NetworkUnavailable, ServerError, describe

TAGS_BODY = {
    "models": [
        {
            "name": "llama3.2:latest",
            "model": "llama3.2:latest",
            "modified_at": "2024-10-01T12:30:00.123456+02:00",
            "size": 2019393189,
            "digest": "a80c4f17acd5",
            "details": {"family": "llama", "parameter_size": "3.2B", "quantization_level": "Q4_K_M"},
        },
        {"name": "mistral:7b", "size": 4113301824},
    ]
}


def ndjson(*chunks) -> bytes:
    return b"".join(json.dumps(chunk).encode() + b"\n" for chunk in chunks)


def make_client(handler) -> OllamaClient:
    return OllamaClient(host="http://ollama.test", transport=httpx.MockTransport(handler))


class TestHost:
    """Tests for host normalisation."""

    @pytest.mark.parametrize("raw, expected", [
        ("http://127.0.0.1:11434/", "http://127.0.0.1:11434"),
        ("localhost:11434", "http://localhost:11434"),
        ("  https://gpu.box  ", "https://gpu.box"),
    ])
    def test_sanitize_host(self, raw, expected):
        assert sanitize_host(raw) == expected

    def test_factory_creates_ollama_client(self):
        client = create_model_server("ollama", host="gpu.box:11434")

        assert isinstance(client, OllamaClient)
        assert client.host == "http://gpu.box:11434"

    def test_factory_rejects_unknown_server(self):
        with pytest.raises(ValueError):
            create_model_server("vllm")


class TestListModels:
    """Tests for GET /api/tags."""

    @pytest.mark.asyncio
    async def test_parses_tags(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/tags"
            return httpx.Response(200, json=TAGS_BODY)

        async with make_client(handler) as client:
            entries = await client.list_models()

        assert [e.name for e in entries] == ["llama3.2:latest", "mistral:7b"]
        assert entries[0].size == 2019393189
        assert entries[0].family == "llama"
        assert entries[0].parameter_size == "3.2B"
        assert entries[0].last_modified.year == 2024
        assert entries[1].last_modified is None

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(NetworkUnavailable) as exc_info:
                await client.list_models()

        assert describe(exc_info.value) == "Server unavailable: Connection refused"

    @pytest.mark.asyncio
    async def test_bad_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>not json</html>")

        async with make_client(handler) as client:
            with pytest.raises(MalformedResponse):
                await client.list_models()

    @pytest.mark.asyncio
    async def test_error_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "out of memory"})

        async with make_client(handler) as client:
            with pytest.raises(ServerError) as exc_info:
                await client.list_models()

        assert str(exc_info.value) == "out of memory"
        assert exc_info.value.status_code == 500


class TestChatStream:
    """Tests for POST /api/chat streaming."""

    @pytest.mark.asyncio
    async def test_streams_content_in_order(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=ndjson(
                {"message": {"role": "assistant", "content": "The"}, "done": False},
                {"message": {"role": "assistant", "content": " sky"}, "done": False},
                {"message": {"role": "assistant", "content": ""}, "done": True, "eval_count": 2},
            ))

        messages = [{"role": "user", "content": "Why is the sky blue?"}]
        async with make_client(handler) as client:
            tokens = [token async for token in client.chat_stream("llama3.2", messages)]

        assert tokens == ["The", " sky"]
        assert seen["path"] == "/api/chat"
        assert seen["body"] == {"model": "llama3.2", "messages": messages, "stream": True}

    @pytest.mark.asyncio
    async def test_error_chunk_raises_server_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=ndjson(
                {"message": {"content": "par"}, "done": False},
                {"error": "model crashed"},
            ))

        async with make_client(handler) as client:
            tokens = []
            with pytest.raises(ServerError, match="model crashed"):
                async for token in client.chat_stream("m", []):
                    tokens.append(token)

        assert tokens == ["par"]

    @pytest.mark.asyncio
    async def test_missing_model_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error": "model 'nope' not found"})

        async with make_client(handler) as client:
            with pytest.raises(ServerError, match="not found"):
                async for _ in client.chat_stream("nope", []):
                    pass

    @pytest.mark.asyncio
    async def test_unparseable_chunk(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b'{"message": {"content": "a"}}\n{oops\n')

        async with make_client(handler) as client:
            with pytest.raises(MalformedResponse):
                async for _ in client.chat_stream("m", []):
                    pass

    @pytest.mark.asyncio
    async def test_stream_ending_early(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=ndjson({"message": {"content": "a"}, "done": False}))

        async with make_client(handler) as client:
            with pytest.raises(MalformedResponse, match="before the final chunk"):
                async for _ in client.chat_stream("m", []):
                    pass

    @pytest.mark.asyncio
    async def test_requests_are_traced(self):
        log = []

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"models": []})

        async with make_client(handler) as client:
            client.set_debug_callback(lambda *entry: log.append(entry))
            await client.list_models()

        assert ("debug", "HTTP", "GET http://ollama.test/api/tags") in log
        assert ("debug", "HTTP", "200 GET /api/tags") in log


class TestParseChunk:
    """Tests for single chunk parsing."""

    def test_blank_message_is_allowed(self):
        chunk = parse_chunk('{"done": true}')

        assert chunk.done
        assert chunk.message is None

    def test_non_object_is_malformed(self):
        with pytest.raises(MalformedResponse):
            parse_chunk("[1, 2]")
