"""Remote model registries.

The registry contract is configurable: the default scrapes the public
Ollama library pages, the JSON variant talks to any endpoint returning
``{name, description, tags}`` records.
"""

from typing import Any

import httpx
from bs4 import BeautifulSoup
from pydantic import ValidationError

from ..core.models import SearchResult
from ..errors import MalformedResponse, NetworkUnavailable, ServerError
from .base import ModelRegistry

OLLAMA_LIBRARY_URL = "https://ollama.com"
USER_AGENT = "ollatui/0.1.0"

SEARCH_LIMIT = 50
TRENDING_LIMIT = 30


def _dedupe(results: list[SearchResult], limit: int) -> list[SearchResult]:
    seen: set[str] = set()
    unique = []
    for result in results:
        if result.name in seen:
            continue
        seen.add(result.name)
        unique.append(result)
    return unique[:limit]


async def _get(client: httpx.AsyncClient, path: str, params: dict[str, str]) -> httpx.Response:
    try:
        response = await client.get(path, params=params)
    except httpx.HTTPError as e:
        raise NetworkUnavailable(str(e) or type(e).__name__) from e
    if response.status_code >= 400:
        raise ServerError(
            f"registry returned HTTP {response.status_code}",
            status_code=response.status_code,
        )
    return response


def extract_library_models(html: str, base_url: str = OLLAMA_LIBRARY_URL) -> list[SearchResult]:
    """Pull model cards out of an Ollama library or search page.

    Every ``/library/<name>`` link is a model; the card's paragraph is its
    description and its capability/size badges are its tags.
    """
    soup = BeautifulSoup(html, "html.parser")
    results = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if href.startswith(base_url):
            href = href[len(base_url):]
        if not href.startswith("/library/"):
            continue
        name = href[len("/library/"):]
        if not name or "/" in name or "?" in name or ":" in name:
            continue

        paragraph = anchor.find("p")
        description = " ".join(paragraph.get_text().split()) if paragraph else ""
        badges = anchor.select("[x-test-capability], [x-test-size]")
        tags = frozenset(" ".join(badge.get_text().split()) for badge in badges) - {""}
        results.append(
            SearchResult(
                name=name,
                description=description,
                tags=tags,
                url=f"{base_url}/library/{name}",
            )
        )
    return results


class OllamaLibraryRegistry(ModelRegistry):
    """Searches the public Ollama model library.

    Queries go to ``/search?q=...``; the trending set is the library
    sorted by popularity.
    """

    def __init__(
        self,
        base_url: str = OLLAMA_LIBRARY_URL,
        search_path: str = "/search",
        trending_path: str = "/library",
        search_limit: int = SEARCH_LIMIT,
        trending_limit: int = TRENDING_LIMIT,
        timeout: float = 15.0,
        **client_kwargs: Any
    ):
        self._base_url = base_url.rstrip("/")
        self._search_path = search_path
        self._trending_path = trending_path
        self._search_limit = search_limit
        self._trending_limit = trending_limit
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            event_hooks=self._event_hooks(),
            follow_redirects=True,
            **client_kwargs
        )

    async def search(self, query: str) -> list[SearchResult]:
        query = query.strip()
        if query:
            response = await _get(self._client, self._search_path, {"q": query})
            limit = self._search_limit
        else:
            response = await _get(self._client, self._trending_path, {"sort": "popular"})
            limit = self._trending_limit
        results = extract_library_models(response.text, self._base_url)
        return _dedupe(results, limit)

    async def close(self) -> None:
        await self._client.aclose()


class JsonRegistry(ModelRegistry):
    """Registry speaking JSON.

    Expects either a list of records or an object holding the list under
    ``models`` or ``results``. Each record needs ``name``; ``description``
    and ``tags`` are optional.
    """

    def __init__(
        self,
        base_url: str,
        search_path: str = "/search",
        trending_path: str | None = None,
        query_param: str = "q",
        limit: int = SEARCH_LIMIT,
        timeout: float = 15.0,
        **client_kwargs: Any
    ):
        self._search_path = search_path
        self._trending_path = trending_path or search_path
        self._query_param = query_param
        self._limit = limit
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            event_hooks=self._event_hooks(),
            **client_kwargs
        )

    async def search(self, query: str) -> list[SearchResult]:
        query = query.strip()
        if query:
            response = await _get(self._client, self._search_path, {self._query_param: query})
        else:
            response = await _get(self._client, self._trending_path, {})
        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponse("registry did not return JSON") from e

        if isinstance(payload, dict):
            payload = payload.get("models", payload.get("results"))
        if not isinstance(payload, list):
            raise MalformedResponse("registry response holds no result list")

        try:
            results = [SearchResult.model_validate(record) for record in payload]
        except ValidationError as e:
            raise MalformedResponse("unexpected registry record format") from e
        return _dedupe(results, self._limit)

    async def close(self) -> None:
        await self._client.aclose()
