from typing import Any

from .base import ModelRegistry, ModelServer
from .ollama import OllamaClient
from .registry import JsonRegistry, OllamaLibraryRegistry

REGISTRY_KINDS = ("ollama-library", "json")


def create_model_server(server: str = "ollama", **config: Any) -> ModelServer:
    """Create a model server client.

    Args:
        server: Server type (only 'ollama' is supported)
        **config: Client configuration
            - host: str (default: 'http://127.0.0.1:11434')
            - timeout: float (default: 10.0)
            - options: dict | None

    Raises:
        ValueError: If server type is not supported
    """
    if server.lower() == "ollama":
        return OllamaClient(**config)

    raise ValueError(f"Unsupported server: {server}. Supported servers: 'ollama'")


def create_registry(registry: str = "ollama-library", **config: Any) -> ModelRegistry:
    """Create a model registry client.

    This factory function hides how the registry contract is configured.

    Args:
        registry: Registry type ('ollama-library' or 'json')
        **config: Registry configuration
            For ollama-library:
                - base_url: str (default: 'https://ollama.com')
                - search_limit / trending_limit: int
            For json:
                - base_url: str (required)
                - search_path: str (default: '/search')
                - trending_path: str | None
                - query_param: str (default: 'q')

    Raises:
        ValueError: If registry type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> registry = create_registry("json", base_url="http://localhost:8080")
    """
    registry_lower = registry.lower()

    if registry_lower in ("ollama-library", "ollama"):
        return OllamaLibraryRegistry(**config)

    if registry_lower == "json":
        if not config.get("base_url"):
            raise TypeError("JSON registry requires 'base_url' in config")
        return JsonRegistry(**config)

    raise ValueError(
        f"Unsupported registry: {registry}. "
        f"Supported registries: {', '.join(repr(kind) for kind in REGISTRY_KINDS)}"
    )
