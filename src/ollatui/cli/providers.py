"""Client factory functions for the CLI.

Centralizes creation of the model server and registry clients from
environment variables and command-line overrides.
"""

import os

from ..client import ModelRegistry, ModelServer, create_model_server, create_registry
from ..client.ollama import DEFAULT_HOST
from ..client.registry import OLLAMA_LIBRARY_URL

DEFAULT_TIMEOUT = 10.0


def get_model_server(host: str | None = None, timeout: float | None = None) -> ModelServer:
    """Create the Ollama client.

    Args:
        host: Server address; falls back to the environment
        timeout: Request timeout in seconds

    Returns:
        Model server client instance

    Environment variables:
        OLLAMA_HOST: Server address (default: http://127.0.0.1:11434)
    """
    return create_model_server(
        "ollama",
        host=host or os.getenv("OLLAMA_HOST", DEFAULT_HOST),
        timeout=timeout or DEFAULT_TIMEOUT,
    )


def get_registry(
    kind: str | None = None,
    url: str | None = None,
    timeout: float | None = None,
) -> ModelRegistry:
    """Create the registry client used by the Search tab.

    Args:
        kind: Registry contract ('ollama-library' or 'json')
        url: Registry base URL
        timeout: Request timeout in seconds

    Returns:
        Registry client instance

    Raises:
        ValueError: If the registry kind is unknown
        TypeError: If the json registry has no URL

    Environment variables:
        OLLATUI_REGISTRY: Registry contract (default: ollama-library)
        OLLATUI_REGISTRY_URL: Registry base URL (default: https://ollama.com)
    """
    kind = (kind or os.getenv("OLLATUI_REGISTRY", "ollama-library")).lower()
    url = url or os.getenv("OLLATUI_REGISTRY_URL")
    config: dict[str, object] = {"timeout": max(timeout or DEFAULT_TIMEOUT, 15.0)}
    if url:
        config["base_url"] = url
    elif kind != "json":
        config["base_url"] = OLLAMA_LIBRARY_URL
    return create_registry(kind, **config)


def get_default_model(model: str | None = None) -> str | None:
    """Resolve the model used before one is picked in the Models tab.

    Environment variables:
        OLLAMA_MODEL: Model name (optional)
    """
    return model or os.getenv("OLLAMA_MODEL") or None
