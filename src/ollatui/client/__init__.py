from .base import ModelRegistry, ModelServer
from .factory import create_model_server, create_registry
from .ollama import OllamaClient
from .registry import JsonRegistry, OllamaLibraryRegistry, extract_library_models

__all__ = [
    "ModelRegistry",
    "ModelServer",
    "create_model_server",
    "create_registry",
    "OllamaClient",
    "JsonRegistry",
    "OllamaLibraryRegistry",
    "extract_library_models",
]
