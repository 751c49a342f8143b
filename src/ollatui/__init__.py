"""
ollatui: a terminal client for a local Ollama server.

Chat with installed models, browse them, and search the public model
library from one keyboard-driven screen. Each module hides a specific
design decision: ``core`` owns state and scheduling, ``client`` the wire
protocols, ``ui`` the drawing.
"""

__version__ = "0.1.0"

from .client import ModelRegistry, ModelServer, create_model_server, create_registry
from .core import AppState, EventLoop, build_frame
from .errors import OllatuiError

__all__ = [
    "AppState",
    "EventLoop",
    "ModelRegistry",
    "ModelServer",
    "OllatuiError",
    "build_frame",
    "create_model_server",
    "create_registry",
]
