"""Interaction core: state machines, event loop and render description.

Module structure (each module hides one design decision):
- scroll.py: cursor/offset arithmetic
- models.py: tabs, messages, list entries
- pending.py: in-flight request bookkeeping and generation numbers
- chat.py / catalog.py / search.py: the three per-tab sessions
- state.py: composition of the sessions
- events.py: what enters the loop and what leaves the handlers
- handlers.py: key bindings
- frame.py: what the renderer is asked to draw
- loop.py: scheduling and cancellation
"""

from .catalog import ModelCatalog
from .chat import ChatSession, transcript_lines
from .events import (
    ChatFailed,
    ChatFinished,
    ChatToken,
    KeyPressed,
    ModelsFailed,
    ModelsLoaded,
    Resize,
    SearchFailed,
    SearchLoaded,
    Tick,
)
from .frame import Frame, build_frame
from .handlers import handle_key
from .loop import EventLoop
from .models import ChatMessage, ChatState, ModelEntry, Role, SearchMode, SearchResult, StatusMessage, Tab
from .scroll import ScrollState
from .search import SearchSession
from .state import AppState

__all__ = [
    "AppState",
    "ChatFailed",
    "ChatFinished",
    "ChatMessage",
    "ChatSession",
    "ChatState",
    "ChatToken",
    "EventLoop",
    "Frame",
    "KeyPressed",
    "ModelCatalog",
    "ModelEntry",
    "ModelsFailed",
    "ModelsLoaded",
    "Resize",
    "Role",
    "ScrollState",
    "SearchFailed",
    "SearchLoaded",
    "SearchMode",
    "SearchResult",
    "SearchSession",
    "StatusMessage",
    "Tab",
    "Tick",
    "build_frame",
    "handle_key",
    "transcript_lines",
]
