"""Terminal UI module for ollatui.

Provides a Textual front end over the core event loop.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (tab bar, transcript, lists, log rendering)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- config.py: Display constants and log levels
- app.py: Application wiring (keys in, frames out)
"""

from .app import OllatuiApp, run_tui
from .config import LogLevel
from .widgets import DebugPanel, ModelList, SearchResultList, StatusBar, TabBar, TranscriptView

__all__ = [
    "DebugPanel",
    "LogLevel",
    "ModelList",
    "OllatuiApp",
    "SearchResultList",
    "StatusBar",
    "TabBar",
    "TranscriptView",
    "run_tui",
]
