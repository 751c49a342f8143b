"""Main Textual TUI application.

Textual only draws and collects keys here. Every key press is forwarded to
the core ``EventLoop``, which runs as a worker on the same asyncio loop and
hands back a ``Frame`` after each event.
"""

import asyncio
import contextlib

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import ContentSwitcher, Header

from ..client.base import ModelRegistry, ModelServer
from ..core.events import KeyPressed, Resize
from ..core.frame import Frame
from ..core.loop import EventLoop
from ..core.models import Tab
from ..core.search import SearchSession
from ..core.state import AppState
from .config import LogLevel
from .styles import APP_CSS
from .themes import OLLATUI_DARK
from .widgets import (
    DebugPanel,
    InputBox,
    MainView,
    ModelList,
    SearchResultList,
    StatusBar,
    TabBar,
    TranscriptView,
)


def to_key_event(event: events.Key) -> KeyPressed:
    """Normalise a Textual key event for the core handlers."""
    if event.is_printable and event.character:
        return KeyPressed(name=event.character, char=event.character)
    return KeyPressed(name=event.key)


class OllatuiApp(App):
    """Textual TUI for chatting with a local Ollama server."""

    CSS = APP_CSS
    TITLE = "ollatui"

    BINDINGS = [
        Binding("tab", "next_tab", "Next tab", show=False, priority=True),
        Binding("ctrl+d", "toggle_debug", "Log", show=False, priority=True),
    ]

    def __init__(
        self,
        server: ModelServer,
        registry: ModelRegistry,
        default_model: str | None = None,
        search_debounce: float | None = None,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._model_server = server
        self._log_level = log_level
        self.state = AppState(
            search=SearchSession(debounce=search_debounce),
            default_model=default_model,
        )
        self.event_loop = EventLoop(self.state, server, registry, self.apply_frame)
        self.event_loop.set_debug_callback(self._route_debug)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield TabBar(id="tab-bar")

        with ContentSwitcher(initial="chat-pane", id="panes"):
            with Vertical(id="chat-pane", classes="pane"):
                yield TranscriptView(id="transcript", classes="main-view")
                yield InputBox(id="chat-input", classes="input-box")
            with Vertical(id="models-pane", classes="pane"):
                yield InputBox(id="models-summary", classes="input-box")
                yield ModelList(id="model-list", classes="main-view")
            with Vertical(id="search-pane", classes="pane"):
                yield InputBox(id="search-input", classes="input-box")
                yield SearchResultList(id="search-results", classes="main-view")

        yield StatusBar(id="status-bar")
        yield DebugPanel(id="debug-panel")

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(OLLATUI_DARK)
        self.theme = "ollatui-dark"
        self.sub_title = self._server_label()

        self.query_one("#chat-input", InputBox).border_title = "Input"
        self.query_one("#models-summary", InputBox).border_title = "Active model"
        self.query_one("#search-input", InputBox).border_title = "Search Online Models"

        if self._log_level is not None:
            log_panel = self.query_one("#debug-panel", DebugPanel)
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self.run_worker(self._drive_event_loop(), name="event-loop", exclusive=True)

    def _server_label(self) -> str:
        return getattr(self._model_server, "host", type(self._model_server).__name__)

    async def _drive_event_loop(self) -> None:
        try:
            await self.event_loop.run()
        finally:
            self.exit()

    def _route_debug(self, level: str, component: str, message: str) -> None:
        """Route core trace messages to the log panel."""
        with contextlib.suppress(Exception):
            log_panel = self.query_one("#debug-panel", DebugPanel)
            getattr(log_panel, level, log_panel.debug)(component, message)

    # Input

    def on_key(self, event: events.Key) -> None:
        """Forward every key to the core loop."""
        event.prevent_default()
        event.stop()
        self.event_loop.post(to_key_event(event))

    def action_next_tab(self) -> None:
        self.event_loop.post(KeyPressed(name="tab"))

    def action_quit(self) -> None:
        """Only ``q`` quits, so outstanding streams are always cancelled first."""
        self.notify("Press q to quit", timeout=2)

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def on_main_view_resized(self, message: MainView.Resized) -> None:
        self.event_loop.post(Resize(message.width, message.height))

    # Rendering

    def apply_frame(self, frame: Frame) -> None:
        """Redraw every widget from ``frame``."""
        self.query_one(TabBar).show(frame.tabs, frame.active_tab)
        self.query_one(ContentSwitcher).current = f"{frame.active_tab.value}-pane"

        chat = frame.chat
        self.query_one(TranscriptView).show(chat)
        self.query_one("#chat-input", InputBox).show(
            "> ", chat.input_text, composing=frame.composing and frame.active_tab is Tab.CHAT
        )

        models = frame.models
        self.query_one("#models-summary", InputBox).show("Chatting with: ", chat.model or "(none)")
        self.query_one(ModelList).show_models(models)

        search = frame.search
        self.query_one("#search-input", InputBox).show(
            "Search: ", search.query, composing=frame.composing and frame.active_tab is Tab.SEARCH
        )
        self.query_one(SearchResultList).show_results(search)

        self.query_one(StatusBar).show(frame.status, frame.hint)


async def run_tui(
    server: ModelServer,
    registry: ModelRegistry,
    default_model: str | None = None,
    search_debounce: float | None = None,
    log_level: str | None = None,
) -> int:
    """Run the Textual TUI.

    Args:
        server: Model server client
        registry: Registry client for the Search tab
        default_model: Model used until one is picked in the Models tab
        search_debounce: Seconds of idle typing before a live search, None to disable
        log_level: Log level for panel (debug/info/warning/error), None to hide

    Returns:
        Process exit code reported by Textual (0 on normal quit)
    """
    app = OllatuiApp(
        server=server,
        registry=registry,
        default_model=default_model,
        search_debounce=search_debounce,
        log_level=log_level,
    )
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        await app.event_loop.shutdown()
    return app.return_code or 0
