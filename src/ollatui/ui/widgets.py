"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- How frames are turned into Rich text
- Selection and cursor rendering
- Log rendering and filtering

Widgets never hold application state; each ``show`` call redraws from the
frame it is given.
"""

from datetime import datetime

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widgets import RichLog, Static

from ..core.frame import ChatView, ListRow, ModelsView, SearchView
from ..core.models import SearchMode, StatusMessage, Tab
from .config import (
    ACTIVE_MODEL_MARKER,
    CURSOR,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    MODELS_EMPTY_TEXT,
    ROLE_STYLES,
    SEARCH_EMPTY_TEXT,
    SELECTION_SYMBOL,
    WELCOME_TEXT,
    LogLevel,
)


class TabBar(Static):
    """One-line tab strip with the active tab highlighted."""

    def show(self, tabs: list[Tab], active: Tab) -> None:
        text = Text()
        for index, tab in enumerate(tabs):
            if index:
                text.append(" | ", style="dim")
            style = "bold yellow" if tab is active else "white"
            text.append(f" {tab.title} ", style=style)
        self.update(text)


class MainView(Static):
    """Bordered content area whose inner size drives the core viewport."""

    class Resized(Message):
        """Posted when the visible content area changes size."""

        def __init__(self, width: int, height: int) -> None:
            super().__init__()
            self.width = width
            self.height = height

    def on_resize(self, event: events.Resize) -> None:
        size = self.content_size
        if size.width > 0 and size.height > 0:
            self.post_message(self.Resized(size.width, size.height))


class TranscriptView(MainView):
    """Visible slice of the chat transcript."""

    BORDER_TITLE = "Messages"

    def show(self, view: ChatView) -> None:
        if not view.lines and not view.streaming:
            self.update(Text(WELCOME_TEXT, style="dim", justify="center"))
            self.border_subtitle = ""
            return

        text = Text()
        for index, (role, line) in enumerate(view.lines):
            if index:
                text.append("\n")
            style = ROLE_STYLES.get(role.value, "") if role is not None else ""
            text.append(line, style=style)
        at_bottom = view.offset + len(view.lines) >= view.content_height
        if view.streaming and not view.cancelling and at_bottom:
            text.append(CURSOR, style="bold yellow")
        self.update(text)

        if view.content_height > len(view.lines):
            self.border_subtitle = f"line {view.offset + 1}/{view.content_height}"
        else:
            self.border_subtitle = ""


class InputBox(Static):
    """Three-line bordered box showing a text buffer or a summary."""

    def show(self, prefix: str, value: str, composing: bool = False) -> None:
        text = Text(prefix, style="dim")
        text.append(value)
        if composing:
            text.append(CURSOR, style="bold yellow")
        self.update(text)
        self.set_class(composing, "-composing")


class RowList(MainView):
    """Selectable list of rows (installed models, search results)."""

    def show(self, rows: list[ListRow], empty_text: str) -> None:
        if not rows:
            self.update(Text(empty_text, style="dim"))
            return
        text = Text()
        for index, row in enumerate(rows):
            if index:
                text.append("\n")
            style = "bold yellow" if row.selected else ""
            text.append(SELECTION_SYMBOL if row.selected else " " * len(SELECTION_SYMBOL), style=style)
            text.append(row.title, style=style)
            if row.marked:
                text.append(f" {ACTIVE_MODEL_MARKER}", style="bold green")
            if row.detail:
                text.append(f"  {row.detail}", style="dim")
        self.update(text)


class ModelList(RowList):
    BORDER_TITLE = "Installed Models"

    def show_models(self, view: ModelsView) -> None:
        empty = "Loading models..." if view.loading and not view.loaded else MODELS_EMPTY_TEXT
        self.show(view.rows, empty)
        self.border_subtitle = f"{view.total} installed" if view.loaded else ""


class SearchResultList(RowList):
    BORDER_TITLE = "Search Results"

    def show_results(self, view: SearchView) -> None:
        if view.mode is SearchMode.ERRORED:
            self.update(Text(f"Search failed: {view.error}", style="red"))
        elif view.mode is SearchMode.LOADED and not view.rows:
            self.update(Text("No models found.", style="dim"))
        else:
            self.show(view.rows, SEARCH_EMPTY_TEXT)
        if view.last_query is None:
            self.border_subtitle = ""
        elif view.last_query:
            self.border_subtitle = f"{view.total} for '{view.last_query}'"
        else:
            self.border_subtitle = f"{view.total} popular"


class StatusBar(Static):
    """Transient status/error banner, falling back to key hints."""

    def show(self, status: StatusMessage | None, hint: str) -> None:
        self.remove_class("-error", "-info")
        if status is None:
            self.update(Text(hint))
            return
        self.add_class("-error" if status.is_error else "-info")
        suffix = "  (Esc to dismiss)" if status.is_error else ""
        self.update(Text(status.text + suffix))


class DebugPanel(RichLog):
    """Log panel for real-time execution tracing with level filtering.

    Shows timestamped log messages from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        """Set log level threshold."""
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, LOOP, CHAT, MODELS, SEARCH, HTTP)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        component_colors = {
            "TUI": "cyan",
            "LOOP": "green",
            "CHAT": "magenta",
            "MODELS": "blue",
            "SEARCH": "bright_magenta",
            "HTTP": "yellow",
        }
        level_color = level_colors.get(level, "white")
        comp_color = component_colors.get(component, "white")

        line = Text()
        line.append(f"{timestamp} ", style="dim")
        line.append(f"{LogLevel.name(level):<5} ", style=level_color)
        line.append(f"[{component}] ", style=comp_color)
        line.append(message)
        self.write(line)

    def debug(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
