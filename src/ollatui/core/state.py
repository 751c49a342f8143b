"""The single application state rendered every frame."""

from dataclasses import dataclass, field

from .catalog import ModelCatalog
from .chat import ChatSession
from .models import StatusMessage, Tab
from .search import SearchSession

# Content area used before the renderer reports its real size
DEFAULT_VIEWPORT = (80, 20)


@dataclass
class AppState:
    """Composes the three sessions and the tab selector.

    Exactly one tab is active; switching tabs leaves the others untouched.
    """

    chat: ChatSession = field(default_factory=ChatSession)
    models: ModelCatalog = field(default_factory=ModelCatalog)
    search: SearchSession = field(default_factory=SearchSession)
    active_tab: Tab = Tab.CHAT
    composing: bool = False
    quitting: bool = False
    default_model: str | None = None
    viewport: tuple[int, int] = DEFAULT_VIEWPORT

    @property
    def viewport_width(self) -> int:
        return self.viewport[0]

    @property
    def viewport_height(self) -> int:
        return self.viewport[1]

    @property
    def busy(self) -> bool:
        """True while any session has a request in flight."""
        return (
            self.chat.pending is not None
            or self.models.pending is not None
            or self.search.pending is not None
        )

    def _session(self, tab: Tab) -> ChatSession | ModelCatalog | SearchSession:
        return {Tab.CHAT: self.chat, Tab.MODELS: self.models, Tab.SEARCH: self.search}[tab]

    def status_for(self, tab: Tab) -> StatusMessage | None:
        return self._session(tab).status

    def dismiss_status(self) -> None:
        self._session(self.active_tab).status = None

    def next_tab(self) -> None:
        self.active_tab = self.active_tab.next()
        self.composing = False

    def select_model(self) -> bool:
        """Copy the highlighted model name into the chat session."""
        entry = self.models.selected_entry
        if entry is None:
            return False
        self.chat.active_model = entry.name
        return True
