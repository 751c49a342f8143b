"""Per-frame render description handed to the terminal renderer.

The renderer receives only what is visible: the transcript slice at the
current scroll offset and the list rows inside the viewport.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .chat import TranscriptLine
from .models import SearchMode, StatusMessage, Tab
from .state import AppState

SPINNER = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")

KEY_HINTS = {
    Tab.CHAT: "Enter: send | i: type | j/k: scroll | g: top | G: bottom | Tab: switch | q: quit",
    Tab.MODELS: "j/k: select | Enter: use | r: reload | Tab: switch | q: quit",
    Tab.SEARCH: "type to edit | Enter: search | j/k: select | Tab: switch | q: quit",
}
COMPOSE_HINT = "Enter: submit | Esc: stop typing | Tab: switch"


def humanize_bytes(num: int | float | None) -> str:
    if not num:
        return "-"
    value = float(num)
    units = ["B", "KB", "MB", "GB", "TB"]
    for unit in units:
        if value < 1024.0 or unit == units[-1]:
            if unit == "B":
                return f"{int(value)} {unit}"
            return f"{value:.1f} {unit}"
        value /= 1024.0
    return "-"


def human_age(moment: datetime | None, now: datetime | None = None) -> str:
    if moment is None:
        return "-"
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    seconds = max(int((now - moment).total_seconds()), 0)
    if seconds < 60:
        return f"{seconds}s"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m"
    hours = minutes // 60
    if hours < 48:
        return f"{hours}h"
    return f"{hours // 24}d"


@dataclass(frozen=True)
class ListRow:
    title: str
    detail: str = ""
    selected: bool = False
    marked: bool = False  # e.g. the model currently used for chat


@dataclass(frozen=True)
class ChatView:
    lines: list[TranscriptLine]
    input_text: str
    model: str | None
    streaming: bool
    cancelling: bool
    offset: int
    content_height: int


@dataclass(frozen=True)
class ModelsView:
    rows: list[ListRow]
    loaded: bool
    loading: bool
    total: int


@dataclass(frozen=True)
class SearchView:
    query: str
    mode: SearchMode
    rows: list[ListRow]
    error: str | None
    last_query: str | None
    total: int


@dataclass(frozen=True)
class Frame:
    active_tab: Tab
    composing: bool
    chat: ChatView
    models: ModelsView
    search: SearchView
    status: StatusMessage | None
    hint: str
    tabs: list[Tab] = field(default_factory=lambda: list(Tab))


def _busy_text(state: AppState, tick: int) -> str | None:
    spinner = SPINNER[tick % len(SPINNER)]
    if state.chat.is_cancelling:
        return f"{spinner} Cancelling..."
    if state.chat.is_streaming:
        return f"{spinner} Generating..."
    if state.active_tab is Tab.SEARCH and state.search.pending is not None:
        return f"{spinner} Searching..."
    if state.active_tab is Tab.MODELS and state.models.pending is not None:
        return f"{spinner} Loading models..."
    return None


def build_frame(state: AppState, tick: int = 0) -> Frame:
    """Describe what the screen should show for ``state``."""
    width, height = state.viewport
    chat = state.chat
    lines = chat.lines(width)
    chat_view = ChatView(
        lines=lines[chat.scroll.offset:chat.scroll.offset + height],
        input_text=chat.input_text,
        model=chat.active_model or state.default_model,
        streaming=chat.is_streaming,
        cancelling=chat.is_cancelling,
        offset=chat.scroll.offset,
        content_height=len(lines),
    )

    models = state.models
    start = models.scroll.offset
    models_view = ModelsView(
        rows=[
            ListRow(
                title=entry.name,
                detail=f"{humanize_bytes(entry.size)}  {human_age(entry.last_modified)}",
                selected=index == models.scroll.selected,
                marked=entry.name == chat.active_model,
            )
            for index, entry in enumerate(models.entries[start:start + height], start=start)
        ],
        loaded=models.loaded,
        loading=models.is_loading,
        total=len(models.entries),
    )

    search = state.search
    start = search.scroll.offset
    search_view = SearchView(
        query=search.query,
        mode=search.mode,
        rows=[
            ListRow(
                title=result.name,
                detail=" ".join([result.description, *sorted(result.tags)]).strip(),
                selected=index == search.scroll.selected,
            )
            for index, result in enumerate(search.results[start:start + height], start=start)
        ],
        error=search.error,
        last_query=search.last_query,
        total=len(search.results),
    )

    status = state.status_for(state.active_tab)
    if status is None:
        busy = _busy_text(state, tick)
        if busy is not None:
            status = StatusMessage(busy)
    hint = COMPOSE_HINT if state.composing else KEY_HINTS[state.active_tab]
    if state.active_tab is Tab.CHAT and chat_view.model:
        hint = f"[{chat_view.model}] {hint}"

    return Frame(
        active_tab=state.active_tab,
        composing=state.composing,
        chat=chat_view,
        models=models_view,
        search=search_view,
        status=status,
        hint=hint,
    )
