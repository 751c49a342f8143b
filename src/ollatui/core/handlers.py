"""Key handling: global keys first, then one handler per tab.

Handlers mutate ``AppState`` and return the commands the loop must run.
They never perform I/O; cancelling a session's request only signals the
handle it already holds.
"""

from collections.abc import Callable

from ..errors import OllatuiError
from .events import Command, KeyPressed, Quit
from .models import StatusMessage, Tab
from .state import AppState

KeyHandler = Callable[[AppState, KeyPressed, float | None], list[Command]]

DOWN_KEYS = ("j", "down")
UP_KEYS = ("k", "up")
TOP_KEYS = ("g", "home")
BOTTOM_KEYS = ("G", "end")


def handle_key(state: AppState, key: KeyPressed, now: float | None = None) -> list[Command]:
    """Apply one key press to ``state``."""
    if key.name == "tab":
        # Leaving the chat tab abandons the reply being streamed
        state.chat.cancel()
        state.next_tab()
        return []
    if key.name == "q" and not state.composing:
        state.quitting = True
        return [Quit()]
    return TAB_HANDLERS[state.active_tab](state, key, now)


# Chat


def _submit_chat(state: AppState) -> list[Command]:
    try:
        command = state.chat.begin_send(state.default_model)
    except OllatuiError as e:
        if e.user_visible:
            state.chat.status = StatusMessage(str(e), level="error")
        return []
    if command is None:
        return []
    state.composing = False
    state.chat.sync_scroll(*state.viewport)
    return [command]


def handle_chat_key(state: AppState, key: KeyPressed, now: float | None = None) -> list[Command]:
    chat = state.chat
    width, height = state.viewport

    if key.name == "enter":
        return _submit_chat(state)
    if key.name == "backspace":
        chat.input_text = chat.input_text[:-1]
        return []
    if key.name == "escape":
        if state.composing:
            state.composing = False
        else:
            state.dismiss_status()
        return []
    if key.name in ("pagedown", "pageup"):
        page = max(1, height - 1)
        chat.scroll_lines(page if key.name == "pagedown" else -page, width, height)
        return []

    if state.composing:
        if key.name in ("down", "up"):
            chat.scroll_lines(1 if key.name == "down" else -1, width, height)
        elif key.is_printable:
            chat.input_text += key.char
        return []

    if key.name in DOWN_KEYS:
        chat.scroll_lines(1, width, height)
    elif key.name in UP_KEYS:
        chat.scroll_lines(-1, width, height)
    elif key.name in TOP_KEYS:
        chat.scroll_home()
    elif key.name in BOTTOM_KEYS:
        chat.scroll_end(width, height)
    elif key.name == "ctrl+l":
        if chat.clear():
            chat.status = StatusMessage("Chat cleared")
    elif key.name == "i":
        state.composing = True
    elif key.is_printable:
        state.composing = True
        chat.input_text += key.char
    return []


# Models


def handle_models_key(state: AppState, key: KeyPressed, now: float | None = None) -> list[Command]:
    models = state.models

    if key.name in DOWN_KEYS:
        models.move(1)
    elif key.name in UP_KEYS:
        models.move(-1)
    elif key.name in TOP_KEYS:
        models.first()
    elif key.name in BOTTOM_KEYS:
        models.last()
    elif key.name == "enter":
        if state.select_model():
            state.active_tab = Tab.CHAT
            state.chat.status = StatusMessage(f"Using model {state.chat.active_model}")
    elif key.name == "r":
        return [models.begin_load()]
    elif key.name == "escape":
        state.dismiss_status()
    models.scroll.ensure_visible(state.viewport_height)
    return []


# Search


def handle_search_key(state: AppState, key: KeyPressed, now: float | None = None) -> list[Command]:
    search = state.search

    if key.name == "enter":
        state.composing = False
        return [search.submit()]
    if key.name == "backspace":
        search.backspace(now)
        return []
    if key.name == "escape":
        if state.composing:
            state.composing = False
        else:
            state.dismiss_status()
        return []

    if state.composing:
        if key.is_printable:
            search.type_text(key.char, now)
        return []

    if key.name in DOWN_KEYS:
        search.move(1)
    elif key.name in UP_KEYS:
        search.move(-1)
    elif key.name in TOP_KEYS:
        search.first()
    elif key.name in BOTTOM_KEYS:
        search.last()
    elif key.name in ("i", "/"):
        state.composing = True
    elif key.is_printable:
        state.composing = True
        search.type_text(key.char, now)
    search.scroll.ensure_visible(state.viewport_height)
    return []


TAB_HANDLERS: dict[Tab, KeyHandler] = {
    Tab.CHAT: handle_chat_key,
    Tab.MODELS: handle_models_key,
    Tab.SEARCH: handle_search_key,
}
