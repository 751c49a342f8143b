"""Unit tests for key handling."""
import pytest
from conftest import FakeHandle, make_entry, make_result
from hypothesis import given
from hypothesis import strategies as st

from ollatui.core.events import KeyPressed, LoadModels, Quit, RunSearch, StreamChat
from ollatui.core.handlers import handle_key
from ollatui.core.models import ChatMessage, Role, Tab
from ollatui.core.scroll import ScrollState
from ollatui.core.state import AppState


def key(name: str) -> KeyPressed:
    if len(name) == 1:
        return KeyPressed(name=name, char=name)
    return KeyPressed(name=name)


def press(state, *names: str) -> list:
    commands = []
    for name in names:
        commands.extend(handle_key(state, key(name), now=0.0))
    return commands


def type_text(state, text: str) -> list:
    return press(state, *text)


class TestGlobalKeys:
    """Tests for keys handled before the active tab."""

    def test_tab_cycles_through_tabs(self, state):
        seen = []
        for _ in range(4):
            seen.append(state.active_tab)
            press(state, "tab")

        assert seen == [Tab.CHAT, Tab.MODELS, Tab.SEARCH, Tab.CHAT]

    def test_tab_preserves_each_tab_state(self, state, entries):
        state.models.entries = entries
        state.active_tab = Tab.MODELS
        press(state, "j", "j")
        press(state, "tab")
        type_text(state, "llama")

        press(state, "tab", "tab")

        assert state.active_tab is Tab.MODELS
        assert state.models.scroll.selected == 2
        assert state.search.query == "llama"

    def test_tab_cancels_chat_stream(self, state):
        state.chat.active_model = "llama3.2"
        state.chat.input_text = "hi"
        command = state.chat.begin_send()
        handle = FakeHandle()
        state.chat.attach(command.generation, handle)

        press(state, "tab")

        assert handle.cancelled
        assert state.chat.is_cancelling

    def test_tab_leaves_compose_mode(self, state):
        type_text(state, "a")
        assert state.composing

        press(state, "tab")

        assert not state.composing

    def test_q_quits(self, state):
        commands = press(state, "q")

        assert commands == [Quit()]
        assert state.quitting

    def test_q_is_typed_while_composing(self, state):
        commands = press(state, "i", "q")

        assert commands == []
        assert not state.quitting
        assert state.chat.input_text == "q"


class TestChatKeys:
    """Tests for the chat tab."""

    def test_typing_enters_compose_mode(self, state):
        type_text(state, "Hi jg")

        assert state.composing
        assert state.chat.input_text == "Hi jg"

    def test_enter_sends_and_leaves_compose_mode(self, state):
        state.chat.active_model = "llama3.2"
        type_text(state, "Hello")

        commands = press(state, "enter")

        assert len(commands) == 1
        assert isinstance(commands[0], StreamChat)
        assert commands[0].messages == [{"role": "user", "content": "Hello"}]
        assert not state.composing
        assert state.chat.input_text == ""

    def test_enter_on_empty_buffer_is_a_no_op(self, state):
        state.chat.active_model = "llama3.2"

        assert press(state, "enter") == []
        assert state.chat.messages == []
        assert state.chat.status is None

    def test_enter_without_model_shows_error(self, state):
        type_text(state, "Hello")

        assert press(state, "enter") == []
        assert state.chat.status.is_error
        assert "Models tab" in state.chat.status.text

    def test_default_model_allows_sending(self, state):
        state.default_model = "mistral"
        type_text(state, "Hello")

        commands = press(state, "enter")

        assert commands[0].model == "mistral"

    def test_backspace_edits_buffer(self, state):
        type_text(state, "abc")
        press(state, "backspace")

        assert state.chat.input_text == "ab"

    def test_escape_leaves_compose_then_dismisses_status(self, state):
        type_text(state, "Hello")
        press(state, "enter")
        assert state.chat.status is not None

        press(state, "escape")
        assert not state.composing
        assert state.chat.status is not None

        press(state, "escape")
        assert state.chat.status is None

    def test_navigation_keys_scroll_transcript(self, state):
        state.chat.messages = [ChatMessage(role=Role.USER, content=f"m{i}") for i in range(10)]
        state.chat.sync_scroll(*state.viewport)
        bottom = state.chat.scroll.offset

        press(state, "k", "k")
        assert state.chat.scroll.offset == bottom - 2
        press(state, "g")
        assert state.chat.scroll.offset == 0
        press(state, "j")
        assert state.chat.scroll.offset == 1
        press(state, "G")
        assert state.chat.scroll.offset == bottom

    def test_clear_transcript(self, state):
        state.chat.messages = [ChatMessage(role=Role.USER, content="old")]

        press(state, "ctrl+l")

        assert state.chat.messages == []


class TestModelsKeys:
    """Tests for the models tab."""

    @pytest.fixture
    def models_state(self, state, entries):
        state.models.entries = entries
        state.models.loaded = True
        state.active_tab = Tab.MODELS
        return state

    def test_enter_selects_model_and_switches_to_chat(self, models_state):
        press(models_state, "j", "enter")

        assert models_state.chat.active_model == "mistral:7b"
        assert models_state.active_tab is Tab.CHAT
        assert models_state.chat.status.text == "Using model mistral:7b"

    def test_enter_on_empty_list_does_nothing(self, state):
        state.active_tab = Tab.MODELS

        press(state, "enter")

        assert state.chat.active_model is None
        assert state.active_tab is Tab.MODELS

    def test_r_reloads(self, models_state):
        commands = press(models_state, "r")

        assert len(commands) == 1
        assert isinstance(commands[0], LoadModels)
        assert models_state.models.is_loading

    def test_top_and_bottom(self, models_state):
        press(models_state, "G")
        assert models_state.models.scroll.selected == 2
        press(models_state, "g")
        assert models_state.models.scroll.selected == 0

    def test_selection_stays_in_viewport(self, models_state):
        models_state.viewport = (40, 2)

        press(models_state, "j", "j")

        assert models_state.models.scroll.offset == 1


class TestSearchKeys:
    """Tests for the search tab."""

    @pytest.fixture
    def search_state(self, state):
        state.active_tab = Tab.SEARCH
        return state

    def test_type_and_submit(self, search_state):
        type_text(search_state, "llama")

        commands = press(search_state, "enter")

        assert commands == [RunSearch(generation=1, query="llama")]
        assert not search_state.composing

    def test_enter_on_empty_query_requests_trending(self, search_state):
        commands = press(search_state, "enter")

        assert commands[0].query == ""

    def test_navigation_after_submit(self, search_state):
        command = press(search_state, "enter")[0]
        search_state.search.apply_results(
            command.generation, "", [make_result("a"), make_result("b"), make_result("c")]
        )

        press(search_state, "j", "j")
        assert search_state.search.selected_result.name == "c"
        press(search_state, "k")
        assert search_state.search.selected_result.name == "b"

    def test_slash_starts_editing_without_typing(self, search_state):
        press(search_state, "/")

        assert search_state.composing
        assert search_state.search.query == ""

    def test_backspace_edits_query(self, search_state):
        type_text(search_state, "llamaa")
        press(search_state, "backspace")

        assert search_state.search.query == "llama"


class TestProperties:
    """Property tests over key sequences."""

    @given(
        st.integers(min_value=0, max_value=4),
        st.integers(min_value=0, max_value=4),
        st.lists(st.integers(min_value=1, max_value=5), max_size=8),
    )
    def test_tab_switches_preserve_scroll(self, chat_offset: int, selected: int, switches: list[int]):
        """Property test: no sequence of tab switches changes any tab's scroll state."""
        state = AppState(viewport=(40, 3))
        state.chat.messages = [ChatMessage(role=Role.USER, content=f"m{i}") for i in range(5)]
        state.chat.scroll.offset = chat_offset
        state.models.entries = [make_entry(f"model{i}") for i in range(5)]
        state.models.scroll.selected = selected
        state.search.scroll = ScrollState(offset=1, selected=2)
        before = [ScrollState(s.offset, s.selected) for s in (state.chat.scroll, state.models.scroll, state.search.scroll)]

        for count in switches:
            press(state, *["tab"] * count)

        after = [state.chat.scroll, state.models.scroll, state.search.scroll]
        assert after == before

    @given(st.integers(min_value=1, max_value=40), st.integers(min_value=0, max_value=39))
    def test_top_then_bottom(self, count: int, start: int):
        """Property test: g selects the first row and G the last on any non-empty list."""
        state = AppState(active_tab=Tab.MODELS)
        state.models.entries = [make_entry(f"model{i}") for i in range(count)]
        state.models.scroll.selected = min(start, count - 1)

        press(state, "g")
        assert state.models.scroll.selected == 0
        press(state, "G")
        assert state.models.scroll.selected == count - 1
