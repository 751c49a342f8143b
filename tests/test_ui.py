"""Tests for the Textual front end."""
import pytest
from conftest import FakeRegistry, FakeServer, make_entry, wait_until
from textual import events

from ollatui.core.models import Tab
from ollatui.ui.app import OllatuiApp, to_key_event
from ollatui.ui.config import MODELS_EMPTY_TEXT, LogLevel
from ollatui.ui.widgets import ModelList


class TestKeyNormalisation:
    """Tests for turning Textual keys into core key presses."""

    def test_printable_key_carries_character(self):
        pressed = to_key_event(events.Key("G", "G"))

        assert pressed.name == "G"
        assert pressed.is_printable

    def test_special_key_uses_name(self):
        pressed = to_key_event(events.Key("enter", "\r"))

        assert pressed.name == "enter"
        assert not pressed.is_printable


class TestLogLevel:
    """Tests for log level parsing."""

    @pytest.mark.parametrize("text, level", [
        ("debug", LogLevel.DEBUG),
        ("INFO", LogLevel.INFO),
        ("Warning", LogLevel.WARNING),
        ("error", LogLevel.ERROR),
        ("verbose", LogLevel.DEBUG),
    ])
    def test_from_string(self, text, level):
        assert LogLevel.from_string(text) == level


class TestApp:
    """Tests driving the full app headlessly."""

    @pytest.mark.asyncio
    async def test_keys_reach_the_core(self):
        server = FakeServer(models=[make_entry("llama3.2:latest")])
        app = OllatuiApp(server=server, registry=FakeRegistry())

        async with app.run_test() as pilot:
            await wait_until(lambda: app.state.models.loaded)

            await pilot.press("h", "i")
            await wait_until(lambda: app.state.chat.input_text == "hi")

            await pilot.press("tab")
            await wait_until(lambda: app.state.active_tab is Tab.MODELS)
            await pilot.pause()

            assert app.state.composing is False
            assert app.query_one("#panes").current == "models-pane"

    @pytest.mark.asyncio
    async def test_mounts_and_quits_with_q(self):
        """Mounting must leave Textual's own app attributes intact."""
        app = OllatuiApp(server=FakeServer(), registry=FakeRegistry())

        async with app.run_test() as pilot:
            await wait_until(lambda: app.state.models.loaded)
            assert app.sub_title == "FakeServer"

            await pilot.press("q")
            await wait_until(lambda: app.state.quitting)

        assert app.return_code == 0
        assert app.event_loop.outstanding_tasks == 0

    @pytest.mark.asyncio
    async def test_empty_model_list_points_to_search(self, monkeypatch):
        shown = []
        monkeypatch.setattr(ModelList, "show", lambda self, rows, empty: shown.append(empty))
        app = OllatuiApp(server=FakeServer(), registry=FakeRegistry())

        async with app.run_test() as pilot:
            await wait_until(lambda: app.state.models.loaded)
            await pilot.pause()

            assert shown[-1] == MODELS_EMPTY_TEXT
            assert "Search tab" in MODELS_EMPTY_TEXT
            assert "ollama pull" in MODELS_EMPTY_TEXT
