"""The cooperative scheduler driving ``AppState``.

One coroutine owns the state. Key presses and network results arrive on a
single ``asyncio.Queue``; each is dispatched on its own and followed by a
render. A ticker task posts ``Tick`` events at a steady rate, faster
while any request is in flight, so the spinner keeps moving during a
reply. Network work runs in tasks that only ever post events back, so no
locking is needed. Late results from superseded requests carry an old
generation number and are dropped by the sessions.
"""

import asyncio
import time
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any

from ..errors import Cancelled, describe
from .events import (
    ChatFailed,
    ChatFinished,
    ChatToken,
    Command,
    Event,
    KeyPressed,
    LoadModels,
    ModelsFailed,
    ModelsLoaded,
    Quit,
    Resize,
    RunSearch,
    SearchFailed,
    SearchLoaded,
    StreamChat,
    Tick,
)
from .frame import Frame, build_frame
from .handlers import handle_key
from .state import AppState

if TYPE_CHECKING:
    from ..client.base import ModelRegistry, ModelServer

Renderer = Callable[[Frame], None]

IDLE_TICK_INTERVAL = 0.5
BUSY_TICK_INTERVAL = 0.05
SHUTDOWN_TIMEOUT = 2.0


class EventLoop:
    """Runs until ``q`` is dispatched, then cancels all outstanding work."""

    def __init__(
        self,
        state: AppState,
        server: "ModelServer",
        registry: "ModelRegistry",
        renderer: Renderer,
        tick_interval: float = IDLE_TICK_INTERVAL,
        busy_tick_interval: float = BUSY_TICK_INTERVAL,
        shutdown_timeout: float = SHUTDOWN_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.state = state
        self._server = server
        self._registry = registry
        self._renderer = renderer
        self._tick_interval = tick_interval
        self._busy_tick_interval = busy_tick_interval
        self._shutdown_timeout = shutdown_timeout
        self._clock = clock
        self._queue: asyncio.Queue[Event] = asyncio.Queue()
        self._tasks: set[asyncio.Task] = set()
        self._ticks = 0
        self._ticker: asyncio.Task | None = None
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for execution tracing.

        Args:
            callback: Callable(level: str, component: str, message: str)
                      level: 'debug', 'info', 'warning', 'error'
        """
        self._debug_callback = callback
        self._server.set_debug_callback(callback)
        self._registry.set_debug_callback(callback)

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    @property
    def outstanding_tasks(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def post(self, event: Event) -> None:
        """Queue an event. Safe to call from any coroutine on the loop."""
        self._queue.put_nowait(event)

    # Main loop

    @property
    def ticks(self) -> int:
        """Number of ticks dispatched so far (drives the spinner)."""
        return self._ticks

    async def run(self) -> None:
        self._ticker = asyncio.create_task(self._tick_forever(), name="ticker")
        try:
            self._execute([self.state.models.begin_load()])
            self.render()
            while not self.state.quitting:
                event = await self._queue.get()
                self.dispatch(event)
                self.render()
        finally:
            self._stop_ticker()
        await self.shutdown()

    async def _tick_forever(self) -> None:
        """Post a ``Tick`` every interval, whatever else is arriving."""
        while True:
            interval = self._busy_tick_interval if self.state.busy else self._tick_interval
            await asyncio.sleep(interval)
            self.post(Tick(self._clock()))

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def render(self) -> None:
        self._renderer(build_frame(self.state, self._ticks))

    def dispatch(self, event: Event) -> bool:
        """Apply one event to the state. Returns False for dropped events."""
        state = self.state

        if isinstance(event, KeyPressed):
            self._execute(handle_key(state, event, self._clock()))
            return True

        if isinstance(event, Tick):
            self._ticks += 1
            if state.search.debounce_due(event.now):
                self._debug("debug", "SEARCH", f"Debounced search for '{state.search.query}'")
                self._execute([state.search.submit()])
            return True

        if isinstance(event, Resize):
            state.viewport = (max(1, event.width), max(1, event.height))
            state.chat.sync_scroll(*state.viewport)
            state.models.scroll.ensure_visible(state.viewport_height)
            state.search.scroll.ensure_visible(state.viewport_height)
            return True

        if isinstance(event, ChatToken):
            applied = state.chat.apply_token(event.generation, event.text)
            if applied:
                state.chat.sync_scroll(*state.viewport)
            return self._report(applied, "CHAT", f"token (generation {event.generation})")

        if isinstance(event, ChatFinished):
            applied = state.chat.finish(event.generation)
            if applied:
                state.chat.sync_scroll(*state.viewport)
                self._debug("info", "CHAT", f"Reply {event.generation} complete")
            return self._report(applied, "CHAT", f"finish (generation {event.generation})")

        if isinstance(event, ChatFailed):
            applied = state.chat.fail(event.generation, event.error)
            if applied:
                state.chat.sync_scroll(*state.viewport)
                level = "info" if isinstance(event.error, Cancelled) else "error"
                self._debug(level, "CHAT", f"Reply {event.generation} ended: {describe(event.error)}")
            return self._report(applied, "CHAT", f"failure (generation {event.generation})")

        if isinstance(event, ModelsLoaded):
            applied = state.models.apply_loaded(event.generation, event.entries)
            if applied:
                self._debug("info", "MODELS", f"Loaded {len(event.entries)} model(s)")
            return self._report(applied, "MODELS", f"list (generation {event.generation})")

        if isinstance(event, ModelsFailed):
            applied = state.models.apply_failed(event.generation, event.error)
            if applied:
                self._debug("error", "MODELS", describe(event.error))
            return self._report(applied, "MODELS", f"failure (generation {event.generation})")

        if isinstance(event, SearchLoaded):
            applied = state.search.apply_results(event.generation, event.query, event.results)
            if applied:
                self._debug("info", "SEARCH", f"{len(event.results)} result(s) for '{event.query}'")
            return self._report(applied, "SEARCH", f"results for '{event.query}'")

        if isinstance(event, SearchFailed):
            applied = state.search.apply_failed(event.generation, event.query, event.error)
            if applied:
                self._debug("error", "SEARCH", describe(event.error))
            return self._report(applied, "SEARCH", f"failure for '{event.query}'")

        raise TypeError(f"Unknown event: {event!r}")

    def _report(self, applied: bool, component: str, what: str) -> bool:
        if not applied:
            self._debug("debug", component, f"Dropped stale {what}")
        return applied

    # Commands

    def _execute(self, commands: list[Command]) -> None:
        state = self.state
        for command in commands:
            if isinstance(command, StreamChat):
                self._debug("info", "CHAT", f"Streaming reply from {command.model}")
                task = self._spawn(self._stream_chat(command), f"chat-{command.generation}")
                task.add_done_callback(self._make_cancel_ack(command.generation))
                state.chat.attach(command.generation, task)
            elif isinstance(command, LoadModels):
                task = self._spawn(self._load_models(command), f"models-{command.generation}")
                state.models.attach(command.generation, task)
            elif isinstance(command, RunSearch):
                self._debug("info", "SEARCH", f"Searching for '{command.query}'")
                task = self._spawn(self._run_search(command), f"search-{command.generation}")
                state.search.attach(command.generation, task)
            elif isinstance(command, Quit):
                self._debug("info", "LOOP", "Quit requested")
                state.chat.cancel()
                state.models.cancel()
                state.search.cancel()

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _stream_chat(self, command: StreamChat) -> None:
        """Post each token, then exactly one finish or failure event."""
        generation = command.generation
        try:
            async for token in self._server.chat_stream(command.model, command.messages):
                self.post(ChatToken(generation, token))
        except Exception as e:
            self.post(ChatFailed(generation, e))
        else:
            self.post(ChatFinished(generation))

    def _make_cancel_ack(self, generation: int) -> Callable[[asyncio.Task], None]:
        """Done callback posting the ack of a cancelled chat task.

        Runs even when the task was cancelled before its first step.
        """
        def _ack(task: asyncio.Task) -> None:
            if task.cancelled():
                self.post(ChatFailed(generation, Cancelled("reply cancelled")))
        return _ack

    async def _load_models(self, command: LoadModels) -> None:
        try:
            entries = await self._server.list_models()
        except Exception as e:
            self.post(ModelsFailed(command.generation, e))
        else:
            self.post(ModelsLoaded(command.generation, entries))

    async def _run_search(self, command: RunSearch) -> None:
        try:
            results = await self._registry.search(command.query)
        except Exception as e:
            self.post(SearchFailed(command.generation, command.query, e))
        else:
            self.post(SearchLoaded(command.generation, command.query, results))

    # Shutdown

    async def shutdown(self) -> None:
        """Cancel every outstanding task and wait for it to unwind."""
        self._stop_ticker()
        self.state.chat.cancel()
        self.state.models.cancel()
        self.state.search.cancel()
        tasks = [task for task in self._tasks if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            _, still_running = await asyncio.wait(tasks, timeout=self._shutdown_timeout)
            if still_running:
                self._debug("warning", "LOOP", f"{len(still_running)} task(s) did not stop in time")
        self._debug("info", "LOOP", "Event loop stopped")
