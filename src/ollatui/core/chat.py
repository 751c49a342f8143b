"""Chat transcript and the lifecycle of one streaming reply.

States:
- Idle: no request pending.
- Streaming: the last message is an incomplete assistant reply and a
  cancellation handle is held. After ``cancel()`` the session stays
  Streaming, ignoring tokens, until the finish/fail ack arrives.
- Error: the last stream failed. Transient: the session is Idle again as
  soon as the failure has been recorded; ``last_outcome`` remembers it.
"""

import textwrap

from ..errors import Cancelled, EmptyInput, NoModelSelected, describe
from .events import StreamChat
from .models import ChatMessage, ChatState, Role, StatusMessage
from .pending import CancelHandle, GenerationCounter, PendingRequest
from .scroll import ScrollState

ROLE_LABELS = {Role.USER: "You", Role.ASSISTANT: "AI"}

TranscriptLine = tuple[Role | None, str]


def message_lines(message: ChatMessage, width: int) -> list[TranscriptLine]:
    """Wrap one message, followed by its blank separator line."""
    lines: list[TranscriptLine] = []
    text = f"{ROLE_LABELS[message.role]}: {message.content}"
    for paragraph in text.split("\n"):
        if width > 0 and paragraph:
            wrapped = textwrap.wrap(
                paragraph, width, replace_whitespace=False, drop_whitespace=False
            )
        else:
            wrapped = [paragraph]
        lines.extend((message.role, line) for line in wrapped or [""])
    lines.append((None, ""))
    return lines


def transcript_lines(messages: list[ChatMessage], width: int) -> list[TranscriptLine]:
    """Lay out the transcript as wrapped lines, one blank line between messages."""
    lines: list[TranscriptLine] = []
    for message in messages:
        lines.extend(message_lines(message, width))
    return lines


class ChatSession:
    """Owns the transcript, the compose buffer and the in-flight stream."""

    def __init__(self, active_model: str | None = None) -> None:
        self.messages: list[ChatMessage] = []
        self.scroll = ScrollState()
        self.input_text = ""
        self.active_model = active_model
        self.pending: PendingRequest | None = None
        self.follow = True
        self.status: StatusMessage | None = None
        self.last_outcome = ChatState.IDLE
        self._generations = GenerationCounter()
        # Wrapped lines of the leading completed messages at _layout_width.
        self._layout_width = 0
        self._layout: list[tuple[ChatMessage, str, list[TranscriptLine]]] = []

    @property
    def state(self) -> ChatState:
        return ChatState.STREAMING if self.pending is not None else ChatState.IDLE

    @property
    def is_streaming(self) -> bool:
        return self.pending is not None

    @property
    def is_cancelling(self) -> bool:
        return self.pending is not None and self.pending.cancelling

    def _is_current(self, generation: int) -> bool:
        return self.pending is not None and self.pending.generation == generation

    # Sending

    def begin_send(self, default_model: str | None = None) -> StreamChat | None:
        """Move the compose buffer into the transcript and describe the request.

        Returns None while a reply is streaming (sending is ignored then).

        Raises:
            EmptyInput: The compose buffer is blank.
            NoModelSelected: No active model and no default model.
        """
        if self.pending is not None:
            return None
        text = self.input_text.strip()
        if not text:
            raise EmptyInput()
        model = self.active_model or default_model
        if not model:
            raise NoModelSelected("No model selected - choose one in the Models tab")

        self.input_text = ""
        self.messages.append(ChatMessage(role=Role.USER, content=text))
        history = [m.to_wire() for m in self.messages if not m.failed]
        self.messages.append(ChatMessage(role=Role.ASSISTANT, complete=False))

        generation = self._generations.next()
        self.pending = PendingRequest(generation)
        self.follow = True
        self.status = None
        return StreamChat(generation=generation, model=model, messages=history)

    def attach(self, generation: int, handle: CancelHandle) -> None:
        """Store the cancellation handle of the task serving ``generation``."""
        if self._is_current(generation):
            self.pending.handle = handle

    # Stream events

    def apply_token(self, generation: int, text: str) -> bool:
        """Append a token to the reply. Returns False for stale tokens."""
        if not self._is_current(generation) or self.pending.cancelling:
            return False
        self.messages[-1].content += text
        return True

    def finish(self, generation: int) -> bool:
        """Complete the reply. Also serves as the ack of a cancellation."""
        if not self._is_current(generation):
            return False
        reply = self.messages[-1]
        reply.complete = True
        reply.interrupted = self.pending.cancelling
        self.pending = None
        self.last_outcome = ChatState.IDLE
        return True

    def fail(self, generation: int, error: Exception) -> bool:
        """Freeze the partial reply after a failure or a cancellation ack."""
        if not self._is_current(generation):
            return False
        reply = self.messages[-1]
        reply.complete = True
        if self.pending.cancelling or isinstance(error, Cancelled):
            reply.interrupted = True
            self.last_outcome = ChatState.IDLE
        else:
            reply.failed = True
            reply.content += f"\n[error: {describe(error)}]"
            self.status = StatusMessage(describe(error), level="error")
            self.last_outcome = ChatState.ERROR
        self.pending = None
        return True

    def cancel(self) -> bool:
        """Signal cancellation of the stream in flight, if any."""
        if self.pending is None or self.pending.cancelling:
            return False
        self.pending.cancel()
        return True

    def clear(self) -> bool:
        """Drop the transcript. Refused while a reply is streaming."""
        if self.pending is not None:
            return False
        self.messages.clear()
        self._layout = []
        self.scroll.reset()
        self.follow = True
        self.status = None
        return True

    # Scrolling

    def lines(self, width: int) -> list[TranscriptLine]:
        """The wrapped transcript. Completed messages are wrapped once per width."""
        if width != self._layout_width:
            self._layout_width = width
            self._layout = []
        lines: list[TranscriptLine] = []
        for index, message in enumerate(self.messages):
            if index < len(self._layout):
                cached, content, block = self._layout[index]
                if cached is message and content == message.content:
                    lines.extend(block)
                    continue
                del self._layout[index:]
            block = message_lines(message, width)
            if message.complete and index == len(self._layout):
                self._layout.append((message, message.content, block))
            lines.extend(block)
        return lines

    def scroll_lines(self, delta: int, width: int, height: int) -> None:
        self.follow = False
        self.scroll.scroll_by(delta, len(self.lines(width)), height)

    def scroll_home(self) -> None:
        self.follow = False
        self.scroll.scroll_to_top()

    def scroll_end(self, width: int, height: int) -> None:
        self.follow = True
        self.scroll.scroll_to_bottom(len(self.lines(width)), height)

    def sync_scroll(self, width: int, height: int) -> None:
        """Re-clamp the offset after the content or viewport changed."""
        content_height = len(self.lines(width))
        if self.follow:
            self.scroll.scroll_to_bottom(content_height, height)
        else:
            self.scroll.scroll_by(0, content_height, height)
