"""Cursor and offset tracking shared by every tab.

Lists (models, search results) use ``selected`` and keep ``offset`` so the
selection stays visible. The chat transcript uses ``offset`` as a line
scroll position and leaves ``selected`` at 0.
"""

from dataclasses import dataclass


def max_offset(content_height: int, viewport_height: int) -> int:
    """Largest valid scroll offset for content in a viewport."""
    return max(0, content_height - max(0, viewport_height))


@dataclass
class ScrollState:
    """Scroll position and selection for one list or text view."""

    offset: int = 0
    selected: int = 0

    def reset(self) -> None:
        self.offset = 0
        self.selected = 0

    # Selection (lists)

    def clamp(self, item_count: int) -> None:
        """Pull ``selected`` back inside ``[0, item_count - 1]``."""
        if item_count <= 0:
            self.selected = 0
            self.offset = 0
            return
        self.selected = min(max(self.selected, 0), item_count - 1)
        self.offset = min(max(self.offset, 0), self.selected)

    def move(self, delta: int, item_count: int) -> None:
        """Move the selection by ``delta`` without wrapping around."""
        self.selected += delta
        self.clamp(item_count)

    def first(self, item_count: int) -> None:
        self.selected = 0
        self.clamp(item_count)

    def last(self, item_count: int) -> None:
        self.selected = item_count - 1
        self.clamp(item_count)

    def ensure_visible(self, viewport_height: int) -> None:
        """Adjust ``offset`` so that ``selected`` is inside the viewport."""
        if viewport_height <= 0:
            return
        if self.selected < self.offset:
            self.offset = self.selected
        elif self.selected >= self.offset + viewport_height:
            self.offset = self.selected - viewport_height + 1

    # Line scrolling (text)

    def scroll_by(self, delta: int, content_height: int, viewport_height: int) -> None:
        """Scroll by ``delta`` lines, clamped to the scrollable range."""
        limit = max_offset(content_height, viewport_height)
        self.offset = min(max(self.offset + delta, 0), limit)

    def scroll_to_top(self) -> None:
        self.offset = 0

    def scroll_to_bottom(self, content_height: int, viewport_height: int) -> None:
        self.offset = max_offset(content_height, viewport_height)
