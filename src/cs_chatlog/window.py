"""Windowed access to a long sequence of fixed-height rows.

Only the rows intersecting the viewport (plus a small overscan margin) are
ever materialized, so the cost of rendering depends on the viewport size
and not on the length of the log.
"""

import logging
from collections.abc import Mapping, Sequence
from enum import Enum

from cs_chatlog.models import IndexedEntry

logger = logging.getLogger(__name__)

DEFAULT_ROW_HEIGHT = 1
DEFAULT_OVERSCAN = 3


class Alignment(str, Enum):
    """Where scroll_to places the target row."""

    START = "start"
    CENTER = "center"


class WindowedView:
    """Viewport over an indexed sequence with fixed row height."""

    def __init__(
        self,
        entries: Sequence[IndexedEntry],
        row_height: int = DEFAULT_ROW_HEIGHT,
        viewport_height: int = 0,
        overscan: int = DEFAULT_OVERSCAN,
    ) -> None:
        if row_height <= 0:
            raise ValueError(f"row_height must be positive, got {row_height}")
        if viewport_height < 0:
            raise ValueError(f"viewport_height must not be negative, got {viewport_height}")
        if overscan < 0:
            raise ValueError(f"overscan must not be negative, got {overscan}")

        self._entries = entries
        self.row_height = row_height
        self.viewport_height = viewport_height
        self.overscan = overscan
        self._scroll_offset = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def content_height(self) -> int:
        return len(self._entries) * self.row_height

    @property
    def max_offset(self) -> int:
        return max(0, self.content_height - self.viewport_height)

    @property
    def scroll_offset(self) -> int:
        return self._scroll_offset

    @scroll_offset.setter
    def scroll_offset(self, value: int) -> None:
        self._scroll_offset = min(max(0, int(value)), self.max_offset)

    def resize(self, viewport_height: int) -> None:
        """Change the viewport height and re-clamp the offset."""
        if viewport_height < 0:
            raise ValueError(f"viewport_height must not be negative, got {viewport_height}")
        self.viewport_height = viewport_height
        self.scroll_offset = self._scroll_offset

    def visible_range(self) -> range:
        """Indices of rows intersecting the viewport, widened by overscan."""
        count = len(self._entries)
        if count == 0 or self.viewport_height == 0:
            return range(0)

        first = self._scroll_offset // self.row_height
        # Last row whose top edge lies above the viewport bottom
        last = (self._scroll_offset + self.viewport_height - 1) // self.row_height

        start = max(0, first - self.overscan)
        stop = min(count, last + 1 + self.overscan)
        return range(start, stop)

    def visible_entries(self) -> list[tuple[int, IndexedEntry]]:
        """(position, entry) pairs for the visible range only."""
        return [(position, self._entries[position]) for position in self.visible_range()]

    def scroll_to(self, position: int, alignment: Alignment = Alignment.START) -> int | None:
        """Scroll so the row at position is at the top or in the middle.

        An out-of-range position is ignored and returns None; otherwise the
        new (clamped) offset is returned.
        """
        if not 0 <= position < len(self._entries):
            logger.debug("Ignoring scroll to out-of-range position %d", position)
            return None

        row_top = position * self.row_height
        alignment = Alignment(alignment)
        if alignment is Alignment.START:
            target = row_top
        else:
            target = row_top - (self.viewport_height - self.row_height) // 2

        self.scroll_offset = target
        return self._scroll_offset

    def scroll_by(self, rows: int) -> int:
        self.scroll_offset = self._scroll_offset + rows * self.row_height
        return self._scroll_offset

    def page_down(self) -> int:
        self.scroll_offset = self._scroll_offset + self.viewport_height
        return self._scroll_offset

    def page_up(self) -> int:
        self.scroll_offset = self._scroll_offset - self.viewport_height
        return self._scroll_offset

    def scroll_home(self) -> int:
        self.scroll_offset = 0
        return self._scroll_offset

    def scroll_end(self) -> int:
        self.scroll_offset = self.max_offset
        return self._scroll_offset

    def jump_to_date(self, date: str, date_positions: Mapping[str, int]) -> int | None:
        """Scroll the date's marker to the top; unknown dates are ignored."""
        position = date_positions.get(date)
        if position is None:
            logger.debug("No marker for date %s", date)
            return None
        return self.scroll_to(position, Alignment.START)
