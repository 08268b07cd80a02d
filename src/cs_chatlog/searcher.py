"""Substring search over an indexed chat log."""

import logging
from collections.abc import Sequence

from cs_chatlog.models import ChatRecord, IndexedEntry

logger = logging.getLogger(__name__)


def search(entries: Sequence[IndexedEntry], term: str) -> list[int]:
    """Find positions of records whose name or message contains term.

    Matching is case-insensitive. Markers never match. A blank term
    matches nothing.
    """
    if not term.strip():
        return []

    needle = term.casefold()
    return [
        position
        for position, entry in enumerate(entries)
        if isinstance(entry, ChatRecord) and needle in entry.searchable_text.casefold()
    ]


class SearchCursor:
    """Search results with a wrapping cursor for next/previous navigation."""

    def __init__(self, entries: Sequence[IndexedEntry]) -> None:
        self._entries = entries
        self.term = ""
        self.results: list[int] = []
        self.current_index = -1

    def __len__(self) -> int:
        return len(self.results)

    @property
    def current_position(self) -> int | None:
        """Entry position under the cursor, or None without results."""
        if self.current_index < 0:
            return None
        return self.results[self.current_index]

    def search(self, term: str) -> int | None:
        """Run a new search and put the cursor on the first match.

        Returns the first match position, which callers should center on.
        """
        self.term = term
        self.results = search(self._entries, term)
        self.current_index = 0 if self.results else -1
        logger.debug("Search %r: %d matches", term, len(self.results))
        return self.current_position

    def next(self) -> int | None:
        if not self.results:
            return None
        self.current_index = (self.current_index + 1) % len(self.results)
        return self.current_position

    def prev(self) -> int | None:
        if not self.results:
            return None
        self.current_index = (self.current_index - 1) % len(self.results)
        return self.current_position

    def clear(self) -> None:
        self.term = ""
        self.results = []
        self.current_index = -1

    def status(self) -> str:
        """Label like "2/7" for the match under the cursor."""
        if not self.results:
            return "0/0"
        return f"{self.current_index + 1}/{len(self.results)}"
