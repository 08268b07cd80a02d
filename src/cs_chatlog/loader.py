"""Log retrieval and load state for a browsing session."""

import logging
from collections.abc import Callable
from enum import Enum
from functools import partial
from pathlib import Path

import httpx

from cs_chatlog.indexer import build_index
from cs_chatlog.models import ChatIndex, LineFormat, ParseDiagnostic
from cs_chatlog.parser import DEFAULT_DELIMITER, check_delimiter, parse_text

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class LogRetrievalError(Exception):
    """The log text could not be obtained."""


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def retrieve_text(source: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Read the raw log from a local path or an http(s) URL.

    Raises:
        LogRetrievalError: If the resource is missing or unreadable.
    """
    if is_url(source):
        try:
            response = httpx.get(source, timeout=timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise LogRetrievalError(f"HTTP error {e.response.status_code} for {source}") from e
        except httpx.HTTPError as e:
            raise LogRetrievalError(f"Could not fetch {source}: {e}") from e
        return response.text.removeprefix("\ufeff")

    try:
        # No newline translation: a lone \r inside a message is not a line break
        return Path(source).expanduser().read_bytes().decode("utf-8-sig")
    except FileNotFoundError as e:
        raise LogRetrievalError(f"Log file not found: {source}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise LogRetrievalError(f"Could not read {source}: {e}") from e


class ChatLogSession:
    """Holds the current index and moves through load states.

    Every load replaces the previous index wholesale. A load whose
    retrieval finishes after a newer load has started is discarded.
    """

    def __init__(
        self,
        line_format: LineFormat = LineFormat.LEGACY,
        delimiter: str = DEFAULT_DELIMITER,
        fetch: Callable[[str], str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.line_format = line_format
        self.delimiter = check_delimiter(delimiter)
        self._fetch = fetch or partial(retrieve_text, timeout=timeout)
        self._generation = 0
        self.source: str | None = None
        self.state = LoadState.IDLE
        self.error: str | None = None
        self.index = ChatIndex()
        self.diagnostics: tuple[ParseDiagnostic, ...] = ()

    def _reset(self, state: LoadState) -> None:
        self.state = state
        self.error = None
        self.index = ChatIndex()
        self.diagnostics = ()

    def load(self, source: str) -> LoadState:
        """Fetch, parse and index a log, ending in READY, EMPTY or ERROR."""
        self._generation += 1
        generation = self._generation
        self.source = source
        self._reset(LoadState.LOADING)

        try:
            text = self._fetch(source)
        except LogRetrievalError as e:
            if generation != self._generation:
                logger.debug("Dropping failure of superseded load of %s", source)
                return self.state
            logger.warning("Failed to load chat log: %s", e)
            self._reset(LoadState.ERROR)
            self.error = str(e)
            return self.state

        if generation != self._generation:
            logger.debug("Dropping superseded load of %s", source)
            return self.state

        return self.ingest(text)

    def ingest(self, text: str) -> LoadState:
        """Parse and index already retrieved text in one step."""
        result = parse_text(text, self.line_format, self.delimiter)
        index = build_index(result.records)

        self._reset(LoadState.READY if len(index) else LoadState.EMPTY)
        self.index = index
        self.diagnostics = result.diagnostics
        logger.info(
            "Loaded %d messages over %d dates (%d lines skipped)",
            len(result.records),
            len(index.date_positions),
            len(result.diagnostics),
        )
        return self.state
