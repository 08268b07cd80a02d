"""Data models for cs-chatlog."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class LineFormat(str, Enum):
    """Supported log line encodings, chosen per deployment."""

    LEGACY = "legacy"
    COMPACT = "compact"

    @property
    def date_order(self) -> str:
        """strptime pattern for the date field of this format."""
        if self is LineFormat.LEGACY:
            return "%m/%d/%Y"
        return "%d/%m/%Y"


class Channel(str, Enum):
    """Team affiliation of the speaker."""

    COUNTER_TERRORIST = "CounterTerrorist"
    TERRORIST = "Terrorist"
    SPECTATOR = "Spectator"
    UNKNOWN = "Unknown"


class Scope(str, Enum):
    """Who could read the message."""

    PUBLIC = "Public"
    TEAM_ONLY = "TeamOnly"


@dataclass(frozen=True)
class ChatRecord:
    """One parsed chat event."""

    date: str  # verbatim from the source line
    time: str  # HH:MM:SS
    player_name: str
    channel: Channel
    scope: Scope
    is_dead: bool
    text: str
    sequence_index: int
    raw: str

    @property
    def short_time(self) -> str:
        return self.time[:5]

    @property
    def searchable_text(self) -> str:
        return f"{self.player_name} {self.text}"


@dataclass(frozen=True)
class Marker:
    """Separator row announcing the first message of a new date."""

    date: str


IndexedEntry = ChatRecord | Marker


@dataclass(frozen=True)
class ParseDiagnostic:
    """A non-blank line that could not be parsed."""

    line_number: int  # 1-based
    line: str


@dataclass(frozen=True)
class ParseResult:
    """Records parsed from a whole log, plus the lines that were dropped."""

    records: tuple[ChatRecord, ...] = ()
    diagnostics: tuple[ParseDiagnostic, ...] = ()


@dataclass(frozen=True)
class ChatIndex:
    """The renderable sequence: records interleaved with date markers."""

    entries: tuple[IndexedEntry, ...] = ()
    date_positions: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, position: int) -> IndexedEntry:
        return self.entries[position]

    @property
    def records(self) -> Iterator[ChatRecord]:
        return (e for e in self.entries if isinstance(e, ChatRecord))

    @property
    def dates(self) -> list[str]:
        """Distinct dates in first-appearance order."""
        return list(self.date_positions)
