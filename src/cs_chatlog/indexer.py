"""Date marker indexer for parsed chat records."""

import logging
from collections.abc import Iterable
from datetime import datetime
from types import MappingProxyType

from cs_chatlog.models import ChatIndex, ChatRecord, IndexedEntry, LineFormat, Marker

logger = logging.getLogger(__name__)


def build_index(records: Iterable[ChatRecord]) -> ChatIndex:
    """Interleave date markers with records in a single pass.

    A marker goes right before the first record of each new date. A date
    that shows up again later in the log keeps its first marker.
    """
    entries: list[IndexedEntry] = []
    date_positions: dict[str, int] = {}
    last_seen_date: str | None = None

    for record in records:
        if record.date != last_seen_date:
            if record.date not in date_positions:
                date_positions[record.date] = len(entries)
                entries.append(Marker(date=record.date))
            else:
                logger.debug("Date %s reappears at record %d", record.date, record.sequence_index)
            last_seen_date = record.date
        entries.append(record)

    return ChatIndex(entries=tuple(entries), date_positions=MappingProxyType(date_positions))


def parse_date(date: str, line_format: LineFormat) -> datetime | None:
    """Parse a verbatim date string using the format's field order."""
    try:
        return datetime.strptime(date.strip(), line_format.date_order)
    except ValueError:
        return None


def sorted_dates(index: ChatIndex, line_format: LineFormat) -> list[str]:
    """Distinct dates ordered by calendar value.

    Dates that cannot be parsed come last, in the order they appear.
    """
    parsed: list[tuple[datetime, int, str]] = []
    unparsed: list[str] = []

    for order, date in enumerate(index.dates):
        value = parse_date(date, line_format)
        if value is None:
            unparsed.append(date)
        else:
            parsed.append((value, order, date))

    parsed.sort()
    return [date for _, _, date in parsed] + unparsed
