"""Chat log line parser."""

import logging
import re

from cs_chatlog.models import Channel, ChatRecord, LineFormat, ParseDiagnostic, ParseResult, Scope

logger = logging.getLogger(__name__)

# Rare enough that players practically never type it
DEFAULT_DELIMITER = "¬"

# L 06/21/2020 - 21:34:02: "AmorDChat<16><STEAM_1:0:1238961968><CT>" say_team "subi"
# L 06/21/2020 - 21:46:17: "fran<21><STEAM_ID_LAN><CT>" say_team "arriba" (dead)
LEGACY_PATTERN = re.compile(
    r"^L (?P<date>\d{2}/\d{2}/\d{4}) - (?P<time>\d{2}:\d{2}:\d{2}): "
    r'"(?P<name>.+)<(?P<uid>[^<>]*)><(?P<steamid>[^<>]*)><(?P<team>[^<>]*)>" '
    r'(?P<say>say|say_team) "(?P<text>.*)"(?P<dead>\s*\(dead\))?$'
)

# Player field of the compact format: name followed by a <team> group
COMPACT_PLAYER_PATTERN = re.compile(r"^(?P<name>.*)<(?P<team>[^<>]*)>$")

LEGACY_TEAMS = {
    "CT": Channel.COUNTER_TERRORIST,
    "TERRORIST": Channel.TERRORIST,
    "SPECTATOR": Channel.SPECTATOR,
}

COMPACT_TEAMS = {
    "C": Channel.COUNTER_TERRORIST,
    "T": Channel.TERRORIST,
    "S": Channel.SPECTATOR,
}

COMPACT_SCOPES = {"y": Scope.PUBLIC, "u": Scope.TEAM_ONLY}


def check_delimiter(delimiter: str) -> str:
    """Reject anything but a single character."""
    if len(delimiter) != 1:
        raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")
    return delimiter


def parse_legacy(line: str, sequence_index: int = 0) -> ChatRecord | None:
    """Parse a line in the original HLDS log format."""
    match = LEGACY_PATTERN.match(line)
    if match is None:
        return None

    return ChatRecord(
        date=match.group("date"),
        time=match.group("time"),
        player_name=match.group("name"),
        channel=LEGACY_TEAMS.get(match.group("team"), Channel.UNKNOWN),
        scope=Scope.TEAM_ONLY if match.group("say") == "say_team" else Scope.PUBLIC,
        is_dead=match.group("dead") is not None,
        text=match.group("text"),
        sequence_index=sequence_index,
        raw=line,
    )


def parse_compact(
    line: str, sequence_index: int = 0, delimiter: str = DEFAULT_DELIMITER
) -> ChatRecord | None:
    """Parse a delimiter-separated line.

    Fields: date, time, name<team>, scope code, message and an optional
    dead flag. The delimiter is not escaped inside messages, so a message
    containing it shifts the following fields.
    """
    check_delimiter(delimiter)
    fields = line.split(delimiter)
    if len(fields) < 5:
        return None

    date, time, player, scope_code, text = fields[:5]
    player_match = COMPACT_PLAYER_PATTERN.match(player)
    if player_match is None:
        return None

    scope = COMPACT_SCOPES.get(scope_code)
    if scope is None:
        return None

    dead_flag = fields[5] if len(fields) > 5 else ""

    return ChatRecord(
        date=date,
        time=time,
        player_name=player_match.group("name"),
        channel=COMPACT_TEAMS.get(player_match.group("team"), Channel.UNKNOWN),
        scope=scope,
        is_dead=dead_flag == "d",
        text=text,
        sequence_index=sequence_index,
        raw=line,
    )


def parse_line(
    line: str,
    line_format: LineFormat,
    sequence_index: int = 0,
    delimiter: str = DEFAULT_DELIMITER,
) -> ChatRecord | None:
    """Parse one log line in the configured format.

    Returns None if the line does not match the format.
    """
    if line_format is LineFormat.LEGACY:
        return parse_legacy(line, sequence_index)
    if line_format is LineFormat.COMPACT:
        return parse_compact(line, sequence_index, delimiter)
    raise ValueError(f"Unknown line format: {line_format!r}")


def split_lines(text: str) -> list[str]:
    """Split on \\n and \\r\\n line endings."""
    return re.split(r"\r?\n", text)


def parse_text(
    text: str,
    line_format: LineFormat,
    delimiter: str = DEFAULT_DELIMITER,
) -> ParseResult:
    """Parse a whole log.

    Blank lines are skipped. Lines that fail to parse are logged and
    reported as diagnostics; they never stop the parse.
    """
    check_delimiter(delimiter)
    records: list[ChatRecord] = []
    diagnostics: list[ParseDiagnostic] = []

    for line_number, line in enumerate(split_lines(text), 1):
        if not line.strip():
            continue

        record = parse_line(line, line_format, len(records), delimiter)
        if record is None:
            logger.warning("Could not parse line %d: %s", line_number, line)
            diagnostics.append(ParseDiagnostic(line_number=line_number, line=line))
            continue

        records.append(record)

    logger.debug(
        "Parsed %d records, skipped %d lines (%s format)",
        len(records),
        len(diagnostics),
        line_format.value,
    )
    return ParseResult(records=tuple(records), diagnostics=tuple(diagnostics))
