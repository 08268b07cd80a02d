"""Rich rendering of indexed chat entries."""

from rich.console import Console
from rich.text import Text

from cs_chatlog.models import Channel, ChatRecord, IndexedEntry, Marker, Scope
from cs_chatlog.searcher import SearchCursor

CHANNEL_STYLES = {
    Channel.COUNTER_TERRORIST: "bold #99ccff",
    Channel.TERRORIST: "bold #ff3f3f",
    Channel.SPECTATOR: "bold #cccccc",
    Channel.UNKNOWN: "bold",
}

MATCH_STYLE = "black on yellow"
CURRENT_MATCH_STYLE = "black on #ff9900"


def render_marker(marker: Marker) -> Text:
    return Text(f"--- {marker.date} ---", style="dim", justify="center")


def render_record(record: ChatRecord) -> Text:
    """One chat line: *DEAD* (TEAM) name: message [HH:MM]."""
    line = Text()
    if record.is_dead:
        line.append("*DEAD* ", style="#ff6666")
    if record.scope is Scope.TEAM_ONLY:
        line.append("(TEAM) ", style="#aaaaaa")
    line.append(record.player_name, style=CHANNEL_STYLES[record.channel])
    line.append(": ")
    line.append(record.text, style="#ffb000")
    line.append(f" [{record.short_time}]", style="dim")
    return line


def render_entry(entry: IndexedEntry) -> Text:
    if isinstance(entry, Marker):
        return render_marker(entry)
    return render_record(entry)


def highlight_matches(text: Text, term: str, style: str = MATCH_STYLE) -> Text:
    """Highlight every occurrence of the search term, ignoring case."""
    if term.strip():
        text.highlight_words([term], style=style, case_sensitive=False)
    return text


def print_window(
    console: Console,
    rows: list[tuple[int, IndexedEntry]],
    cursor: SearchCursor | None = None,
    show_positions: bool = False,
) -> None:
    """Print the visible rows, marking search hits."""
    current = cursor.current_position if cursor else None
    matches = set(cursor.results) if cursor else set()

    for position, entry in rows:
        line = render_entry(entry)
        if cursor and position in matches:
            style = CURRENT_MATCH_STYLE if position == current else MATCH_STYLE
            highlight_matches(line, cursor.term, style)
        if show_positions:
            line = Text.assemble((f"{position:>6} ", "dim"), line)
        console.print(line)
