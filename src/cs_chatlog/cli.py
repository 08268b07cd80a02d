"""CLI for cs-chatlog."""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.text import Text

from cs_chatlog import __version__
from cs_chatlog.loader import DEFAULT_TIMEOUT
from cs_chatlog.models import ChatRecord, LineFormat
from cs_chatlog.parser import DEFAULT_DELIMITER

app = typer.Typer(
    name="cs-chatlog",
    help="Browse and search Counter-Strike chat logs.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def delimiter_callback(value: str) -> str:
    if len(value) != 1:
        raise typer.BadParameter("must be a single character")
    return value


SourceArgument = Annotated[str, typer.Argument(help="Log file path or http(s) URL")]
FormatOption = Annotated[
    LineFormat,
    typer.Option(
        "--format",
        "-f",
        help="Line format of the log",
        envvar="CS_CHATLOG_FORMAT",
        case_sensitive=False,
    ),
]
DelimiterOption = Annotated[
    str,
    typer.Option(
        "--delimiter",
        help="Field delimiter of the compact format (one character)",
        envvar="CS_CHATLOG_DELIMITER",
        callback=delimiter_callback,
    ),
]
TimeoutOption = Annotated[
    float,
    typer.Option("--timeout", help="Seconds to wait for a remote log", envvar="CS_CHATLOG_TIMEOUT"),
]


def version_callback(value: bool) -> None:
    if value:
        console.print(f"cs-chatlog {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send library logs to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log skipped lines and load details")
    ] = False,
) -> None:
    """Browse and search Counter-Strike chat logs."""
    configure_logging(verbose)


def load_session(source: str, line_format: LineFormat, delimiter: str, timeout: float):
    """Load a log or exit: errors exit 1, an empty log exits 0."""
    from cs_chatlog.loader import ChatLogSession, LoadState

    session = ChatLogSession(line_format=line_format, delimiter=delimiter, timeout=timeout)
    state = session.load(source)

    if state is LoadState.ERROR:
        console.print(f"[red]Error: Failed to load chat logs: {escape(session.error or '')}[/red]")
        raise typer.Exit(1)
    if state is LoadState.EMPTY:
        console.print("[yellow]No chat messages found or parsed.[/yellow]")
        raise typer.Exit()
    return session


def record_to_dict(position: int, record: ChatRecord) -> dict:
    return {
        "position": position,
        "sequence_index": record.sequence_index,
        "date": record.date,
        "time": record.time,
        "player": record.player_name,
        "channel": record.channel.value,
        "scope": record.scope.value,
        "dead": record.is_dead,
        "text": record.text,
    }


@app.command()
def view(
    source: SourceArgument,
    line_format: FormatOption = LineFormat.LEGACY,
    delimiter: DelimiterOption = DEFAULT_DELIMITER,
    timeout: TimeoutOption = DEFAULT_TIMEOUT,
    height: Annotated[
        int | None,
        typer.Option("--height", "-H", min=1, help="Rows to show (default: terminal height)"),
    ] = None,
    date: Annotated[str | None, typer.Option("--date", "-d", help="Jump to a date")] = None,
    term: Annotated[
        str | None, typer.Option("--search", "-s", help="Center the first message matching text")
    ] = None,
    match: Annotated[
        int, typer.Option("--match", "-m", min=1, help="Which match to center (1-based)")
    ] = 1,
    offset: Annotated[
        int | None, typer.Option("--offset", "-o", min=0, help="Scroll offset in rows")
    ] = None,
    overscan: Annotated[int, typer.Option("--overscan", min=0, help="Extra rows around the window")] = 0,
    positions: Annotated[bool, typer.Option("--positions", help="Show entry positions")] = False,
) -> None:
    """Show one screen of the log."""
    from cs_chatlog.display import print_window
    from cs_chatlog.indexer import sorted_dates
    from cs_chatlog.searcher import SearchCursor
    from cs_chatlog.window import Alignment, WindowedView

    session = load_session(source, line_format, delimiter, timeout)
    index = session.index

    viewport = height if height is not None else max(1, console.size.height - 2)
    window = WindowedView(index.entries, row_height=1, viewport_height=viewport, overscan=overscan)
    cursor = SearchCursor(index.entries)

    if term is not None:
        position = cursor.search(term)
        for _ in range(match - 1):
            position = cursor.next()
        if position is None:
            console.print(f"[yellow]No matches for '{escape(term)}'[/yellow]")
            raise typer.Exit()
        window.scroll_to(position, Alignment.CENTER)
    elif date is not None:
        window.jump_to_date(date, index.date_positions)
    elif offset is not None:
        window.scroll_offset = offset
    else:
        dates = sorted_dates(index, session.line_format)
        window.jump_to_date(dates[0], index.date_positions)

    print_window(console, window.visible_entries(), cursor, show_positions=positions)

    shown = window.visible_range()
    footer = f"rows {shown.start + 1}-{shown.stop} of {len(index)}"
    if cursor.term:
        footer += f" | match {cursor.status()}"
    console.print(f"[dim]{footer}[/dim]")


@app.command()
def search(
    source: SourceArgument,
    term: Annotated[str, typer.Argument(help="Text to find in player names and messages")],
    line_format: FormatOption = LineFormat.LEGACY,
    delimiter: DelimiterOption = DEFAULT_DELIMITER,
    timeout: TimeoutOption = DEFAULT_TIMEOUT,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List every message matching a search term."""
    from cs_chatlog.display import highlight_matches, render_record
    from cs_chatlog.searcher import SearchCursor

    session = load_session(source, line_format, delimiter, timeout)
    entries = session.index.entries
    cursor = SearchCursor(entries)
    cursor.search(term)

    if json_output:
        console.print_json(
            data={
                "term": term,
                "total_results": len(cursor),
                "results": [record_to_dict(position, entries[position]) for position in cursor.results],
            }
        )
        return

    if not cursor.results:
        console.print(f"[yellow]No matches for '{escape(term)}'[/yellow]")
        return

    for _ in range(len(cursor)):
        record = entries[cursor.current_position]
        line = highlight_matches(render_record(record), term)
        console.print(f"[cyan]{cursor.status():>9}[/cyan] [dim]{record.date}[/dim] ", line, sep="")
        cursor.next()


@app.command()
def dates(
    source: SourceArgument,
    line_format: FormatOption = LineFormat.LEGACY,
    delimiter: DelimiterOption = DEFAULT_DELIMITER,
    timeout: TimeoutOption = DEFAULT_TIMEOUT,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List the dates in the log in calendar order."""
    from cs_chatlog.indexer import sorted_dates

    session = load_session(source, line_format, delimiter, timeout)
    ordered = sorted_dates(session.index, session.line_format)

    if json_output:
        console.print_json(data={"dates": ordered, "count": len(ordered)})
        return

    for date in ordered:
        console.print(date)
    console.print(f"[dim]{len(ordered)} dates[/dim]")


@app.command()
def stats(
    source: SourceArgument,
    line_format: FormatOption = LineFormat.LEGACY,
    delimiter: DelimiterOption = DEFAULT_DELIMITER,
    timeout: TimeoutOption = DEFAULT_TIMEOUT,
    show_skipped: Annotated[
        bool, typer.Option("--skipped", help="List lines that could not be parsed")
    ] = False,
) -> None:
    """Show message, date and skipped line counts."""
    session = load_session(source, line_format, delimiter, timeout)
    index = session.index
    markers = len(index.date_positions)

    console.print(f"Messages: {len(index) - markers}")
    console.print(f"Dates: {markers}")
    console.print(f"Skipped lines: {len(session.diagnostics)}")

    if show_skipped:
        for diagnostic in session.diagnostics:
            console.print(Text.assemble("  ", (str(diagnostic.line_number), "yellow"), ": ", diagnostic.line))


if __name__ == "__main__":
    app()
