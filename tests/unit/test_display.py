"""Tests for the display module."""

from rich.console import Console

from cs_chatlog.display import highlight_matches, print_window, render_entry, render_record
from cs_chatlog.indexer import build_index
from cs_chatlog.models import Marker, Scope
from cs_chatlog.searcher import SearchCursor


def test_render_record_labels(make_record):
    record = make_record(
        player_name="fran", text="arriba", time="21:46:17", is_dead=True, scope=Scope.TEAM_ONLY
    )
    assert render_record(record).plain == "*DEAD* (TEAM) fran: arriba [21:46]"


def test_render_public_alive(make_record):
    assert render_record(make_record(player_name="a", text="b")).plain == "a: b [12:00]"


def test_render_marker():
    assert render_entry(Marker(date="06/21/2020")).plain == "--- 06/21/2020 ---"


def test_highlight_matches_ignores_case(make_record):
    text = highlight_matches(render_record(make_record(text="GG wp gg")), "gg")
    assert len(text.spans) > 0
    highlighted = [text.plain[s.start : s.end] for s in text.spans if s.style == "black on yellow"]
    assert highlighted == ["GG", "gg"]


def test_print_window_shows_positions(make_record):
    index = build_index([make_record(text="needle"), make_record(text="hay")])
    cursor = SearchCursor(index.entries)
    cursor.search("needle")
    console = Console(record=True, width=80)

    print_window(console, list(enumerate(index.entries)), cursor, show_positions=True)

    output = console.export_text()
    assert "     0 --- 06/21/2020 ---" in output
    assert "     1 player: needle [12:00]" in output
    assert "hay" in output
