"""Integration tests for the CLI."""

import json
import subprocess
import sys


def run_cli(*args):
    return subprocess.run(
        [sys.executable, "-m", "cs_chatlog.cli", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


def test_cli_help():
    """Test that --help works."""
    result = run_cli("--help")
    assert result.returncode == 0
    assert "view" in result.stdout
    assert "search" in result.stdout
    assert "dates" in result.stdout


def test_cli_version():
    """Test that --version works."""
    result = run_cli("--version")
    assert result.returncode == 0
    assert "cs-chatlog" in result.stdout


def test_view_jumps_to_date(sample_log_file):
    result = run_cli("view", str(sample_log_file), "--date", "07/01/2020", "--height", "3")
    assert result.returncode == 0
    assert "07/01/2020" in result.stdout
    assert "GG again" in result.stdout
    assert "subi" not in result.stdout


def test_view_defaults_to_first_date(sample_log_file):
    result = run_cli("view", str(sample_log_file), "--height", "3")
    assert result.returncode == 0
    assert "06/21/2020" in result.stdout
    assert "subi" in result.stdout


def test_view_search_centers_match(sample_log_file):
    result = run_cli("view", str(sample_log_file), "--search", "gg", "--match", "2", "--height", "3")
    assert result.returncode == 0
    assert "GG again" in result.stdout
    assert "match 2/2" in result.stdout


def test_search_json_output(sample_log_file):
    """Test that search with --json outputs valid JSON."""
    result = run_cli("search", str(sample_log_file), "gg", "--json")
    assert result.returncode == 0

    data = json.loads(result.stdout)
    assert data["total_results"] == 2
    assert [r["text"] for r in data["results"]] == ["gg wp", "GG again"]
    assert data["results"][0]["channel"] == "Terrorist"


def test_dates_calendar_order(sample_log_file):
    result = run_cli("dates", str(sample_log_file), "--json")
    assert result.returncode == 0
    assert json.loads(result.stdout) == {
        "dates": ["06/21/2020", "06/22/2020", "07/01/2020"],
        "count": 3,
    }


def test_stats_reports_skipped(sample_log_file):
    result = run_cli("stats", str(sample_log_file), "--skipped")
    assert result.returncode == 0
    assert "Messages: 5" in result.stdout
    assert "Dates: 3" in result.stdout
    assert "Skipped lines: 1" in result.stdout
    assert "this line is garbage" in result.stdout


def test_missing_file_is_an_error(temp_dir):
    result = run_cli("view", str(temp_dir / "missing.log"))
    assert result.returncode == 1
    assert "Failed to load chat logs" in result.stdout


def test_empty_log_is_not_an_error(temp_dir):
    log_file = temp_dir / "empty.log"
    log_file.write_text("\n\n", encoding="utf-8")

    result = run_cli("dates", str(log_file))
    assert result.returncode == 0
    assert "No chat messages found" in result.stdout


def test_compact_format(temp_dir):
    log_file = temp_dir / "chat.log"
    log_file.write_text("21/06/2020¬21:46:17¬fran<C>¬u¬arriba¬d\n", encoding="utf-8")

    result = run_cli("search", str(log_file), "arriba", "--format", "compact", "--json")
    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["results"][0]["dead"] is True
    assert data["results"][0]["scope"] == "TeamOnly"


def test_blank_search_term_is_empty_result(sample_log_file):
    result = run_cli("search", str(sample_log_file), "  ", "--json")
    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["total_results"] == 0
    assert data["results"] == []


def test_blank_search_term_human_output(sample_log_file):
    result = run_cli("search", str(sample_log_file), "")
    assert result.returncode == 0
    assert "No matches" in result.stdout


def test_empty_delimiter_rejected(temp_dir):
    log_file = temp_dir / "chat.log"
    log_file.write_text("21/06/2020¬21:46:17¬fran<C>¬u¬arriba\n", encoding="utf-8")

    result = run_cli("dates", str(log_file), "--format", "compact", "--delimiter", "")
    assert result.returncode == 2
    assert "Traceback" not in result.stderr


def test_view_height_must_be_positive(sample_log_file):
    result = run_cli("view", str(sample_log_file), "--height", "0")
    assert result.returncode == 2
    assert "Traceback" not in result.stderr
