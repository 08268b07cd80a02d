"""Pytest fixtures for cs-chatlog tests."""

import tempfile
from pathlib import Path

import pytest

LEGACY_LOG = "\n".join(
    [
        'L 06/21/2020 - 21:34:02: "AmorDChat<16><STEAM_1:0:1238961968><CT>" say_team "subi"',
        'L 06/21/2020 - 21:46:17: "fran<21><STEAM_ID_LAN><CT>" say_team "arriba" (dead)',
        "this line is garbage",
        "",
        'L 06/22/2020 - 20:01:40: "Pepe<3><STEAM_1:1:555><TERRORIST>" say "gg wp"',
        "   ",
        'L 06/22/2020 - 20:02:11: "lurker<7><STEAM_1:0:42><SPECTATOR>" say "who is winning?"',
        'L 07/01/2020 - 19:00:00: "fran<21><STEAM_ID_LAN><CT>" say "GG again"',
    ]
)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def legacy_log_text():
    return LEGACY_LOG


@pytest.fixture
def sample_log_file(temp_dir):
    """Write a small legacy-format chat log with one unparseable line."""
    log_file = temp_dir / "all_chat_messages.log"
    log_file.write_text(LEGACY_LOG + "\n", encoding="utf-8")
    return log_file


@pytest.fixture
def make_record():
    """Factory for ChatRecord objects with sensible defaults."""
    from cs_chatlog.models import Channel, ChatRecord, Scope

    def _make(text="hello", date="06/21/2020", player_name="player", sequence_index=0, **kwargs):
        fields = {
            "time": "12:00:00",
            "channel": Channel.COUNTER_TERRORIST,
            "scope": Scope.PUBLIC,
            "is_dead": False,
            "raw": "",
        }
        fields.update(kwargs)
        return ChatRecord(
            date=date,
            player_name=player_name,
            text=text,
            sequence_index=sequence_index,
            **fields,
        )

    return _make
