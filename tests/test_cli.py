"""CLI-level tests for the scoreboard commands."""

from pathlib import Path

import pytest

from qeid.cli import _cmd_add, main
from qeid.rules import Team
from qeid.storage import MatchStore


class _Args:
    def __init__(self, **kwargs):
        self.__dict__.update(kwargs)


def _run(tmp_path: Path, *argv: str) -> None:
    main(["--match-file", str(tmp_path / "match.json"), *argv])


def test_add_with_auto_complete(tmp_path: Path, capsys):
    _run(tmp_path, "add", "--mode", "sun", "--us", "20", "--project-them", "sara")
    out = capsys.readouterr().out
    assert "Us 20 - Them 10" in out
    m = MatchStore(tmp_path / "match.json").load()
    assert m.rounds[0].base_them == 6
    assert m.rounds[0].auto_complete_used


def test_add_both_sides_and_baloot_shared(tmp_path: Path):
    _run(
        tmp_path,
        "add",
        "--mode", "hokom",
        "--multiplier", "x2",
        "--us", "12",
        "--them", "20",
        "--project-us", "baloot",
        "--project-them", "baloot",
        "--double-projects",
    )
    r = MatchStore(tmp_path / "match.json").load().rounds[0]
    assert r.final_us == 14
    assert r.final_them == 22
    assert not r.auto_complete_used


def test_coffee_then_undo(tmp_path: Path, capsys):
    _run(tmp_path, "add", "--mode", "sun", "--us", "20")
    _run(tmp_path, "add", "--mode", "hokom", "--multiplier", "coffee", "--coffee-winner", "them")
    out = capsys.readouterr().out
    assert "Winner: Them" in out
    assert MatchStore(tmp_path / "match.json").load().winner is Team.THEM

    _run(tmp_path, "undo")
    m = MatchStore(tmp_path / "match.json").load()
    assert len(m.rounds) == 1
    assert m.winner is None
    assert m.top_up_them == 0


def test_delete_and_reset(tmp_path: Path, capsys):
    for us in ("10", "20", "26"):
        _run(tmp_path, "add", "--mode", "sun", "--us", us)
    _run(tmp_path, "delete", "2")
    m = MatchStore(tmp_path / "match.json").load()
    assert [r.base_us for r in m.rounds] == [10, 26]
    assert [r.sequence_index for r in m.rounds] == [1, 2]

    _run(tmp_path, "delete", "9")
    assert "No hand #9" in capsys.readouterr().out

    _run(tmp_path, "reset")
    assert MatchStore(tmp_path / "match.json").load().rounds == []


def test_baloot_in_sun_is_rejected(tmp_path: Path):
    args = _Args(
        match_file=str(tmp_path / "match.json"),
        rules="standard",
        mode="sun",
        multiplier="normal",
        us=26,
        them=None,
        project_us=["baloot"],
        project_them=[],
        double_projects=False,
        coffee_winner=None,
    )
    with pytest.raises(SystemExit):
        _cmd_add(args)
    assert not (tmp_path / "match.json").exists()


def test_coffee_requires_winner(tmp_path: Path):
    with pytest.raises(SystemExit):
        _run(tmp_path, "add", "--mode", "sun", "--multiplier", "coffee")


def test_rules_command(capsys):
    main(["--rules", "classic", "rules"])
    out = capsys.readouterr().out
    assert "Rules: classic" in out
    assert "Baloot=20" in out
