"""Tests for the JSON match file store."""

from pathlib import Path

import pytest

from qeid.errors import PersistFailure
from qeid.models import Match
from qeid.rules import CLASSIC_RULES, Mode
from qeid.scoring import RoundInputs, build_round
from qeid.storage import MatchStore


def test_save_and_load(tmp_path: Path) -> None:
    store = MatchStore(tmp_path / "games" / "current.json")
    m = Match()
    m.rounds.append(build_round(RoundInputs(mode=Mode.SUN, base_us=20, base_them=6), sequence_index=1))
    store.save(m)
    assert store.exists()
    assert not list(store.path.parent.glob("*.tmp"))
    assert store.load() == m


def test_missing_file_gives_empty_match(tmp_path: Path) -> None:
    store = MatchStore(tmp_path / "none.json")
    m = store.load(CLASSIC_RULES)
    assert m.rounds == []
    assert m.target_score == CLASSIC_RULES.target_score


def test_corrupt_file_falls_back_to_empty(tmp_path: Path, caplog) -> None:
    path = tmp_path / "current.json"
    path.write_text("{ truncated", encoding="utf-8")
    m = MatchStore(path).load()
    assert m.rounds == []
    assert m.winner is None
    assert "unreadable" in caplog.text


def test_save_into_unwritable_location_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    store = MatchStore(blocker / "current.json")
    with pytest.raises(PersistFailure):
        store.save(Match())


def test_clear(tmp_path: Path) -> None:
    store = MatchStore(tmp_path / "current.json")
    store.save(Match())
    store.clear()
    assert not store.exists()
    store.clear()


def test_overflowing_numbers_fall_back_to_empty(tmp_path: Path) -> None:
    path = tmp_path / "current.json"
    path.write_text('{"target_score": Infinity, "rounds": []}', encoding="utf-8")
    m = MatchStore(path).load()
    assert m.rounds == []
    assert m.target_score == 152
