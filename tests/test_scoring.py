"""Tests for hand scoring."""

import pytest

from qeid.errors import InvalidInput
from qeid.rules import CLASSIC_RULES, Mode, MultiplierOption, ProjectType, Team
from qeid.scoring import RoundInputs, adjusted_base, build_round, project_points


def test_adjusted_base():
    assert adjusted_base(Mode.SUN, MultiplierOption.NORMAL) == 26
    assert adjusted_base(Mode.SUN, MultiplierOption.X2) == 52
    assert adjusted_base(Mode.HOKOM, MultiplierOption.COFFEE) == 80
    assert adjusted_base(Mode.HOKOM, MultiplierOption.X4) == 64


def test_project_points_single():
    assert project_points({ProjectType.SARA}, Mode.SUN, False) == 4
    assert project_points({ProjectType.SARA}, Mode.SUN, True) == 8
    assert project_points({ProjectType.SARA}, Mode.HOKOM, False) == 2
    assert project_points({ProjectType.P50}, Mode.HOKOM, False) == 5
    assert project_points({ProjectType.BALOOT}, Mode.HOKOM, False) == 2
    assert project_points({ProjectType.BALOOT}, Mode.SUN, False) == 0


def test_doubling_skips_baloot():
    projects = {ProjectType.P100, ProjectType.BALOOT}
    assert project_points(projects, Mode.HOKOM, False) == 12
    assert project_points(projects, Mode.HOKOM, True) == 22
    assert project_points({ProjectType.BALOOT}, Mode.HOKOM, True) == 2


def test_empty_projects():
    assert project_points(set(), Mode.SUN, True) == 0


def test_classic_doubling_follows_hand_multiplier():
    pts = project_points(
        {ProjectType.P50, ProjectType.BALOOT},
        Mode.HOKOM,
        True,
        multiplier=MultiplierOption.X3,
        rules=CLASSIC_RULES,
    )
    assert pts == 150 + 60


def test_build_round_normal():
    r = build_round(
        RoundInputs(
            mode=Mode.SUN,
            multiplier=MultiplierOption.X2,
            base_us=30,
            base_them=22,
            projects_us=frozenset({ProjectType.P50}),
        )
    )
    assert r.base_adjusted == 52
    assert r.project_points_us == 10
    assert r.project_points_them == 0
    assert r.final_us == 40
    assert r.final_them == 22
    assert r.instant_winner is None
    assert r.sums_match


def test_build_round_mismatch_is_accepted(caplog):
    r = build_round(RoundInputs(mode=Mode.HOKOM, base_us=10, base_them=10))
    assert not r.sums_match
    assert r.final_us == 10
    assert "do not add up" in caplog.text


def test_coffee_round_winner_takes_base():
    r = build_round(
        RoundInputs(
            mode=Mode.HOKOM,
            multiplier=MultiplierOption.COFFEE,
            base_us=5,
            base_them=7,
            projects_us=frozenset({ProjectType.SARA}),
            projects_them=frozenset({ProjectType.P100, ProjectType.BALOOT}),
            instant_winner=Team.THEM,
        )
    )
    assert r.is_instant_win
    assert r.instant_winner is Team.THEM
    assert r.base_us == 0
    assert r.base_them == 80
    assert r.final_them == 80 + 12
    assert r.final_us == 2


def test_coffee_without_winner_uses_entered_bases():
    r = build_round(
        RoundInputs(mode=Mode.SUN, multiplier=MultiplierOption.COFFEE, base_us=100, base_them=30)
    )
    assert not r.is_instant_win
    assert r.final_us == 100


def test_instant_winner_ignored_for_normal_hand():
    r = build_round(RoundInputs(mode=Mode.SUN, base_us=26, instant_winner=Team.US))
    assert r.instant_winner is None
    assert not r.is_instant_win


def test_unavailable_project_rejected():
    with pytest.raises(InvalidInput):
        build_round(
            RoundInputs(mode=Mode.SUN, base_us=26, projects_them=frozenset({ProjectType.BALOOT}))
        )


def test_round_ids_are_unique():
    inputs = RoundInputs(mode=Mode.SUN, base_us=13, base_them=13)
    assert build_round(inputs).id != build_round(inputs).id
