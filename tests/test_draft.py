"""Tests for the add-round form state (auto-complete, project exclusivity, validation)."""

from qeid.draft import EditedSide, RoundDraft
from qeid.rules import Mode, MultiplierOption, ProjectType, Team


def test_auto_complete_fills_other_side():
    d = RoundDraft()
    d.edit_base(Team.US, "20")
    assert d.base_text[Team.THEM] == "6"
    assert d.last_edited is EditedSide.US
    d.edit_base(Team.THEM, "10")
    assert d.base_text[Team.US] == "16"
    assert d.last_edited is EditedSide.THEM


def test_auto_complete_negative_leaves_empty():
    d = RoundDraft()
    d.edit_base(Team.US, "40")
    assert d.base_text[Team.THEM] == ""
    assert d.validation_error is not None
    assert not d.is_valid


def test_multiplier_change_recomputes_from_last_edited():
    d = RoundDraft()
    d.edit_base(Team.US, "20")
    d.set_multiplier(MultiplierOption.X2)
    assert d.base_text[Team.THEM] == "32"


def test_auto_complete_off_keeps_both_and_flags_mismatch():
    d = RoundDraft(auto_complete=False)
    d.edit_base(Team.US, "20")
    assert d.base_text[Team.THEM] == ""
    d.edit_base(Team.THEM, "10")
    assert d.sums_mismatch
    assert d.is_valid
    d.edit_base(Team.THEM, "6")
    assert not d.sums_mismatch


def test_enabling_auto_complete_rederives():
    d = RoundDraft(auto_complete=False)
    d.edit_base(Team.THEM, "6")
    d.set_auto_complete(True)
    assert d.base_text[Team.US] == "20"


def test_mutual_exclusion_in_sun():
    d = RoundDraft(mode=Mode.SUN)
    d.toggle_project(Team.US, ProjectType.SARA)
    d.toggle_project(Team.THEM, ProjectType.SARA)
    assert ProjectType.SARA not in d.projects[Team.US]
    assert ProjectType.SARA in d.projects[Team.THEM]
    # baloot is not available in Sun, the toggle is ignored
    d.toggle_project(Team.US, ProjectType.BALOOT)
    assert ProjectType.BALOOT not in d.projects[Team.US]


def test_every_project_but_baloot_is_exclusive_in_hokom():
    d = RoundDraft()
    d.set_mode(Mode.HOKOM)
    for project in ProjectType:
        d.toggle_project(Team.US, project)
        d.toggle_project(Team.THEM, project)
        held_by_us = project in d.projects[Team.US]
        assert project in d.projects[Team.THEM]
        assert held_by_us == (project is ProjectType.BALOOT)


def test_toggle_twice_removes():
    d = RoundDraft()
    d.toggle_project(Team.US, ProjectType.P100)
    d.toggle_project(Team.US, ProjectType.P100)
    assert d.projects[Team.US] == set()


def test_switching_to_sun_drops_baloot():
    d = RoundDraft(mode=Mode.HOKOM)
    d.toggle_project(Team.US, ProjectType.BALOOT)
    d.toggle_project(Team.THEM, ProjectType.BALOOT)
    d.toggle_project(Team.THEM, ProjectType.P50)
    d.set_mode(Mode.SUN)
    assert d.projects[Team.US] == set()
    assert d.projects[Team.THEM] == {ProjectType.P50}
    assert ProjectType.BALOOT not in d.available_projects()


def test_coffee_draft():
    d = RoundDraft(mode=Mode.HOKOM)
    d.set_multiplier(MultiplierOption.COFFEE)
    assert not d.is_valid
    d.set_instant_winner(Team.US)
    d.toggle_project(Team.THEM, ProjectType.P50)
    assert d.is_valid
    assert d.final(Team.US) == 80
    assert d.final(Team.THEM) == 5
    r = d.build_round()
    assert r.instant_winner is Team.US
    assert r.final_us == 80
    assert r.final_them == 5


def test_leaving_coffee_clears_winner():
    d = RoundDraft()
    d.set_multiplier(MultiplierOption.COFFEE)
    d.set_instant_winner(Team.THEM)
    d.set_multiplier(MultiplierOption.X3)
    assert d.instant_winner is None
    assert d.to_inputs().instant_winner is None


def test_to_inputs_and_build():
    d = RoundDraft()
    d.double_projects = True
    d.edit_base(Team.US, "16")
    d.toggle_project(Team.US, ProjectType.SARA)
    inputs = d.to_inputs()
    assert inputs.base_us == 16
    assert inputs.base_them == 10
    assert inputs.auto_complete
    r = d.build_round()
    assert r.final_us == 16 + 8
    assert r.final_them == 10
