"""
Headless state of the "add round" form.

``RoundDraft`` holds what the user has picked so far and applies the form
rules: auto-completing the other team's base from the hand value, dropping
projects that the mode does not allow, and keeping projects exclusive to one
team (baloot in Hokom may be held by both). The GUI dialog and the CLI both
drive a draft and hand ``to_inputs()`` to the scoring layer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set

from .models import Round
from .rules import STANDARD_RULES, Mode, MultiplierOption, ProjectType, RuleConfig, Team
from .scoring import RoundInputs, adjusted_base, build_round, project_points


class EditedSide(str, Enum):
    """Which base field the user typed in last."""
    NONE = "none"
    US = "us"
    THEM = "them"


def _parse_int(text: str) -> Optional[int]:
    try:
        return int(text.strip())
    except ValueError:
        return None


def _empty_selection() -> Dict[Team, Set[ProjectType]]:
    return {Team.US: set(), Team.THEM: set()}


@dataclass
class RoundDraft:
    rules: RuleConfig = STANDARD_RULES
    mode: Mode = Mode.SUN
    multiplier: MultiplierOption = MultiplierOption.NORMAL
    auto_complete: bool = True
    double_projects: bool = False
    base_text: Dict[Team, str] = field(default_factory=lambda: {Team.US: "", Team.THEM: ""})
    projects: Dict[Team, Set[ProjectType]] = field(default_factory=_empty_selection)
    instant_winner: Optional[Team] = None
    last_edited: EditedSide = EditedSide.NONE

    # -- derived values --

    @property
    def is_coffee(self) -> bool:
        return self.multiplier.is_instant

    @property
    def adjusted_base(self) -> int:
        return adjusted_base(self.mode, self.multiplier, self.rules)

    def available_projects(self) -> List[ProjectType]:
        return [p for p in ProjectType if self.rules.is_available(p, self.mode)]

    def base_value(self, team: Team) -> int:
        if self.is_coffee:
            return self.adjusted_base if self.instant_winner is team else 0
        return _parse_int(self.base_text[team]) or 0

    def project_points(self, team: Team) -> int:
        return project_points(
            self.projects[team],
            self.mode,
            self.double_projects,
            multiplier=self.multiplier,
            rules=self.rules,
        )

    def final(self, team: Team) -> int:
        return self.base_value(team) + self.project_points(team)

    # -- validation --

    def _out_of_range(self, team: Team) -> bool:
        value = _parse_int(self.base_text[team])
        return value is not None and not 0 <= value <= self.adjusted_base

    @property
    def validation_error(self) -> Optional[str]:
        if self.is_coffee:
            return None
        if self.auto_complete:
            checked = [Team.THEM] if self.last_edited is EditedSide.THEM else [Team.US]
        else:
            checked = [Team.US, Team.THEM]
        if any(self._out_of_range(team) for team in checked):
            return f"Base points must be between 0 and {self.adjusted_base}."
        return None

    @property
    def sums_mismatch(self) -> bool:
        """Manual entry whose two bases do not add up to the hand value."""
        if self.auto_complete or self.is_coffee:
            return False
        return self.base_value(Team.US) + self.base_value(Team.THEM) != self.adjusted_base

    @property
    def is_valid(self) -> bool:
        if self.is_coffee:
            return self.instant_winner is not None
        if self.validation_error is not None:
            return False
        return all(_parse_int(self.base_text[team]) is not None for team in Team)

    # -- edits --

    def set_mode(self, mode: Mode) -> None:
        self.mode = mode
        for team in Team:
            self.projects[team] = {p for p in self.projects[team] if self.rules.is_available(p, mode)}
        self._recompute()

    def set_multiplier(self, multiplier: MultiplierOption) -> None:
        self.multiplier = multiplier
        if not multiplier.is_instant:
            self.instant_winner = None
        self._recompute()

    def set_auto_complete(self, enabled: bool) -> None:
        self.auto_complete = enabled
        self._recompute()

    def set_instant_winner(self, team: Optional[Team]) -> None:
        self.instant_winner = team

    def edit_base(self, team: Team, text: str) -> None:
        """User typed ``text`` into ``team``'s base field."""
        self.last_edited = EditedSide(team.value)
        self.base_text[team] = text
        if self.auto_complete:
            self._complete_from(team)

    def toggle_project(self, team: Team, project: ProjectType) -> None:
        if not self.rules.is_available(project, self.mode):
            return
        mine = self.projects[team]
        if project in mine:
            mine.discard(project)
            return
        if not self.rules.is_shared(project, self.mode):
            self.projects[team.other].discard(project)
        mine.add(project)

    def _recompute(self) -> None:
        if not self.auto_complete or self.is_coffee:
            return
        if self.last_edited is EditedSide.US:
            self._complete_from(Team.US)
        elif self.last_edited is EditedSide.THEM:
            self._complete_from(Team.THEM)

    def _complete_from(self, team: Team) -> None:
        remaining = self.adjusted_base - (_parse_int(self.base_text[team]) or 0)
        self.base_text[team.other] = str(remaining) if remaining >= 0 else ""

    # -- output --

    def to_inputs(self) -> RoundInputs:
        return RoundInputs(
            mode=self.mode,
            multiplier=self.multiplier,
            base_us=self.base_value(Team.US),
            base_them=self.base_value(Team.THEM),
            projects_us=frozenset(self.projects[Team.US]),
            projects_them=frozenset(self.projects[Team.THEM]),
            double_projects=self.double_projects,
            instant_winner=self.instant_winner if self.is_coffee else None,
            auto_complete=self.auto_complete,
        )

    def build_round(self) -> Round:
        return build_round(self.to_inputs(), rules=self.rules)


__all__ = ["EditedSide", "RoundDraft"]
