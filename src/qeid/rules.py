"""
Baloot rule table: modes, multipliers, projects and teams.

Sun (primary mode) is worth 26 base points per hand, Hokom (secondary mode)
16. A hand may be played at x2/x3/x4 or as a "coffee" (qahwah) hand, which is
worth 5x and ends the match immediately for the declared winner.

All numbers live in ``RuleConfig`` so alternate house rules can be selected
at startup by preset name.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, Mapping


class Mode(str, Enum):
    """Game mode of a hand."""
    SUN = "sun"      # primary
    HOKOM = "hokom"  # secondary (trumps)

    @property
    def label(self) -> str:
        return MODE_NAMES[self]


class MultiplierOption(str, Enum):
    """Per-hand scaling. COFFEE is the instant-win multiplier."""
    NORMAL = "normal"
    X2 = "x2"
    X3 = "x3"
    X4 = "x4"
    COFFEE = "coffee"

    @property
    def label(self) -> str:
        return MULTIPLIER_NAMES[self]

    @property
    def is_instant(self) -> bool:
        return self is MultiplierOption.COFFEE


class ProjectType(str, Enum):
    """Bonus combinations ("mashari") a team may declare."""
    SARA = "sara"
    P50 = "p50"
    P100 = "p100"
    P400 = "p400"
    BALOOT = "baloot"  # Hokom only

    @property
    def label(self) -> str:
        return PROJECT_NAMES[self]

    def points(self, mode: Mode, rules: "RuleConfig | None" = None) -> int:
        """Undoubled points for this project in ``mode`` (0 when unavailable)."""
        return (rules or STANDARD_RULES).project_points(self, mode)

    def is_available(self, mode: Mode, rules: "RuleConfig | None" = None) -> bool:
        return (rules or STANDARD_RULES).is_available(self, mode)


class Team(str, Enum):
    US = "us"
    THEM = "them"

    @property
    def label(self) -> str:
        return TEAM_NAMES[self]

    @property
    def other(self) -> "Team":
        return Team.THEM if self is Team.US else Team.US


MODE_NAMES = {
    Mode.SUN: "Sun",
    Mode.HOKOM: "Hokom",
}

MULTIPLIER_NAMES = {
    MultiplierOption.NORMAL: "Normal",
    MultiplierOption.X2: "x2",
    MultiplierOption.X3: "x3",
    MultiplierOption.X4: "x4",
    MultiplierOption.COFFEE: "Coffee (Qahwah)",
}

PROJECT_NAMES = {
    ProjectType.SARA: "Sara",
    ProjectType.P50: "50",
    ProjectType.P100: "100",
    ProjectType.P400: "400",
    ProjectType.BALOOT: "Baloot",
}

TEAM_NAMES = {
    Team.US: "Us",
    Team.THEM: "Them",
}

# How "double projects" scales project points.
DOUBLE_FIXED = "fixed"                # always double_projects_multiplier
DOUBLE_SAME_AS_HAND = "same_as_hand"  # the hand's own multiplier value


def _standard_sun_table() -> Dict[ProjectType, int]:
    return {
        ProjectType.SARA: 4,
        ProjectType.P50: 10,
        ProjectType.P100: 20,
        ProjectType.P400: 40,
    }


def _standard_hokom_table() -> Dict[ProjectType, int]:
    return {
        ProjectType.SARA: 2,
        ProjectType.P50: 5,
        ProjectType.P100: 10,
        ProjectType.P400: 20,
        ProjectType.BALOOT: 2,
    }


def _default_restrictions() -> Dict[ProjectType, Mode]:
    return {ProjectType.BALOOT: Mode.HOKOM}


@dataclass(frozen=True)
class RuleConfig:
    """Scoring constants for one rule variant."""

    name: str = "standard"
    sun_base: int = 26
    hokom_base: int = 16
    target_score: int = 152
    instant_multiplier_value: int = 5
    double_projects_multiplier: int = 2
    double_projects_mode: str = DOUBLE_FIXED  # "fixed" | "same_as_hand"
    baloot_double_exempt: bool = True
    sun_projects: Mapping[ProjectType, int] = field(default_factory=_standard_sun_table)
    hokom_projects: Mapping[ProjectType, int] = field(default_factory=_standard_hokom_table)
    # project -> the only mode it may be declared in
    restricted_projects: Mapping[ProjectType, Mode] = field(default_factory=_default_restrictions)

    def __hash__(self) -> int:
        # The project tables are dicts; hash their items instead.
        return hash(tuple(
            frozenset(value.items()) if isinstance(value, Mapping) else value
            for value in (getattr(self, f.name) for f in fields(self))
        ))

    def base_score(self, mode: Mode) -> int:
        return self.sun_base if mode is Mode.SUN else self.hokom_base

    def multiplier_value(self, option: MultiplierOption) -> int:
        if option is MultiplierOption.COFFEE:
            return self.instant_multiplier_value
        return {
            MultiplierOption.NORMAL: 1,
            MultiplierOption.X2: 2,
            MultiplierOption.X3: 3,
            MultiplierOption.X4: 4,
        }[option]

    def is_available(self, project: ProjectType, mode: Mode) -> bool:
        only_in = self.restricted_projects.get(project)
        return only_in is None or only_in is mode

    def is_shared(self, project: ProjectType, mode: Mode) -> bool:
        """True if both teams may hold ``project`` in ``mode`` (baloot in Hokom)."""
        return self.restricted_projects.get(project) is mode

    def project_points(self, project: ProjectType, mode: Mode) -> int:
        if not self.is_available(project, mode):
            return 0
        table = self.sun_projects if mode is Mode.SUN else self.hokom_projects
        return table.get(project, 0)

    def doubling_factor(self, multiplier: MultiplierOption) -> int:
        """Factor applied to each doubled project for a hand played at ``multiplier``."""
        if self.double_projects_mode == DOUBLE_SAME_AS_HAND:
            return self.multiplier_value(multiplier)
        return self.double_projects_multiplier

    def is_double_exempt(self, project: ProjectType) -> bool:
        return self.baloot_double_exempt and project is ProjectType.BALOOT


STANDARD_RULES = RuleConfig()

# Flat project values, doubled by the hand's own multiplier.
CLASSIC_RULES = RuleConfig(
    name="classic",
    double_projects_mode=DOUBLE_SAME_AS_HAND,
    baloot_double_exempt=False,
    sun_projects={
        ProjectType.SARA: 0,
        ProjectType.P50: 50,
        ProjectType.P100: 100,
        ProjectType.P400: 400,
    },
    hokom_projects={
        ProjectType.SARA: 0,
        ProjectType.P50: 50,
        ProjectType.P100: 100,
        ProjectType.P400: 400,
        ProjectType.BALOOT: 20,
    },
)

RULE_PRESETS: Dict[str, RuleConfig] = {
    STANDARD_RULES.name: STANDARD_RULES,
    CLASSIC_RULES.name: CLASSIC_RULES,
}


def get_rules(name: str) -> RuleConfig:
    """Look up a rule preset by name."""
    try:
        return RULE_PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown rules preset {name!r}; expected one of {sorted(RULE_PRESETS)}."
        ) from None


__all__ = [
    "Mode",
    "MultiplierOption",
    "ProjectType",
    "Team",
    "MODE_NAMES",
    "MULTIPLIER_NAMES",
    "PROJECT_NAMES",
    "TEAM_NAMES",
    "DOUBLE_FIXED",
    "DOUBLE_SAME_AS_HAND",
    "RuleConfig",
    "STANDARD_RULES",
    "CLASSIC_RULES",
    "RULE_PRESETS",
    "get_rules",
]
