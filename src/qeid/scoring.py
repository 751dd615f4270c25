"""
Hand scoring: adjusted base, project points, and assembling a ``Round``.

Hand value = base(mode) x multiplier: Sun 26, Hokom 16; x2/x3/x4; coffee 5x.
Projects add per team on top of the base, optionally doubled (baloot keeps its
face value under the standard rules).
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import AbstractSet, FrozenSet, Optional

from .errors import InvalidInput
from .models import Round
from .rules import STANDARD_RULES, Mode, MultiplierOption, ProjectType, RuleConfig, Team

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundInputs:
    """Resolved user selections for one hand, as handed over by a form or the CLI."""

    mode: Mode
    multiplier: MultiplierOption = MultiplierOption.NORMAL
    base_us: int = 0
    base_them: int = 0
    projects_us: FrozenSet[ProjectType] = field(default_factory=frozenset)
    projects_them: FrozenSet[ProjectType] = field(default_factory=frozenset)
    double_projects: bool = False
    instant_winner: Optional[Team] = None  # only read for coffee hands
    auto_complete: bool = False


def adjusted_base(
    mode: Mode,
    multiplier: MultiplierOption,
    rules: RuleConfig = STANDARD_RULES,
) -> int:
    """Total base points at stake in a hand."""
    return rules.base_score(mode) * rules.multiplier_value(multiplier)


def project_points(
    projects: AbstractSet[ProjectType],
    mode: Mode,
    doubled: bool,
    *,
    multiplier: MultiplierOption = MultiplierOption.NORMAL,
    rules: RuleConfig = STANDARD_RULES,
) -> int:
    """
    Points for one team's declared projects.

    Projects unavailable in ``mode`` count 0. ``multiplier`` only matters for
    rule sets that double projects by the hand's own multiplier.
    """
    factor = rules.doubling_factor(multiplier) if doubled else 1
    total = 0
    for project in projects:
        pts = rules.project_points(project, mode)
        if doubled and not rules.is_double_exempt(project):
            pts *= factor
        total += pts
    return total


def _check_available(projects: AbstractSet[ProjectType], mode: Mode, rules: RuleConfig) -> None:
    bad = sorted(p.value for p in projects if not rules.is_available(p, mode))
    if bad:
        raise InvalidInput(f"Projects {bad} are not available in {mode.label}")


def build_round(
    inputs: RoundInputs,
    *,
    rules: RuleConfig = STANDARD_RULES,
    sequence_index: int = 0,
) -> Round:
    """
    Score a hand.

    For a coffee hand with a declared winner, the winner takes the whole
    adjusted base and the other team's base is 0 (entered bases are ignored).
    Otherwise the entered bases are used as given; a mismatch with the hand
    value is logged but accepted.
    """
    _check_available(inputs.projects_us, inputs.mode, rules)
    _check_available(inputs.projects_them, inputs.mode, rules)

    base_adj = adjusted_base(inputs.mode, inputs.multiplier, rules)
    points = {
        team: project_points(
            projects,
            inputs.mode,
            inputs.double_projects,
            multiplier=inputs.multiplier,
            rules=rules,
        )
        for team, projects in ((Team.US, inputs.projects_us), (Team.THEM, inputs.projects_them))
    }

    winner = inputs.instant_winner if inputs.multiplier.is_instant else None
    if winner is not None:
        base_us = base_adj if winner is Team.US else 0
        base_them = base_adj if winner is Team.THEM else 0
    else:
        base_us, base_them = inputs.base_us, inputs.base_them
        if base_us + base_them != base_adj:
            logger.warning(
                "Round bases %d + %d do not add up to %d (%s %s)",
                base_us,
                base_them,
                base_adj,
                inputs.mode.value,
                inputs.multiplier.value,
            )

    return Round(
        id=uuid.uuid4().hex,
        sequence_index=sequence_index,
        mode=inputs.mode,
        multiplier=inputs.multiplier,
        auto_complete_used=inputs.auto_complete,
        double_projects_enabled=inputs.double_projects,
        projects_us=frozenset(inputs.projects_us),
        projects_them=frozenset(inputs.projects_them),
        base_us=base_us,
        base_them=base_them,
        base_adjusted=base_adj,
        project_points_us=points[Team.US],
        project_points_them=points[Team.THEM],
        final_us=base_us + points[Team.US],
        final_them=base_them + points[Team.THEM],
        instant_winner=winner,
    )


__all__ = ["RoundInputs", "adjusted_base", "project_points", "build_round"]
