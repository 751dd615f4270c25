"""
Round and Match: the scoring record of one hand and the running game.

A ``Round`` is immutable once built by ``qeid.scoring.build_round``; only its
``sequence_index`` changes, by copying, when the match is re-ordered.

A ``Match`` never stores its winner. Totals and the winner are derived from
``rounds`` plus the coffee (instant-win) state, which is itself re-derived
from ``rounds`` whenever rounds are removed.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, List, Optional

from .rules import STANDARD_RULES, Mode, MultiplierOption, ProjectType, Team


class MatchState(str, Enum):
    EMPTY = "empty"
    IN_PROGRESS = "in_progress"
    WON = "won"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Round:
    """Fully resolved score of one hand."""

    id: str
    mode: Mode
    multiplier: MultiplierOption
    base_us: int
    base_them: int
    base_adjusted: int
    final_us: int
    final_them: int
    project_points_us: int = 0
    project_points_them: int = 0
    projects_us: FrozenSet[ProjectType] = frozenset()
    projects_them: FrozenSet[ProjectType] = frozenset()
    auto_complete_used: bool = False
    double_projects_enabled: bool = False
    instant_winner: Optional[Team] = None
    sequence_index: int = 0  # 1-based position in the match
    created_at: datetime = field(default_factory=_utcnow, compare=False)

    @property
    def is_instant_win(self) -> bool:
        """True for a coffee hand with a declared winner."""
        return self.multiplier is MultiplierOption.COFFEE and self.instant_winner is not None

    @property
    def sums_match(self) -> bool:
        """Whether the two bases add up to the hand's value (always True for coffee wins)."""
        if self.is_instant_win:
            return True
        return self.base_us + self.base_them == self.base_adjusted

    def final_for(self, team: Team) -> int:
        return self.final_us if team is Team.US else self.final_them

    def base_for(self, team: Team) -> int:
        return self.base_us if team is Team.US else self.base_them

    def projects_for(self, team: Team) -> FrozenSet[ProjectType]:
        return self.projects_us if team is Team.US else self.projects_them

    def with_index(self, sequence_index: int) -> "Round":
        if sequence_index == self.sequence_index:
            return self
        return replace(self, sequence_index=sequence_index)


@dataclass
class Match:
    """
    Ordered rounds of one game plus the coffee top-up state.

    Coffee wins are applied as a top-up: the winner's raw total is padded up
    to ``target_score`` (``top_up_us``/``top_up_them``) so the displayed score
    reaches the target, and ``instant_winner`` is kept alongside so the coffee
    winner also beats an opponent whose own total happens to be higher.
    """

    rounds: List[Round] = field(default_factory=list)
    target_score: int = STANDARD_RULES.target_score
    instant_winner: Optional[Team] = None
    top_up_us: int = 0
    top_up_them: int = 0

    def raw_total(self, team: Team, upto: int | None = None) -> int:
        """Sum of final scores for ``team`` over ``rounds[:upto]``."""
        rounds = self.rounds if upto is None else self.rounds[:upto]
        return sum(r.final_for(team) for r in rounds)

    def top_up(self, team: Team) -> int:
        return self.top_up_us if team is Team.US else self.top_up_them

    def total(self, team: Team) -> int:
        return self.raw_total(team) + self.top_up(team)

    @property
    def total_us(self) -> int:
        return self.total(Team.US)

    @property
    def total_them(self) -> int:
        return self.total(Team.THEM)

    @property
    def winner(self) -> Optional[Team]:
        if self.instant_winner is not None:
            return self.instant_winner
        us, them = self.total_us, self.total_them
        us_won = us >= self.target_score
        them_won = them >= self.target_score
        if us_won and them_won:
            # TODO: confirm the exact-tie rule with players; us wins for now.
            return Team.US if us >= them else Team.THEM
        if us_won:
            return Team.US
        if them_won:
            return Team.THEM
        return None

    @property
    def state(self) -> MatchState:
        if self.winner is not None:
            return MatchState.WON
        if self.rounds:
            return MatchState.IN_PROGRESS
        return MatchState.EMPTY

    def winning_round(self) -> Optional[Round]:
        """The hand that decided the match: the last coffee win, else the first hand reaching the target."""
        if self.winner is None:
            return None
        if self.instant_winner is not None:
            for r in reversed(self.rounds):
                if r.is_instant_win:
                    return r
        for pos, r in enumerate(self.rounds, start=1):
            if max(self.raw_total(Team.US, pos), self.raw_total(Team.THEM, pos)) >= self.target_score:
                return r
        return None

    def find_round(self, round_id: str) -> Optional[Round]:
        for r in self.rounds:
            if r.id == round_id:
                return r
        return None

    def reindex(self) -> None:
        """Renumber rounds 1..N in their current order."""
        self.rounds = [r.with_index(i) for i, r in enumerate(self.rounds, start=1)]

    def clear_instant_state(self) -> None:
        self.instant_winner = None
        self.top_up_us = 0
        self.top_up_them = 0

    def apply_instant_win(self, winner: Team, upto: int | None = None) -> None:
        """
        Make ``winner`` the coffee winner.

        ``upto`` is the number of leading rounds counted towards the top-up
        (defaults to all rounds, i.e. the coffee hand is the last one).
        Only one top-up is active at a time.
        """
        self.clear_instant_state()
        needed = max(0, self.target_score - self.raw_total(winner, upto))
        if winner is Team.US:
            self.top_up_us = needed
        else:
            self.top_up_them = needed
        self.instant_winner = winner

    def recalculate_instant_state(self) -> None:
        """Re-derive the coffee state from the last coffee win still in ``rounds``."""
        self.clear_instant_state()
        for pos in range(len(self.rounds) - 1, -1, -1):
            r = self.rounds[pos]
            if r.is_instant_win:
                self.apply_instant_win(r.instant_winner, upto=pos + 1)
                return

    def share_text(self) -> str:
        return f"{Team.US.label} {self.total_us} - {Team.THEM.label} {self.total_them}"


__all__ = ["Match", "MatchState", "Round"]
