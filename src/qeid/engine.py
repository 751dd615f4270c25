"""
Match engine: the single owner of the current Match.

All edits go through ``MatchEngine`` so the coffee state, sequence indices and
redo history stay consistent:

- ``add_round`` / ``submit`` append a hand and drop the redo history
- ``undo_last_round`` / ``redo_last_round`` move hands to and from a bounded
  redo stack
- ``delete_round`` removes a hand anywhere in the list
- ``reset_match`` starts over

After each edit the match is saved through the optional store; a failed save
is logged and the in-memory match stays authoritative. Listeners are called
with the match each time it becomes won, at most once per winning hand.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Iterable, List, Optional, Set

from .errors import PersistFailure
from .models import Match, MatchState, Round
from .rules import STANDARD_RULES, RuleConfig
from .scoring import RoundInputs, build_round
from .storage import MatchStore

logger = logging.getLogger(__name__)

WinListener = Callable[[Match], None]

DEFAULT_REDO_LIMIT = 100


class MatchEngine:
    """Applies round edits to a Match and tracks undo/redo and win transitions."""

    def __init__(
        self,
        match: Optional[Match] = None,
        *,
        rules: RuleConfig = STANDARD_RULES,
        store: Optional[MatchStore] = None,
        listeners: Iterable[WinListener] = (),
        redo_limit: int = DEFAULT_REDO_LIMIT,
    ) -> None:
        self.rules = rules
        self.store = store
        self._match = match if match is not None else Match(target_score=rules.target_score)
        self._redo: Deque[Round] = deque(maxlen=redo_limit)
        self._listeners: List[WinListener] = list(listeners)
        # Ids of rounds whose win has already been reported to listeners.
        self._counted_wins: Set[str] = set()
        decided_by = self._match.winning_round()
        if decided_by is not None:
            self._counted_wins.add(decided_by.id)
        self.show_winner = False

    @classmethod
    def from_store(
        cls,
        store: MatchStore,
        *,
        rules: RuleConfig = STANDARD_RULES,
        listeners: Iterable[WinListener] = (),
        redo_limit: int = DEFAULT_REDO_LIMIT,
    ) -> "MatchEngine":
        """Create an engine around the match saved in ``store`` (or a new one)."""
        match = store.load(rules)
        match.reindex()
        match.recalculate_instant_state()
        return cls(match, rules=rules, store=store, listeners=listeners, redo_limit=redo_limit)

    @property
    def match(self) -> Match:
        return self._match

    @property
    def state(self) -> MatchState:
        return self._match.state

    @property
    def can_undo(self) -> bool:
        return bool(self._match.rounds)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def add_listener(self, listener: WinListener) -> None:
        self._listeners.append(listener)

    def submit(self, inputs: RoundInputs) -> Round:
        """Score ``inputs`` with the engine's rules and add the resulting round."""
        return self.add_round(build_round(inputs, rules=self.rules))

    def add_round(self, round: Round) -> Round:
        """Append ``round`` as the next hand; returns the stored (re-indexed) round."""
        was_won = self._match.winner is not None
        stored = round.with_index(len(self._match.rounds) + 1)
        self._match.rounds.append(stored)
        self._redo.clear()
        if stored.is_instant_win:
            self._match.apply_instant_win(stored.instant_winner)
        logger.debug("Added round %d (%s)", stored.sequence_index, stored.id)
        self._persist()
        self._after_forward(stored, was_won)
        return stored

    def delete_round(self, round_id: str) -> bool:
        """Remove the round with ``round_id``. Unknown ids are ignored (returns False)."""
        before = len(self._match.rounds)
        self._match.rounds = [r for r in self._match.rounds if r.id != round_id]
        if len(self._match.rounds) == before:
            return False
        self._match.reindex()
        self._match.recalculate_instant_state()
        logger.debug("Deleted round %s", round_id)
        self._persist()
        return True

    def undo_last_round(self) -> Optional[Round]:
        """Move the last round onto the redo stack. Returns it, or None if there was none."""
        if not self._match.rounds:
            return None
        last = self._match.rounds.pop()
        self._redo.append(last)
        self._match.recalculate_instant_state()
        logger.debug("Undid round %d (%s)", last.sequence_index, last.id)
        self._persist()
        return last

    def redo_last_round(self) -> Optional[Round]:
        """Re-append the most recently undone round. Returns it, or None if there was none."""
        if not self._redo:
            return None
        was_won = self._match.winner is not None
        stored = self._redo.pop().with_index(len(self._match.rounds) + 1)
        self._match.rounds.append(stored)
        if stored.is_instant_win:
            self._match.apply_instant_win(stored.instant_winner)
        logger.debug("Redid round %d (%s)", stored.sequence_index, stored.id)
        self._persist()
        self._after_forward(stored, was_won)
        return stored

    def reset_match(self) -> None:
        """Start a new empty match, dropping all history."""
        self._match = Match(target_score=self.rules.target_score)
        self._redo.clear()
        self._counted_wins.clear()
        self.show_winner = False
        logger.debug("Match reset")
        self._persist()

    def dismiss_winner(self) -> None:
        self.show_winner = False

    def _after_forward(self, stored: Round, was_won: bool) -> None:
        winner = self._match.winner
        if winner is None or was_won:
            return
        self.show_winner = True
        if stored.id in self._counted_wins:
            return
        self._counted_wins.add(stored.id)
        logger.info(
            "Match won by %s (%d - %d)",
            winner.value,
            self._match.total_us,
            self._match.total_them,
        )
        for listener in list(self._listeners):
            try:
                listener(self._match)
            except Exception:
                logger.exception("Win listener %r failed", listener)

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(self._match)
        except PersistFailure:
            logger.warning("Match not saved; keeping in-memory state", exc_info=True)


__all__ = ["MatchEngine", "WinListener", "DEFAULT_REDO_LIMIT"]
