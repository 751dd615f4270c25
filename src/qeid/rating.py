"""
Rating prompt collaborator.

Counts completed games and asks for a review after the 3rd, 10th and 25th.
Register ``RatingPrompter.record_game_completed`` (or the prompter itself,
which is callable) as a MatchEngine win listener.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, Optional

from .models import Match

logger = logging.getLogger(__name__)

PROMPT_MILESTONES = frozenset({3, 10, 25})


class RatingPrompter:
    def __init__(
        self,
        request_review: Callable[[], None],
        *,
        state_path: Optional[Path | str] = None,
        milestones: Iterable[int] = PROMPT_MILESTONES,
    ) -> None:
        self.request_review = request_review
        self.state_path = Path(state_path) if state_path else None
        self.milestones: FrozenSet[int] = frozenset(milestones)
        self.games_completed = self._load_count()

    def __call__(self, match: Match) -> None:
        self.record_game_completed()

    def record_game_completed(self) -> None:
        self.games_completed += 1
        self._save_count()
        if self.games_completed in self.milestones:
            logger.info("Requesting review after %d completed games", self.games_completed)
            self.request_review()

    def _load_count(self) -> int:
        if self.state_path is None or not self.state_path.exists():
            return 0
        try:
            with self.state_path.open("r", encoding="utf-8") as f:
                return int(json.load(f).get("games_completed", 0))
        except (OSError, ValueError, TypeError, AttributeError, OverflowError):
            logger.warning("Ignoring unreadable rating state %s", self.state_path, exc_info=True)
            return 0

    def _save_count(self) -> None:
        if self.state_path is None:
            return
        try:
            self.state_path.parent.mkdir(parents=True, exist_ok=True)
            with self.state_path.open("w", encoding="utf-8") as f:
                json.dump({"games_completed": self.games_completed}, f)
        except OSError:
            logger.warning("Could not save rating state to %s", self.state_path, exc_info=True)


__all__ = ["RatingPrompter", "PROMPT_MILESTONES"]
