"""
Local JSON file storage for the current match.

The store is a thin wrapper over ``qeid.persistence``: ``save`` writes the
whole match atomically (temp file + rename), ``load`` returns a fresh empty
Match when the file is missing or unreadable.
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from .errors import DecodeFailure, PersistFailure
from .models import Match
from .persistence import deserialize, serialize
from .rules import STANDARD_RULES, RuleConfig

logger = logging.getLogger(__name__)

DEFAULT_MATCH_FILE = "current_match.json"


class MatchStore:
    """Reads and writes one match file."""

    def __init__(self, path: Path | str = DEFAULT_MATCH_FILE) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, match: Match) -> None:
        """
        Write ``match`` to ``self.path``.

        Raises:
            PersistFailure: if the file or its directory cannot be written.
        """
        data = serialize(match)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistFailure(f"Could not save match to {self.path}: {e}") from e

    def load(self, rules: RuleConfig = STANDARD_RULES) -> Match:
        """Load the saved match, or a new empty one (targeting ``rules``) if there is none."""
        if not self.path.exists():
            return Match(target_score=rules.target_score)
        try:
            data = self.path.read_bytes()
        except OSError:
            logger.warning("Could not read %s; starting a new match", self.path, exc_info=True)
            return Match(target_score=rules.target_score)
        try:
            return deserialize(data)
        except DecodeFailure as e:
            logger.warning("Saved match %s is unreadable (%s); starting a new match", self.path, e)
            return Match(target_score=rules.target_score)

    def clear(self) -> None:
        """Delete the match file if present."""
        self.path.unlink(missing_ok=True)


__all__ = ["MatchStore", "DEFAULT_MATCH_FILE"]
