"""Baloot scorekeeping engine (Sun/Hokom, multipliers, projects, coffee)."""

__version__ = "0.1.0"

from .errors import DecodeFailure, InvalidInput, PersistFailure, QeidError
from .rules import (
    CLASSIC_RULES,
    STANDARD_RULES,
    Mode,
    MultiplierOption,
    ProjectType,
    RuleConfig,
    Team,
    get_rules,
)
from .models import Match, MatchState, Round
from .scoring import RoundInputs, adjusted_base, build_round, project_points
from .draft import EditedSide, RoundDraft
from .persistence import deserialize, serialize
from .storage import MatchStore
from .engine import MatchEngine
from .rating import RatingPrompter
