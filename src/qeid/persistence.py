"""
Match serialization.

Converts a Match to and from JSON-compatible dicts, JSON strings, and UTF-8
bytes. Decoding is best-effort: missing optional fields fall back to
defaults, and anything unreadable raises ``DecodeFailure``.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

from .errors import DecodeFailure
from .models import Match, Round
from .rules import STANDARD_RULES, Mode, MultiplierOption, ProjectType, Team

SCHEMA_VERSION = 1


def _projects_to_list(projects: Iterable[ProjectType]) -> List[str]:
    return sorted(p.value for p in projects)


def _team_or_none(value: Any) -> Team | None:
    return Team(value) if value else None


def _round_to_dict(r: Round) -> Dict[str, Any]:
    return {
        "id": r.id,
        "sequence_index": r.sequence_index,
        "created_at": r.created_at.isoformat(),
        "mode": r.mode.value,
        "multiplier": r.multiplier.value,
        "auto_complete_used": r.auto_complete_used,
        "double_projects_enabled": r.double_projects_enabled,
        "projects_us": _projects_to_list(r.projects_us),
        "projects_them": _projects_to_list(r.projects_them),
        "base_us": r.base_us,
        "base_them": r.base_them,
        "base_adjusted": r.base_adjusted,
        "project_points_us": r.project_points_us,
        "project_points_them": r.project_points_them,
        "final_us": r.final_us,
        "final_them": r.final_them,
        "instant_winner": r.instant_winner.value if r.instant_winner else None,
    }


def _round_from_dict(d: Dict[str, Any]) -> Round:
    base_us = int(d.get("base_us", 0))
    base_them = int(d.get("base_them", 0))
    points_us = int(d.get("project_points_us", 0))
    points_them = int(d.get("project_points_them", 0))
    created = d.get("created_at")
    return Round(
        id=str(d["id"]),
        sequence_index=int(d.get("sequence_index", 0)),
        created_at=datetime.fromisoformat(created) if created else datetime.now(timezone.utc),
        mode=Mode(d["mode"]),
        multiplier=MultiplierOption(d.get("multiplier", MultiplierOption.NORMAL.value)),
        auto_complete_used=bool(d.get("auto_complete_used", False)),
        double_projects_enabled=bool(d.get("double_projects_enabled", False)),
        projects_us=frozenset(ProjectType(p) for p in d.get("projects_us", [])),
        projects_them=frozenset(ProjectType(p) for p in d.get("projects_them", [])),
        base_us=base_us,
        base_them=base_them,
        base_adjusted=int(d.get("base_adjusted", base_us + base_them)),
        project_points_us=points_us,
        project_points_them=points_them,
        final_us=int(d.get("final_us", base_us + points_us)),
        final_them=int(d.get("final_them", base_them + points_them)),
        instant_winner=_team_or_none(d.get("instant_winner")),
    )


def match_to_dict(match: Match) -> Dict[str, Any]:
    """Serialize a Match to a JSON-compatible dict."""
    return {
        "schema_version": SCHEMA_VERSION,
        "saved_at": datetime.now(timezone.utc).isoformat(),
        "target_score": match.target_score,
        "instant_winner": match.instant_winner.value if match.instant_winner else None,
        "top_up_us": match.top_up_us,
        "top_up_them": match.top_up_them,
        "rounds": [_round_to_dict(r) for r in match.rounds],
    }


def match_from_dict(d: Dict[str, Any]) -> Match:
    """
    Deserialize a Match from a dict produced by ``match_to_dict``.

    Raises:
        DecodeFailure: if the payload is not a match or a field is malformed.
    """
    if not isinstance(d, dict):
        raise DecodeFailure(f"Expected a JSON object, got {type(d).__name__}")
    try:
        return Match(
            rounds=[_round_from_dict(rd) for rd in d.get("rounds", [])],
            target_score=int(d.get("target_score", STANDARD_RULES.target_score)),
            instant_winner=_team_or_none(d.get("instant_winner")),
            top_up_us=int(d.get("top_up_us", 0)),
            top_up_them=int(d.get("top_up_them", 0)),
        )
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
        raise DecodeFailure(f"Malformed match data: {e}") from e


def match_to_json(match: Match) -> str:
    """Serialize a Match to a JSON string."""
    return json.dumps(match_to_dict(match), indent=2)


def match_from_json(s: str) -> Match:
    """Deserialize a Match from a JSON string."""
    try:
        payload = json.loads(s)
    except json.JSONDecodeError as e:
        raise DecodeFailure(f"Invalid JSON: {e}") from e
    return match_from_dict(payload)


def serialize(match: Match) -> bytes:
    return match_to_json(match).encode("utf-8")


def deserialize(data: bytes) -> Match:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeFailure(f"Match data is not UTF-8: {e}") from e
    return match_from_json(text)


__all__ = [
    "match_to_dict",
    "match_from_dict",
    "match_to_json",
    "match_from_json",
    "serialize",
    "deserialize",
    "SCHEMA_VERSION",
]
