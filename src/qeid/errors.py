"""Exceptions raised by the scoring core and its persistence layer."""
from __future__ import annotations


class QeidError(Exception):
    """Base class for all Qeid errors."""


class InvalidInput(QeidError, ValueError):
    """Round inputs that cannot be scored (e.g. a project unavailable in the mode)."""


class DecodeFailure(QeidError, ValueError):
    """Persisted match data could not be decoded."""


class PersistFailure(QeidError, OSError):
    """The match could not be written to disk."""


__all__ = ["QeidError", "InvalidInput", "DecodeFailure", "PersistFailure"]
