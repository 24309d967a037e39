# src/sortscope/errors.py
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .analyze import TrialFailure


class SortscopeError(Exception):
    """Base class for every error raised by sortscope."""


class InvalidConfiguration(SortscopeError, ValueError):
    """Benchmark parameters rejected before any trial runs."""


class PostconditionViolation(SortscopeError, AssertionError):
    """A sort returned something that is not a sorted permutation of its input."""

    def __init__(self, message: str, failure: Optional["TrialFailure"] = None):
        super().__init__(message)
        self.failure = failure


class OutputError(SortscopeError, OSError):
    """Writing a result row failed. Fatal for the run."""
