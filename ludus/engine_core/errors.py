"""
Engine Errors - Contract violations raised by the engine.

All of these signal programming errors (a buggy game, driver or player),
not recoverable runtime conditions. They propagate to the nearest match
boundary and abort that match.
"""

from __future__ import annotations
from typing import Any


class LudusError(Exception):
    """Base class for all engine errors."""


class InvalidAction(LudusError):
    """Raised when an action is not in the legal set for a role."""

    def __init__(self, message: str, role: str | None = None, action: Any = None):
        self.role = role
        self.action = action
        super().__init__(message)


class MissingHap(LudusError):
    """Raised when a contingent state is advanced without its chance outcomes."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing haps for chance variables: {', '.join(missing)}")


class UnexpectedHap(LudusError):
    """Raised when haps are given that the state does not expect."""

    def __init__(self, message: str, haps: dict[str, Any] | None = None):
        self.haps = haps
        super().__init__(message)


class NoLegalActions(LudusError):
    """Raised when a non-terminal state offers no action to an active role."""

    def __init__(self, role: str, state: Any = None):
        self.role = role
        self.state = state
        super().__init__(f"Role {role!r} has no legal actions in {state!r}")


class InvalidDistribution(LudusError):
    """Raised when an aleatory's weights are negative or do not add up to anything."""


class MatchAborted(LudusError):
    """Raised by a match that was aborted before finishing."""

    def __init__(self, reason: str = "aborted"):
        self.reason = reason
        super().__init__(f"Match aborted: {reason}")
