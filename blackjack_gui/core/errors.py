"""Errors raised by round actions."""
from __future__ import annotations


class GameError(Exception):
    """Base class for recoverable, action-scoped game errors."""


class InsufficientFunds(GameError):
    def __init__(self, requested: int, available: int) -> None:
        super().__init__(f"Insufficient funds: need {requested}, have {available}")
        self.requested = requested
        self.available = available


class InvalidAction(GameError):
    """The action is not legal in the current stage or hand state."""


class ActionInProgress(InvalidAction):
    """Another action is still resolving; retry once it finishes."""

    def __init__(self, action: str = "action") -> None:
        super().__init__(f"Cannot {action}: another action is in progress")
        self.action = action


__all__ = ["GameError", "InsufficientFunds", "InvalidAction", "ActionInProgress"]
