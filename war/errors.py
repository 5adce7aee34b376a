"""Exceptions raised by the War engine."""


class WarError(Exception):
    """Base class for all engine errors."""


class StateDecodeError(WarError):
    """A game token could not be decoded; the caller should start a fresh game."""


class InvalidMoveError(WarError):
    """The requested move is not allowed in the current state."""


class CooldownActiveError(WarError):
    """A move arrived before the cooldown period elapsed."""

    def __init__(self, retry_after_ms: int) -> None:
        super().__init__(f"Move rejected, retry in {retry_after_ms}ms")
        self.retry_after_ms = retry_after_ms


class InvariantViolationError(WarError):
    """Card conservation was broken. Indicates a logic defect, never user error."""

    def __init__(self, message: str, expected: int, actual: int) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual
