"""Core War engine - 100% UI-agnostic."""

from war.cards import Card, Rank, Suit, build_deck, shuffle
from war.errors import (
    CooldownActiveError,
    InvalidMoveError,
    InvariantViolationError,
    StateDecodeError,
    WarError,
)

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "build_deck",
    "shuffle",
    "WarError",
    "StateDecodeError",
    "InvalidMoveError",
    "CooldownActiveError",
    "InvariantViolationError",
]
