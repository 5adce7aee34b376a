"""Game engine and state management."""

from war.game.events import EventEmitter, EventType, GameEvent, log_event
from war.game.rules import RuleSet
from war.game.state import GameState, GameStatus, Side
from war.game.engine import Move, MoveKind, MoveResult, WarGame, apply_move, initialize_game

__all__ = [
    "EventEmitter",
    "EventType",
    "GameEvent",
    "log_event",
    "RuleSet",
    "GameState",
    "GameStatus",
    "Side",
    "Move",
    "MoveKind",
    "MoveResult",
    "WarGame",
    "apply_move",
    "initialize_game",
]
