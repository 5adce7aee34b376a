"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


# Game schemas
class NewGameRequest(BaseModel):
    """Request to deal a new game."""

    player_name: str | None = Field(default=None, max_length=64)
    player_avatar: str | None = Field(default=None, max_length=512)
    minimal: bool = False


class MoveRequest(BaseModel):
    """Request for a player move."""

    token: str | None = Field(default=None, description="Token from the previous response")
    action: Literal["draw", "nuke"] = "draw"
    player_id: str | None = Field(default=None, max_length=128)
    minimal: bool = False


class CardResponse(BaseModel):
    """Card representation."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    value: int
    label: str
    face_down: bool = False
    is_special: bool = False


class GameStateResponse(BaseModel):
    """Current game state as the renderer sees it."""

    status: str
    player_cards: int
    opponent_cards: int
    player_card: CardResponse | None
    opponent_card: CardResponse | None
    war_pile: list[CardResponse]
    message: str
    victory_message: str | None
    war_in_progress: bool
    move_count: int
    player_name: str | None
    player_avatar: str | None
    can_draw: bool
    can_nuke: bool
    winner: Literal["player", "opponent"] | None


class MoveResponse(BaseModel):
    """Result of a move request."""

    token: str
    state: GameStateResponse
    accepted: bool
    reason: Literal["restarted", "invalid", "cooldown"] | None = None
    detail: str | None = None
    retry_after_ms: int | None = None
    just_ended: bool = False
    outcome: Literal["win", "loss"] | None = None


# Stats schemas
class PlayerStatsResponse(BaseModel):
    """Finished-game totals for a player."""

    player_id: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    games_played: int = 0
    win_rate: float = 0.0
