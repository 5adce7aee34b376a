"""Game API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from api.schemas import (
    CardResponse,
    GameStateResponse,
    MoveRequest,
    MoveResponse,
    NewGameRequest,
)
from api.stats_store import StatsStore, get_stats_store
from config import config
from war.cards import Card
from war.game import GameState, Move, MoveKind, Side, WarGame, log_event
from war.game.runner import TurnOutcome, play_turn, start_game

logger = logging.getLogger(__name__)

router = APIRouter()

# Rules and checker are process-wide; games themselves live in the tokens
_engine: WarGame | None = None


def get_engine() -> WarGame:
    """Get or create the engine configured from the environment."""
    global _engine
    if _engine is None:
        _engine = WarGame(
            rules=config.game.rules(),
            strict_invariants=config.game.strict_invariants,
        )
        _engine.subscribe(log_event)
    return _engine


def _card_response(card: Card | None) -> CardResponse | None:
    """Convert a Card to CardResponse."""
    if card is None:
        return None
    return CardResponse(
        rank=str(card.rank),
        suit=str(card.suit),
        value=card.value,
        label=card.label,
        face_down=card.face_down,
        is_special=card.is_special,
    )


def _game_state_response(state: GameState) -> GameStateResponse:
    """Convert game state to response."""
    winner = state.winner
    return GameStateResponse(
        status=state.game_status.value,
        player_cards=len(state.player_deck),
        opponent_cards=len(state.opponent_deck),
        player_card=_card_response(state.player_card),
        opponent_card=_card_response(state.opponent_card),
        war_pile=[_card_response(c) for c in state.war_pile],
        message=state.message,
        victory_message=state.victory_message,
        war_in_progress=state.war_in_progress,
        move_count=state.move_count,
        player_name=state.player_name,
        player_avatar=state.player_avatar,
        can_draw=state.can_draw,
        can_nuke=state.can_nuke,
        winner=winner.value if winner else None,
    )


def _move_response(outcome: TurnOutcome, result: str | None = None) -> MoveResponse:
    return MoveResponse(
        token=outcome.token,
        state=_game_state_response(outcome.state),
        accepted=outcome.accepted,
        reason=outcome.reason,
        detail=outcome.detail,
        retry_after_ms=outcome.retry_after_ms,
        just_ended=outcome.just_ended,
        outcome=result,
    )


@router.post("/new")
async def new_game(
    engine: Annotated[WarGame, Depends(get_engine)],
    request: NewGameRequest | None = None,
) -> MoveResponse:
    """Deal a new game and return its first token."""
    request = request or NewGameRequest()
    outcome = start_game(
        engine,
        player_name=request.player_name,
        player_avatar=request.player_avatar,
        minimal=request.minimal,
    )
    return _move_response(outcome)


@router.post("/move")
async def make_move(
    request: MoveRequest,
    engine: Annotated[WarGame, Depends(get_engine)],
    store: Annotated[StatsStore, Depends(get_stats_store)],
) -> MoveResponse:
    """Apply one move to the game carried by the token."""
    move = Move(kind=MoveKind(request.action), side=Side.PLAYER)
    outcome = play_turn(engine, request.token, move, minimal=request.minimal)

    result = None
    if outcome.just_ended:
        result = "win" if outcome.state.winner is Side.PLAYER else "loss"
        if request.player_id:
            await store.record(request.player_id, result)
            logger.info("Recorded %s for player %s", result, request.player_id)

    return _move_response(outcome, result)
