"""Token-in, token-out turn pipeline.

Ties the pieces together for stateless callers:

    decode (or deal) → audit → cooldown gate → resolve → audit → encode

Recoverable failures degrade to a fresh or unchanged state; only invariant
violations from a strict checker propagate.

Callers must not submit two moves for the same token concurrently. The
engine has no way to detect that race.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from war import codec
from war.errors import CooldownActiveError, InvalidMoveError, StateDecodeError
from war.game.engine import Move, WarGame
from war.game.events import EventType, GameEvent
from war.game.state import GameState

logger = logging.getLogger(__name__)

RejectReason = Literal["restarted", "invalid", "cooldown"]


@dataclass(frozen=True)
class TurnOutcome:
    """What a stateless caller needs after one request."""

    token: str
    state: GameState
    accepted: bool
    reason: RejectReason | None = None
    detail: str | None = None
    retry_after_ms: int | None = None
    just_ended: bool = False
    events: tuple[GameEvent, ...] = ()


def start_game(
    engine: WarGame,
    player_name: str | None = None,
    player_avatar: str | None = None,
    minimal: bool = False,
) -> TurnOutcome:
    """Deal a new game and encode it."""
    state = engine.new_game(player_name, player_avatar)
    return TurnOutcome(token=codec.encode(state, minimal), state=state, accepted=True)


def play_turn(
    engine: WarGame,
    token: str | None,
    move: Move | None = None,
    now: int | None = None,
    minimal: bool = False,
) -> TurnOutcome:
    """
    Run one move against an encoded game.

    Args:
        engine: Engine holding the rules and checker
        token: Token from the previous response (None deals a new game)
        move: Intent for this turn
        now: Epoch ms of the request
        minimal: Encode the returned token without display fields

    Returns:
        Outcome carrying the token to send back next time
    """
    if token is None:
        return start_game(engine, minimal=minimal)

    try:
        state = codec.decode(token)
    except StateDecodeError as e:
        logger.info("Restarting game after undecodable token")
        engine.events.emit_new(EventType.STATE_RESET, detail=str(e))
        fresh = engine.new_game()
        return TurnOutcome(
            token=codec.encode(fresh, minimal),
            state=fresh,
            accepted=False,
            reason="restarted",
            detail=str(e),
        )

    try:
        result = engine.apply_move(state, move, now=now)
    except CooldownActiveError as e:
        return TurnOutcome(
            token=codec.encode(state, minimal),
            state=state,
            accepted=False,
            reason="cooldown",
            detail=str(e),
            retry_after_ms=e.retry_after_ms,
        )
    except InvalidMoveError as e:
        return TurnOutcome(
            token=codec.encode(state, minimal),
            state=state,
            accepted=False,
            reason="invalid",
            detail=str(e),
        )

    return TurnOutcome(
        token=codec.encode(result.state, minimal),
        state=result.state,
        accepted=True,
        just_ended=result.just_ended,
        events=result.events,
    )
