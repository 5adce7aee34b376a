"""Game state token encoding.

Tokens are compact JSON in URL-safe base64 so they can ride inside a button
value or query string. Keys are deliberately short:

    p / c     player / opponent deck (bottom first)
    pc / cc   last drawn cards
    wp        war pile
    w         war in progress
    g         game status
    n         move count
    t         last move timestamp (epoch ms)
    pn / cn   nuke still available
    tc        total cards in the game
    m / vm    message / victory message      (dropped when minimal)
    nm / av   display name / avatar          (dropped when minimal)

Cards are ``[rank, suit]`` with an optional third element holding flag bits.
"""

import json
import logging
from typing import Any

from itsdangerous import BadData
from itsdangerous.encoding import base64_decode, base64_encode
from pydantic import BaseModel, ValidationError

from war.cards import Card, Rank, Suit
from war.errors import StateDecodeError
from war.game.state import GameState, GameStatus

logger = logging.getLogger(__name__)

TOKEN_VERSION = 1

FLAG_FACE_DOWN = 1
FLAG_SPECIAL = 2

_SUIT_CODES = {
    Suit.CLUBS: "C",
    Suit.DIAMONDS: "D",
    Suit.HEARTS: "H",
    Suit.SPADES: "S",
}
_CODE_SUITS = {code: suit for suit, code in _SUIT_CODES.items()}

CardData = tuple[int, str] | tuple[int, str, int]


class _TokenPayload(BaseModel):
    """Wire schema of a decoded token."""

    v: int = TOKEN_VERSION
    p: list[CardData]
    c: list[CardData]
    pc: CardData | None = None
    cc: CardData | None = None
    wp: list[CardData] = []
    w: bool = False
    g: str = GameStatus.INITIAL.value
    n: int = 0
    t: int | None = None
    pn: bool = False
    cn: bool = False
    tc: int
    m: str = ""
    vm: str | None = None
    nm: str | None = None
    av: str | None = None


def _card_to_data(card: Card) -> list[Any]:
    flags = (FLAG_FACE_DOWN if card.face_down else 0) | (FLAG_SPECIAL if card.is_special else 0)
    data: list[Any] = [card.rank.value, _SUIT_CODES[card.suit]]
    if flags:
        data.append(flags)
    return data


def _card_from_data(data: CardData) -> Card:
    rank_value, suit_code = data[0], data[1]
    flags = data[2] if len(data) == 3 else 0
    if suit_code not in _CODE_SUITS:
        raise ValueError(f"Invalid suit code: {suit_code}")
    return Card(
        Rank(rank_value),
        _CODE_SUITS[suit_code],
        face_down=bool(flags & FLAG_FACE_DOWN),
        is_special=bool(flags & FLAG_SPECIAL),
    )


def _optional_card(data: CardData | None) -> Card | None:
    return None if data is None else _card_from_data(data)


def to_payload(state: GameState, minimal: bool = False) -> dict[str, Any]:
    """
    Project a state onto the wire dict.

    Args:
        state: State to project
        minimal: Drop display-only fields to shrink the token

    Returns:
        JSON-serializable dict
    """
    payload: dict[str, Any] = {
        "v": TOKEN_VERSION,
        "p": [_card_to_data(c) for c in state.player_deck],
        "c": [_card_to_data(c) for c in state.opponent_deck],
        "pc": _card_to_data(state.player_card) if state.player_card else None,
        "cc": _card_to_data(state.opponent_card) if state.opponent_card else None,
        "wp": [_card_to_data(c) for c in state.war_pile],
        "w": state.war_in_progress,
        "g": state.game_status.value,
        "n": state.move_count,
        "t": state.last_move_timestamp,
        "pn": state.player_nuke_available,
        "cn": state.opponent_nuke_available,
        "tc": state.total_cards,
    }
    if not minimal:
        payload["m"] = state.message
        if state.victory_message is not None:
            payload["vm"] = state.victory_message
        if state.player_name is not None:
            payload["nm"] = state.player_name
        if state.player_avatar is not None:
            payload["av"] = state.player_avatar
    return payload


def from_payload(payload: _TokenPayload) -> GameState:
    """Rebuild a GameState from a validated payload."""
    return GameState(
        player_deck=tuple(_card_from_data(c) for c in payload.p),
        opponent_deck=tuple(_card_from_data(c) for c in payload.c),
        total_cards=payload.tc,
        player_card=_optional_card(payload.pc),
        opponent_card=_optional_card(payload.cc),
        war_pile=tuple(_card_from_data(c) for c in payload.wp),
        message=payload.m,
        victory_message=payload.vm,
        war_in_progress=payload.w,
        game_status=GameStatus(payload.g),
        move_count=payload.n,
        last_move_timestamp=payload.t,
        player_nuke_available=payload.pn,
        opponent_nuke_available=payload.cn,
        player_name=payload.nm,
        player_avatar=payload.av,
    )


def encode(state: GameState, minimal: bool = False) -> str:
    """
    Serialize a state into a transportable token.

    Args:
        state: State to encode
        minimal: Drop display-only fields (message, identity)

    Returns:
        URL-safe base64 string
    """
    raw = json.dumps(to_payload(state, minimal), separators=(",", ":"), ensure_ascii=False)
    return base64_encode(raw.encode("utf-8")).decode("ascii")


def decode(token: str) -> GameState:
    """
    Deserialize a token produced by encode().

    Raises:
        StateDecodeError: The token is not valid base64, JSON, or game state
    """
    if not token:
        raise StateDecodeError("Empty game token")
    try:
        raw = base64_decode(token)
        payload = _TokenPayload.model_validate_json(raw)
        if payload.v != TOKEN_VERSION:
            raise ValueError(f"Unsupported token version: {payload.v}")
        return from_payload(payload)
    except (BadData, ValidationError, ValueError) as e:
        logger.warning("Rejected game token: %s", e)
        raise StateDecodeError(f"Invalid game token: {e}") from e
