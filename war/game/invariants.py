"""Card conservation audit."""

import logging
from collections import Counter

from war.cards import Rank
from war.errors import InvariantViolationError
from war.game.events import EventEmitter, EventType
from war.game.state import GameState

logger = logging.getLogger(__name__)


def in_play_count(state: GameState) -> int:
    """
    Count drawn cards not yet placed in a deck or the war pile.

    player_card / opponent_card are echoed for display after being
    placed, so only cards missing from every zone count here.
    """
    placed = {
        card.identity
        for zone in (state.player_deck, state.opponent_deck, state.war_pile)
        for card in zone
    }
    return sum(
        1
        for card in (state.player_card, state.opponent_card)
        if card is not None and card.identity not in placed
    )


def card_count(state: GameState) -> int:
    """Total cards across all zones."""
    return (
        len(state.player_deck)
        + len(state.opponent_deck)
        + len(state.war_pile)
        + in_play_count(state)
    )


def _duplicates(state: GameState) -> list[str]:
    counts = Counter(
        card.identity
        for zone in (state.player_deck, state.opponent_deck, state.war_pile)
        for card in zone
    )
    return sorted(f"{Rank(rank)}{suit}" for (rank, suit, _), n in counts.items() if n > 1)


def verify_card_count(state: GameState) -> bool:
    """
    Check card conservation for a state.

    Logs a structured diagnostic on mismatch or duplicated cards.

    Returns:
        True if every card is accounted for exactly once
    """
    actual = card_count(state)
    duplicates = _duplicates(state)
    if actual == state.total_cards and not duplicates:
        return True

    logger.error(
        "Card conservation violated: expected %d, found %d",
        state.total_cards,
        actual,
        extra={
            "expected": state.total_cards,
            "actual": actual,
            "player_deck": len(state.player_deck),
            "opponent_deck": len(state.opponent_deck),
            "war_pile": len(state.war_pile),
            "in_play": in_play_count(state),
            "duplicates": duplicates,
            "move_count": state.move_count,
            "game_status": state.game_status.value,
        },
    )
    return False


class InvariantChecker:
    """
    Runs the conservation audit around every mutation.

    Strict checkers raise InvariantViolationError. Lenient checkers report
    to the emitter and let the call continue; the state is never repaired.
    """

    def __init__(self, strict: bool = True, emitter: EventEmitter | None = None) -> None:
        self.strict = strict
        self.emitter = emitter or EventEmitter()

    def check(self, state: GameState, context: str = "") -> bool:
        """
        Audit a state.

        Args:
            state: State to audit
            context: Where in the move pipeline the audit runs

        Returns:
            True if the state is sound (lenient mode returns False on violation)
        """
        if verify_card_count(state):
            return True

        actual = card_count(state)
        self.emitter.emit_new(
            EventType.INVARIANT_VIOLATION,
            context=context,
            expected=state.total_cards,
            actual=actual,
            move_count=state.move_count,
        )
        if self.strict:
            raise InvariantViolationError(
                f"Card conservation violated {context}".strip(),
                expected=state.total_cards,
                actual=actual,
            )
        logger.warning("Continuing after invariant violation %s", context)
        return False
