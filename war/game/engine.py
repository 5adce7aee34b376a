"""War turn-resolution engine with state machine."""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from random import Random
from typing import Callable, NoReturn

from transitions import Machine

from war.cards import Card, build_deck, shuffle
from war.errors import CooldownActiveError, InvalidMoveError
from war.game.events import EventEmitter, EventType, GameEvent
from war.game.rules import RuleSet
from war.game.state import GameState, GameStatus, Side
from war.game.invariants import InvariantChecker
from war.limiter import cooldown_remaining, now_ms

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to War! Draw a card to begin."


class MoveKind(Enum):
    """Actions a side can take on its turn."""

    DRAW = "draw"
    NUKE = "nuke"


@dataclass(frozen=True)
class Move:
    """A side's intent for the next turn."""

    kind: MoveKind = MoveKind.DRAW
    side: Side = Side.PLAYER


@dataclass(frozen=True)
class MoveResult:
    """Outcome of an accepted move."""

    state: GameState
    events: tuple[GameEvent, ...] = ()
    # True only on the move that ended the game
    just_ended: bool = False

    @property
    def winner(self) -> Side | None:
        return self.state.winner


def _winner_text(side: Side) -> str:
    return "You win!" if side is Side.PLAYER else "Computer wins!"


def initialize_game(
    rules: RuleSet | None = None,
    rng: Random | None = None,
    player_name: str | None = None,
    player_avatar: str | None = None,
) -> GameState:
    """
    Deal a fresh game.

    Args:
        rules: Game rules (uses defaults if not provided)
        rng: Random number generator for reproducible deals
        player_name: Display name passed through from the identity service
        player_avatar: Avatar URL passed through from the identity service

    Returns:
        A shuffled game split evenly between the two sides
    """
    rules = rules or RuleSet()
    deck = shuffle(build_deck(rules.include_special_cards), rng)
    midpoint = len(deck) // 2
    return GameState(
        player_deck=tuple(deck[:midpoint]),
        opponent_deck=tuple(deck[midpoint:]),
        total_cards=len(deck),
        message=WELCOME_MESSAGE,
        game_status=GameStatus.INITIAL,
        move_count=0,
        player_nuke_available=rules.include_special_cards,
        opponent_nuke_available=rules.include_special_cards,
        player_name=player_name,
        player_avatar=player_avatar,
    )


class _Turn:
    """
    Mutable working copy of a GameState for the duration of one move.

    The state machine is attached here so the caller-held GameState is
    never touched.
    """

    STATES = [s.value for s in GameStatus]

    TRANSITIONS = [
        {"trigger": "settle", "source": ["initial", "playing", "war"], "dest": "playing"},
        {"trigger": "declare_war", "source": ["initial", "playing"], "dest": "war"},
        {"trigger": "extend_war", "source": "war", "dest": "war"},
        {"trigger": "finish", "source": ["initial", "playing", "war"], "dest": "ended"},
    ]

    def __init__(self, state: GameState, rules: RuleSet, events: EventEmitter) -> None:
        self.origin = state
        self.rules = rules
        self.events = events

        self.decks: dict[Side, list[Card]] = {
            Side.PLAYER: list(state.player_deck),
            Side.OPPONENT: list(state.opponent_deck),
        }
        self.drawn: dict[Side, Card | None] = {
            Side.PLAYER: state.player_card,
            Side.OPPONENT: state.opponent_card,
        }
        self.war_pile: list[Card] = list(state.war_pile)
        self._return_unplaced()
        self.nukes: dict[Side, bool] = {
            Side.PLAYER: state.player_nuke_available,
            Side.OPPONENT: state.opponent_nuke_available,
        }
        self.message = state.message
        self.victory_message: str | None = None
        self.move_number = state.move_count + 1
        self.resolving_war = state.war_in_progress

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial=state.game_status.value,
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def status(self) -> GameStatus:
        return GameStatus(self._machine_state)  # type: ignore[attr-defined]

    def play(self, move: Move) -> None:
        """Resolve one move in place."""
        if self._game_over_on_entry():
            return

        if move.kind is MoveKind.NUKE and self._nuke(move.side):
            return

        self._draw()
        self._check_game_over()

    def build(self, timestamp: int) -> GameState:
        """Freeze the working copy into the next GameState."""
        status = self.status
        return replace(
            self.origin,
            player_deck=tuple(self.decks[Side.PLAYER]),
            opponent_deck=tuple(self.decks[Side.OPPONENT]),
            player_card=self.drawn[Side.PLAYER],
            opponent_card=self.drawn[Side.OPPONENT],
            war_pile=tuple(self.war_pile),
            message=self.message,
            victory_message=self.victory_message,
            war_in_progress=status is GameStatus.WAR,
            game_status=status,
            move_count=self.move_number,
            last_move_timestamp=timestamp,
            player_nuke_available=self.nukes[Side.PLAYER],
            opponent_nuke_available=self.nukes[Side.OPPONENT],
        )

    # Rule steps

    def _game_over_on_entry(self) -> bool:
        empty = [side for side in Side if not self.decks[side]]
        if not empty:
            return False
        winner = self._leader()
        self.message = f"Game Over! {_winner_text(winner)}"
        self.events.emit_new(EventType.GAME_ENDED, winner=winner.value, reason="empty_deck")
        self.finish()
        return True

    def _nuke(self, side: Side) -> bool:
        """Fire a side's nuke. Returns True if it ended the game."""
        self.nukes[side] = False
        target = self.decks[side.other]

        if len(target) <= self.rules.nuke_threshold:
            captured = len(target)
            self._sweep_to(side)
            self.message = f"NUKE! {captured} cards wiped out. {_winner_text(side)}"
            self.events.emit_new(
                EventType.NUKE_USED, side=side.value, captured=captured, outright=True
            )
            self.events.emit_new(EventType.GAME_ENDED, winner=side.value, reason="nuke")
            self.finish()
            return True

        count = self.rules.nuke_capture
        # Bottom of the deck is the start of the list
        captured_cards = target[:count]
        del target[:count]
        self.decks[side][:0] = captured_cards
        self.events.emit_new(
            EventType.NUKE_USED, side=side.value, captured=len(captured_cards), outright=False
        )
        logger.debug("Nuke by %s captured %d cards", side.value, len(captured_cards))

        if not target:
            self.message = f"NUKE! {_winner_text(side)}"
            self.events.emit_new(EventType.GAME_ENDED, winner=side.value, reason="nuke")
            self.finish()
            return True
        return False

    def _draw(self) -> None:
        player_card = self.decks[Side.PLAYER].pop()
        opponent_card = self.decks[Side.OPPONENT].pop()
        self.drawn = {Side.PLAYER: player_card, Side.OPPONENT: opponent_card}
        self.events.emit_new(
            EventType.CARDS_DRAWN,
            player=str(player_card),
            opponent=str(opponent_card),
        )

        if self.resolving_war:
            self._resolve_war(player_card, opponent_card)
            return

        interval = self.rules.forced_war_interval
        forced = interval is not None and self.move_number % interval == 0
        if forced or player_card.value == opponent_card.value:
            if forced:
                self.events.emit_new(EventType.FORCED_WAR, move=self.move_number)
            self._start_war(player_card, opponent_card, forced=forced)
            return

        winner = Side.PLAYER if player_card.value > opponent_card.value else Side.OPPONENT
        self._take(winner, [player_card, opponent_card])
        winning_card = player_card if winner is Side.PLAYER else opponent_card
        if winner is Side.PLAYER:
            self.message = f"You win with {winning_card.label}!"
        else:
            self.message = f"Computer wins with {winning_card.label}!"
        self.events.emit_new(EventType.ROUND_WON, winner=winner.value, cards=2)
        self.settle()

    def _start_war(self, player_card: Card, opponent_card: Card, forced: bool = False) -> None:
        face_down = self.rules.war_face_down

        if any(len(self.decks[side]) < face_down for side in Side):
            # Ties favor the player
            if len(self.decks[Side.PLAYER]) >= len(self.decks[Side.OPPONENT]):
                winner = Side.PLAYER
            else:
                winner = Side.OPPONENT
            self.war_pile.extend([player_card, opponent_card])
            self._sweep_to(winner)
            self.message = f"Not enough cards for war! {_winner_text(winner)}"
            self.events.emit_new(EventType.WAR_FORFEITED, winner=winner.value)
            self.events.emit_new(EventType.GAME_ENDED, winner=winner.value, reason="war_forfeit")
            self.finish()
            return

        hidden: list[Card] = []
        for side in Side:
            deck = self.decks[side]
            hidden.extend(card.turned_down() for card in deck[-face_down:])
            del deck[-face_down:]

        self.war_pile.extend([player_card, opponent_card])
        self.war_pile.extend(hidden)

        prefix = "FORCED WAR!" if forced else "WAR!"
        self.message = (
            f"{prefix} {face_down} cards face down, next card decides the winner!"
        )
        if self.status is GameStatus.WAR:
            self.events.emit_new(EventType.WAR_EXTENDED, pile=len(self.war_pile))
            self.extend_war()
        else:
            self.events.emit_new(EventType.WAR_STARTED, pile=len(self.war_pile), forced=forced)
            self.declare_war()

    def _resolve_war(self, player_card: Card, opponent_card: Card) -> None:
        if player_card.value == opponent_card.value and self.rules.war_policy == "chain":
            self._start_war(player_card, opponent_card)
            return

        # Strict comparison: an exact re-tie goes to the opponent
        winner = Side.PLAYER if player_card.value > opponent_card.value else Side.OPPONENT
        spoils = [player_card, opponent_card, *self.war_pile]
        self.war_pile.clear()
        self._take(winner, spoils)

        winning_card = player_card if winner is Side.PLAYER else opponent_card
        if winner is Side.PLAYER:
            self.victory_message = f"You won the WAR with {winning_card.label}!"
        else:
            self.victory_message = f"Computer won the WAR with {winning_card.label}!"
        self.message = ""
        self.events.emit_new(EventType.WAR_RESOLVED, winner=winner.value, cards=len(spoils))
        self.settle()

    def _check_game_over(self) -> None:
        if self.status is GameStatus.ENDED:
            return
        if self.decks[Side.PLAYER] and self.decks[Side.OPPONENT]:
            return

        winner = self._leader()
        if self.war_pile:
            # A side put its last cards into the war
            self._sweep_to(winner)
        self.message = f"Game Over! {_winner_text(winner)}"
        self.events.emit_new(EventType.GAME_ENDED, winner=winner.value, reason="empty_deck")
        self.finish()

    def _leader(self) -> Side:
        """Side ahead on cards; the player when both are empty."""
        if not self.decks[Side.PLAYER] and self.decks[Side.OPPONENT]:
            return Side.OPPONENT
        return Side.PLAYER

    # Card movement

    def _return_unplaced(self) -> None:
        """Put drawn cards that sit in no zone back under their owner's deck."""
        placed = {
            card.identity
            for zone in (*self.decks.values(), self.war_pile)
            for card in zone
        }
        for side, card in self.drawn.items():
            if card is not None and card.identity not in placed:
                self.decks[side].insert(0, card.turned_up())

    def _take(self, side: Side, cards: list[Card]) -> None:
        """Put won cards at the bottom of a side's deck."""
        self.decks[side][:0] = [card.turned_up() for card in cards]

    def _sweep_to(self, side: Side) -> None:
        """Award the loser's deck and the war pile to a side."""
        loser = self.decks[side.other]
        self._take(side, [*loser, *self.war_pile])
        loser.clear()
        self.war_pile.clear()


class WarGame:
    """
    War game engine.

    This is the core game logic, completely UI-agnostic and stateless between
    calls: every move takes a GameState and returns a new one.
    """

    def __init__(
        self,
        rules: RuleSet | None = None,
        rng: Random | None = None,
        checker: InvariantChecker | None = None,
        clock: Callable[[], int] = now_ms,
        strict_invariants: bool = True,
    ) -> None:
        """
        Initialize the engine.

        Args:
            rules: Game rules (uses defaults if not provided)
            rng: Random number generator for reproducible deals
            checker: Conservation audit (built from strict_invariants if omitted)
            clock: Source of epoch milliseconds
            strict_invariants: Abort on conservation violations instead of reporting
        """
        self.rules = rules or RuleSet()
        self.rng = rng or Random()
        self.events = EventEmitter()
        self.checker = checker or InvariantChecker(
            strict=strict_invariants, emitter=self.events
        )
        self.clock = clock

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def new_game(
        self,
        player_name: str | None = None,
        player_avatar: str | None = None,
    ) -> GameState:
        """Deal a fresh game under this engine's rules."""
        state = initialize_game(self.rules, self.rng, player_name, player_avatar)
        self.checker.check(state, "after deal")
        self.events.emit_new(
            EventType.GAME_STARTED,
            total_cards=state.total_cards,
            special_cards=self.rules.include_special_cards,
        )
        return state

    def apply_move(
        self,
        state: GameState,
        move: Move | None = None,
        now: int | None = None,
    ) -> MoveResult:
        """
        Apply one move to a state.

        Args:
            state: Current game state (left untouched)
            move: Intent for this turn (a player draw if omitted)
            now: Epoch ms of the move (clock if omitted)

        Returns:
            The next state with the events raised while resolving it

        Raises:
            InvalidMoveError: Game already over, or nuke not available
            CooldownActiveError: Move arrived inside the cooldown window
            InvariantViolationError: Conservation broken (strict checker only)
        """
        move = move or Move()
        self.checker.check(state, "before move")

        if state.is_over:
            self._reject("Game is over, start a new game")
        if move.kind is MoveKind.NUKE and not state.nuke_available(move.side):
            self._reject(f"Nuke not available for {move.side.value}")

        now = self.clock() if now is None else now
        remaining = cooldown_remaining(state.last_move_timestamp, now, self.rules.cooldown_ms)
        if remaining > 0:
            self.events.emit_new(EventType.COOLDOWN_ACTIVE, retry_after_ms=remaining)
            raise CooldownActiveError(remaining)

        turn_events = EventEmitter(max_history=None)
        turn = _Turn(state, self.rules, turn_events)
        turn.play(move)
        next_state = turn.build(now)

        self.checker.check(next_state, "after move")

        for event in turn_events.history:
            self.events.emit(event)

        just_ended = not state.is_over and next_state.is_over
        if just_ended:
            logger.info(
                "Game ended after %d moves, winner: %s",
                next_state.move_count,
                next_state.winner.value if next_state.winner else None,
            )

        return MoveResult(
            state=next_state,
            events=tuple(turn_events.history),
            just_ended=just_ended,
        )

    def _reject(self, message: str) -> NoReturn:
        self.events.emit_new(EventType.INVALID_ACTION, message=message)
        raise InvalidMoveError(message)


def apply_move(
    state: GameState,
    move: Move | None = None,
    rules: RuleSet | None = None,
    now: int | None = None,
) -> MoveResult:
    """Apply a move with a throwaway engine (strict invariants)."""
    return WarGame(rules=rules).apply_move(state, move, now=now)
