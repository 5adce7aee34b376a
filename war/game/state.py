"""Game status enumeration and the immutable game state."""

from dataclasses import dataclass, replace
from enum import Enum

from war.cards import Card


class GameStatus(Enum):
    """
    Game state machine states.

    Flow: INITIAL → PLAYING ⇄ WAR → ENDED
    """

    # Fresh game, nothing drawn yet
    INITIAL = "initial"

    # Ordinary rounds
    PLAYING = "playing"

    # Tie declared, war pile awaiting the resolving draw
    WAR = "war"

    # One side holds every card (terminal)
    ENDED = "ended"

    def __str__(self) -> str:
        return self.name.title()


class Side(Enum):
    """The two seats at the table."""

    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Side":
        return Side.OPPONENT if self is Side.PLAYER else Side.PLAYER


@dataclass(frozen=True)
class GameState:
    """
    Complete game snapshot.

    Decks are tuples with the top card at the end. The engine never mutates
    a GameState; each accepted move produces a new one.
    """

    player_deck: tuple[Card, ...]
    opponent_deck: tuple[Card, ...]
    total_cards: int
    player_card: Card | None = None
    opponent_card: Card | None = None
    war_pile: tuple[Card, ...] = ()
    message: str = ""
    victory_message: str | None = None
    war_in_progress: bool = False
    game_status: GameStatus = GameStatus.INITIAL
    move_count: int = 0
    last_move_timestamp: int | None = None
    player_nuke_available: bool = False
    opponent_nuke_available: bool = False

    # Opaque pass-through from the identity collaborator
    player_name: str | None = None
    player_avatar: str | None = None

    def deck(self, side: Side) -> tuple[Card, ...]:
        """Return the deck held by a side."""
        return self.player_deck if side is Side.PLAYER else self.opponent_deck

    def nuke_available(self, side: Side) -> bool:
        """Check whether a side still holds its one-time nuke."""
        if side is Side.PLAYER:
            return self.player_nuke_available
        return self.opponent_nuke_available

    @property
    def deck_sizes(self) -> tuple[int, int]:
        """Return (player, opponent) deck sizes."""
        return len(self.player_deck), len(self.opponent_deck)

    @property
    def is_over(self) -> bool:
        return self.game_status is GameStatus.ENDED

    @property
    def winner(self) -> Side | None:
        """Side holding the cards once the game has ended."""
        if not self.is_over:
            return None
        if self.player_deck or not self.opponent_deck:
            return Side.PLAYER
        return Side.OPPONENT

    @property
    def can_draw(self) -> bool:
        return not self.is_over

    @property
    def can_nuke(self) -> bool:
        return not self.is_over and self.player_nuke_available

    def with_identity(self, name: str | None, avatar: str | None) -> "GameState":
        """Attach display name and avatar without touching play."""
        return replace(self, player_name=name, player_avatar=avatar)
