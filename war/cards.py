"""Card, Rank and Suit values plus deck construction - immutable card representations."""

from dataclasses import dataclass
from enum import Enum
from random import Random


class Suit(Enum):
    """Card suits, valued by their display symbol."""

    CLUBS = "♣"
    DIAMONDS = "♦"
    HEARTS = "♥"
    SPADES = "♠"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    """Card ranks with War comparison values (Ace high)."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14
    # Only carried by the special nuke cards
    NUKE = 15

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
            Rank.NUKE: "☢",
        }[self]

    @property
    def label(self) -> str:
        """Return the spoken name used in game messages."""
        if self.value <= 10:
            return str(self.value)
        return self.name.title()


STANDARD_RANKS: tuple[Rank, ...] = tuple(r for r in Rank if r is not Rank.NUKE)

# One special card per side; distinct suits keep every card in the deck unique.
SPECIAL_SUITS: tuple[Suit, ...] = (Suit.SPADES, Suit.HEARTS)


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit
    face_down: bool = False
    is_special: bool = False

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        flags = ""
        if self.face_down:
            flags += ", face_down"
        if self.is_special:
            flags += ", special"
        return f"Card({self.rank.name}, {self.suit.name}{flags})"

    @property
    def value(self) -> int:
        """Return the comparison value."""
        return self.rank.value

    @property
    def label(self) -> str:
        """Return the card name used in messages, e.g. 'Ace' or '7'."""
        return self.rank.label

    @property
    def identity(self) -> tuple[int, str, bool]:
        """Key identifying the physical card regardless of how it lies."""
        return (self.rank.value, self.suit.value, self.is_special)

    def turned_down(self) -> "Card":
        """Return this card tagged face-down for the war pile."""
        return Card(self.rank, self.suit, face_down=True, is_special=self.is_special)

    def turned_up(self) -> "Card":
        """Return this card with the face-down tag cleared."""
        return Card(self.rank, self.suit, face_down=False, is_special=self.is_special)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {
            "2": Rank.TWO,
            "3": Rank.THREE,
            "4": Rank.FOUR,
            "5": Rank.FIVE,
            "6": Rank.SIX,
            "7": Rank.SEVEN,
            "8": Rank.EIGHT,
            "9": Rank.NINE,
            "10": Rank.TEN,
            "T": Rank.TEN,
            "J": Rank.JACK,
            "Q": Rank.QUEEN,
            "K": Rank.KING,
            "A": Rank.ACE,
            "1": Rank.ACE,
        }

        suit_map = {
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])

    @classmethod
    def nuke(cls, suit: Suit) -> "Card":
        """Create a special nuke card."""
        return cls(Rank.NUKE, suit, is_special=True)


def build_deck(include_special: bool = False) -> list[Card]:
    """
    Build an ordered deck.

    Args:
        include_special: Append one nuke card per side (54 cards total)

    Returns:
        A new list with one card per (rank, suit) pair
    """
    cards = [Card(rank, suit) for suit in Suit for rank in STANDARD_RANKS]
    if include_special:
        cards.extend(Card.nuke(suit) for suit in SPECIAL_SUITS)
    return cards


def shuffle(cards: list[Card], rng: Random | None = None) -> list[Card]:
    """
    Return a uniformly shuffled copy of the cards.

    Random.shuffle is an unbiased Fisher-Yates permutation; the input
    list is left untouched.
    """
    shuffled = list(cards)
    (rng or Random()).shuffle(shuffled)
    return shuffled
