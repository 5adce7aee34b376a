"""Pytest fixtures for War engine tests."""

import pytest
from dataclasses import replace
from random import Random

from war.cards import Card, build_deck
from war.game import GameState, GameStatus, RuleSet, WarGame


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1000) -> int:
        self.now += ms
        return self.now


def cards(*specs: str) -> tuple[Card, ...]:
    """Build a deck from strings, bottom card first."""
    return tuple(Card.from_string(s) for s in specs)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def clock():
    """A clock that only moves when told to."""
    return FakeClock()


@pytest.fixture
def rules():
    """Default ruleset without cooldown so moves can run back-to-back."""
    return RuleSet(cooldown_ms=0)


@pytest.fixture
def nuclear_rules():
    """54-card ruleset with nukes and forced wars."""
    return replace(RuleSet.nuclear(), cooldown_ms=0)


@pytest.fixture
def engine(rules, rng, clock):
    """A strict engine with a controllable clock."""
    return WarGame(rules=rules, rng=rng, clock=clock)


@pytest.fixture
def make_state():
    """
    Factory for hand-built states.

    Decks are given as card strings, bottom first; total_cards defaults to
    the number of cards placed so conservation holds.
    """

    def _make(player, opponent, war_pile=(), **kwargs) -> GameState:
        player_deck = cards(*player)
        opponent_deck = cards(*opponent)
        pile = tuple(war_pile)
        kwargs.setdefault("total_cards", len(player_deck) + len(opponent_deck) + len(pile))
        kwargs.setdefault("game_status", GameStatus.PLAYING)
        return GameState(
            player_deck=player_deck,
            opponent_deck=opponent_deck,
            war_pile=pile,
            **kwargs,
        )

    return _make


@pytest.fixture
def full_deck():
    """An ordered 52-card deck."""
    return build_deck()

