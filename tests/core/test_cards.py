"""Tests for Card values, deck construction and shuffling."""

import pytest
from collections import Counter
from random import Random

from hypothesis import given, settings, strategies as st

from war.cards import Card, Rank, Suit, build_deck, shuffle


class TestCard:
    """Tests for the Card class."""

    def test_card_creation(self):
        """Test creating a card."""
        card = Card(Rank.ACE, Suit.SPADES)
        assert card.rank == Rank.ACE
        assert card.suit == Suit.SPADES
        assert not card.face_down
        assert not card.is_special

    def test_card_immutability(self):
        """Test that cards are immutable."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(AttributeError):
            card.rank = Rank.KING

    def test_ace_is_high(self):
        """Aces beat kings."""
        assert Card(Rank.ACE, Suit.CLUBS).value == 14
        assert Card(Rank.ACE, Suit.CLUBS).value > Card(Rank.KING, Suit.CLUBS).value

    def test_card_labels(self):
        """Test the names used in messages."""
        assert Card(Rank.ACE, Suit.HEARTS).label == "Ace"
        assert Card(Rank.KING, Suit.HEARTS).label == "King"
        assert Card(Rank.JACK, Suit.HEARTS).label == "Jack"
        assert Card(Rank.SEVEN, Suit.HEARTS).label == "7"

    def test_card_from_string(self):
        """Test creating cards from strings."""
        assert Card.from_string("AS") == Card(Rank.ACE, Suit.SPADES)
        assert Card.from_string("2H") == Card(Rank.TWO, Suit.HEARTS)
        assert Card.from_string("10D") == Card(Rank.TEN, Suit.DIAMONDS)
        assert Card.from_string("kc") == Card(Rank.KING, Suit.CLUBS)
        assert Card.from_string("7♠") == Card(Rank.SEVEN, Suit.SPADES)

    def test_card_from_string_invalid(self):
        """Test rejecting malformed strings."""
        with pytest.raises(ValueError):
            Card.from_string("Z")
        with pytest.raises(ValueError):
            Card.from_string("11S")
        with pytest.raises(ValueError):
            Card.from_string("AX")

    def test_card_str(self):
        """Test string representation."""
        assert str(Card(Rank.SEVEN, Suit.SPADES)) == "7♠"
        assert str(Card(Rank.QUEEN, Suit.DIAMONDS)) == "Q♦"

    def test_turned_down_keeps_identity(self):
        """Face-down tagging does not change which card it is."""
        card = Card(Rank.FIVE, Suit.CLUBS)
        hidden = card.turned_down()

        assert hidden.face_down
        assert hidden != card
        assert hidden.identity == card.identity
        assert hidden.turned_up() == card

    def test_nuke_card(self):
        """Special cards carry the fixed nuke rank."""
        nuke = Card.nuke(Suit.SPADES)
        assert nuke.is_special
        assert nuke.rank == Rank.NUKE
        assert nuke.value > Card(Rank.ACE, Suit.SPADES).value
        assert nuke.identity != Card(Rank.ACE, Suit.SPADES).identity


class TestBuildDeck:
    """Tests for deck construction."""

    def test_standard_deck(self):
        """52 unique cards, 13 per suit."""
        deck = build_deck()
        assert len(deck) == 52
        assert len(set(deck)) == 52
        suits = Counter(c.suit for c in deck)
        assert all(n == 13 for n in suits.values())
        assert not any(c.is_special for c in deck)

    def test_deck_with_special_cards(self):
        """One nuke card per side brings the deck to 54."""
        deck = build_deck(include_special=True)
        assert len(deck) == 54
        assert len(set(deck)) == 54
        specials = [c for c in deck if c.is_special]
        assert len(specials) == 2
        assert all(c.rank == Rank.NUKE for c in specials)

    def test_build_deck_returns_new_list(self):
        """Callers can mutate the result freely."""
        first = build_deck()
        first.pop()
        assert len(build_deck()) == 52


class TestShuffle:
    """Tests for shuffling."""

    def test_shuffle_is_permutation(self, full_deck, rng):
        """Shuffling keeps exactly the same cards."""
        shuffled = shuffle(full_deck, rng)
        assert Counter(shuffled) == Counter(full_deck)

    def test_shuffle_leaves_input_untouched(self, full_deck, rng):
        """The input list is copied, not shuffled in place."""
        original = list(full_deck)
        shuffle(full_deck, rng)
        assert full_deck == original

    def test_shuffle_changes_order(self, full_deck):
        """A 52-card shuffle is practically never the identity."""
        assert shuffle(full_deck, Random(7)) != full_deck

    def test_shuffle_reproducible_with_seed(self, full_deck):
        """Same seed, same order."""
        assert shuffle(full_deck, Random(1)) == shuffle(full_deck, Random(1))

    def test_shuffle_uniform_positions(self):
        """Every card lands in every slot about equally often."""
        cards = build_deck()[:4]
        rng = Random(123)
        first_slot = Counter(shuffle(cards, rng)[0] for _ in range(4000))

        assert set(first_slot) == set(cards)
        for count in first_slot.values():
            assert 800 < count < 1200

    @given(seed=st.integers(min_value=0, max_value=2**32 - 1), special=st.booleans())
    @settings(max_examples=50)
    def test_shuffle_permutation_property(self, seed, special):
        """Shuffle is a permutation for any seed and deck variant."""
        deck = build_deck(include_special=special)
        assert Counter(shuffle(deck, Random(seed))) == Counter(deck)
