# cards.py - card identity, colour rules and the id -> card registry
from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Iterator, Optional

from klondike.errors import UnknownCardError


class Suit(Enum):
    CLUBS = "Clubs"
    DIAMONDS = "Diamonds"
    HEARTS = "Hearts"
    SPADES = "Spades"

    def __str__(self):
        return self.value


ALL_SUITS = (Suit.CLUBS, Suit.DIAMONDS, Suit.HEARTS, Suit.SPADES)
ALL_RANKS = tuple(range(1, 14))

ACE = 1
KING = 13

RED = "red"
BLACK = "black"

SUIT_GLYPHS = {Suit.CLUBS: "♣", Suit.DIAMONDS: "♦", Suit.HEARTS: "♥", Suit.SPADES: "♠"}
RANK_TO_TEXT = {1: "A", 11: "J", 12: "Q", 13: "K"}
for _r in range(2, 11):
    RANK_TO_TEXT[_r] = str(_r)


def is_red(suit: Suit) -> bool:
    return suit in (Suit.DIAMONDS, Suit.HEARTS)


def color_of(suit: Suit) -> str:
    return RED if is_red(suit) else BLACK


def are_opposite_colors(a: Suit, b: Suit) -> bool:
    return is_red(a) != is_red(b)


class Card:
    """A playing card with a fixed identity and a mutable face state.

    The same ``Card`` object is shared between the pile that holds it and the
    controller's registry, so a flip is seen everywhere at once.
    """

    __slots__ = ("_suit", "_rank", "_id", "face_up")

    def __init__(self, suit: Suit, rank: int, face_up: bool = False):
        if not isinstance(suit, Suit):
            raise ValueError(f"Suit is invalid: {suit!r}")
        if isinstance(rank, bool) or not isinstance(rank, int) or rank not in ALL_RANKS:
            raise ValueError(f"Rank is invalid: {rank!r}")
        self._suit = suit
        self._rank = rank
        self._id = f"{suit.value}_{rank}"
        self.face_up = face_up

    @property
    def suit(self) -> Suit:
        return self._suit

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def id(self) -> str:
        return self._id

    @property
    def color(self) -> str:
        return color_of(self._suit)

    @property
    def label(self) -> str:
        return f"{RANK_TO_TEXT[self._rank]}{SUIT_GLYPHS[self._suit]}"

    def flip(self):
        self.face_up = not self.face_up

    def reveal(self):
        self.face_up = True

    def hide(self):
        self.face_up = False

    def can_stack_on_tableau(self, other: Card) -> bool:
        """True if this card may sit directly on ``other`` in a tableau."""
        if not are_opposite_colors(self._suit, other.suit):
            return False
        return self._rank == other.rank - 1

    def can_place_on_foundation(self, top: Optional[Card], locked_suit: Optional[Suit] = None) -> bool:
        if locked_suit is not None and self._suit != locked_suit:
            return False
        if top is None:
            return self._rank == ACE
        if self._suit != top.suit:
            return False
        return self._rank == top.rank + 1

    def __repr__(self):
        return f"{self.label}{'↑' if self.face_up else '↓'}"


class CardRegistry:
    """Non-owning id -> Card index used to restore snapshots by identity."""

    def __init__(self):
        self._cards: Dict[str, Card] = {}

    def register(self, card: Card):
        self._cards[card.id] = card

    def register_all(self, cards: Iterable[Card]):
        for card in cards:
            self.register(card)

    def get(self, card_id: str) -> Card:
        try:
            return self._cards[card_id]
        except KeyError:
            raise UnknownCardError(card_id) from None

    def clear(self):
        self._cards.clear()

    def __contains__(self, card_id) -> bool:
        return card_id in self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards.values())
