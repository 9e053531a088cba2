# dealer.py - seeded shuffle and the initial Klondike deal
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from klondike.cards import ALL_RANKS, ALL_SUITS, Card
from klondike.errors import InvalidDifficultyError, InvalidSeedError

logger = logging.getLogger(__name__)

TABLEAU_COUNT = 7
FOUNDATION_COUNT = 4

DIFFICULTIES = ("easy", "medium", "hard", "expert")

DIFFICULTY_LABELS = {
    "easy": "Easy (Draw 1)",
    "medium": "Medium (Draw 1)",
    "hard": "Hard (Draw 3)",
    "expert": "Expert (Draw 3)",
}

_DRAW_COUNTS = {"easy": 1, "medium": 1, "hard": 3, "expert": 3}

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def validate_seed(seed) -> int:
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise InvalidSeedError(seed)
    return seed


def draw_count_for(difficulty: str) -> int:
    try:
        return _DRAW_COUNTS[difficulty]
    except (KeyError, TypeError):
        raise InvalidDifficultyError(difficulty) from None


def difficulty_label(difficulty: str) -> str:
    draw_count_for(difficulty)
    return DIFFICULTY_LABELS[difficulty]


class Mulberry32:
    """Small 32-bit PRNG; a given seed always yields the same stream."""

    def __init__(self, seed: int):
        self.state = validate_seed(seed) & _MASK32

    def next_uint32(self) -> int:
        self.state = (self.state + 0x6D2B79F5) & _MASK32
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return (t ^ (t >> 14)) & _MASK32

    def next_float(self) -> float:
        return self.next_uint32() / 4294967296

    __call__ = next_float


@dataclass(frozen=True)
class DealResult:
    tableau_cards: Tuple[Tuple[Card, ...], ...]
    stock_cards: Tuple[Card, ...]
    seed: int
    draw_count: int


class Dealer:
    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = int(time.time() * 1000)
        self._seed = validate_seed(seed)
        self._rng = Mulberry32(self._seed)

    @property
    def seed(self) -> int:
        return self._seed

    def set_seed(self, seed: int):
        self._seed = validate_seed(seed)
        self._rng = Mulberry32(self._seed)

    def generate_deck(self) -> List[Card]:
        return [Card(suit, rank, False) for suit in ALL_SUITS for rank in ALL_RANKS]

    def shuffle(self, cards: Sequence[Card], seed: Optional[int] = None) -> List[Card]:
        """Return a Fisher-Yates permutation of ``cards``.

        Passing ``seed`` reseeds the generator first, so the same seed and
        input order always give the same result. Without it the shuffle
        continues the current stream.
        """
        if seed is not None:
            self.set_seed(seed)
        shuffled = list(cards)
        for i in range(len(shuffled) - 1, 0, -1):
            j = int(self._rng() * (i + 1))
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

    def next_seed(self) -> int:
        return self._rng.next_uint32()

    def deal(self, difficulty: str, seed: Optional[int] = None) -> DealResult:
        """Shuffle a fresh deck and lay out the seven tableau piles.

        Without ``seed`` a new one is taken from the current stream, so the
        returned ``DealResult.seed`` always reproduces the deal.
        """
        draw_count = draw_count_for(difficulty)
        if seed is None:
            seed = self.next_seed()
        self.set_seed(seed)
        used_seed = self._seed
        deck = self.shuffle(self.generate_deck())

        tableau_cards = []
        pos = 0
        for pile_index in range(TABLEAU_COUNT):
            size = pile_index + 1
            pile = deck[pos:pos + size]
            pos += size
            for r, card in enumerate(pile):
                card.face_up = (r == size - 1)
            tableau_cards.append(tuple(pile))

        stock = deck[pos:]
        for card in stock:
            card.hide()

        logger.debug("Dealt %s game with seed %d (%d cards in stock)", difficulty, used_seed, len(stock))
        return DealResult(
            tableau_cards=tuple(tableau_cards),
            stock_cards=tuple(stock),
            seed=used_seed,
            draw_count=draw_count,
        )

    def deal_winnable(self, difficulty: str, seed: Optional[int] = None) -> DealResult:
        # No solver yet; every deal is accepted as-is.
        return self.deal(difficulty, seed)

    def draw_count_for(self, difficulty: str) -> int:
        return draw_count_for(difficulty)
