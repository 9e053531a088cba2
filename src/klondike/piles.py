# piles.py - stock, waste, foundation and tableau containers with their acceptance rules
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from klondike.cards import ACE, KING, Card, Suit


class Pile:
    """Ordered card container; the last element is the top card."""

    def __init__(self, cards: Iterable[Card] = ()):
        self._cards: List[Card] = list(cards)

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards)

    @property
    def count(self) -> int:
        return len(self._cards)

    @property
    def is_empty(self) -> bool:
        return not self._cards

    def __len__(self):
        return len(self._cards)

    def get_top_card(self) -> Optional[Card]:
        if not self._cards:
            return None
        return self._cards[-1]

    def clear(self):
        self._cards = []

    def restore_cards(self, cards: Iterable[Card]):
        """Replace contents verbatim. Used by undo; no rules are checked."""
        self._cards = list(cards)

    def __repr__(self):
        return f"{type(self).__name__}({self._cards!r})"


class Deck(Pile):
    """Face-down stock. Draws come off the end."""

    def __init__(self, cards: Iterable[Card] = (), draw_count: int = 1):
        super().__init__(cards)
        self._draw_count = 1
        self.draw_count = draw_count
        for c in self._cards:
            c.hide()

    @property
    def draw_count(self) -> int:
        return self._draw_count

    @draw_count.setter
    def draw_count(self, value: int):
        self._draw_count = max(1, min(3, int(value)))

    def draw(self) -> List[Card]:
        if not self._cards:
            return []
        n = min(self._draw_count, len(self._cards))
        drawn = self._cards[-n:]
        del self._cards[-n:]
        for c in drawn:
            c.reveal()
        return drawn

    def recycle(self, waste_cards: Iterable[Card]):
        recycled = list(reversed(list(waste_cards)))
        for c in recycled:
            c.hide()
        self._cards = recycled

    def reset(self, cards: Iterable[Card]):
        self._cards = list(cards)
        for c in self._cards:
            c.hide()


class WastePile(Pile):
    def add_cards(self, cards: Iterable[Card]):
        for c in cards:
            c.reveal()
            self._cards.append(c)

    def remove_top_card(self) -> Optional[Card]:
        if not self._cards:
            return None
        return self._cards.pop()

    def remove_all(self) -> List[Card]:
        drained = self._cards
        self._cards = []
        return drained


class Foundation(Pile):
    """Goal pile built Ace to King in the suit of its first card."""

    def __init__(self, index: int, cards: Iterable[Card] = ()):
        super().__init__()
        self.index = index
        self._suit: Optional[Suit] = None
        self.restore_cards(cards)

    @property
    def suit(self) -> Optional[Suit]:
        return self._suit

    @property
    def is_complete(self) -> bool:
        return len(self._cards) == 13

    def can_accept_card(self, card: Card) -> bool:
        if self.is_complete:
            return False
        if not self._cards:
            return card.rank == ACE
        return card.can_place_on_foundation(self._cards[-1], self._suit)

    def add_card(self, card: Card) -> bool:
        if not self.can_accept_card(card):
            return False
        if not self._cards:
            self._suit = card.suit
        self._cards.append(card)
        return True

    def remove_top_card(self) -> Optional[Card]:
        if not self._cards:
            return None
        card = self._cards.pop()
        if not self._cards:
            self._suit = None
        return card

    def clear(self):
        super().clear()
        self._suit = None

    def restore_cards(self, cards: Iterable[Card]):
        super().restore_cards(cards)
        self._suit = self._cards[0].suit if self._cards else None


class Tableau(Pile):
    """Playing pile: face-down cards under a descending, alternating face-up run."""

    def __init__(self, index: int, cards: Iterable[Card] = ()):
        super().__init__(cards)
        self.index = index

    def initialize(self, cards: Iterable[Card]):
        self._cards = list(cards)

    def get_face_up_cards(self) -> List[Card]:
        i = len(self._cards)
        while i > 0 and self._cards[i - 1].face_up:
            i -= 1
        return self._cards[i:]

    def can_accept_card(self, card: Card) -> bool:
        if not self._cards:
            return card.rank == KING
        top = self._cards[-1]
        if not top.face_up:
            return False
        return card.can_stack_on_tableau(top)

    def add_cards(self, cards: Iterable[Card]) -> bool:
        # Only the first card is checked; the run was validated when detached.
        cards = list(cards)
        if not cards:
            return False
        if not self.can_accept_card(cards[0]):
            return False
        self._cards.extend(cards)
        return True

    def remove_cards_from(self, index: int) -> List[Card]:
        if index < 0 or index >= len(self._cards):
            return []
        removed = self._cards[index:]
        del self._cards[index:]
        return removed

    def reveal_top_card(self):
        top = self.get_top_card()
        if top is not None and not top.face_up:
            top.reveal()

    def get_card_index(self, card: Card) -> int:
        for i, c in enumerate(self._cards):
            if c.id == card.id:
                return i
        return -1
