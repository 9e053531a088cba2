# history.py - bounded stack of game snapshots for undo
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from klondike.cards import Card

DEFAULT_HISTORY_LIMIT = 50


@dataclass(frozen=True)
class CardState:
    id: str
    face_up: bool


PileState = Tuple[CardState, ...]


def pile_state(cards: Iterable[Card]) -> PileState:
    return tuple(CardState(c.id, c.face_up) for c in cards)


@dataclass(frozen=True)
class GameSnapshot:
    """Everything needed to put a game back: (id, face) pairs per pile plus counters.

    Cards themselves are never copied; undo resolves ids through the
    controller's registry.
    """

    deck: PileState
    waste: PileState
    tableaus: Tuple[PileState, ...]
    foundations: Tuple[PileState, ...]
    score: int
    moves: int

    def all_card_states(self):
        yield from self.deck
        yield from self.waste
        for pile in self.tableaus:
            yield from pile
        for pile in self.foundations:
            yield from pile


class MoveHistory:
    def __init__(self, max_history: int = DEFAULT_HISTORY_LIMIT):
        if max_history < 1:
            raise ValueError(f"History limit must be at least 1: {max_history!r}")
        self._history = deque(maxlen=max_history)

    @property
    def max_history(self) -> int:
        return self._history.maxlen

    @property
    def can_undo(self) -> bool:
        return len(self._history) > 0

    @property
    def undo_count(self) -> int:
        return len(self._history)

    def push_state(self, state: GameSnapshot):
        # deque(maxlen) drops the oldest entry on overflow
        self._history.append(state)

    def pop_state(self) -> Optional[GameSnapshot]:
        if not self._history:
            return None
        return self._history.pop()

    def peek_state(self) -> Optional[GameSnapshot]:
        if not self._history:
            return None
        return self._history[-1]

    def clear(self):
        self._history.clear()

    def __len__(self):
        return len(self._history)
