"""Game controller: the single entry point that validates and applies moves.

Every mutator follows the same order: validate, snapshot into the move
history, mutate the piles, then feed the score manager. Rule violations come
back as a failed ``MoveResult``; nothing here raises for an expected game
condition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from klondike.cards import CardRegistry
from klondike.dealer import FOUNDATION_COUNT, TABLEAU_COUNT, Dealer, draw_count_for, validate_seed
from klondike.history import GameSnapshot, MoveHistory, pile_state
from klondike.locations import (
    DECK,
    WASTE,
    DeckLocation,
    FoundationLocation,
    Hint,
    Location,
    TableauLocation,
    WasteLocation,
)
from klondike.piles import Deck, Foundation, Tableau, WastePile
from klondike import scoring as S
from klondike.settings import EngineSettings, default_settings

logger = logging.getLogger(__name__)


class Rejection(Enum):
    RULE = "rule"    # the move breaks a game rule
    INDEX = "index"  # a pile or card index is out of range


@dataclass(frozen=True)
class MoveResult:
    success: bool
    message: Optional[str] = None
    rejection: Optional[Rejection] = None

    def __bool__(self):
        return self.success


def _ok(message: Optional[str] = None) -> MoveResult:
    return MoveResult(True, message)


def _reject(message: str, rejection: Rejection = Rejection.RULE) -> MoveResult:
    logger.debug("Move rejected (%s): %s", rejection.value, message)
    return MoveResult(False, message, rejection)


def _valid_index(index, size: int) -> bool:
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < size


class GameController:
    def __init__(self, settings: Optional[EngineSettings] = None, dealer: Optional[Dealer] = None):
        self._settings = settings or default_settings()
        self._dealer = dealer or Dealer()
        self._score_manager = S.ScoreManager()
        self._history = MoveHistory(self._settings.history_limit)
        self._registry = CardRegistry()
        self._deck = Deck()
        self._waste = WastePile()
        self._tableaus: List[Tableau] = [Tableau(i) for i in range(TABLEAU_COUNT)]
        self._foundations: List[Foundation] = [Foundation(i) for i in range(FOUNDATION_COUNT)]
        self._difficulty = self._settings.difficulty
        self._seed: Optional[int] = None

    # ---------- Read-only views ----------
    @property
    def deck(self) -> Deck:
        return self._deck

    @property
    def waste_pile(self) -> WastePile:
        return self._waste

    @property
    def tableaus(self) -> Tuple[Tableau, ...]:
        return tuple(self._tableaus)

    @property
    def foundations(self) -> Tuple[Foundation, ...]:
        return tuple(self._foundations)

    @property
    def score_manager(self) -> S.ScoreManager:
        return self._score_manager

    @property
    def registry(self) -> CardRegistry:
        return self._registry

    @property
    def difficulty(self) -> str:
        return self._difficulty

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def undo_count(self) -> int:
        return self._history.undo_count

    @property
    def is_won(self) -> bool:
        return all(f.is_complete for f in self._foundations)

    @property
    def has_available_moves(self) -> bool:
        if not self._deck.is_empty or not self._waste.is_empty:
            return True

        # Only reachable with an empty stock and waste, so the waste check is moot.
        for tableau in self._tableaus:
            face_up = tableau.get_face_up_cards()
            if not face_up:
                continue
            first = face_up[0]
            for other in self._tableaus:
                if other.index != tableau.index and other.can_accept_card(first):
                    return True
            top = tableau.get_top_card()
            for foundation in self._foundations:
                if foundation.can_accept_card(top):
                    return True
        return False

    def check_game_over(self) -> bool:
        return not self.is_won and not self.has_available_moves

    # ---------- Game lifecycle ----------
    def new_game(self, difficulty: Optional[str] = None, seed: Optional[int] = None):
        if difficulty is None:
            difficulty = self._settings.difficulty
        draw_count_for(difficulty)
        if seed is not None:
            validate_seed(seed)

        self._difficulty = difficulty
        self._score_manager.reset()
        self._waste.clear()
        for f in self._foundations:
            f.clear()
        for t in self._tableaus:
            t.clear()
        self._history.clear()
        self._registry.clear()

        deal = self._dealer.deal(difficulty, seed)
        self._seed = deal.seed
        self._deck = Deck(deal.stock_cards, deal.draw_count)
        for t, cards in zip(self._tableaus, deal.tableau_cards):
            t.initialize(cards)
        self._register_all_cards()
        logger.info("New %s game (seed %d, draw %d)", difficulty, deal.seed, deal.draw_count)

    def _register_all_cards(self):
        self._registry.register_all(self._deck.cards)
        self._registry.register_all(self._waste.cards)
        for t in self._tableaus:
            self._registry.register_all(t.cards)
        for f in self._foundations:
            self._registry.register_all(f.cards)

    def update(self, delta_ms):
        self._score_manager.update_time(delta_ms)

    # ---------- History ----------
    def _snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            deck=pile_state(self._deck.cards),
            waste=pile_state(self._waste.cards),
            tableaus=tuple(pile_state(t.cards) for t in self._tableaus),
            foundations=tuple(pile_state(f.cards) for f in self._foundations),
            score=self._score_manager.raw_score,
            moves=self._score_manager.moves,
        )

    def _save_state(self):
        self._history.push_state(self._snapshot())

    def undo(self) -> bool:
        snap = self._history.peek_state()
        if snap is None:
            return False

        get = self._registry.get
        # Resolve everything before popping so a bad id leaves state and history intact.
        deck = [get(s.id) for s in snap.deck]
        waste = [get(s.id) for s in snap.waste]
        tableaus = [[get(s.id) for s in pile] for pile in snap.tableaus]
        foundations = [[get(s.id) for s in pile] for pile in snap.foundations]
        self._history.pop_state()

        for state in snap.all_card_states():
            card = get(state.id)
            if card.face_up != state.face_up:
                card.flip()

        self._deck.restore_cards(deck)
        self._waste.restore_cards(waste)
        for t, cards in zip(self._tableaus, tableaus):
            t.restore_cards(cards)
        for f, cards in zip(self._foundations, foundations):
            f.restore_cards(cards)
        self._score_manager.restore_state(snap.score, snap.moves)
        logger.info("Undid last move (%d left in history)", self._history.undo_count)
        return True

    # ---------- Validation helpers ----------
    def _check_tableau(self, index, name="tableau") -> Optional[MoveResult]:
        if not _valid_index(index, TABLEAU_COUNT):
            return _reject(f"Invalid {name} index: {index!r}", Rejection.INDEX)
        return None

    def _check_foundation(self, index, name="foundation") -> Optional[MoveResult]:
        if not _valid_index(index, FOUNDATION_COUNT):
            return _reject(f"Invalid {name} index: {index!r}", Rejection.INDEX)
        return None

    def _reveal_source(self, tableau: Tableau):
        top = tableau.get_top_card()
        if top is not None and not top.face_up:
            tableau.reveal_top_card()
            self._score_manager.record_action(S.FLIP_TABLEAU_CARD)

    def _log_if_won(self):
        if self.is_won:
            logger.info("Game won in %d moves, score %d", self._score_manager.moves, self._score_manager.score)

    # ---------- Moves ----------
    def draw_from_deck(self) -> MoveResult:
        self._save_state()

        if self._deck.is_empty:
            if self._waste.is_empty:
                self._history.pop_state()
                return _reject("No cards left to recycle")
            self._deck.recycle(self._waste.remove_all())
            if self._deck.draw_count == 1:
                self._score_manager.record_action(S.RECYCLE_WASTE)
            logger.info("Recycled waste into deck (%d cards)", self._deck.count)
            return _ok("Deck recycled")

        drawn = self._deck.draw()
        self._waste.add_cards(drawn)
        return _ok(f"Drew {len(drawn)} card(s)")

    def move_waste_to_tableau(self, tableau_index: int) -> MoveResult:
        bad = self._check_tableau(tableau_index)
        if bad is not None:
            return bad
        card = self._waste.get_top_card()
        if card is None:
            return _reject("Waste pile is empty")
        tableau = self._tableaus[tableau_index]
        if not tableau.can_accept_card(card):
            return _reject(f"{card.label} cannot go on tableau {tableau_index}")

        self._save_state()
        self._waste.remove_top_card()
        tableau.add_cards([card])
        self._score_manager.record_action(S.WASTE_TO_TABLEAU)
        self._score_manager.increment_moves()
        return _ok()

    def move_waste_to_foundation(self, foundation_index: int) -> MoveResult:
        bad = self._check_foundation(foundation_index)
        if bad is not None:
            return bad
        card = self._waste.get_top_card()
        if card is None:
            return _reject("Waste pile is empty")
        foundation = self._foundations[foundation_index]
        if not foundation.can_accept_card(card):
            return _reject(f"{card.label} cannot go on foundation {foundation_index}")

        self._save_state()
        self._waste.remove_top_card()
        foundation.add_card(card)
        self._score_manager.record_action(S.WASTE_TO_FOUNDATION)
        self._score_manager.increment_moves()
        self._log_if_won()
        return _ok()

    def move_tableau_to_tableau(self, from_index: int, card_index: int, to_index: int) -> MoveResult:
        bad = self._check_tableau(from_index, "source tableau")
        if bad is not None:
            return bad
        bad = self._check_tableau(to_index, "target tableau")
        if bad is not None:
            return bad
        if from_index == to_index:
            return _reject("Source and target tableau are the same")
        source = self._tableaus[from_index]
        target = self._tableaus[to_index]
        if not _valid_index(card_index, source.count):
            return _reject(f"Invalid card index {card_index!r} for tableau {from_index}", Rejection.INDEX)
        card = source.cards[card_index]
        if not card.face_up:
            return _reject("That card is face down")
        if not target.can_accept_card(card):
            return _reject(f"{card.label} cannot go on tableau {to_index}")

        self._save_state()
        target.add_cards(source.remove_cards_from(card_index))
        self._reveal_source(source)
        self._score_manager.increment_moves()
        return _ok()

    def move_tableau_to_foundation(self, from_index: int, to_index: int) -> MoveResult:
        bad = self._check_tableau(from_index)
        if bad is not None:
            return bad
        bad = self._check_foundation(to_index)
        if bad is not None:
            return bad
        source = self._tableaus[from_index]
        foundation = self._foundations[to_index]
        card = source.get_top_card()
        if card is None:
            return _reject(f"Tableau {from_index} is empty")
        if not card.face_up:
            return _reject("That card is face down")
        if not foundation.can_accept_card(card):
            return _reject(f"{card.label} cannot go on foundation {to_index}")

        self._save_state()
        source.remove_cards_from(source.count - 1)
        foundation.add_card(card)
        self._reveal_source(source)
        self._score_manager.record_action(S.TABLEAU_TO_FOUNDATION)
        self._score_manager.increment_moves()
        self._log_if_won()
        return _ok()

    def move_foundation_to_tableau(self, from_index: int, to_index: int) -> MoveResult:
        bad = self._check_foundation(from_index)
        if bad is not None:
            return bad
        bad = self._check_tableau(to_index)
        if bad is not None:
            return bad
        foundation = self._foundations[from_index]
        tableau = self._tableaus[to_index]
        card = foundation.get_top_card()
        if card is None:
            return _reject(f"Foundation {from_index} is empty")
        if not tableau.can_accept_card(card):
            return _reject(f"{card.label} cannot go on tableau {to_index}")

        # Adding to a tableau never exposes a hidden card, so no reveal here.
        self._save_state()
        foundation.remove_top_card()
        tableau.add_cards([card])
        self._score_manager.record_action(S.FOUNDATION_TO_TABLEAU)
        self._score_manager.increment_moves()
        return _ok()

    def auto_move(self, location: Location) -> MoveResult:
        """Send the card at ``location`` to the first pile that takes it.

        Foundations are tried before tableaus, each in index order. Cards
        already on a foundation only go back to a tableau.
        """
        if isinstance(location, DeckLocation):
            return _reject("Cards in the deck cannot be moved directly")

        if isinstance(location, WasteLocation):
            card = self._waste.get_top_card()
            if card is None:
                return _reject("Waste pile is empty")
            for i, f in enumerate(self._foundations):
                if f.can_accept_card(card):
                    return self.move_waste_to_foundation(i)
            for i, t in enumerate(self._tableaus):
                if t.can_accept_card(card):
                    return self.move_waste_to_tableau(i)

        elif isinstance(location, TableauLocation):
            bad = self._check_tableau(location.index)
            if bad is not None:
                return bad
            source = self._tableaus[location.index]
            if source.is_empty:
                return _reject(f"Tableau {location.index} is empty")
            card_index = source.count - 1 if location.card_index is None else location.card_index
            if not _valid_index(card_index, source.count):
                return _reject(f"Invalid card index {card_index!r} for tableau {location.index}", Rejection.INDEX)
            card = source.cards[card_index]
            if not card.face_up:
                return _reject("That card is face down")
            if card_index == source.count - 1:
                for i, f in enumerate(self._foundations):
                    if f.can_accept_card(card):
                        return self.move_tableau_to_foundation(location.index, i)
            for i, t in enumerate(self._tableaus):
                if i != location.index and t.can_accept_card(card):
                    return self.move_tableau_to_tableau(location.index, card_index, i)

        elif isinstance(location, FoundationLocation):
            bad = self._check_foundation(location.index)
            if bad is not None:
                return bad
            card = self._foundations[location.index].get_top_card()
            if card is None:
                return _reject(f"Foundation {location.index} is empty")
            for i, t in enumerate(self._tableaus):
                if t.can_accept_card(card):
                    return self.move_foundation_to_tableau(location.index, i)

        else:
            raise TypeError(f"Not a card location: {location!r}")

        return _reject("No automatic move available")

    # ---------- Auto finish ----------
    def can_auto_finish(self) -> bool:
        """Eligible when stock and waste are empty and all tableau cards are face-up."""
        if not self._deck.is_empty or not self._waste.is_empty:
            return False
        return all(c.face_up for t in self._tableaus for c in t.cards)

    def auto_finish_step(self) -> MoveResult:
        if not self.can_auto_finish():
            return _reject("Auto finish needs an empty stock and no hidden cards")
        for ti, t in enumerate(self._tableaus):
            top = t.get_top_card()
            if top is None:
                continue
            for fi, f in enumerate(self._foundations):
                if f.can_accept_card(top):
                    return self.move_tableau_to_foundation(ti, fi)
        return _reject("Nothing left to auto-finish")

    # ---------- Hints ----------
    def get_hint(self) -> Optional[Hint]:
        hint = self._find_hint()
        logger.debug("Hint: %r", hint)
        return hint

    def _find_hint(self) -> Optional[Hint]:
        for i, t in enumerate(self._tableaus):
            card = t.get_top_card()
            if card is None or not card.face_up:
                continue
            for j, f in enumerate(self._foundations):
                if f.can_accept_card(card):
                    return Hint(TableauLocation(i, t.count - 1), FoundationLocation(j))

        waste_card = self._waste.get_top_card()
        if waste_card is not None:
            for j, f in enumerate(self._foundations):
                if f.can_accept_card(waste_card):
                    return Hint(WASTE, FoundationLocation(j))

        for i, t in enumerate(self._tableaus):
            face_up = t.get_face_up_cards()
            if not face_up:
                continue
            first = face_up[0]
            card_index = t.count - len(face_up)
            for j, other in enumerate(self._tableaus):
                if i == j or not other.can_accept_card(first):
                    continue
                # Skip moves that would only shuffle a run between piles.
                if card_index > 0 or other.is_empty:
                    return Hint(TableauLocation(i, card_index), TableauLocation(j))

        if waste_card is not None:
            for j, t in enumerate(self._tableaus):
                if t.can_accept_card(waste_card):
                    return Hint(WASTE, TableauLocation(j))

        if not self._deck.is_empty:
            return Hint(DECK, WASTE)
        return None
