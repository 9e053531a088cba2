from typing import Dict, List, Optional, Sequence

from klondike.cards import Card, Suit
from klondike.controller import GameController

_SUIT_LETTERS = {"C": Suit.CLUBS, "D": Suit.DIAMONDS, "H": Suit.HEARTS, "S": Suit.SPADES}
_RANK_LETTERS = {"A": 1, "J": 11, "Q": 12, "K": 13}


def card(text: str, up: bool = True) -> Card:
    """Build a card from short text such as ``"AH"``, ``"10C"`` or ``"KS"``."""
    rank_text, suit_letter = text[:-1], text[-1]
    rank = _RANK_LETTERS.get(rank_text) or int(rank_text)
    return Card(_SUIT_LETTERS[suit_letter], rank, up)


def cards(*texts: str, up: bool = True) -> List[Card]:
    return [card(t, up) for t in texts]


def suit_run(suit_letter: str, upto: int = 13) -> List[Card]:
    names = {1: "A", 11: "J", 12: "Q", 13: "K"}
    return [card(f"{names.get(r, r)}{suit_letter}") for r in range(1, upto + 1)]


def set_layout(
    ctl: GameController,
    tableaus: Optional[Dict[int, Sequence[Card]]] = None,
    foundations: Optional[Dict[int, Sequence[Card]]] = None,
    waste: Sequence[Card] = (),
    deck: Sequence[Card] = (),
) -> GameController:
    """Replace the whole table with the given cards and register them."""
    tableaus = tableaus or {}
    foundations = foundations or {}
    ctl.registry.clear()
    ctl.deck.restore_cards(deck)
    ctl.waste_pile.restore_cards(waste)
    for i, t in enumerate(ctl.tableaus):
        t.restore_cards(tableaus.get(i, ()))
    for i, f in enumerate(ctl.foundations):
        f.restore_cards(foundations.get(i, ()))
    ctl.registry.register_all(ctl.deck.cards)
    ctl.registry.register_all(ctl.waste_pile.cards)
    for t in ctl.tableaus:
        ctl.registry.register_all(t.cards)
    for f in ctl.foundations:
        ctl.registry.register_all(f.cards)
    return ctl


def table_state(ctl: GameController):
    """Comparable picture of every pile including face states."""
    def pile(p):
        return [(c.id, c.face_up) for c in p.cards]

    return {
        "deck": pile(ctl.deck),
        "waste": pile(ctl.waste_pile),
        "tableaus": [pile(t) for t in ctl.tableaus],
        "foundations": [pile(f) for f in ctl.foundations],
        "score": ctl.score_manager.raw_score,
        "moves": ctl.score_manager.moves,
    }
