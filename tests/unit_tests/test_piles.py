import pytest

from klondike.cards import Suit
from klondike.piles import Deck, Foundation, Tableau, WastePile

from helpers import card, cards, suit_run


def _ids(pile_or_cards):
    seq = getattr(pile_or_cards, "cards", pile_or_cards)
    return [c.id for c in seq]


def test_pile_views_are_read_only_copies() -> None:
    t = Tableau(0, cards("KS", "QH"))
    view = t.cards
    assert isinstance(view, tuple)
    assert t.count == len(t) == 2
    assert t.get_top_card().id == "Hearts_12"
    assert Tableau(1).get_top_card() is None
    assert Tableau(1).is_empty


# ---------- Deck ----------
def test_deck_hides_cards_on_construction() -> None:
    d = Deck(cards("AH", "2H", "3H"), draw_count=1)
    assert not any(c.face_up for c in d.cards)


@pytest.mark.parametrize("value, expected", [(0, 1), (1, 1), (2, 2), (3, 3), (7, 3)])
def test_deck_draw_count_is_clamped(value: int, expected: int) -> None:
    assert Deck(draw_count=value).draw_count == expected


def test_deck_draw_one_takes_from_end_and_reveals() -> None:
    d = Deck(cards("AH", "2H", "3H"), draw_count=1)
    drawn = d.draw()
    assert _ids(drawn) == ["Hearts_3"]
    assert drawn[0].face_up
    assert _ids(d) == ["Hearts_1", "Hearts_2"]


def test_deck_draw_three_keeps_order_and_stops_at_empty() -> None:
    d = Deck(cards("AH", "2H", "3H", "4H"), draw_count=3)
    assert _ids(d.draw()) == ["Hearts_2", "Hearts_3", "Hearts_4"]
    assert _ids(d.draw()) == ["Hearts_1"]
    assert d.draw() == []
    assert d.is_empty


def test_deck_recycle_reverses_and_hides() -> None:
    d = Deck()
    waste = cards("AH", "2H", "3H", up=True)
    d.recycle(waste)
    assert _ids(d) == ["Hearts_3", "Hearts_2", "Hearts_1"]
    assert not any(c.face_up for c in d.cards)
    # drawing again yields the original first-drawn card first
    assert d.draw()[0].id == "Hearts_1"


def test_deck_reset_and_clear() -> None:
    d = Deck()
    d.reset(cards("5C", "6C", up=True))
    assert _ids(d) == ["Clubs_5", "Clubs_6"]
    assert not any(c.face_up for c in d.cards)
    d.clear()
    assert d.is_empty


# ---------- Waste ----------
def test_waste_add_forces_face_up() -> None:
    w = WastePile()
    w.add_cards(cards("AH", "2C", up=False))
    assert all(c.face_up for c in w.cards)
    assert w.get_top_card().id == "Clubs_2"


def test_waste_remove_top_and_all() -> None:
    w = WastePile()
    assert w.remove_top_card() is None
    w.add_cards(cards("AH", "2C", "3D"))
    assert w.remove_top_card().id == "Diamonds_3"
    drained = w.remove_all()
    assert _ids(drained) == ["Hearts_1", "Clubs_2"]
    assert w.is_empty


# ---------- Foundation ----------
def test_empty_foundation_accepts_only_ace() -> None:
    f = Foundation(0)
    assert f.suit is None
    assert not f.can_accept_card(card("2H"))
    assert not f.add_card(card("KS"))
    assert f.can_accept_card(card("AH"))
    assert f.add_card(card("AH"))
    assert f.suit is Suit.HEARTS


def test_foundation_builds_up_in_suit() -> None:
    f = Foundation(1, suit_run("S", 3))
    assert f.suit is Suit.SPADES
    assert f.can_accept_card(card("4S"))
    assert not f.can_accept_card(card("4C"))
    assert not f.can_accept_card(card("5S"))
    assert not f.can_accept_card(card("3S"))


def test_complete_foundation_accepts_nothing() -> None:
    f = Foundation(2, suit_run("D"))
    assert f.is_complete
    assert not f.can_accept_card(card("AH"))


def test_foundation_remove_clears_suit_when_empty() -> None:
    f = Foundation(0, suit_run("C", 2))
    assert f.remove_top_card().id == "Clubs_2"
    assert f.suit is Suit.CLUBS
    assert f.remove_top_card().id == "Clubs_1"
    assert f.suit is None
    assert f.remove_top_card() is None


def test_foundation_restore_and_clear_track_suit() -> None:
    f = Foundation(3)
    f.restore_cards(suit_run("H", 4))
    assert f.suit is Suit.HEARTS
    f.clear()
    assert f.suit is None and f.is_empty


# ---------- Tableau ----------
def test_empty_tableau_accepts_only_king() -> None:
    t = Tableau(0)
    assert t.can_accept_card(card("KH"))
    assert not t.can_accept_card(card("QS"))
    assert not t.add_cards(cards("QS"))
    assert t.add_cards(cards("KH", "QS"))
    assert _ids(t) == ["Hearts_13", "Spades_12"]


def test_tableau_needs_face_up_top() -> None:
    t = Tableau(0, [card("7S", up=False)])
    assert not t.can_accept_card(card("6H"))
    t.reveal_top_card()
    assert t.can_accept_card(card("6H"))
    assert not t.can_accept_card(card("6C"))


def test_tableau_add_checks_only_first_card() -> None:
    t = Tableau(0, cards("9C"))
    # The second card is not a legal follow-up; the run is trusted as-is.
    assert t.add_cards(cards("8H", "2S"))
    assert t.count == 3
    assert not t.add_cards([])


def test_tableau_remove_cards_from() -> None:
    t = Tableau(0, cards("KS", "QH", "JC"))
    assert t.remove_cards_from(5) == []
    assert t.remove_cards_from(-1) == []
    assert _ids(t.remove_cards_from(1)) == ["Hearts_12", "Clubs_11"]
    assert _ids(t) == ["Spades_13"]


def test_reveal_top_card_only_flips_face_down() -> None:
    t = Tableau(0, [card("5D", up=False), card("4C", up=True)])
    t.reveal_top_card()
    assert [c.face_up for c in t.cards] == [False, True]
    t.remove_cards_from(1)
    t.reveal_top_card()
    assert t.get_top_card().face_up
    Tableau(1).reveal_top_card()


def test_get_face_up_cards_is_trailing_run() -> None:
    t = Tableau(0, [card("KD", up=False), card("9S", up=False), card("8H"), card("7C")])
    assert _ids(t.get_face_up_cards()) == ["Hearts_8", "Clubs_7"]
    hidden_top = Tableau(1, [card("8H"), card("KS", up=False)])
    assert hidden_top.get_face_up_cards() == []
    assert Tableau(2).get_face_up_cards() == []


def test_get_card_index() -> None:
    t = Tableau(0, cards("KS", "QH"))
    assert t.get_card_index(card("QH")) == 1
    assert t.get_card_index(card("AH")) == -1
