"""Klondike Solitaire rule and state engine."""

from klondike.cards import ALL_RANKS, ALL_SUITS, Card, CardRegistry, Suit
from klondike.controller import GameController, MoveResult, Rejection
from klondike.dealer import DIFFICULTIES, Dealer, DealResult
from klondike.errors import InvalidDifficultyError, InvalidSeedError, KlondikeError, UnknownCardError
from klondike.locations import (
    DeckLocation,
    FoundationLocation,
    Hint,
    Location,
    TableauLocation,
    WasteLocation,
)
from klondike.scoring import ScoreManager

__version__ = "0.1.0"
