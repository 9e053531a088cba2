"""Where a card sits: a small tagged union used by moves and hints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class DeckLocation:
    pass


@dataclass(frozen=True)
class WasteLocation:
    pass


@dataclass(frozen=True)
class TableauLocation:
    index: int
    card_index: Optional[int] = None  # None means the top card


@dataclass(frozen=True)
class FoundationLocation:
    index: int


Location = Union[DeckLocation, WasteLocation, TableauLocation, FoundationLocation]

DECK = DeckLocation()
WASTE = WasteLocation()


@dataclass(frozen=True)
class Hint:
    source: Location
    target: Location
