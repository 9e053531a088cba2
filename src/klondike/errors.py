"""Exceptions raised for engine misuse.

Rule violations during play are never raised; they come back as failed
``MoveResult`` values from the controller. The classes here cover the
programming errors that should fail fast instead.
"""

from __future__ import annotations

from typing import Any


class KlondikeError(Exception):
    """Base class for every error raised by the engine."""


class InvalidSeedError(KlondikeError, ValueError):
    def __init__(self, seed: Any) -> None:
        super().__init__(f"Seed is invalid: {seed!r}")
        self.seed = seed


class InvalidDifficultyError(KlondikeError, ValueError):
    def __init__(self, difficulty: Any) -> None:
        super().__init__(f"Difficulty is invalid: {difficulty!r}")
        self.difficulty = difficulty


class UnknownCardError(KlondikeError, KeyError):
    def __init__(self, card_id: Any) -> None:
        super().__init__(f"Card is not registered: {card_id!r}")
        self.card_id = card_id

    def __str__(self) -> str:
        return self.args[0]
