"""Point accounting and elapsed-time tracking for a Klondike game."""

from __future__ import annotations

from typing import Dict

WASTE_TO_TABLEAU = "waste_to_tableau"
WASTE_TO_FOUNDATION = "waste_to_foundation"
TABLEAU_TO_FOUNDATION = "tableau_to_foundation"
FLIP_TABLEAU_CARD = "flip_tableau_card"
FOUNDATION_TO_TABLEAU = "foundation_to_tableau"
RECYCLE_WASTE = "recycle_waste"

SCORE_VALUES: Dict[str, int] = {
    WASTE_TO_TABLEAU: 5,
    WASTE_TO_FOUNDATION: 10,
    TABLEAU_TO_FOUNDATION: 10,
    FLIP_TABLEAU_CARD: 5,
    FOUNDATION_TO_TABLEAU: -15,
    RECYCLE_WASTE: -100,
}

TIME_BONUS_NUMERATOR = 700000
TIME_BONUS_GRACE_SECONDS = 30


class ScoreManager:
    def __init__(self) -> None:
        self._score = 0
        self._moves = 0
        self._elapsed_ms = 0

    @property
    def score(self) -> int:
        """Displayed score; never below zero."""
        return max(0, self._score)

    @property
    def raw_score(self) -> int:
        """Unclamped accumulator, which may be negative."""
        return self._score

    @property
    def moves(self) -> int:
        return self._moves

    @property
    def elapsed_ms(self) -> int:
        return self._elapsed_ms

    @property
    def elapsed_time(self) -> int:
        return int(self._elapsed_ms // 1000)

    def record_action(self, action: str) -> int:
        try:
            points = SCORE_VALUES[action]
        except KeyError:
            raise ValueError(f"Unknown score action: {action!r}") from None
        self._score += points
        return points

    def increment_moves(self) -> None:
        self._moves += 1

    def update_time(self, delta_ms) -> None:
        if delta_ms < 0:
            raise ValueError(f"Time delta must not be negative: {delta_ms!r}")
        self._elapsed_ms += delta_ms

    def reset(self) -> None:
        self._score = 0
        self._moves = 0
        self._elapsed_ms = 0

    def calculate_time_bonus(self) -> int:
        seconds = self.elapsed_time
        if seconds <= TIME_BONUS_GRACE_SECONDS:
            return 0
        return TIME_BONUS_NUMERATOR // seconds

    def get_final_score(self) -> int:
        return self.score + self.calculate_time_bonus()

    def get_formatted_time(self) -> str:
        minutes, seconds = divmod(self.elapsed_time, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def restore_state(self, score: int, moves: int) -> None:
        # Undo only: bypasses the scoring table.
        self._score = score
        self._moves = moves
