# session.py - game session lifecycle around a controller, driven by the host loop's clock
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional

import pygame

from klondike.controller import GameController
from klondike.dealer import difficulty_label, draw_count_for
from klondike.settings import EngineSettings, load_settings

logger = logging.getLogger(__name__)

FRAME_RATE = 60


class SessionState(Enum):
    IDLE = "idle"
    STARTING = "starting"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "gameover"
    FINISHED = "finished"


class GameSession:
    """Play/pause/finish bookkeeping the engine itself does not carry.

    The host loop calls ``tick()`` (or ``update(delta_ms)``) once per frame;
    time only runs while PLAYING, and the session settles into FINISHED or
    GAME_OVER as soon as the controller reports a win or a dead end.
    """

    def __init__(self, controller: Optional[GameController] = None, settings: Optional[EngineSettings] = None):
        self.settings = settings or load_settings()
        self.controller = controller or GameController(self.settings)
        self.state = SessionState.IDLE
        self.difficulty = self.settings.difficulty
        self._clock = None
        self._on_state_change: Optional[Callable[[SessionState], None]] = None
        self._on_win: Optional[Callable[[], None]] = None
        self._on_game_over: Optional[Callable[[], None]] = None

        # Auto-finish pacing
        self.auto_play_active = False
        self._auto_elapsed_ms = 0

    # ---------- Callbacks ----------
    def on_state_change(self, callback: Callable[[SessionState], None]):
        self._on_state_change = callback

    def on_win(self, callback: Callable[[], None]):
        self._on_win = callback

    def on_game_over(self, callback: Callable[[], None]):
        self._on_game_over = callback

    def _set_state(self, new_state: SessionState):
        self.state = new_state
        logger.debug("Session state -> %s", new_state.value)
        if self._on_state_change:
            self._on_state_change(new_state)

    # ---------- Lifecycle ----------
    def initialize(self):
        self._set_state(SessionState.IDLE)

    def start(self, seed: Optional[int] = None) -> bool:
        if self.state is not SessionState.IDLE:
            return False
        self._set_state(SessionState.STARTING)
        self.controller.new_game(self.difficulty, seed)
        self.auto_play_active = False
        self._set_state(SessionState.PLAYING)
        return True

    def pause(self) -> bool:
        if self.state is not SessionState.PLAYING:
            return False
        self._set_state(SessionState.PAUSED)
        return True

    def resume(self) -> bool:
        if self.state is not SessionState.PAUSED:
            return False
        self._set_state(SessionState.PLAYING)
        return True

    def end(self):
        self.auto_play_active = False
        self._set_state(SessionState.FINISHED)

    def restart(self, seed: Optional[int] = None):
        self._set_state(SessionState.IDLE)
        self.start(seed)

    @property
    def difficulty_label(self) -> str:
        return difficulty_label(self.difficulty)

    def change_difficulty(self, difficulty: str):
        draw_count_for(difficulty)
        self.difficulty = difficulty
        logger.info("Difficulty set to %s", difficulty_label(difficulty))
        if self.state is not SessionState.IDLE:
            self.restart()

    # ---------- Auto finish ----------
    def start_auto_finish(self) -> bool:
        if self.state is not SessionState.PLAYING or not self.controller.can_auto_finish():
            return False
        self.auto_play_active = True
        self._auto_elapsed_ms = 0
        return True

    def _step_auto_finish(self, delta_ms):
        self._auto_elapsed_ms += delta_ms
        interval = self.settings.auto_finish_interval_ms
        while self.auto_play_active and self._auto_elapsed_ms >= interval:
            self._auto_elapsed_ms -= interval
            if not self.controller.auto_finish_step():
                self.auto_play_active = False

    # ---------- Frame update ----------
    def update(self, delta_ms):
        if self.state is not SessionState.PLAYING:
            return
        self.controller.update(delta_ms)
        if self.auto_play_active:
            self._step_auto_finish(delta_ms)

        if self.controller.is_won:
            self.auto_play_active = False
            self._set_state(SessionState.FINISHED)
            if self._on_win:
                self._on_win()
        elif self.controller.check_game_over():
            self._set_state(SessionState.GAME_OVER)
            if self._on_game_over:
                self._on_game_over()

    def tick(self, clock=None, fps: int = FRAME_RATE) -> int:
        """Advance one frame using ``clock.tick(fps)`` as the elapsed milliseconds."""
        if clock is None:
            if self._clock is None:
                self._clock = pygame.time.Clock()
            clock = self._clock
        delta_ms = clock.tick(fps)
        self.update(delta_ms)
        return delta_ms
