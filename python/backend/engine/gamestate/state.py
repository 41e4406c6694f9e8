"""Tracks the mutable state of a game in progress."""

from __future__ import annotations

import time

from backend import config
from backend.models.board import PuzzleState


class GameState:
    """Holds the current puzzle, move and hint counters, and elapsed time."""

    def __init__(self, puzzle: PuzzleState) -> None:
        self.puzzle = puzzle
        self.moves: int = 0
        self.hints_used: int = 0
        self._start_time: float = time.monotonic()
        self._elapsed_banked: float = 0.0
        self._running: bool = True

    # -- time tracking --------------------------------------------------------

    @property
    def elapsed_time(self) -> float:
        if self._running:
            return self._elapsed_banked + (time.monotonic() - self._start_time)
        return self._elapsed_banked

    @property
    def is_running(self) -> bool:
        return self._running

    def pause(self) -> None:
        if self._running:
            self._elapsed_banked += time.monotonic() - self._start_time
            self._running = False

    def resume(self) -> None:
        if not self._running:
            self._start_time = time.monotonic()
            self._running = True

    # -- counters -------------------------------------------------------------

    def increment_moves(self) -> None:
        self.moves = min(self.moves + 1, config.MAX_MOVE_COUNT)

    def decrement_moves(self) -> None:
        self.moves = max(0, self.moves - 1)

    def record_hint(self) -> None:
        self.hints_used += 1

    @property
    def is_solved(self) -> bool:
        return self.puzzle.is_solved()
