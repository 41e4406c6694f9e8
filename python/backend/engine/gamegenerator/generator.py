"""Generates solvable sliding puzzle boards."""

from __future__ import annotations

import logging
import random

from backend import config
from backend.models.board import PuzzleState

logger = logging.getLogger(__name__)


class GameGenerator:
    """Creates solvable puzzles by shuffling from the solved state."""

    @staticmethod
    def solved(size: int) -> PuzzleState:
        """Return the goal-state board (all tiles in order, blank bottom-right)."""
        return PuzzleState.solved(size)

    @staticmethod
    def scramble(state: PuzzleState, difficulty: str = config.DEFAULT_DIFFICULTY,
                 rng: random.Random | None = None) -> None:
        """Scramble *state* in-place with the difficulty's shuffle count."""
        state.shuffle_with_difficulty(difficulty, rng=rng)

    @staticmethod
    def generate(size: int, difficulty: str = config.DEFAULT_DIFFICULTY,
                 rng: random.Random | None = None) -> PuzzleState:
        """Return a random *solvable*, unsolved board of the given size."""
        state = GameGenerator.solved(size)
        GameGenerator.scramble(state, difficulty, rng=rng)
        logger.debug(
            "Generated %d×%d board (%s, %d inversions)",
            state.size, state.size, difficulty, state.count_inversions(),
        )
        return state
