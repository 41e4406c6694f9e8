"""Core gameplay logic — processes moves, power-ups and the win condition."""

from __future__ import annotations

import logging
import random

from backend.config import GameConfig
from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamesolver import Solver
from backend.engine.gamestate import GameState
from backend.models.board import Cell, Direction, PuzzleState

logger = logging.getLogger(__name__)


class GamePlay:
    """Orchestrates a single game session."""

    def __init__(self, size: int | None = None, difficulty: str | None = None,
                 config: GameConfig | None = None,
                 rng: random.Random | None = None) -> None:
        config = config or GameConfig()
        if size is not None or difficulty is not None:
            config = GameConfig(
                size=config.size if size is None else size,
                difficulty=difficulty or config.difficulty,
                search=config.search,
                powerups=config.powerups,
            )
        self.config = config
        self._rng = rng
        self.powerups: dict[str, int] = {}
        self.new_game()

    @classmethod
    def from_puzzle(cls, puzzle: PuzzleState,
                    config: GameConfig | None = None) -> GamePlay:
        """Create a game session from an existing puzzle (e.g. study mode)."""
        obj = object.__new__(cls)
        base = config or GameConfig()
        obj.config = GameConfig(
            size=puzzle.size,
            difficulty=base.difficulty,
            search=base.search,
            powerups=base.powerups,
        )
        obj._rng = None
        obj.state = GameState(puzzle)
        obj.reset_powerups()
        return obj

    # -- session lifecycle ----------------------------------------------------

    def new_game(self) -> None:
        puzzle = GameGenerator.generate(
            self.config.size, self.config.difficulty, rng=self._rng
        )
        self.state = GameState(puzzle)
        self.reset_powerups()
        logger.info(
            "New %d×%d game (%s)", self.size, self.size, self.config.difficulty
        )

    restart = new_game

    def reset_powerups(self) -> None:
        self.powerups = {
            name: limits.default for name, limits in self.config.powerups.items()
        }

    @property
    def size(self) -> int:
        return self.config.size

    @property
    def puzzle(self) -> PuzzleState:
        return self.state.puzzle

    # -- movement -------------------------------------------------------------

    def move(self, direction: Direction) -> bool:
        """Slide a tile in *direction* into the adjacent blank.

        E.g. ``Direction.UP`` moves the tile **below** the blank upward.
        Returns True if the move was valid.
        """
        cell = self.puzzle.cell_for(direction)
        if cell is None:
            return False
        return self.move_tile(cell.row, cell.col)

    def move_tile(self, row: int, col: int) -> bool:
        """Move a tile at (row, col) into the adjacent blank.

        Returns True if the tile was adjacent to the blank and the move
        was applied.
        """
        if not self.puzzle.move(row, col):
            return False
        self.state.increment_moves()
        if self.is_won:
            self.state.pause()
            logger.info("Solved %d×%d in %d moves", self.size, self.size, self.state.moves)
        return True

    # -- power-ups ------------------------------------------------------------

    def _has_charge(self, name: str) -> bool:
        return (
            self.powerups.get(name, 0) > 0
            and self.state.is_running
            and not self.is_won
        )

    def use_hint(self) -> Cell | None:
        """Return the next move of a solution, spending a hint charge.

        No charge is spent when no hint is available.
        """
        if not self._has_charge("hint"):
            return None
        search = self.config.search_config
        cell = Solver.hint(
            self.puzzle,
            search.max_iterations,
            time_limit=search.time_limit,
            max_open=search.max_open,
        )
        if cell is None:
            return None
        self.powerups["hint"] -= 1
        self.state.record_hint()
        return cell

    def use_smart_move(self) -> Cell | None:
        """Apply the greedy best move, spending a smart-move charge."""
        if not self._has_charge("smart_move"):
            return None
        self.powerups["smart_move"] -= 1
        cell = Solver.best_immediate_move(self.puzzle)
        self.move_tile(cell.row, cell.col)
        return cell

    def use_undo(self) -> bool:
        """Undo the last move, spending an undo charge only on success."""
        if not self._has_charge("undo"):
            return False
        if not self.puzzle.undo():
            return False
        self.powerups["undo"] -= 1
        self.state.decrement_moves()
        return True

    def auto_solve(self) -> list[Cell] | None:
        """Return a full solution for the current position, if one is found."""
        search = self.config.search_config
        return Solver.solve(
            self.puzzle,
            search.max_iterations,
            time_limit=search.time_limit,
            max_open=search.max_open,
        )

    # -- queries --------------------------------------------------------------

    @property
    def is_won(self) -> bool:
        return self.state.is_solved
