"""Board model for the sliding puzzle: tile grid, legal moves and undo."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import StrEnum
from typing import NamedTuple

from backend import config

logger = logging.getLogger(__name__)


class Direction(StrEnum):
    """Direction the *tile* slides into the empty cell."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class Cell(NamedTuple):
    row: int
    col: int


@dataclass(frozen=True)
class MoveRecord:
    """One applied move; ``to_cell`` is where the empty cell was before it."""

    from_cell: Cell
    to_cell: Cell
    value: int


@dataclass(frozen=True)
class Snapshot:
    size: int
    tiles: tuple[int, ...]
    empty_pos: Cell


# Offset from the empty cell to the tile that slides in each direction.
# UP   -> tile below the empty cell moves up
# DOWN -> tile above the empty cell moves down
# LEFT -> tile right of the empty cell moves left
# RIGHT-> tile left of the empty cell moves right
_DIRECTION_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (1, 0),
    Direction.DOWN: (-1, 0),
    Direction.LEFT: (0, 1),
    Direction.RIGHT: (0, -1),
}


def _check_permutation(size: int, tiles: list[int] | tuple[int, ...]) -> None:
    if len(tiles) != size * size:
        raise ValueError(
            f"Expected {size * size} tiles for a {size}×{size} board, "
            f"got {len(tiles)}."
        )
    if sorted(tiles) != list(range(size * size)):
        raise ValueError(
            f"Tiles must be a permutation of 0..{size * size - 1}."
        )


class PuzzleState:
    """Represents the sliding puzzle board.

    Tiles are stored as a flat row-major list of ints. 0 represents the
    empty cell, whose position is cached in ``empty_pos``.
    """

    def __init__(self, size: int = config.DEFAULT_SIZE) -> None:
        self.size = config.clamp_size(size)
        self.tiles: list[int] = []
        self.empty_pos = Cell(self.size - 1, self.size - 1)
        self.move_history: list[MoveRecord] = []
        self.reset()

    # -- construction helpers -------------------------------------------------

    @classmethod
    def solved(cls, size: int) -> PuzzleState:
        return cls(size)

    @classmethod
    def from_flat(cls, size: int, flat: list[int]) -> PuzzleState:
        """Create a state from a flat row-major tile list.

        Unlike the constructor, *size* is not clamped: hand-built positions
        outside the supported range are rejected.

        Example::

            PuzzleState.from_flat(3, [1, 2, 3, 4, 5, 6, 7, 0, 8])
        """
        if not config.MIN_SIZE <= size <= config.MAX_SIZE:
            raise ValueError(
                f"Size must be between {config.MIN_SIZE} and "
                f"{config.MAX_SIZE}, got {size}."
            )
        _check_permutation(size, flat)
        state = cls(size)
        state.tiles = list(flat)
        state.empty_pos = state.cell_of(state.tiles.index(0))
        return state

    def reset(self) -> None:
        """Put every tile back in goal order and forget the history."""
        n = self.size
        self.tiles = list(range(1, n * n)) + [0]
        self.empty_pos = Cell(n - 1, n - 1)
        self.move_history = []

    # -- coordinates ----------------------------------------------------------

    def index_of(self, row: int, col: int) -> int:
        return row * self.size + col

    def cell_of(self, index: int) -> Cell:
        return Cell(*divmod(index, self.size))

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    # -- queries --------------------------------------------------------------

    def tile_at(self, row: int, col: int) -> int:
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) is outside a {self.size}×{self.size} board.")
        return self.tiles[self.index_of(row, col)]

    def rows(self) -> list[list[int]]:
        """2-D view of the tiles, one list per row."""
        n = self.size
        return [self.tiles[r * n : (r + 1) * n] for r in range(n)]

    @property
    def history_length(self) -> int:
        return len(self.move_history)

    def is_adjacent(self, row: int, col: int) -> bool:
        dr = abs(row - self.empty_pos.row)
        dc = abs(col - self.empty_pos.col)
        return (dr == 1 and dc == 0) or (dr == 0 and dc == 1)

    def movable_cells(self) -> list[Cell]:
        """Cells orthogonally adjacent to the empty cell.

        Order is fixed: above, below, left of, right of the empty cell.
        """
        er, ec = self.empty_pos
        last = self.size - 1
        cells: list[Cell] = []
        if er > 0:
            cells.append(Cell(er - 1, ec))
        if er < last:
            cells.append(Cell(er + 1, ec))
        if ec > 0:
            cells.append(Cell(er, ec - 1))
        if ec < last:
            cells.append(Cell(er, ec + 1))
        return cells

    def cell_for(self, direction: Direction) -> Cell | None:
        """Return the cell whose tile would slide in *direction*, if any."""
        dr, dc = _DIRECTION_OFFSETS[direction]
        row, col = self.empty_pos.row + dr, self.empty_pos.col + dc
        if not self.in_bounds(row, col):
            return None
        return Cell(row, col)

    def is_solved(self) -> bool:
        """Check if all tiles are in their goal positions."""
        last = len(self.tiles) - 1
        for i in range(last):
            if self.tiles[i] != i + 1:
                return False
        return self.tiles[last] == 0

    def is_tile_correct(self, row: int, col: int) -> bool:
        """Check if a specific tile is in its goal position."""
        val = self.tile_at(row, col)
        if val == 0:
            return row == self.size - 1 and col == self.size - 1
        return self.index_of(row, col) == val - 1

    def count_inversions(self) -> int:
        """Number of out-of-order pairs among the non-zero tiles."""
        flat = [v for v in self.tiles if v != 0]
        inversions = 0
        for i in range(len(flat)):
            for j in range(i + 1, len(flat)):
                if flat[i] > flat[j]:
                    inversions += 1
        return inversions

    def is_solvable(self) -> bool:
        """Return True if the goal arrangement is reachable by legal moves."""
        inversions = self.count_inversions()
        if self.size % 2 == 1:
            return inversions % 2 == 0
        # Bottom row counts as 0.
        empty_row_from_bottom = self.size - 1 - self.empty_pos.row
        return (inversions + empty_row_from_bottom) % 2 == 0

    # -- moves ----------------------------------------------------------------

    def move(self, row: int, col: int) -> bool:
        """Slide the tile at (row, col) into the adjacent empty cell.

        Returns False, leaving the board untouched, when the coordinates
        are not integers, fall outside the board, or are not orthogonally
        adjacent to the empty cell.
        """
        if not _is_coordinate(row) or not _is_coordinate(col):
            return False
        if not self.in_bounds(row, col) or not self.is_adjacent(row, col):
            return False

        src = self.index_of(row, col)
        dst = self.index_of(*self.empty_pos)
        value = self.tiles[src]

        self.move_history.append(
            MoveRecord(from_cell=Cell(row, col), to_cell=self.empty_pos, value=value)
        )
        if len(self.move_history) > config.HISTORY_CEILING:
            del self.move_history[: -config.HISTORY_RETAINED]

        self.tiles[dst] = value
        self.tiles[src] = 0
        self.empty_pos = Cell(row, col)
        return True

    def undo(self) -> bool:
        """Reverse the most recent move. Returns False if there is none."""
        if not self.move_history:
            return False
        record = self.move_history.pop()
        self.tiles[self.index_of(*record.from_cell)] = record.value
        self.tiles[self.index_of(*record.to_cell)] = 0
        self.empty_pos = record.to_cell
        return True

    def shuffle(self, move_count: int | None = None,
                rng: random.Random | None = None) -> None:
        """Scramble the board in-place using random legal moves.

        *move_count* is clamped into the supported band. The scramble is
        retried from the solved arrangement if it lands on the goal, and
        the history is cleared so the scramble cannot be undone.
        """
        moves = config.clamp_shuffle_moves(move_count)
        rng = rng or random.Random()

        for attempt in range(1, config.SHUFFLE_ATTEMPTS + 1):
            self.move_history = []
            for _ in range(moves):
                target = rng.choice(self.movable_cells())
                self.move(target.row, target.col)

            if self.is_solvable() and not self.is_solved():
                break

            logger.debug("Shuffle attempt %d landed on a trivial board, retrying", attempt)
            if attempt < config.SHUFFLE_ATTEMPTS:
                self.reset()

        self.move_history = []

    def shuffle_with_difficulty(self, difficulty: str,
                                rng: random.Random | None = None) -> None:
        self.shuffle(config.shuffle_moves_for(difficulty), rng=rng)

    # -- copies and snapshots -------------------------------------------------

    def clone(self) -> PuzzleState:
        copy = PuzzleState.__new__(PuzzleState)
        copy.size = self.size
        copy.tiles = self.tiles[:]
        copy.empty_pos = self.empty_pos
        copy.move_history = self.move_history[:]
        return copy

    def get_state(self) -> Snapshot:
        return Snapshot(size=self.size, tiles=tuple(self.tiles), empty_pos=self.empty_pos)

    def set_state(self, snapshot: Snapshot) -> None:
        """Restore a snapshot taken with ``get_state``.

        History survives only if the tiles are unchanged; otherwise it
        would describe a different arrangement.
        """
        _check_permutation(snapshot.size, snapshot.tiles)
        empty = Cell(*snapshot.empty_pos)
        if snapshot.tiles[empty.row * snapshot.size + empty.col] != 0:
            raise ValueError(f"Snapshot empty cell {tuple(empty)} does not hold 0.")

        if snapshot.size != self.size or tuple(self.tiles) != snapshot.tiles:
            self.move_history = []
        self.size = snapshot.size
        self.tiles = list(snapshot.tiles)
        self.empty_pos = empty

    # -- dunder helpers -------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PuzzleState):
            return NotImplemented
        return self.size == other.size and self.tiles == other.tiles

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PuzzleState(size={self.size}, tiles={self.tiles!r})"


def _is_coordinate(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
