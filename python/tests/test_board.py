"""PuzzleState test suite — moves, undo, history, solvability, shuffle."""

from __future__ import annotations

import random

import pytest

from backend import config
from backend.models.board import Cell, Direction, MoveRecord, PuzzleState, Snapshot

SIZES = list(range(config.MIN_SIZE, config.MAX_SIZE + 1))


# -- helpers ------------------------------------------------------------------


class _CountingRandom(random.Random):
    """Counts ``choice`` calls so shuffle lengths can be observed."""

    def __init__(self, seed: int) -> None:
        super().__init__(seed)
        self.calls = 0

    def choice(self, seq):  # type: ignore[override]
        self.calls += 1
        return super().choice(seq)


class _BouncingRandom(_CountingRandom):
    """Slides a tile out and straight back for the first *bouncing_calls*
    choices, landing on the goal after every even-length attempt; then
    always picks the first movable cell.
    """

    def __init__(self, home: Cell, bouncing_calls: int) -> None:
        super().__init__(0)
        self.home = home
        self.bouncing_calls = bouncing_calls
        self._back: Cell | None = None

    def choice(self, seq):  # type: ignore[override]
        self.calls += 1
        if self.calls > self.bouncing_calls or self._back is None:
            self._back = self.home if self.calls <= self.bouncing_calls else None
            return seq[0]
        back, self._back = self._back, None
        return back


def _assert_consistent(state: PuzzleState) -> None:
    n = state.size
    assert sorted(state.tiles) == list(range(n * n))
    assert state.tiles.count(0) == 1
    assert state.tile_at(*state.empty_pos) == 0


def _random_walk(state: PuzzleState, steps: int, seed: int) -> None:
    rng = random.Random(seed)
    for _ in range(steps):
        cell = rng.choice(state.movable_cells())
        assert state.move(cell.row, cell.col)


# -- construction -------------------------------------------------------------


@pytest.mark.parametrize("size", SIZES)
def test_new_state_is_solved(size: int) -> None:
    state = PuzzleState(size)
    assert state.is_solved()
    assert state.tiles == list(range(1, size * size)) + [0]
    assert state.empty_pos == (size - 1, size - 1)
    assert state.history_length == 0


@pytest.mark.parametrize("requested, expected", [(1, 3), (2, 3), (11, 10), (25, 10)])
def test_size_is_clamped(requested: int, expected: int) -> None:
    assert PuzzleState(requested).size == expected


def test_from_flat_locates_empty_cell() -> None:
    state = PuzzleState.from_flat(3, [1, 2, 3, 4, 0, 5, 6, 7, 8])
    assert state.empty_pos == Cell(1, 1)
    assert state.tile_at(2, 2) == 8
    assert not state.is_solved()


@pytest.mark.parametrize(
    "size, flat",
    [
        (3, [1, 2, 3, 4, 5, 6, 7, 8]),
        (3, [1, 1, 3, 4, 5, 6, 7, 8, 0]),
        (3, [1, 2, 3, 4, 5, 6, 7, 8, 9]),
        (2, [1, 2, 3, 0]),
    ],
    ids=["short", "duplicate", "no-empty", "too-small"],
)
def test_from_flat_rejects_bad_input(size: int, flat: list[int]) -> None:
    with pytest.raises(ValueError):
        PuzzleState.from_flat(size, flat)


def test_tile_at_out_of_range_raises() -> None:
    state = PuzzleState(3)
    with pytest.raises(IndexError):
        state.tile_at(3, 0)
    with pytest.raises(IndexError):
        state.tile_at(0, -1)


def test_rows_view() -> None:
    assert PuzzleState(3).rows() == [[1, 2, 3], [4, 5, 6], [7, 8, 0]]


# -- movable cells ------------------------------------------------------------


def test_movable_cells_corner() -> None:
    assert PuzzleState(3).movable_cells() == [Cell(1, 2), Cell(2, 1)]


def test_movable_cells_centre_order() -> None:
    state = PuzzleState.from_flat(3, [1, 2, 3, 4, 0, 5, 6, 7, 8])
    assert state.movable_cells() == [Cell(0, 1), Cell(2, 1), Cell(1, 0), Cell(1, 2)]


def test_movable_cells_edge() -> None:
    state = PuzzleState.from_flat(3, [1, 0, 2, 3, 4, 5, 6, 7, 8])
    assert state.movable_cells() == [Cell(1, 1), Cell(0, 0), Cell(0, 2)]


@pytest.mark.parametrize(
    "direction, expected",
    [
        (Direction.UP, None),
        (Direction.LEFT, None),
        (Direction.DOWN, Cell(1, 2)),
        (Direction.RIGHT, Cell(2, 1)),
    ],
)
def test_cell_for_direction(direction: Direction, expected: Cell | None) -> None:
    assert PuzzleState(3).cell_for(direction) == expected


# -- moves --------------------------------------------------------------------


def test_move_swaps_tile_and_records_history() -> None:
    state = PuzzleState(3)
    assert state.move(2, 1)
    assert state.tiles == [1, 2, 3, 4, 5, 6, 7, 0, 8]
    assert state.empty_pos == Cell(2, 1)
    assert state.move_history == [
        MoveRecord(from_cell=Cell(2, 1), to_cell=Cell(2, 2), value=8)
    ]


@pytest.mark.parametrize(
    "row, col",
    [
        (1, 1),      # diagonal
        (2, 0),      # two cells away
        (0, 2),      # two cells away
        (2, 2),      # the empty cell itself
        (3, 2),      # below the board
        (2, 3),      # right of the board
        (-1, 2),
        (2.0, 1),    # non-integer
        ("2", 1),
        (True, 1),
    ],
)
def test_illegal_move_is_rejected(row, col) -> None:
    state = PuzzleState(3)
    before = state.get_state()
    assert state.move(row, col) is False
    assert state.get_state() == before
    assert state.history_length == 0


@pytest.mark.parametrize("size", SIZES)
def test_random_walk_preserves_invariants(size: int) -> None:
    state = PuzzleState(size)
    rng = random.Random(size)
    for _ in range(300):
        cell = rng.choice(state.movable_cells())
        assert state.move(cell.row, cell.col)
        _assert_consistent(state)
    assert state.is_solvable()


# -- undo ---------------------------------------------------------------------


def test_undo_on_empty_history() -> None:
    state = PuzzleState(4)
    assert state.undo() is False
    assert state.is_solved()


@pytest.mark.parametrize("size", [3, 4, 7])
def test_move_then_undo_round_trip(size: int) -> None:
    state = PuzzleState(size)
    _random_walk(state, 40, seed=size)
    for cell in state.movable_cells():
        tiles, empty, length = state.tiles[:], state.empty_pos, state.history_length
        assert state.move(cell.row, cell.col)
        assert state.undo()
        assert state.tiles == tiles
        assert state.empty_pos == empty
        assert state.history_length == length


def test_undo_all_returns_to_solved() -> None:
    state = PuzzleState(4)
    _random_walk(state, 60, seed=7)
    while state.undo():
        pass
    assert state.is_solved()
    assert state.history_length == 0


def test_history_is_trimmed_to_recent_half() -> None:
    state = PuzzleState(3)
    for i in range(config.HISTORY_CEILING):
        assert state.move(2, 1) if i % 2 == 0 else state.move(2, 2)
    assert state.history_length == config.HISTORY_CEILING

    assert state.move(2, 1)
    assert state.history_length == config.HISTORY_RETAINED

    # The retained records still undo cleanly.
    for _ in range(config.HISTORY_RETAINED):
        assert state.undo()
    assert state.undo() is False
    _assert_consistent(state)


# -- inversions and solvability -----------------------------------------------


@pytest.mark.parametrize("size", SIZES)
def test_solved_state_has_no_inversions(size: int) -> None:
    state = PuzzleState(size)
    assert state.count_inversions() == 0
    assert state.is_solvable()


def test_single_swap_on_4x4_bottom_row_is_unsolvable() -> None:
    state = PuzzleState.from_flat(4, [2, 1, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 0])
    assert state.count_inversions() == 1
    assert state.is_solvable() is False


def test_single_swap_on_3x3_is_unsolvable() -> None:
    state = PuzzleState.from_flat(3, [1, 2, 3, 4, 5, 6, 8, 7, 0])
    assert state.count_inversions() == 1
    assert state.is_solvable() is False


def test_4x4_empty_one_row_up() -> None:
    # Tile 12 slid down: three inversions, empty one row above the bottom.
    state = PuzzleState.from_flat(4, [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 0, 13, 14, 15, 12])
    assert state.count_inversions() == 3
    assert state.is_solvable()


def test_4x4_swap_with_empty_one_row_up_is_unsolvable() -> None:
    state = PuzzleState.from_flat(4, [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 0, 13, 15, 14, 12])
    assert state.is_solvable() is False


# -- shuffle ------------------------------------------------------------------


@pytest.mark.parametrize("size", SIZES)
def test_shuffle_produces_solvable_unsolved_board(size: int) -> None:
    state = PuzzleState(size)
    state.shuffle(100, rng=random.Random(size))
    _assert_consistent(state)
    assert state.is_solvable()
    assert not state.is_solved()
    assert state.history_length == 0
    assert state.undo() is False


@pytest.mark.parametrize(
    "requested, per_attempt",
    [(None, 50), (0, 50), (5, 10), (37, 37), (5000, 1000)],
)
def test_shuffle_move_count_is_clamped(requested, per_attempt: int) -> None:
    rng = _CountingRandom(3)
    PuzzleState(4).shuffle(requested, rng=rng)
    assert rng.calls >= per_attempt
    assert rng.calls % per_attempt == 0


@pytest.mark.parametrize(
    "difficulty, per_attempt",
    [("easy", 20), ("medium", 50), ("hard", 100), ("expert", 200), ("nightmare", 50)],
)
def test_shuffle_with_difficulty(difficulty: str, per_attempt: int) -> None:
    rng = _CountingRandom(11)
    state = PuzzleState(4)
    state.shuffle_with_difficulty(difficulty, rng=rng)
    assert rng.calls % per_attempt == 0
    assert not state.is_solved()


def test_shuffle_retries_after_landing_on_goal() -> None:
    rng = _BouncingRandom(Cell(2, 2), bouncing_calls=10)
    state = PuzzleState(3)
    state.shuffle(10, rng=rng)
    assert rng.calls == 20
    assert not state.is_solved()
    assert state.is_solvable()
    assert state.history_length == 0
    _assert_consistent(state)


def test_shuffle_gives_up_after_attempt_cap() -> None:
    rng = _BouncingRandom(Cell(2, 2), bouncing_calls=10**6)
    state = PuzzleState(3)
    state.shuffle(10, rng=rng)
    assert rng.calls == config.SHUFFLE_ATTEMPTS * 10
    assert state.is_solved()
    assert state.history_length == 0


# -- clone and snapshots ------------------------------------------------------


def test_clone_is_independent() -> None:
    state = PuzzleState(4)
    _random_walk(state, 15, seed=2)
    copy = state.clone()
    assert copy == state
    assert copy.move_history == state.move_history

    cell = copy.movable_cells()[0]
    copy.move(cell.row, cell.col)
    assert copy != state
    assert copy.history_length == state.history_length + 1


def test_snapshot_round_trip_keeps_history() -> None:
    state = PuzzleState(3)
    _random_walk(state, 10, seed=4)
    snap = state.get_state()
    assert isinstance(snap, Snapshot)
    length = state.history_length

    state.set_state(snap)
    assert state.history_length == length
    assert state.undo()


def test_restoring_a_different_snapshot_clears_history() -> None:
    state = PuzzleState(3)
    snap = state.get_state()
    _random_walk(state, 10, seed=5)
    state.set_state(snap)
    assert state.is_solved()
    assert state.history_length == 0


def test_set_state_rejects_inconsistent_snapshot() -> None:
    state = PuzzleState(3)
    bad = Snapshot(size=3, tiles=tuple(state.tiles), empty_pos=Cell(0, 0))
    with pytest.raises(ValueError):
        state.set_state(bad)
    assert state.is_solved()
