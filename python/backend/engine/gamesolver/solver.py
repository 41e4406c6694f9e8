"""Sliding puzzle solver.

Best-first search over tile arrangements guided by the Manhattan
distance heuristic. Nodes carry immutable tile tuples, so exploration
never touches the caller's live ``PuzzleState``; the tuple itself is the
closed-set key.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterable

from backend.models.board import Cell, PuzzleState

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 10_000


class SearchStatus(StrEnum):
    SOLVED = "solved"
    UNSOLVABLE = "unsolvable"
    EXHAUSTED = "exhausted"


@dataclass
class SearchResult:
    """Outcome of one ``Solver.search`` call.

    ``moves`` is ``None`` unless ``status`` is ``SOLVED``.
    """

    status: SearchStatus
    moves: list[Cell] | None = None
    iterations: int = 0
    expanded: int = 0
    elapsed: float = 0.0

    @property
    def found(self) -> bool:
        return self.status is SearchStatus.SOLVED


@dataclass(order=True)
class _Node:
    priority: int
    seq: int
    tiles: tuple[int, ...] = field(compare=False)
    empty: int = field(compare=False)
    h: int = field(compare=False)
    g: int = field(compare=False)
    parent: _Node | None = field(compare=False, default=None)
    moved_from: int = field(compare=False, default=-1)


def _neighbours(size: int) -> list[tuple[int, ...]]:
    """Movable indices around every empty index, in up/down/left/right order."""
    adj: list[tuple[int, ...]] = []
    for i in range(size * size):
        r, c = divmod(i, size)
        nb: list[int] = []
        if r > 0:
            nb.append(i - size)
        if r < size - 1:
            nb.append(i + size)
        if c > 0:
            nb.append(i - 1)
        if c < size - 1:
            nb.append(i + 1)
        adj.append(tuple(nb))
    return adj


def _distance(size: int, value: int, index: int) -> int:
    r, c = divmod(index, size)
    gr, gc = divmod(value - 1, size)
    return abs(r - gr) + abs(c - gc)


def _manhattan(size: int, tiles: Iterable[int]) -> int:
    return sum(
        _distance(size, v, i) for i, v in enumerate(tiles) if v != 0
    )


def _path(node: _Node, size: int) -> list[Cell]:
    moves: list[Cell] = []
    while node.parent is not None:
        moves.append(Cell(*divmod(node.moved_from, size)))
        node = node.parent
    moves.reverse()
    return moves


class Solver:
    """Stateless solver — all methods are static."""

    @staticmethod
    def heuristic(state: PuzzleState) -> int:
        """Sum of Manhattan distances of every tile from its goal cell."""
        return _manhattan(state.size, state.tiles)

    @staticmethod
    def is_solvable(state: PuzzleState) -> bool:
        """Return True if *state* can reach the goal state."""
        return state.is_solvable()

    @staticmethod
    def search(
        state: PuzzleState,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        *,
        time_limit: float | None = None,
        max_open: int | None = None,
    ) -> SearchResult:
        """Search for a move sequence that solves *state*.

        The open set is ordered by ``moves so far + heuristic``; equal
        costs pop in discovery order. Every pop counts as an iteration,
        including pops of already-closed arrangements. The search gives
        up with ``EXHAUSTED`` when *max_iterations* pops, *time_limit*
        seconds, or *max_open* queued nodes are exceeded.

        *state* is restored to its original snapshot before returning.
        """
        started = time.monotonic()
        if state.is_solved():
            return SearchResult(SearchStatus.SOLVED, moves=[])
        if not state.is_solvable():
            logger.debug("Search skipped: %d×%d board is unsolvable", state.size, state.size)
            return SearchResult(SearchStatus.UNSOLVABLE)

        snapshot = state.get_state()
        try:
            result = Solver._best_first(
                state, max_iterations, started, time_limit, max_open
            )
        finally:
            state.set_state(snapshot)

        result.elapsed = time.monotonic() - started
        logger.debug(
            "Search on %d×%d board %s after %d iterations (%d expanded, %.3fs)",
            state.size, state.size, result.status, result.iterations,
            result.expanded, result.elapsed,
        )
        return result

    @staticmethod
    def solve(
        state: PuzzleState,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        *,
        time_limit: float | None = None,
        max_open: int | None = None,
    ) -> list[Cell] | None:
        """Return the cells to move to solve *state*.

        ``[]`` if already solved; ``None`` if unsolvable or the budget
        runs out first.
        """
        return Solver.search(
            state, max_iterations, time_limit=time_limit, max_open=max_open
        ).moves

    @staticmethod
    def hint(
        state: PuzzleState,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        *,
        time_limit: float | None = None,
        max_open: int | None = None,
    ) -> Cell | None:
        """Return the first move of a solution, or ``None`` if there is none."""
        moves = Solver.solve(
            state, max_iterations, time_limit=time_limit, max_open=max_open
        )
        return moves[0] if moves else None

    @staticmethod
    def best_immediate_move(state: PuzzleState) -> Cell:
        """Greedy one-ply lookahead: the movable cell whose move scores lowest.

        Ties go to the first cell in ``movable_cells()`` order.
        """
        cells = state.movable_cells()
        best = cells[0]
        best_cost: int | None = None
        for cell in cells:
            trial = state.clone()
            trial.move(cell.row, cell.col)
            cost = Solver.heuristic(trial)
            if best_cost is None or cost < best_cost:
                best, best_cost = cell, cost
        return best

    @staticmethod
    def apply(state: PuzzleState, moves: Iterable[Cell]) -> bool:
        """Replay *moves* on *state*; stop and return False at the first illegal one."""
        for cell in moves:
            if not state.move(cell.row, cell.col):
                return False
        return True

    # -- search core ----------------------------------------------------------

    @staticmethod
    def _best_first(
        state: PuzzleState,
        max_iterations: int,
        started: float,
        time_limit: float | None,
        max_open: int | None,
    ) -> SearchResult:
        n = state.size
        adj = _neighbours(n)
        counter = itertools.count()

        start_tiles = tuple(state.tiles)
        h0 = _manhattan(n, start_tiles)
        root = _Node(h0, next(counter), start_tiles, start_tiles.index(0), h0, 0)
        open_heap: list[_Node] = [root]
        closed: set[tuple[int, ...]] = set()
        iterations = 0
        expanded = 0

        def exhausted() -> SearchResult:
            return SearchResult(
                SearchStatus.EXHAUSTED, iterations=iterations, expanded=expanded
            )

        while open_heap and iterations < max_iterations:
            iterations += 1
            if time_limit is not None and time.monotonic() - started > time_limit:
                return exhausted()

            node = heapq.heappop(open_heap)
            if node.tiles in closed:
                continue
            closed.add(node.tiles)

            if node.h == 0:
                return SearchResult(
                    SearchStatus.SOLVED,
                    moves=_path(node, n),
                    iterations=iterations,
                    expanded=expanded,
                )

            expanded += 1
            blank = node.empty
            g = node.g + 1
            for src in adj[blank]:
                tiles = list(node.tiles)
                value = tiles[src]
                tiles[blank] = value
                tiles[src] = 0
                key = tuple(tiles)
                if key in closed:
                    continue
                h = node.h - _distance(n, value, src) + _distance(n, value, blank)
                heapq.heappush(
                    open_heap,
                    _Node(g + h, next(counter), key, src, h, g, node, src),
                )

            if max_open is not None and len(open_heap) > max_open:
                return exhausted()

        return exhausted()
