#!/usr/bin/env python3
"""Fifteen Puzzle.

Usage::

    python main.py                       # interactive Rich menu, 4×4 medium
    python main.py -s 3 -d hard          # preselect size and difficulty
    python main.py --solve 1,2,3,4,5,6,0,7,8
                                         # print a solution and exit
"""

import logging
import sys
from enum import StrEnum
from math import isqrt
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend import config  # noqa: E402
from backend.engine.gamesolver import SearchStatus, Solver  # noqa: E402
from backend.models.board import PuzzleState  # noqa: E402


class Difficulty(StrEnum):
    easy = "easy"
    medium = "medium"
    hard = "hard"
    expert = "expert"


# -- helpers ------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _parse_tiles(raw: str) -> PuzzleState:
    try:
        flat = [int(part) for part in raw.replace(" ", "").split(",") if part]
    except ValueError:
        raise typer.BadParameter("Tiles must be comma-separated integers.") from None
    size = isqrt(len(flat))
    if size * size != len(flat):
        raise typer.BadParameter(f"{len(flat)} tiles do not form a square board.")
    try:
        return PuzzleState.from_flat(size, flat)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from None


def _print_solution(puzzle: PuzzleState, search: config.SearchConfig) -> None:
    console = Console()
    result = Solver.search(
        puzzle,
        search.max_iterations,
        time_limit=search.time_limit,
        max_open=search.max_open,
    )
    if result.status is SearchStatus.UNSOLVABLE:
        console.print("[red]Board is unsolvable.[/red]")
        raise typer.Exit(code=1)
    if result.status is SearchStatus.EXHAUSTED:
        console.print(
            f"[yellow]No solution within {result.iterations} iterations "
            f"({result.elapsed:.2f}s).[/yellow]"
        )
        raise typer.Exit(code=2)

    console.print(
        f"[green]{len(result.moves)} moves[/green] "
        f"[dim]({result.expanded} nodes expanded, {result.elapsed:.2f}s)[/dim]"
    )
    for i, cell in enumerate(result.moves, 1):
        value = puzzle.tile_at(cell.row, cell.col)
        puzzle.move(cell.row, cell.col)
        console.print(f"  {i:>3}. tile {value:>2}  ({cell.row}, {cell.col})")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    size: int = typer.Option(
        config.DEFAULT_SIZE, "-s", "--size",
        min=config.MIN_SIZE, max=config.MAX_SIZE,
        help="Grid size (3-10).",
    ),
    difficulty: Difficulty = typer.Option(
        Difficulty.medium, "-d", "--difficulty",
        help="Shuffle difficulty.",
    ),
    max_iterations: Optional[int] = typer.Option(
        None, "--max-iterations", min=1,
        help="Search iteration budget. Defaults depend on the board size.",
    ),
    time_limit: Optional[float] = typer.Option(
        None, "--time-limit", min=0.0,
        help="Wall-clock limit for a single search, in seconds.",
    ),
    solve: Optional[str] = typer.Option(
        None, "--solve",
        help="Comma-separated row-major tiles (0 = empty). Print a solution and exit.",
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Log solver activity.",
    ),
) -> None:
    """Fifteen Puzzle."""
    _configure_logging(verbose)

    puzzle = _parse_tiles(solve) if solve is not None else None
    board_size = puzzle.size if puzzle is not None else size

    search: config.SearchConfig | None = None
    if max_iterations is not None or time_limit is not None:
        default = config.SearchConfig.for_size(board_size)
        search = config.SearchConfig(
            max_iterations=max_iterations or default.max_iterations,
            time_limit=time_limit if time_limit is not None else default.time_limit,
            max_open=default.max_open,
        )

    if puzzle is not None:
        _print_solution(puzzle, search or config.SearchConfig.for_size(board_size))
        return

    from frontend.cli.rich.app import run

    run(size=size, difficulty=difficulty.value, search=search)


if __name__ == "__main__":
    app()
