"""Rich terminal frontend — tables, colours, and panels.

Includes a built-in menu for size and difficulty selection, a scored
play mode with power-ups, and a study mode with unlimited hints and
auto-solve.
"""

from __future__ import annotations

import sys
import time

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend import config
from backend.config import GameConfig
from backend.engine.gamegenerator import GameGenerator
from backend.engine.gameplay import GamePlay
from backend.engine.gamesolver import Solver
from backend.models.board import Cell, Direction, PuzzleState
from frontend.cli.input_handler import get_key, get_key_timeout

console = Console()

_DIRECTIONS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}

_DIFFICULTY_NAMES = list(config.DIFFICULTIES)

# -- helpers ------------------------------------------------------------------


def _format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def _describe(puzzle: PuzzleState, cell: Cell) -> str:
    return f"tile [bold]{puzzle.tile_at(cell.row, cell.col)}[/bold] at ({cell.row}, {cell.col})"


# -- board rendering ----------------------------------------------------------


def render_board(puzzle: PuzzleState, highlight: Cell | None = None) -> Table:
    """Return a Rich Table representing the puzzle grid."""
    width = len(str(puzzle.size * puzzle.size - 1))
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(puzzle.size):
        table.add_column(width=width + 1, justify="center")

    for r, row in enumerate(puzzle.rows()):
        cells: list[str] = []
        for c, val in enumerate(row):
            if val == 0:
                cells.append("[dim]·[/dim]")
            elif highlight == (r, c):
                cells.append(f"[bold black on yellow]{val:>{width}}[/bold black on yellow]")
            elif puzzle.is_tile_correct(r, c):
                cells.append(f"[bold green]{val:>{width}}[/bold green]")
            else:
                cells.append(f"[bold white]{val:>{width}}[/bold white]")
        table.add_row(*cells)

    return table


def _powerup_line(game: GamePlay) -> Text:
    line = Text()
    for key, name, label in (("N", "hint", "hint"), ("M", "smart_move", "smart"),
                             ("U", "undo", "undo")):
        left = game.powerups.get(name, 0)
        line.append(f"  {key}", style="bold cyan" if left else "dim")
        line.append(f" {label} ", style="dim")
        line.append(f"×{left}", style="bold yellow" if left else "dim")
    return line


# -- solver helpers -----------------------------------------------------------


def _auto_solve(game: GamePlay) -> str:
    puzzle = game.puzzle
    if puzzle.is_solved():
        return "[green]Already solved![/green]"

    with console.status("[cyan]Searching…[/cyan]"):
        moves = game.auto_solve()

    if moves is None:
        if not puzzle.is_solvable():
            return "[red]Board is unsolvable.[/red]"
        return "[yellow]No solution found within the search budget.[/yellow]"

    for i, cell in enumerate(moves):
        game.move_tile(cell.row, cell.col)
        console.clear()

        progress = Text()
        progress.append(f"  Solving… move {i + 1}/{len(moves)} ", style="bold cyan")
        progress.append(f"({cell.row}, {cell.col})", style="dim")

        panel = Panel(
            Align.center(render_board(game.puzzle)),
            title=f"[bold cyan]Auto-Solve  {game.size}×{game.size}[/bold cyan]",
            border_style="cyan",
            padding=(1, 2),
        )
        console.print()
        console.print(Align.center(panel))
        console.print(Align.center(progress))
        sys.stdout.flush()
        time.sleep(0.05)

    return f"[bold green]Solved in {len(moves)} moves![/bold green]"


def _hint(game: GamePlay) -> tuple[Cell | None, str]:
    with console.status("[cyan]Thinking…[/cyan]"):
        cell = game.use_hint()
    if cell is None:
        if game.powerups.get("hint", 0) <= 0:
            return None, "[yellow]No hints left.[/yellow]"
        return None, "[yellow]No hint available right now.[/yellow]"
    return cell, f"[cyan]Hint:[/cyan] move {_describe(game.puzzle, cell)}"


def _smart_move(game: GamePlay) -> str:
    cell = game.use_smart_move()
    if cell is None:
        return "[yellow]No smart moves left.[/yellow]"
    return f"[cyan]Smart move applied[/cyan] ({cell.row}, {cell.col})"


def _undo(game: GamePlay) -> str:
    if game.use_undo():
        return "[cyan]Move undone.[/cyan]"
    if game.powerups.get("undo", 0) <= 0:
        return "[yellow]No undos left.[/yellow]"
    return "[yellow]Nothing to undo.[/yellow]"


# -- menu screen --------------------------------------------------------------


def _selector(options: list[str], selected: str) -> Text:
    line = Text()
    for i, opt in enumerate(options):
        if i:
            line.append("  ")
        if opt == selected:
            line.append(f" {opt} ", style="bold green on #313244")
        else:
            line.append(f" {opt} ", style="dim")
    return line


def _draw_menu(sel_size: int, sel_difficulty: str) -> None:
    console.clear()

    sizes = _selector(
        [f"{s}×{s}" for s in range(config.MIN_SIZE, config.MAX_SIZE + 1)],
        f"{sel_size}×{sel_size}",
    )
    difficulties = _selector(_DIFFICULTY_NAMES, sel_difficulty)
    nav = Text("  ← →  size     ↑ ↓  difficulty", style="dim")

    opts = Text()
    opts.append("  1", style="bold cyan")
    opts.append("  Play    ")
    opts.append("2", style="bold yellow")
    opts.append("  Study    ")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    body = Group(
        Text(""),
        Align.center(sizes),
        Align.center(difficulties),
        Align.center(nav),
        Text(""),
        Align.center(opts),
        Text(""),
    )

    panel = Panel(
        body,
        title="[bold]F I F T E E N   P U Z Z L E[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )

    console.print()
    console.print(Align.center(panel))


# -- game screens -------------------------------------------------------------


def _stats(game: GamePlay) -> Text:
    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(game.state.moves), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(_format_time(game.state.elapsed_time), style="bold yellow")
    return stats


def _draw_game(game: GamePlay, status: str = "", highlight: Cell | None = None) -> None:
    """Draw the play screen (stats and power-ups visible)."""
    console.clear()

    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append("  move   ", style="dim")
    controls.append("R", style="bold cyan")
    controls.append("  restart   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  back", style="dim")

    panel = Panel(
        Align.center(render_board(game.puzzle, highlight)),
        title=(
            f"[bold cyan]Fifteen  {game.size}×{game.size}  "
            f"({game.config.difficulty})[/bold cyan]"
        ),
        border_style="bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    # Save the cursor right before the stats line so _update_time() can
    # repaint just that line.
    sys.stdout.write("\033[s")
    sys.stdout.flush()
    console.print(Align.center(_stats(game)))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(_powerup_line(game)))
    console.print(Align.center(controls))


def _update_time(game: GamePlay) -> None:
    """Overwrite just the stats line using the saved cursor position."""
    _DIM = "\033[2m"
    _YB = "\033[33;1m"
    _RS = "\033[0m"

    moves = game.state.moves
    clock = _format_time(game.state.elapsed_time)
    stats_raw = (
        f"{_DIM}Moves: {_RS}{_YB}{moves}{_RS}"
        f"    {_DIM}Time: {_RS}{_YB}{clock}{_RS}"
    )
    visible_len = len(f"Moves: {moves}    Time: {clock}")
    pad = max(0, (console.width - visible_len) // 2)

    sys.stdout.write(f"\033[u\033[K{' ' * pad}{stats_raw}")
    sys.stdout.flush()


def _draw_study(game: GamePlay, status: str = "", highlight: Cell | None = None) -> None:
    """Draw the study screen (no stats, scramble/solve available)."""
    console.clear()

    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append("  move   ", style="dim")
    controls.append("R", style="bold yellow")
    controls.append("  scramble   ", style="dim")
    controls.append("N", style="bold cyan")
    controls.append("  hint   ", style="dim")
    controls.append("U", style="bold cyan")
    controls.append("  undo   ", style="dim")
    controls.append("V", style="bold cyan")
    controls.append("  solve   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  back", style="dim")

    panel = Panel(
        Align.center(render_board(game.puzzle, highlight)),
        title=f"[bold yellow]Study  {game.size}×{game.size}[/bold yellow]",
        border_style="yellow",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))


def _draw_win(game: GamePlay) -> None:
    console.clear()

    congrats = Text()
    congrats.append("\n  ★ ", style="bold yellow")
    congrats.append("CONGRATULATIONS!", style="bold green")
    congrats.append("  You solved it!  ", style="green")
    congrats.append("★\n", style="bold yellow")

    stats = _stats(game)
    stats.append("    Hints: ", style="dim")
    stats.append(str(game.state.hints_used), style="bold yellow")

    group = Group(
        Align.center(render_board(game.puzzle)),
        Align.center(congrats),
        Align.center(stats),
    )

    panel = Panel(
        group,
        title=f"[bold green]Fifteen  {game.size}×{game.size}[/bold green]",
        border_style="bold green",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))


# -- game loops ---------------------------------------------------------------


def _play_game(game_config: GameConfig) -> None:
    """Play mode — scored, power-ups limited."""
    while True:
        game = GamePlay(config=game_config)
        status = ""
        highlight: Cell | None = None

        while not game.is_won:
            _draw_game(game, status, highlight)
            status = ""
            highlight = None

            # Short timeout so the clock keeps ticking.
            while True:
                key = get_key_timeout(0.5)
                if key is not None:
                    break
                _update_time(game)

            if key in _DIRECTIONS:
                game.move(_DIRECTIONS[key])
            elif key == "hint":
                highlight, status = _hint(game)
            elif key == "smart":
                status = _smart_move(game)
            elif key == "undo":
                status = _undo(game)
            elif key == "restart":
                game.restart()
            elif key == "quit":
                return

        _draw_win(game)
        console.print(
            Align.center(
                Text("\n  Press R to play again, Q to go back.\n", style="dim")
            )
        )

        while True:
            key = get_key()
            if key == "restart":
                break
            if key == "quit":
                return


def _study_game(game_config: GameConfig) -> None:
    """Study mode — starts solved, unlimited hints, undo and auto-solve."""
    game = GamePlay.from_puzzle(GameGenerator.solved(game_config.size), game_config)
    status = ""
    highlight: Cell | None = None

    while True:
        _draw_study(game, status, highlight)
        status = ""
        highlight = None
        key = get_key()

        if key in _DIRECTIONS:
            game.move(_DIRECTIONS[key])
        elif key == "restart":
            puzzle = GameGenerator.generate(game_config.size, game_config.difficulty)
            game = GamePlay.from_puzzle(puzzle, game_config)
            status = "[yellow]Scrambled![/yellow]"
        elif key == "hint":
            search = game_config.search_config
            with console.status("[cyan]Thinking…[/cyan]"):
                highlight = Solver.hint(
                    game.puzzle,
                    search.max_iterations,
                    time_limit=search.time_limit,
                    max_open=search.max_open,
                )
            if highlight is None:
                status = "[yellow]No hint available right now.[/yellow]"
        elif key == "undo":
            if not game.puzzle.undo():
                status = "[yellow]Nothing to undo.[/yellow]"
        elif key == "solve":
            status = _auto_solve(game)
        elif key == "quit":
            return


# -- menu loop ----------------------------------------------------------------


def _menu_loop(sel_size: int, sel_difficulty: str, search: config.SearchConfig | None) -> None:
    while True:
        _draw_menu(sel_size, sel_difficulty)
        key = get_key()
        idx = _DIFFICULTY_NAMES.index(sel_difficulty)

        if key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key == "left":
            sel_size = max(config.MIN_SIZE, sel_size - 1)
        elif key == "right":
            sel_size = min(config.MAX_SIZE, sel_size + 1)
        elif key == "up":
            sel_difficulty = _DIFFICULTY_NAMES[max(0, idx - 1)]
        elif key == "down":
            sel_difficulty = _DIFFICULTY_NAMES[min(len(_DIFFICULTY_NAMES) - 1, idx + 1)]
        elif key in ("1", "enter"):
            _play_game(GameConfig(size=sel_size, difficulty=sel_difficulty, search=search))
        elif key == "2":
            _study_game(GameConfig(size=sel_size, difficulty=sel_difficulty, search=search))


# -- public entry point -------------------------------------------------------


def run(size: int = config.DEFAULT_SIZE,
        difficulty: str = config.DEFAULT_DIFFICULTY,
        search: config.SearchConfig | None = None) -> None:
    """Launch the Rich CLI with interactive menu."""
    if difficulty not in config.DIFFICULTIES:
        difficulty = config.DEFAULT_DIFFICULTY
    _menu_loop(config.clamp_size(size), difficulty, search)
