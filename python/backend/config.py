"""Read-only configuration tables for the puzzle engine and game session."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

MIN_SIZE = 3
MAX_SIZE = 10
DEFAULT_SIZE = 4

HISTORY_CEILING = 1000
HISTORY_RETAINED = HISTORY_CEILING // 2

MIN_SHUFFLE_MOVES = 10
MAX_SHUFFLE_MOVES = 1000
DEFAULT_SHUFFLE_MOVES = 50
SHUFFLE_ATTEMPTS = 10

MAX_MOVE_COUNT = 100_000


@dataclass(frozen=True)
class Difficulty:
    name: str
    shuffle_moves: int
    time_bonus: float
    score_multiplier: float


DIFFICULTIES: Mapping[str, Difficulty] = MappingProxyType({
    "easy": Difficulty("easy", 20, 1.5, 0.8),
    "medium": Difficulty("medium", 50, 1.0, 1.0),
    "hard": Difficulty("hard", 100, 0.7, 1.3),
    "expert": Difficulty("expert", 200, 0.5, 1.5),
})

DEFAULT_DIFFICULTY = "medium"


@dataclass(frozen=True)
class PowerupLimits:
    default: int
    maximum: int


POWERUPS: Mapping[str, PowerupLimits] = MappingProxyType({
    "hint": PowerupLimits(default=3, maximum=5),
    "smart_move": PowerupLimits(default=1, maximum=2),
    "undo": PowerupLimits(default=5, maximum=10),
})


@dataclass(frozen=True)
class SearchConfig:
    """Effort bounds for a single solver call.

    ``time_limit`` is in seconds; ``None`` disables the bound.
    """

    max_iterations: int = 10_000
    time_limit: float | None = None
    max_open: int | None = None

    @classmethod
    def for_size(cls, size: int) -> SearchConfig:
        """Default budget for a board of *size*.

        Small boards get a budget big enough to finish most scrambles;
        large boards get a tight cap so a hint never stalls the caller.
        """
        if size <= 3:
            return cls(max_iterations=200_000, time_limit=5.0)
        if size == 4:
            return cls(max_iterations=50_000, time_limit=3.0, max_open=500_000)
        return cls(max_iterations=10_000, time_limit=1.0, max_open=100_000)


@dataclass(frozen=True)
class GameConfig:
    """Everything a game session needs, passed in explicitly."""

    size: int = DEFAULT_SIZE
    difficulty: str = DEFAULT_DIFFICULTY
    search: SearchConfig | None = None
    powerups: Mapping[str, PowerupLimits] = field(default_factory=lambda: POWERUPS)

    def __post_init__(self) -> None:
        object.__setattr__(self, "size", clamp_size(self.size))
        if self.difficulty not in DIFFICULTIES:
            object.__setattr__(self, "difficulty", DEFAULT_DIFFICULTY)

    @property
    def shuffle_moves(self) -> int:
        return DIFFICULTIES[self.difficulty].shuffle_moves

    @property
    def search_config(self) -> SearchConfig:
        return self.search or SearchConfig.for_size(self.size)


# -- range validation ---------------------------------------------------------


def clamp_size(size: int) -> int:
    return min(max(int(size), MIN_SIZE), MAX_SIZE)


def clamp_shuffle_moves(count: int | None) -> int:
    """Clamp a shuffle move count; ``None`` or ``0`` means the default."""
    if not count:
        count = DEFAULT_SHUFFLE_MOVES
    return min(max(int(count), MIN_SHUFFLE_MOVES), MAX_SHUFFLE_MOVES)


def shuffle_moves_for(difficulty: str) -> int:
    level = DIFFICULTIES.get(difficulty)
    return level.shuffle_moves if level else DEFAULT_SHUFFLE_MOVES
