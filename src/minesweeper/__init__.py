"""
Minesweeper game module.

Provides the game engine: board generation, reveal propagation,
flagging, chording, timing, and the presentation layers built on it.
"""
from .cell import Cell, CellState, CellView
from .board import (
    Board,
    BoardConfig,
    GameState,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
    DIFFICULTIES,
    get_difficulty,
)
from .timer import GameTimer, Scheduler
from .engine import GameEngine, GameStats, GameSummary
from .environment import ActionType, MinesweeperEnv

__all__ = [
    "Cell",
    "CellState",
    "CellView",
    "Board",
    "BoardConfig",
    "GameState",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "DIFFICULTIES",
    "get_difficulty",
    "GameTimer",
    "Scheduler",
    "GameEngine",
    "GameStats",
    "GameSummary",
    "ActionType",
    "MinesweeperEnv",
]
