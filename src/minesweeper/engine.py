"""
Game engine for Minesweeper.

Owns one game session at a time: the board, the click counter, the
timer and the end-of-game summary. The presentation layer sends commands
and reads views and statistics back.
"""
import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional, Union

import numpy as np

from .board import Board, BoardConfig, get_difficulty
from .cell import CellView
from .timer import GameTimer, Scheduler

logger = logging.getLogger(__name__)

Difficulty = Union[str, BoardConfig]


# ============================================================================
# Reported State
# ============================================================================

@dataclass(frozen=True)
class GameStats:
    """Aggregate statistics shown alongside the board."""

    mines_remaining: int
    flags_used: int
    click_count: int
    progress_percent: int
    elapsed_seconds: int
    is_game_over: bool
    is_win: bool
    difficulty_label: str


@dataclass(frozen=True)
class GameSummary:
    """Summary handed to the presentation layer when a game ends."""

    elapsed_seconds: int
    click_count: int
    difficulty_label: str
    won: bool


# ============================================================================
# Game Engine
# ============================================================================

class GameEngine:
    """
    A single-player Minesweeper session manager.

    Commands that do not apply to the current state (revealing a flagged
    cell, chording a blank, acting after the game ended) are ignored and
    return False.
    """

    def __init__(
        self,
        difficulty: Difficulty = "beginner",
        scheduler: Optional[Scheduler] = None,
        seed: Optional[int] = None,
        on_game_over: Optional[Callable[[GameSummary], None]] = None,
        on_tick: Optional[Callable[[int], None]] = None,
    ) -> None:
        """
        Initialize the engine and start a first game.

        Args:
            difficulty: Preset name or a custom board configuration.
            scheduler: Drives timer ticks; None means the caller ticks
                the engine itself once per second.
            seed: Seed for mine placement, for reproducible games.
            on_game_over: Called once with the summary when a game ends.
            on_tick: Called with the elapsed seconds on every timer tick.
        """
        self.scheduler = scheduler
        self.on_game_over = on_game_over
        self.on_tick = on_tick
        self.rng = random.Random(seed)
        self.config = self._resolve(difficulty)
        self._timer = GameTimer(scheduler, on_tick)
        self._click_count = 0
        self._summary: Optional[GameSummary] = None
        self.start_new_game()

    @staticmethod
    def _resolve(difficulty: Difficulty) -> BoardConfig:
        """Turn a preset name or configuration into a BoardConfig."""
        if isinstance(difficulty, BoardConfig):
            return difficulty
        return get_difficulty(difficulty)

    # ========================================================================
    # Session Commands
    # ========================================================================

    def set_difficulty(self, name: str) -> None:
        """
        Select a preset and immediately start a new game with it.

        Raises:
            ValueError: If the name is not a known preset.
        """
        self.start_new_game(get_difficulty(name))

    def start_new_game(self, difficulty: Optional[Difficulty] = None) -> None:
        """
        Discard the current session and start a fresh one.

        Args:
            difficulty: Optional new preset name or configuration; the
                current one is kept when omitted.
        """
        if difficulty is not None:
            self.config = self._resolve(difficulty)

        # Cancel first so a pending tick cannot reach the discarded session.
        self._timer.stop()
        self._timer = GameTimer(self.scheduler, self.on_tick)
        self.board = Board(self.config, self.rng)
        self._click_count = 0
        self._summary = None
        logger.debug(
            "New %s game: %dx%d with %d mines",
            self.config.label, self.config.height,
            self.config.width, self.config.num_mines,
        )

    def tick(self) -> bool:
        """Advance the timer by one second if it is running."""
        return self._timer.tick()

    def stop_timer(self) -> None:
        """Stop the timer without ending the game."""
        self._timer.stop()

    # ========================================================================
    # Gameplay Commands
    # ========================================================================

    def reveal(self, row: int, col: int) -> bool:
        """
        Reveal a cell as a player click.

        The first accepted reveal places the mines and starts the timer.

        Returns:
            True if the reveal was accepted.
        """
        first_click = self.board.is_first_click
        if not self.board.reveal(row, col):
            return False

        self._click_count += 1
        if first_click:
            self._timer.start()
        self._check_game_over()
        return True

    def toggle_flag(self, row: int, col: int) -> bool:
        """Flag or unflag a hidden cell. Returns True if toggled."""
        return self.board.flag(row, col)

    def chord_reveal(self, row: int, col: int) -> bool:
        """
        Reveal the unflagged neighbors of a satisfied numbered cell.

        Returns:
            True if any neighbor was revealed.
        """
        if not self.board.chord(row, col):
            return False
        self._check_game_over()
        return True

    def _check_game_over(self) -> None:
        """Finish the session once the board reaches a terminal state."""
        if self.board.is_playing or self._summary is not None:
            return

        self._timer.stop()
        self._summary = GameSummary(
            elapsed_seconds=self._timer.elapsed_seconds,
            click_count=self._click_count,
            difficulty_label=self.config.label,
            won=self.board.is_won,
        )
        logger.info(
            "Game %s after %ds and %d clicks",
            "won" if self._summary.won else "lost",
            self._summary.elapsed_seconds, self._summary.click_count,
        )
        if self.on_game_over:
            self.on_game_over(self._summary)

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def is_game_over(self) -> bool:
        """Check if the current game has ended."""
        return not self.board.is_playing

    @property
    def is_win(self) -> bool:
        """Check if the current game was won."""
        return self.board.is_won

    @property
    def is_first_click(self) -> bool:
        """Check if the next accepted reveal will place the mines."""
        return self.board.is_first_click

    @property
    def difficulty_label(self) -> str:
        """Label of the current board configuration."""
        return self.config.label

    @property
    def click_count(self) -> int:
        """Number of accepted reveal commands this game."""
        return self._click_count

    @property
    def elapsed_seconds(self) -> int:
        """Seconds counted by the current game timer."""
        return self._timer.elapsed_seconds

    @property
    def timer(self) -> GameTimer:
        """Timer of the current session."""
        return self._timer

    @property
    def summary(self) -> Optional[GameSummary]:
        """End-of-game summary, or None while the game is running."""
        return self._summary

    def cell_view(self, row: int, col: int) -> Optional[CellView]:
        """Get what the player may see of a cell, or None if invalid."""
        return self.board.cell_view(row, col)

    def get_observation(self) -> np.ndarray:
        """Get the visible board as an int8 array."""
        return self.board.get_observation()

    def stats(self) -> GameStats:
        """Compute the aggregate statistics for the current game."""
        return GameStats(
            mines_remaining=self.board.mines_remaining,
            flags_used=self.board.flags_used,
            click_count=self._click_count,
            progress_percent=self.board.progress_percent,
            elapsed_seconds=self._timer.elapsed_seconds,
            is_game_over=self.is_game_over,
            is_win=self.is_win,
            difficulty_label=self.config.label,
        )
