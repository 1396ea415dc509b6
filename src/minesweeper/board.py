"""
Board module for Minesweeper game.

Implements the game board with deferred mine placement, flood-fill
revealing, flagging, chording, and win/loss detection.
"""
import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Set, Tuple

import numpy as np

from .cell import Cell, CellState, CellView

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameState(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


@dataclass
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines to place.
        label: Human-readable difficulty name.
    """

    width: int = 9
    height: int = 9
    num_mines: int = 10
    label: str = "Custom"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise ValueError("Board dimensions must be positive")
        if self.num_mines < 0:
            raise ValueError("Number of mines cannot be negative")
        # The first click may land where its safe zone is a full 3x3 block.
        max_mines = self.total_cells - min(3, self.width) * min(3, self.height)
        if self.num_mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        """Number of cells on the board."""
        return self.width * self.height

    @property
    def safe_cells(self) -> int:
        """Number of cells that must be revealed to win."""
        return self.total_cells - self.num_mines


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10, "Beginner")
INTERMEDIATE = BoardConfig(16, 16, 40, "Intermediate")
EXPERT = BoardConfig(30, 16, 99, "Expert")

DIFFICULTIES: Dict[str, BoardConfig] = {
    "beginner": BEGINNER,
    "intermediate": INTERMEDIATE,
    "expert": EXPERT,
}


def get_difficulty(name: str) -> BoardConfig:
    """
    Look up a preset by name.

    Raises:
        ValueError: If the name is not one of the presets.
    """
    try:
        return DIFFICULTIES[name.lower()]
    except KeyError:
        choices = ", ".join(DIFFICULTIES)
        raise ValueError(
            f"Unknown difficulty {name!r} (expected one of: {choices})"
        ) from None


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    Manages the grid of cells, mine placement, revealing logic,
    and win/lose conditions.
    """

    config: BoardConfig = field(default_factory=lambda: BoardConfig())
    rng: random.Random = field(default_factory=random.Random, repr=False)
    _grid: List[List[Cell]] = field(default_factory=list, repr=False)
    _game_state: GameState = GameState.PLAYING
    _first_click: bool = True
    _cells_revealed: int = 0
    _flags_used: int = 0

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        self._init_grid()

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self._grid = [
            [Cell() for _ in range(self.config.width)]
            for _ in range(self.config.height)
        ]

    def _place_mines(self, safe_row: int, safe_col: int) -> None:
        """
        Place mines randomly outside the safe zone of the first click.

        Args:
            safe_row: Row of the first revealed cell.
            safe_col: Column of the first revealed cell.

        Raises:
            ValueError: If the mines cannot fit outside the safe zone.
        """
        positions = self._get_valid_mine_positions(safe_row, safe_col)
        if self.config.num_mines > len(positions):
            raise ValueError(
                f"Cannot place {self.config.num_mines} mines: only "
                f"{len(positions)} cells lie outside the safe zone"
            )
        mine_positions = self.rng.sample(positions, self.config.num_mines)
        self._lay_mines(mine_positions)
        logger.debug(
            "Placed %d mines avoiding (%d, %d)",
            self.config.num_mines, safe_row, safe_col,
        )

    def _get_valid_mine_positions(
        self, safe_row: int, safe_col: int
    ) -> List[Tuple[int, int]]:
        """Get all positions farther than one step from the safe cell."""
        positions = []
        for row in range(self.config.height):
            for col in range(self.config.width):
                if abs(row - safe_row) <= 1 and abs(col - safe_col) <= 1:
                    continue
                positions.append((row, col))
        return positions

    def _lay_mines(self, positions: Iterable[Tuple[int, int]]) -> None:
        """Put mines at the given positions and compute neighbor counts."""
        for row, col in positions:
            self._grid[row][col].is_mine = True
        self._first_click = False
        self._calculate_neighbor_mines()

    def _calculate_neighbor_mines(self) -> None:
        """Calculate neighbor mine counts for all cells."""
        for row in range(self.config.height):
            for col in range(self.config.width):
                if not self._grid[row][col].is_mine:
                    count = self._count_neighbor_mines(row, col)
                    self._grid[row][col].neighbor_mines = count

    def _count_neighbor_mines(self, row: int, col: int) -> int:
        """Count mines adjacent to a specific cell."""
        count = 0
        for neighbor_row, neighbor_col in self._get_neighbors(row, col):
            if self._grid[neighbor_row][neighbor_col].is_mine:
                count += 1
        return count

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _get_neighbors(
        self, row: int, col: int
    ) -> List[Tuple[int, int]]:
        """
        Get valid neighboring cell positions.

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            List of (row, col) tuples for valid neighbors.
        """
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self._is_valid_position(new_row, new_col):
                    neighbors.append((new_row, new_col))
        return neighbors

    def _is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.config.height and 0 <= col < self.config.width

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(self, row: int, col: int) -> bool:
        """
        Reveal a cell at the given position.

        On first click, places mines outside the clicked cell's safe zone.
        If cell is blank (0 neighbor mines), flood fills its region.
        If cell is a mine, game is lost.

        Args:
            row: Row index to reveal.
            col: Column index to reveal.

        Returns:
            True if reveal was accepted, False otherwise.
        """
        if not self._can_reveal(row, col):
            return False

        if self._first_click:
            self._place_mines(row, col)

        self._reveal_cell(row, col)
        return True

    def _can_reveal(self, row: int, col: int) -> bool:
        """Check if a cell can be revealed."""
        if self._game_state != GameState.PLAYING:
            return False
        if not self._is_valid_position(row, col):
            return False
        cell = self._grid[row][col]
        return cell.state == CellState.HIDDEN

    def _reveal_cell(self, row: int, col: int) -> None:
        """Reveal a cell, flood filling through blanks, then check for a win."""
        stack = [(row, col)]
        while stack:
            current_row, current_col = stack.pop()
            cell = self._grid[current_row][current_col]
            # Revealed cells are visited; flagged cells are barriers.
            if not cell.reveal():
                continue

            self._cells_revealed += 1

            if cell.is_mine:
                self._game_state = GameState.LOST
                logger.info("Mine hit at (%d, %d)", current_row, current_col)
                return

            if cell.neighbor_mines == 0:
                for neighbor in self._get_neighbors(current_row, current_col):
                    if self._grid[neighbor[0]][neighbor[1]].is_hidden:
                        stack.append(neighbor)

        self._check_win_condition()

    def _check_win_condition(self) -> None:
        """Check if all non-mine cells are revealed."""
        if self._game_state != GameState.PLAYING:
            return
        if self._cells_revealed == self.config.safe_cells:
            self._game_state = GameState.WON
            logger.info("All %d safe cells revealed", self.config.safe_cells)

    def flag(self, row: int, col: int) -> bool:
        """
        Toggle flag on a cell.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            True if flag was toggled, False otherwise.
        """
        if self._game_state != GameState.PLAYING:
            return False
        if not self._is_valid_position(row, col):
            return False
        cell = self._grid[row][col]
        if not cell.toggle_flag():
            return False
        self._flags_used += 1 if cell.is_flagged else -1
        return True

    def chord(self, row: int, col: int) -> bool:
        """
        Chord action: reveal all unflagged neighbors if flag count matches.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            True if chord was performed, False otherwise.
        """
        if not self._can_chord(row, col):
            return False

        revealed_any = False
        for neighbor_row, neighbor_col in self._get_neighbors(row, col):
            if self._game_state != GameState.PLAYING:
                break
            neighbor = self._grid[neighbor_row][neighbor_col]
            if neighbor.state == CellState.HIDDEN:
                self._reveal_cell(neighbor_row, neighbor_col)
                revealed_any = True

        return revealed_any

    def _can_chord(self, row: int, col: int) -> bool:
        """Check if chord action is valid."""
        if self._game_state != GameState.PLAYING:
            return False
        if not self._is_valid_position(row, col):
            return False
        cell = self._grid[row][col]
        if not cell.is_revealed or cell.neighbor_mines == 0:
            return False
        flag_count = self._count_neighbor_flags(row, col)
        return flag_count == cell.neighbor_mines

    def _count_neighbor_flags(self, row: int, col: int) -> int:
        """Count flagged cells adjacent to position."""
        count = 0
        for neighbor_row, neighbor_col in self._get_neighbors(row, col):
            if self._grid[neighbor_row][neighbor_col].is_flagged:
                count += 1
        return count

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        return self._game_state

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._game_state == GameState.PLAYING

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._game_state == GameState.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._game_state == GameState.LOST

    @property
    def is_first_click(self) -> bool:
        """Check if mines are still waiting for the first reveal."""
        return self._first_click

    @property
    def cells_revealed(self) -> int:
        """Number of revealed cells, including a detonated mine."""
        return self._cells_revealed

    @property
    def flags_used(self) -> int:
        """Number of flags currently on the board."""
        return self._flags_used

    @property
    def mines_remaining(self) -> int:
        """Mines left to flag, clamped at zero."""
        return max(0, self.config.num_mines - self._flags_used)

    @property
    def progress_percent(self) -> int:
        """Share of safe cells revealed, as a whole percentage."""
        progress = 100 * self._cells_revealed // self.config.safe_cells
        return max(0, min(100, progress))

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self._is_valid_position(row, col):
            return None
        return self._grid[row][col]

    def cell_view(self, row: int, col: int) -> Optional[CellView]:
        """Get the player-visible view of a cell, or None if invalid."""
        cell = self.get_cell(row, col)
        if cell is None:
            return None
        return cell.to_view(game_over=not self.is_playing)

    def mine_positions(self) -> Set[Tuple[int, int]]:
        """Get positions of every placed mine."""
        return {
            (row, col)
            for row in range(self.config.height)
            for col in range(self.config.width)
            if self._grid[row][col].is_mine
        }

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array.

        Returns:
            2D numpy array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with neighbor count
                9 = revealed mine, or any mine once the game is over
        """
        game_over = not self.is_playing
        obs = np.zeros((self.config.height, self.config.width), dtype=np.int8)
        for row in range(self.config.height):
            for col in range(self.config.width):
                obs[row, col] = self._grid[row][col].to_observation(game_over)
        return obs

    def get_valid_actions(self) -> List[Tuple[int, int]]:
        """
        Get list of valid cells to reveal.

        Returns:
            List of (row, col) positions that can be revealed.
        """
        actions = []
        for row in range(self.config.height):
            for col in range(self.config.width):
                if self._grid[row][col].state == CellState.HIDDEN:
                    actions.append((row, col))
        return actions
