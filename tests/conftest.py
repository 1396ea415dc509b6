"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import Callable, Iterable, List, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import Board, BoardConfig, Cell, GameEngine


Position = Tuple[int, int]


def make_board(
    width: int, height: int, mines: Iterable[Position]
) -> Board:
    """Create a board with mines already laid at known positions."""
    mines = list(mines)
    board = Board(BoardConfig(width, height, len(mines)))
    board._lay_mines(mines)
    return board


def make_engine(
    width: int, height: int, mines: Iterable[Position], **kwargs
) -> GameEngine:
    """Create an engine whose current board has mines at known positions."""
    mines = list(mines)
    engine = GameEngine(BoardConfig(width, height, len(mines), "Test"), **kwargs)
    engine.board._lay_mines(mines)
    return engine


# ============================================================================
# Scheduler Double
# ============================================================================

class FakeHandle:
    """Pending callback recorded by FakeScheduler."""

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Records call_later requests so tests can fire them by hand."""

    def __init__(self) -> None:
        self.handles: List[FakeHandle] = []

    def call_later(
        self, delay: float, callback: Callable[[], None]
    ) -> FakeHandle:
        handle = FakeHandle(delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> List[FakeHandle]:
        return [handle for handle in self.handles if not handle.cancelled]

    def fire(self) -> int:
        """Run every pending callback once. Returns how many ran."""
        due = self.pending
        self.handles = []
        for handle in due:
            handle.callback()
        return len(due)


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board()


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no mines for cascade testing."""
    return Board(BoardConfig(5, 5, 0))


@pytest.fixture
def wall_board() -> Board:
    """5x5 board with a column of mines splitting it in two."""
    return make_board(5, 5, [(row, 2) for row in range(5)])


@pytest.fixture
def corner_board() -> Board:
    """5x5 board with a single mine in the top-left corner."""
    return make_board(5, 5, [(0, 0)])


@pytest.fixture
def strip_board() -> Board:
    """1x5 strip: safe, safe(1), mine, safe(2), mine."""
    return make_board(1, 5, [(2, 0), (4, 0)])


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def engine() -> GameEngine:
    """Beginner engine with a fixed seed."""
    return GameEngine("beginner", seed=1234)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def scheduled_engine(scheduler: FakeScheduler) -> GameEngine:
    """Intermediate engine whose timer is driven by the fake scheduler."""
    return GameEngine("intermediate", scheduler=scheduler, seed=99)


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)


@pytest.fixture
def numbered_cell() -> Cell:
    """Create a revealed cell with neighboring mines."""
    cell = Cell(neighbor_mines=3)
    cell.reveal()
    return cell


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)
