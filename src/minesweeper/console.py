"""
Terminal front end for Minesweeper.

Renders the engine's state as text and turns typed commands into
engine calls. Holds no game state of its own.
"""
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .board import DIFFICULTIES
from .engine import GameEngine, GameSummary


HELP = """Commands:
  r ROW COL   reveal a cell
  f ROW COL   flag or unflag a cell
  c ROW COL   chord (reveal around a satisfied number)
  n           new game
  d NAME      change difficulty ({names})
  h           show this help
  q           quit""".format(names=", ".join(DIFFICULTIES))

ALIASES = {
    "r": "reveal",
    "f": "flag",
    "c": "chord",
    "n": "new",
    "d": "difficulty",
    "h": "help",
    "q": "quit",
}

CELL_COMMANDS = ("reveal", "flag", "chord")


# ============================================================================
# Rendering
# ============================================================================

def observation_symbol(value: int) -> str:
    """Map an observation value to its single-character glyph."""
    if value == -1:
        return "."
    if value == -2:
        return "F"
    if value == 9:
        return "*"
    if value == 0:
        return " "
    return str(value)


def render_board(engine: GameEngine) -> str:
    """Render the grid with row and column indices."""
    obs = engine.get_observation()
    height, width = obs.shape
    lines = ["   " + " ".join(f"{col:>2}" for col in range(width))]
    for row in range(height):
        cells = " ".join(
            f"{observation_symbol(obs[row, col]):>2}" for col in range(width)
        )
        lines.append(f"{row:>2} {cells}")
    return "\n".join(lines)


def render_stats(engine: GameEngine) -> str:
    """Render the counters shown above the board."""
    stats = engine.stats()
    return (
        f"Mines: {stats.mines_remaining:03d}  "
        f"Time: {stats.elapsed_seconds:03d}  "
        f"Clicks: {stats.click_count}  "
        f"Flags: {stats.flags_used}  "
        f"Progress: {stats.progress_percent}%  "
        f"[{stats.difficulty_label}]"
    )


def render(engine: GameEngine) -> str:
    """Render stats, board, and the outcome once the game is over."""
    parts = [render_stats(engine), render_board(engine)]
    if engine.is_game_over:
        outcome = "*** WIN ***" if engine.is_win else "*** BOOM ***"
        parts.append(f"{outcome}  (n for a new game)")
    return "\n".join(parts)


def format_summary(summary: GameSummary) -> str:
    """Describe a finished game in one line."""
    title = "You won!" if summary.won else "Game over."
    return (
        f"{title} Time: {summary.elapsed_seconds}s | "
        f"Clicks: {summary.click_count} | "
        f"Difficulty: {summary.difficulty_label}"
    )


# ============================================================================
# Commands
# ============================================================================

@dataclass(frozen=True)
class Command:
    """A parsed line of player input."""

    name: str
    row: int = 0
    col: int = 0
    difficulty: str = ""


def parse_command(line: str) -> Optional[Command]:
    """
    Parse a line of input.

    Returns:
        The command, or None if the line is not understood.
    """
    tokens = line.split()
    if not tokens:
        return None
    verb = tokens[0].lower()
    name = ALIASES.get(verb, verb)

    if name in CELL_COMMANDS:
        if len(tokens) != 3:
            return None
        try:
            row, col = int(tokens[1]), int(tokens[2])
        except ValueError:
            return None
        return Command(name, row, col)

    if name == "difficulty":
        if len(tokens) != 2:
            return None
        return Command(name, difficulty=tokens[1].lower())

    if name in ("new", "help", "quit") and len(tokens) == 1:
        return Command(name)
    return None


def execute(engine: GameEngine, command: Command) -> bool:
    """
    Apply a command to the engine.

    Returns:
        True if the engine accepted it.

    Raises:
        ValueError: If a difficulty command names an unknown preset.
    """
    if command.name == "reveal":
        return engine.reveal(command.row, command.col)
    if command.name == "flag":
        return engine.toggle_flag(command.row, command.col)
    if command.name == "chord":
        return engine.chord_reveal(command.row, command.col)
    if command.name == "new":
        engine.start_new_game()
        return True
    if command.name == "difficulty":
        engine.set_difficulty(command.difficulty)
        return True
    return False


# ============================================================================
# Timer Feed
# ============================================================================

class WallClockTicker:
    """
    Feeds the engine one tick per elapsed wall-clock second.

    Time only accrues while the engine's timer is running, so seconds
    spent before the first click or after the game ends are dropped.
    """

    def __init__(
        self,
        engine: GameEngine,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.engine = engine
        self.clock = clock
        self._last = clock()
        self._carry = 0.0

    def sync(self) -> None:
        """Deliver the ticks owed since the last sync."""
        now = self.clock()
        if self.engine.timer.is_running:
            self._carry += now - self._last
            while self._carry >= 1.0 and self.engine.tick():
                self._carry -= 1.0
        else:
            self._carry = 0.0
        self._last = now


# ============================================================================
# Main Loop
# ============================================================================

def run(
    engine: GameEngine,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    """
    Play interactively until the player quits or input runs out.

    The end-of-game summary is printed once, after the move that ends it.

    Args:
        engine: Engine to drive.
        input_fn: Reads a line given a prompt.
        output_fn: Writes a block of text.
        clock: Monotonic seconds, used to drive the game timer.
    """
    ticker = WallClockTicker(engine, clock)
    output_fn(HELP)
    output_fn(render(engine))

    while True:
        try:
            line = input_fn("> ")
        except EOFError:
            break

        ticker.sync()
        command = parse_command(line)
        if command is None:
            output_fn("Unknown command (h for help)")
            continue
        if command.name == "quit":
            break
        if command.name == "help":
            output_fn(HELP)
            continue

        was_over = engine.is_game_over
        try:
            execute(engine, command)
        except ValueError as exc:
            output_fn(str(exc))
            continue

        ticker.sync()
        output_fn(render(engine))
        if engine.is_game_over and not was_over:
            output_fn(format_summary(engine.summary))

    engine.stop_timer()
