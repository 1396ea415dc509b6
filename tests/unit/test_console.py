"""
Unit tests for the terminal front end.

Tests rendering, command parsing, the wall-clock timer feed and the
interactive loop with scripted input.
"""
from typing import List

import pytest
from minesweeper import GameEngine, GameSummary
from minesweeper.console import (
    Command,
    WallClockTicker,
    execute,
    format_summary,
    parse_command,
    render,
    render_board,
    render_stats,
    run,
)

from conftest import make_engine


class ScriptedInput:
    """Feeds lines to run() and raises EOFError when exhausted."""

    def __init__(self, lines: List[str]) -> None:
        self.lines = list(lines)
        self.prompts: List[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def wall_engine() -> GameEngine:
    return make_engine(5, 5, [(row, 2) for row in range(5)])


# ============================================================================
# Rendering Tests
# ============================================================================

class TestRendering:
    """Test text rendering of the board and counters."""

    def test_render_board(self, wall_engine: GameEngine) -> None:
        wall_engine.reveal(0, 0)
        wall_engine.toggle_flag(0, 3)
        lines = render_board(wall_engine).split("\n")
        assert lines[0].split() == ["0", "1", "2", "3", "4"]
        assert lines[1].split() == ["0", "2", ".", "F", "."]
        assert lines[3].split() == ["2", "3", ".", ".", "."]
        assert len(lines) == 6

    def test_render_stats(self, wall_engine: GameEngine) -> None:
        wall_engine.reveal(0, 0)
        wall_engine.toggle_flag(0, 3)
        assert render_stats(wall_engine) == (
            "Mines: 004  Time: 000  Clicks: 1  Flags: 1  "
            "Progress: 50%  [Test]"
        )

    def test_render_shows_mines_and_outcome(
        self, wall_engine: GameEngine
    ) -> None:
        wall_engine.reveal(0, 2)
        text = render(wall_engine)
        assert "*** BOOM ***" in text
        assert render_board(wall_engine).count("*") == 5

    def test_format_summary(self) -> None:
        assert format_summary(GameSummary(42, 17, "Expert", True)) == (
            "You won! Time: 42s | Clicks: 17 | Difficulty: Expert"
        )
        assert format_summary(GameSummary(3, 1, "Beginner", False)).startswith(
            "Game over."
        )


# ============================================================================
# Command Parsing Tests
# ============================================================================

class TestParseCommand:
    """Test parsing of typed commands."""

    @pytest.mark.parametrize("line,expected", [
        ("r 3 4", Command("reveal", 3, 4)),
        ("reveal 0 0", Command("reveal", 0, 0)),
        ("F 1 2", Command("flag", 1, 2)),
        ("c 5 6", Command("chord", 5, 6)),
        ("n", Command("new")),
        ("d Expert", Command("difficulty", difficulty="expert")),
        ("q", Command("quit")),
        ("h", Command("help")),
    ])
    def test_valid_commands(self, line: str, expected: Command) -> None:
        assert parse_command(line) == expected

    @pytest.mark.parametrize("line", [
        "", "   ", "r 1", "r a b", "f 1 2 3", "d", "n now", "jump 1 1",
    ])
    def test_invalid_commands(self, line: str) -> None:
        assert parse_command(line) is None


class TestExecute:
    """Test dispatching commands to the engine."""

    def test_execute_reveal_and_flag(self, wall_engine: GameEngine) -> None:
        assert execute(wall_engine, Command("reveal", 0, 0)) is True
        assert execute(wall_engine, Command("flag", 0, 3)) is True
        assert execute(wall_engine, Command("reveal", 0, 3)) is False
        assert wall_engine.click_count == 1

    def test_execute_difficulty(self, wall_engine: GameEngine) -> None:
        execute(wall_engine, Command("difficulty", difficulty="intermediate"))
        assert wall_engine.difficulty_label == "Intermediate"

    def test_execute_unknown_difficulty_raises(
        self, wall_engine: GameEngine
    ) -> None:
        with pytest.raises(ValueError):
            execute(wall_engine, Command("difficulty", difficulty="hard"))


# ============================================================================
# Timer Feed Tests
# ============================================================================

class TestWallClockTicker:
    """Test conversion of wall-clock time into engine ticks."""

    def test_time_before_first_click_is_dropped(self) -> None:
        clock = FakeClock()
        engine = GameEngine("intermediate", seed=21)
        ticker = WallClockTicker(engine, clock)

        clock.now = 30.0
        ticker.sync()
        engine.reveal(8, 8)
        ticker.sync()
        assert engine.elapsed_seconds == 0

    def test_whole_seconds_become_ticks(self) -> None:
        clock = FakeClock()
        engine = GameEngine("intermediate", seed=22)
        ticker = WallClockTicker(engine, clock)
        engine.reveal(8, 8)
        ticker.sync()

        clock.now = 2.5
        ticker.sync()
        assert engine.elapsed_seconds == 2
        clock.now = 3.0
        ticker.sync()
        assert engine.elapsed_seconds == 3


# ============================================================================
# Main Loop Tests
# ============================================================================

class TestRun:
    """Test the interactive loop with scripted input."""

    def test_run_until_quit(self, wall_engine: GameEngine) -> None:
        output: List[str] = []
        script = ScriptedInput(["h", "bogus", "f 0 0", "r 0 4", "q", "r 0 0"])
        run(wall_engine, script, output.append, FakeClock())

        assert any("Unknown command" in block for block in output)
        assert wall_engine.board.flags_used == 1
        assert wall_engine.click_count == 1
        assert script.lines == ["r 0 0"]
        assert script.prompts[0] == "> "

    def test_run_prints_summary_once(self, wall_engine: GameEngine) -> None:
        output: List[str] = []
        script = ScriptedInput(["r 0 2", "r 0 0", "f 1 1"])
        run(wall_engine, script, output.append, FakeClock())

        summaries = [block for block in output if block.startswith("Game over.")]
        assert summaries == ["Game over. Time: 0s | Clicks: 1 | Difficulty: Test"]
        assert output.index(summaries[0]) == 3

    def test_run_reports_bad_difficulty(self, wall_engine: GameEngine) -> None:
        output: List[str] = []
        run(wall_engine, ScriptedInput(["d hard"]), output.append, FakeClock())
        assert any("Unknown difficulty" in block for block in output)

    def test_run_stops_timer_on_eof(self) -> None:
        engine = GameEngine("intermediate", seed=23)
        output: List[str] = []
        run(engine, ScriptedInput(["r 8 8"]), output.append, FakeClock())
        assert engine.timer.is_running is False
        assert "Mines: 040" in output[-1]
