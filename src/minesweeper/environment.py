"""
Gymnasium environment wrapper for Minesweeper.

Exposes the game engine through the standard RL interface so scripted
or learning players can drive it.
"""
from enum import IntEnum
from typing import Any, Dict, Optional, SupportsFloat, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .console import observation_symbol
from .engine import Difficulty, GameEngine


# ============================================================================
# Constants
# ============================================================================

class ActionType(IntEnum):
    """Kinds of move an action can make."""

    REVEAL = 0
    FLAG = 1
    CHORD = 2


WIN_REWARD = 10.0
LOSS_REWARD = -10.0
PROGRESS_REWARD = 1.0
FLAG_REWARD = 0.0
NO_OP_REWARD = -0.1


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with neighbor mine count
        - 9 = mine (revealed, or every mine after the game ends)

    Actions:
        MultiDiscrete([3, height, width]) = (kind, row, col), where kind
        is reveal (0), flag (1) or chord (2).

    Rewards:
        - +1 for a reveal or chord that uncovers cells
        - 0 for toggling a flag
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for an action that changes nothing
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        difficulty: Difficulty = "beginner",
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            difficulty: Preset name or board configuration.
            render_mode: How to render the environment.
        """
        super().__init__()

        self.engine = GameEngine(difficulty)
        self.config = self.engine.config
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )

        self.action_space = spaces.MultiDiscrete(
            [len(ActionType), self.config.height, self.config.width]
        )

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        self.engine.rng.seed(int(self.np_random.integers(2 ** 32)))
        self.engine.start_new_game()
        self._steps = 0

        return self.engine.get_observation(), self._get_info()

    def step(
        self, action: np.ndarray
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: (kind, row, col) triple.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        kind, row, col = (int(value) for value in action)
        self._steps += 1

        reward = self._apply(ActionType(kind), row, col)

        observation = self.engine.get_observation()
        terminated = self.engine.is_game_over
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def _apply(self, kind: ActionType, row: int, col: int) -> float:
        """
        Perform an action on the engine and score it.

        Args:
            kind: Which command to issue.
            row: Row index.
            col: Column index.

        Returns:
            Reward value.
        """
        if kind == ActionType.FLAG:
            changed = self.engine.toggle_flag(row, col)
            return FLAG_REWARD if changed else NO_OP_REWARD

        if kind == ActionType.CHORD:
            changed = self.engine.chord_reveal(row, col)
        else:
            changed = self.engine.reveal(row, col)

        if not changed:
            return NO_OP_REWARD
        if self.engine.is_win:
            return WIN_REWARD
        if self.engine.is_game_over:
            return LOSS_REWARD
        return PROGRESS_REWARD

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        stats = self.engine.stats()
        return {
            "steps": self._steps,
            "revealed": self.engine.board.cells_revealed,
            "total_safe": self.config.safe_cells,
            "game_state": self.engine.board.game_state.name,
            "mines_remaining": stats.mines_remaining,
            "progress": stats.progress_percent,
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render board as ASCII string."""
        lines = []
        obs = self.engine.get_observation()

        for row in range(self.config.height):
            row_str = ""
            for col in range(self.config.width):
                row_str += observation_symbol(obs[row, col]) + " "
            lines.append(row_str)

        return "\n".join(lines)

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of hidden, unflagged cells that a reveal can act on.

        Returns:
            Boolean (height, width) array where True = hidden, unflagged cell;
            all False once the game is over.
        """
        mask = np.zeros((self.config.height, self.config.width), dtype=bool)
        if self.engine.is_game_over:
            return mask
        for row, col in self.engine.board.get_valid_actions():
            mask[row, col] = True
        return mask
