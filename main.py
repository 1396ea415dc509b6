#!/usr/bin/env python3
"""
Minesweeper - Main entry point.

Usage:
    python main.py play [--difficulty {beginner,intermediate,expert}] [--seed N]
    python main.py watch [--difficulty NAME] [--games N] [--delay SECONDS]
"""
import argparse
import logging
import time

import numpy as np

from src.minesweeper.board import DIFFICULTIES
from src.minesweeper.console import run
from src.minesweeper.engine import GameEngine
from src.minesweeper.environment import ActionType, MinesweeperEnv


def play(args: argparse.Namespace) -> None:
    """Play interactively in the terminal."""
    engine = GameEngine(args.difficulty, seed=args.seed)
    run(engine)


def watch(args: argparse.Namespace) -> None:
    """Watch random reveals play through the Gymnasium environment."""
    env = MinesweeperEnv(args.difficulty, render_mode="ansi")
    rng = np.random.default_rng(args.seed)
    wins = 0

    for game in range(args.games):
        obs, info = env.reset(seed=None if args.seed is None else args.seed + game)
        done = False

        while not done:
            hidden = np.argwhere(env.get_action_mask())
            row, col = hidden[rng.integers(len(hidden))]
            obs, reward, terminated, truncated, info = env.step(
                np.array([ActionType.REVEAL, row, col])
            )
            done = terminated or truncated
            print(f"=== Game {game + 1}/{args.games} | Step {info['steps']} ===")
            print(env.render())
            time.sleep(args.delay)

        if info["game_state"] == "WON":
            wins += 1
            print("\n*** WIN! ***")
        else:
            print("\n*** LOST (hit mine) ***")

    print(f"\n=== Final: {wins}/{args.games} wins ===")


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(description="Minesweeper in the terminal")
    parser.add_argument(
        "--verbose", action="store_true", help="Log engine events"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    play_parser = subparsers.add_parser("play", help="Play a game")
    play_parser.add_argument(
        "--difficulty", choices=list(DIFFICULTIES), default="beginner",
        help="Board preset",
    )
    play_parser.add_argument(
        "--seed", type=int, default=None, help="Seed for mine placement"
    )

    watch_parser = subparsers.add_parser(
        "watch", help="Watch random reveals play"
    )
    watch_parser.add_argument(
        "--difficulty", choices=list(DIFFICULTIES), default="beginner",
        help="Board preset",
    )
    watch_parser.add_argument(
        "--games", type=int, default=3, help="Number of games"
    )
    watch_parser.add_argument(
        "--delay", type=float, default=0.3, help="Delay between moves"
    )
    watch_parser.add_argument(
        "--seed", type=int, default=None, help="Seed for reproducible runs"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )

    if args.command == "play":
        play(args)
    elif args.command == "watch":
        watch(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
