"""
Play Nokia Snake in the terminal.

Usage:
    python main.py
    python main.py --seed 42

Controls: arrow keys move, SPACE or P pauses, SPACE or ENTER restarts after
a game over, Q or ESC quits.
"""

import argparse
import curses
import logging
import random
import sys
from typing import Optional

from domain.controls import resolve_key
from domain.engine import GameEngine
from services.config import GameSettings, get_settings
from services.game_loop import GameLoop
from services.terminal_view import RESIZE_KEY, CursesView

logger = logging.getLogger(__name__)

QUIT_KEYS = {"q", "Q", "Escape"}


def build_game(settings: GameSettings, seed: Optional[int] = None) -> GameLoop:
    """Create an engine and its loop from the given settings."""
    if seed is None:
        seed = settings.seed
    rng = random.Random(seed) if seed is not None else random.Random()
    engine = GameEngine(grid_size=settings.grid_size, rng=rng)
    return GameLoop(engine, tick_interval=settings.tick_interval)


def play(stdscr, settings: GameSettings, seed: Optional[int] = None) -> int:
    """
    Run the interactive game until the player quits.

    Returns:
        The score of the game that was on screen when the player quit.
    """
    loop = build_game(settings, seed)
    view = CursesView(stdscr, settings.grid_size)

    try:
        loop.add_listener(view.draw)
        view.draw(loop.engine.get_current_state())

        while True:
            key = view.read_key(loop.time_until_next_tick())
            if key in QUIT_KEYS:
                logger.info("Player quit")
                break

            if key == RESIZE_KEY:
                # No tick may be armed (paused / game over), so repaint now
                view.draw(loop.engine.get_current_state())
            elif key is not None:
                command = resolve_key(key, loop.engine.phase)
                if command is not None:
                    loop.submit(command)

            loop.pump()

        return loop.engine.score
    finally:
        loop.close()


def configure_logging(settings: GameSettings, to_file: bool):
    kwargs = {
        "level": settings.log_level,
        "format": '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    }
    if to_file:
        # Anything written to the terminal would tear through the curses screen
        kwargs["filename"] = settings.log_file
    logging.basicConfig(**kwargs)


def main():
    parser = argparse.ArgumentParser(description="Play Nokia Snake in the terminal.")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for food placement (default: SNAKE_SEED or random)")
    args = parser.parse_args()

    try:
        settings = get_settings()
    except ValueError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    configure_logging(settings, to_file=True)

    try:
        score = curses.wrapper(play, settings, args.seed)
    except KeyboardInterrupt:
        logger.info("Cancelled by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        sys.exit(1)

    print(f"Final score: {score}")


if __name__ == "__main__":
    main()
