#!/usr/bin/env python3
"""
CLI tool to run a headless game and render the final snapshot

Usage:
    python render_frame.py --ticks <n> [--moves UP,RIGHT,...] [--seed <n>]

Examples:
    # Ten ticks straight ahead, board printed and saved to frames/
    python render_frame.py --ticks 10

    # Turn up on the first tick, then left on the fourth
    python render_frame.py --ticks 6 --moves UP,,,LEFT --seed 7

    # Custom output path and cell size
    python render_frame.py --ticks 20 --output ./snake.png --cell-size 32

Each entry in --moves is applied before the matching tick; empty entries
keep the current heading.
"""

import os
import sys
import random
import argparse
import logging
from typing import List, Optional, Tuple

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.constants import RUNNING  # noqa: E402
from domain.controls import MOVE_NAMES  # noqa: E402
from domain.engine import GameEngine  # noqa: E402
from domain.game_state import GameState  # noqa: E402
from services.config import get_settings  # noqa: E402
from services.frame_renderer import FrameRenderer, CELL_SIZE  # noqa: E402

logger = logging.getLogger(__name__)


def parse_move_script(text: str) -> List[Optional[Tuple[int, int]]]:
    """
    Parse a positional move script such as "UP,,LEFT".

    Raises:
        ValueError: for names other than UP, DOWN, LEFT, RIGHT
    """
    if not text:
        return []

    script = []
    for raw in text.split(","):
        name = raw.strip().upper()
        if not name:
            script.append(None)
        elif name in MOVE_NAMES:
            script.append(MOVE_NAMES[name])
        else:
            raise ValueError(f"Unknown move '{raw.strip()}'. Expected one of {sorted(MOVE_NAMES)}")
    return script


def run_headless(
    engine: GameEngine,
    ticks: int,
    script: List[Optional[Tuple[int, int]]]
) -> GameState:
    """Advance the engine tick by tick, applying scripted turns; stops at game over."""
    state = engine.get_current_state()
    for i in range(ticks):
        if i < len(script) and script[i] is not None:
            engine.set_direction(script[i])
        state = engine.step()
        if state.phase != RUNNING:
            logger.info(f"Game ended after {i + 1} ticks")
            break
    return state


def main():
    parser = argparse.ArgumentParser(
        description='Run a headless Nokia Snake game and render the last frame',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        '--ticks',
        type=int,
        required=True,
        help='Number of ticks to simulate'
    )
    parser.add_argument(
        '--moves',
        type=str,
        default='',
        help='Comma separated turns, one slot per tick (e.g. "UP,,LEFT")'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Seed for food placement (default: SNAKE_SEED or random)'
    )
    parser.add_argument(
        '--output', '-o',
        type=str,
        help='Output PNG path (default: <SNAKE_FRAMES_DIR>/tick_<n>.png)'
    )
    parser.add_argument(
        '--cell-size',
        type=int,
        default=CELL_SIZE,
        help=f'Cell size in pixels (default: {CELL_SIZE})'
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        settings = get_settings()
        logging.getLogger().setLevel(settings.log_level)

        if args.ticks < 0:
            raise ValueError("--ticks must not be negative")
        if args.cell_size < 1:
            raise ValueError("--cell-size must be at least 1")
        script = parse_move_script(args.moves)

        seed = args.seed if args.seed is not None else settings.seed
        rng = random.Random(seed) if seed is not None else random.Random()
        engine = GameEngine(grid_size=settings.grid_size, rng=rng)

        state = run_headless(engine, args.ticks, script)
        print(state.print_board())
        print(f"Score: {state.score} | Phase: {state.phase} | Tick: {state.tick}")

        output = args.output or os.path.join(settings.frames_dir, f"tick_{state.tick}.png")
        renderer = FrameRenderer(settings.grid_size, cell_size=args.cell_size)
        renderer.save(state, output)
        logger.info("Done!")

    except KeyboardInterrupt:
        logger.info("\nCancelled by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
