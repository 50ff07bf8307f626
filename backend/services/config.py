"""
Runtime settings for Nokia Snake.

Values come from environment variables, optionally loaded from a .env file
next to the process working directory.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from domain.constants import GRID_SIZE, TICK_INTERVAL_MS


@dataclass
class GameSettings:
    grid_size: int = GRID_SIZE
    tick_interval_ms: int = TICK_INTERVAL_MS
    log_level: str = "INFO"
    log_file: str = "snake.log"
    frames_dir: str = "frames"
    seed: Optional[int] = None

    @property
    def tick_interval(self) -> float:
        """Tick interval in seconds."""
        return self.tick_interval_ms / 1000.0


def _int_from_env(name: str, default: Optional[int], minimum: Optional[int] = None) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default

    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")

    if minimum is not None and value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")
    return value


def _log_level_from_env(name: str, default: str) -> str:
    level = os.getenv(name, default).strip().upper() or default

    # getLevelName() maps known names to their number and anything else to a string
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(
            f"{name} must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL, got {level!r}"
        )
    return level


def get_settings(load_env_file: bool = True) -> GameSettings:
    """
    Build GameSettings from the environment.

    Recognised variables:
        SNAKE_GRID_SIZE   board width/height in cells (>= 2)
        SNAKE_TICK_MS     fixed tick interval in milliseconds (>= 1)
        SNAKE_LOG_LEVEL   logging level name
        SNAKE_LOG_FILE    log destination for the terminal game
        SNAKE_FRAMES_DIR  default directory for rendered PNG frames
        SNAKE_SEED        optional seed for food placement

    Raises:
        ValueError: if a numeric variable is malformed or out of range
    """
    if load_env_file:
        load_dotenv()

    return GameSettings(
        grid_size=_int_from_env("SNAKE_GRID_SIZE", GRID_SIZE, minimum=2),
        tick_interval_ms=_int_from_env("SNAKE_TICK_MS", TICK_INTERVAL_MS, minimum=1),
        log_level=_log_level_from_env("SNAKE_LOG_LEVEL", "INFO"),
        log_file=os.getenv("SNAKE_LOG_FILE", "snake.log").strip() or "snake.log",
        frames_dir=os.getenv("SNAKE_FRAMES_DIR", "frames").strip() or "frames",
        seed=_int_from_env("SNAKE_SEED", None),
    )
