"""
Domain entities for the Nokia Snake game engine.

This module contains the core game entities that are independent of
infrastructure concerns (timers, terminals, image output, etc.).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, DIRECTIONS,
    RUNNING, PAUSED, GAME_OVER,
    GRID_SIZE, FOOD_REWARD, TICK_INTERVAL_MS, INITIAL_DIRECTION,
)
from .snake import Snake
from .game_state import GameState
from .engine import GameEngine
from .controls import TOGGLE_PAUSE, RESTART, resolve_key

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'DIRECTIONS',
    'RUNNING', 'PAUSED', 'GAME_OVER',
    'GRID_SIZE', 'FOOD_REWARD', 'TICK_INTERVAL_MS', 'INITIAL_DIRECTION',
    'Snake',
    'GameState',
    'GameEngine',
    'TOGGLE_PAUSE', 'RESTART', 'resolve_key',
]
