"""
GameState entity - a read-only snapshot of the game at a point in time.
"""

from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .constants import BODY, DIRECTION_NAMES, EMPTY, FOOD, HEAD


class GameState:
    """
    A snapshot of the game handed to renderers after every mutation.

    Attributes:
        snake: tuple of (x, y) positions, head first
        food: (x, y) of the food, or None once the board is full
        direction: last committed direction
        pending_direction: direction that the next tick will use
        score: points collected since the last reset
        phase: one of RUNNING, PAUSED, GAME_OVER
        grid_size: width and height of the square board
        tick: number of steps taken since the last reset
    """

    def __init__(
        self,
        snake: List[Tuple[int, int]],
        food: Optional[Tuple[int, int]],
        direction: Tuple[int, int],
        pending_direction: Tuple[int, int],
        score: int,
        phase: str,
        grid_size: int,
        tick: int = 0
    ):
        self.snake = tuple(snake)
        self.food = food
        self.direction = direction
        self.pending_direction = pending_direction
        self.score = score
        self.phase = phase
        self.grid_size = grid_size
        self.tick = tick

    @property
    def head(self) -> Tuple[int, int]:
        return self.snake[0]

    def to_grid(self) -> np.ndarray:
        """
        Returns a grid_size x grid_size matrix indexed as [y, x] with:
        EMPTY = empty cell
        BODY = snake body
        FOOD = food
        HEAD = snake head
        """
        grid = np.full((self.grid_size, self.grid_size), EMPTY, dtype=np.int8)

        if self.food is not None:
            fx, fy = self.food
            grid[fy, fx] = FOOD

        for x, y in self.snake[1:]:
            grid[y, x] = BODY

        hx, hy = self.head
        grid[hy, hx] = HEAD
        return grid

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        S = snake body
        H = snake head
        Row 0 is printed first (top) and x-axis labels sit at the bottom.
        """
        symbols = {EMPTY: '.', BODY: 'S', FOOD: 'F', HEAD: 'H'}
        grid = self.to_grid()

        result = []
        for y in range(self.grid_size):
            row = ' '.join(symbols[int(cell)] for cell in grid[y])
            result.append(f"{y:2d} {row}")

        # Only the last digit of each column so wide boards stay aligned
        result.append("   " + " ".join(str(x % 10) for x in range(self.grid_size)))

        return "\n".join(result)

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-friendly representation of the snapshot."""
        return {
            "snake": [list(pos) for pos in self.snake],
            "food": list(self.food) if self.food is not None else None,
            "direction": DIRECTION_NAMES[self.direction],
            "pending_direction": DIRECTION_NAMES[self.pending_direction],
            "score": self.score,
            "phase": self.phase,
            "grid_size": self.grid_size,
            "tick": self.tick,
        }

    def __eq__(self, other):
        if not isinstance(other, GameState):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (
            f"<GameState tick={self.tick}, phase={self.phase}, "
            f"length={len(self.snake)}, food={self.food}, score={self.score}>"
        )
