"""
GameEngine - the tick-driven state machine behind a game of snake.

The engine owns all game state. A fixed-interval timer calls step() and
input events call set_direction(), toggle_pause() and reset(). Collisions
are a normal transition to GAME_OVER, never an exception.
"""

import logging
import random
from typing import List, Optional, Tuple

from .constants import (
    DIRECTION_NAMES,
    DIRECTIONS,
    FOOD_REWARD,
    GAME_OVER,
    GRID_SIZE,
    INITIAL_DIRECTION,
    MAX_FOOD_ATTEMPTS,
    PAUSED,
    RUNNING,
    initial_origin,
    opposite,
)
from .game_state import GameState
from .snake import Snake

logger = logging.getLogger(__name__)


class GameEngine:
    """
    Manages:
      - Board (square, grid_size cells per side)
      - Snake
      - Food
      - Score
      - Phase (RUNNING / PAUSED / GAME_OVER)
      - Committed direction and the pending-direction buffer
    """

    def __init__(self, grid_size: int = GRID_SIZE, rng: Optional[random.Random] = None):
        if grid_size < 2:
            raise ValueError(f"grid_size must be at least 2, got {grid_size}")

        self.grid_size = grid_size
        self.rng = rng or random.Random()

        self.snake = Snake([initial_origin(grid_size)])
        self.food: Optional[Tuple[int, int]] = None
        self.direction = INITIAL_DIRECTION
        self.pending_direction = INITIAL_DIRECTION
        self.score = 0
        self.phase = RUNNING
        self.tick = 0

        self.reset()

    def in_bounds(self, position: Tuple[int, int]) -> bool:
        x, y = position
        return 0 <= x < self.grid_size and 0 <= y < self.grid_size

    def step(self) -> GameState:
        """
        Advance the simulation by one tick:
          1) Do nothing unless RUNNING
          2) Compute the new head from the pending direction
          3) Wall or self collision -> GAME_OVER, everything else untouched
          4) Move the head; grow and re-place food if it was eaten
          5) Commit the pending direction
        """
        if self.phase != RUNNING:
            return self.get_current_state()

        new_head = self.snake.next_head(self.pending_direction)

        if not self.in_bounds(new_head):
            self._end_game(f"wall at {new_head}")
            return self.get_current_state()

        # Checked against the pre-move body, tail included
        if self.snake.occupies(new_head):
            self._end_game(f"self collision at {new_head}")
            return self.get_current_state()

        eats_food = new_head == self.food
        self.snake.advance(new_head, grow=eats_food)

        if eats_food:
            self.score += FOOD_REWARD
            self.food = self.generate_food()
            logger.debug(f"Food eaten at {new_head}, score {self.score}, next food {self.food}")

        self.direction = self.pending_direction
        self.tick += 1

        if self.food is None:
            self._end_game("board is full")

        return self.get_current_state()

    def set_direction(self, direction: Tuple[int, int]) -> bool:
        """
        Buffer a direction for the next tick.

        Requests that are not one of the four unit directions, that point
        straight back along the committed direction, or that arrive after
        the game is over are ignored. Returns True if the buffer changed.
        """
        if not isinstance(direction, tuple) or direction not in DIRECTIONS:
            logger.debug(f"Ignoring unknown direction {direction!r}")
            return False

        if self.phase == GAME_OVER:
            return False

        if direction == opposite(self.direction):
            return False

        self.pending_direction = direction
        return True

    def toggle_pause(self) -> str:
        """Flip between RUNNING and PAUSED. Returns the resulting phase."""
        if self.phase == RUNNING:
            self.phase = PAUSED
        elif self.phase == PAUSED:
            self.phase = RUNNING
        return self.phase

    def reset(self) -> GameState:
        """Start a new game from any phase."""
        self.snake = Snake([initial_origin(self.grid_size)])
        self.direction = INITIAL_DIRECTION
        self.pending_direction = INITIAL_DIRECTION
        self.score = 0
        self.tick = 0
        self.phase = RUNNING
        self.food = self.generate_food()

        logger.info(
            f"New game on a {self.grid_size}x{self.grid_size} board, "
            f"heading {DIRECTION_NAMES[self.direction]}, food at {self.food}"
        )
        return self.get_current_state()

    def generate_food(self) -> Optional[Tuple[int, int]]:
        """
        Return a random cell not occupied by the snake.

        Draws uniformly over the whole board and rejects occupied cells. If
        MAX_FOOD_ATTEMPTS draws in a row are rejected the board is crowded,
        so pick uniformly from the list of free cells instead. Returns None
        when no free cell is left.
        """
        for _ in range(MAX_FOOD_ATTEMPTS):
            x = self.rng.randrange(self.grid_size)
            y = self.rng.randrange(self.grid_size)
            if not self.snake.occupies((x, y)):
                return (x, y)

        free_cells = self._free_cells()
        logger.debug(f"Food placement fell back to {len(free_cells)} free cells")
        if not free_cells:
            return None
        return self.rng.choice(free_cells)

    def _free_cells(self) -> List[Tuple[int, int]]:
        occupied = set(self.snake.positions)
        return [
            (x, y)
            for y in range(self.grid_size)
            for x in range(self.grid_size)
            if (x, y) not in occupied
        ]

    def get_current_state(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        return GameState(
            snake=self.snake.as_list(),
            food=self.food,
            direction=self.direction,
            pending_direction=self.pending_direction,
            score=self.score,
            phase=self.phase,
            grid_size=self.grid_size,
            tick=self.tick
        )

    def _end_game(self, reason: str):
        self.phase = GAME_OVER
        logger.info(f"Game Over: {reason}. Final score {self.score} after {self.tick} ticks.")
