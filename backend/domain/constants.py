"""
Game constants for Nokia Snake.

Coordinates follow the screen convention: x grows to the right and
y grows downwards, so row 0 is the top of the board.
"""

# Movement directions (unit vectors)
UP = (0, -1)
DOWN = (0, 1)
LEFT = (-1, 0)
RIGHT = (1, 0)
DIRECTIONS = {UP, DOWN, LEFT, RIGHT}

DIRECTION_NAMES = {
    UP: "UP",
    DOWN: "DOWN",
    LEFT: "LEFT",
    RIGHT: "RIGHT",
}

# Phases
RUNNING = "running"
PAUSED = "paused"
GAME_OVER = "game_over"

# Game settings
GRID_SIZE = 20
FOOD_REWARD = 10
TICK_INTERVAL_MS = 150
INITIAL_DIRECTION = RIGHT

# Rejected food draws before falling back to sampling the free cells directly
MAX_FOOD_ATTEMPTS = 64

# Cell roles used by GameState.to_grid()
EMPTY = 0
BODY = 1
FOOD = 2
HEAD = 7


def initial_origin(grid_size: int = GRID_SIZE):
    """Return the starting cell of the snake for a board of grid_size."""
    return (grid_size // 2, grid_size // 2)


def opposite(direction):
    """Return the direction pointing the other way."""
    return (-direction[0], -direction[1])
