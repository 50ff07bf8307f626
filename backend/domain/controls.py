"""
Keyboard controls - translate key names into engine commands.

Key names follow the browser's KeyboardEvent.key values so every shell
(terminal, headless scripts, tests) speaks the same vocabulary.
"""

from typing import Optional, Tuple, Union

from .constants import DOWN, GAME_OVER, LEFT, RIGHT, UP

# Commands that are not directions
TOGGLE_PAUSE = "toggle_pause"
RESTART = "restart"

Command = Union[str, Tuple[int, int]]

KEY_DIRECTIONS = {
    "ArrowUp": UP,
    "ArrowDown": DOWN,
    "ArrowLeft": LEFT,
    "ArrowRight": RIGHT,
}

PAUSE_KEYS = {" ", "p", "P"}
RESTART_KEYS = {" ", "Enter"}

# Names accepted in scripted move lists, e.g. "--moves UP,LEFT"
MOVE_NAMES = {
    "UP": UP,
    "DOWN": DOWN,
    "LEFT": LEFT,
    "RIGHT": RIGHT,
}


def resolve_key(key: str, phase: str) -> Optional[Command]:
    """
    Map a key press to a command for the current phase.

    Once the game is over only the restart keys do anything; pause and
    direction keys are ignored. Returns None for keys with no meaning.
    """
    if phase == GAME_OVER:
        return RESTART if key in RESTART_KEYS else None

    if key in PAUSE_KEYS:
        return TOGGLE_PAUSE

    return KEY_DIRECTIONS.get(key)
