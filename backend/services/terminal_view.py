"""
Curses view for Nokia Snake.

Paints GameState snapshots into a terminal window and turns curses key
codes into the key names understood by domain.controls.
"""

import curses
import logging
from typing import Optional

from domain.constants import BODY, EMPTY, FOOD, GAME_OVER, HEAD, PAUSED
from domain.game_state import GameState

logger = logging.getLogger(__name__)

# Two characters per cell keeps cells roughly square in a terminal
CELL_GLYPHS = {
    EMPTY: "  ",
    BODY: "[]",
    FOOD: "<>",
    HEAD: "@@",
}

RESIZE_KEY = "Resize"

CURSES_KEY_NAMES = {
    curses.KEY_UP: "ArrowUp",
    curses.KEY_DOWN: "ArrowDown",
    curses.KEY_LEFT: "ArrowLeft",
    curses.KEY_RIGHT: "ArrowRight",
    curses.KEY_ENTER: "Enter",
    10: "Enter",
    13: "Enter",
    27: "Escape",
    curses.KEY_RESIZE: RESIZE_KEY,
}

PAIR_SNAKE = 1
PAIR_FOOD = 2
PAIR_TEXT = 3
PAIR_ALERT = 4


def key_name(code: int) -> Optional[str]:
    """Translate a curses key code to a key name, or None for no key."""
    if code == -1:
        return None
    if code in CURSES_KEY_NAMES:
        return CURSES_KEY_NAMES[code]
    if 0 <= code < 256:
        return chr(code)
    return None


class CursesView:
    """Draws snapshots on a curses window. Register draw() as a loop listener."""

    def __init__(self, stdscr, grid_size: int):
        self.stdscr = stdscr
        self.grid_size = grid_size
        self.colors = False

        try:
            curses.curs_set(0)
        except curses.error:
            pass  # some terminals cannot hide the cursor

        self.stdscr.keypad(True)

        if curses.has_colors():
            curses.start_color()
            curses.init_pair(PAIR_SNAKE, curses.COLOR_GREEN, curses.COLOR_BLACK)
            curses.init_pair(PAIR_FOOD, curses.COLOR_RED, curses.COLOR_BLACK)
            curses.init_pair(PAIR_TEXT, curses.COLOR_YELLOW, curses.COLOR_BLACK)
            curses.init_pair(PAIR_ALERT, curses.COLOR_RED, curses.COLOR_BLACK)
            self.colors = True

        logger.debug(f"Curses view ready for a {grid_size}x{grid_size} board (colors={self.colors})")

    @property
    def required_size(self):
        """(rows, cols) needed to show the whole board."""
        return (self.grid_size + 5, self.grid_size * 2 + 2)

    def read_key(self, timeout: Optional[float]) -> Optional[str]:
        """Wait up to timeout seconds for a key press (None waits forever)."""
        self.stdscr.timeout(-1 if timeout is None else max(0, int(round(timeout * 1000))))
        return key_name(self.stdscr.getch())

    def draw(self, state: GameState):
        self.stdscr.erase()

        rows, cols = self.stdscr.getmaxyx()
        need_rows, need_cols = self.required_size
        if rows < need_rows or cols < need_cols:
            self._put(0, 0, f"Terminal too small: need {need_cols}x{need_rows}", PAIR_ALERT)
            self.stdscr.refresh()
            return

        self._put(0, 0, "NOKIA", PAIR_TEXT)
        score = f"SCORE: {state.score}"
        self._put(0, need_cols - len(score), score, PAIR_TEXT)

        border = "+" + "-" * (self.grid_size * 2) + "+"
        self._put(1, 0, border)
        grid = state.to_grid()
        for y in range(self.grid_size):
            self._put(2 + y, 0, "|")
            for x in range(self.grid_size):
                role = int(grid[y, x])
                pair = PAIR_FOOD if role == FOOD else PAIR_SNAKE
                self._put(2 + y, 1 + x * 2, CELL_GLYPHS[role], pair if role != EMPTY else None)
            self._put(2 + y, 1 + self.grid_size * 2, "|")
        self._put(2 + self.grid_size, 0, border)

        if state.phase == GAME_OVER:
            self._overlay(["GAME OVER", f"Final Score: {state.score}", "Press SPACE to restart"], PAIR_ALERT)
        elif state.phase == PAUSED:
            self._overlay(["PAUSED", "Press SPACE to resume"], PAIR_TEXT)

        self._put(3 + self.grid_size, 0, "Arrows move, SPACE pauses, Q quits")
        self.stdscr.refresh()

    def _overlay(self, lines, pair: int):
        top = 2 + (self.grid_size - len(lines)) // 2
        width = self.grid_size * 2 + 2
        for i, line in enumerate(lines):
            self._put(top + i, max(1, (width - len(line)) // 2), line, pair, bold=True)

    def _put(self, y: int, x: int, text: str, pair: Optional[int] = None, bold: bool = False):
        attr = 0
        if pair is not None and self.colors:
            attr |= curses.color_pair(pair)
        if bold:
            attr |= curses.A_BOLD
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            # Writing the bottom-right cell raises even though the text is drawn
            pass
