"""
Frame Rendering Service for Nokia Snake

Renders GameState snapshots to images with PIL (Pillow):
- Header bar with the NOKIA logo and the score
- Grid with food, snake body and the snake head (with eyes)
- PAUSED / GAME OVER overlays
- Footer with the control hints

The renderer only reads snapshots; it never touches the engine.
"""

import logging
import os
from typing import Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from domain.constants import BODY, DOWN, FOOD, GAME_OVER, LEFT, PAUSED, UP
from domain.game_state import GameState

logger = logging.getLogger(__name__)

CELL_SIZE = 20  # Size of each grid cell in pixels
HEADER_HEIGHT = 40
FOOTER_HEIGHT = 44
MARGIN = 12


class ColorScheme:
    """Monochrome LCD palette, with a red variant once the game is over"""

    SCREEN = "#C7F0D8"
    INK = "#43523D"
    GRID_LINE = "#B5DCC3"
    BODY = "#43523D"
    FOOD = "#6B7F5E"
    OVERLAY = "#C7F0D8"

    GAME_OVER_SCREEN = "#F0C7C7"
    GAME_OVER_INK = "#5E2A2A"
    GAME_OVER_GRID_LINE = "#DCB5B5"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB tuple"""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def darken_color(hex_color: str, amount: float = 0.3) -> Tuple[int, int, int]:
    """Darken a hex color by a given amount"""
    r, g, b = hex_to_rgb(hex_color)
    r = max(0, int(r * (1 - amount)))
    g = max(0, int(g * (1 - amount)))
    b = max(0, int(b * (1 - amount)))
    return (r, g, b)


class FrameRenderer:
    """Render GameState snapshots to PIL images"""

    def __init__(self, grid_size: int, cell_size: int = CELL_SIZE):
        if cell_size < 1:
            raise ValueError(f"cell_size must be at least 1, got {cell_size}")

        self.grid_size = grid_size
        self.cell_size = cell_size

        self.board_pixels = grid_size * cell_size
        self.width = self.board_pixels + 2 * MARGIN
        self.height = HEADER_HEIGHT + self.board_pixels + FOOTER_HEIGHT + 2 * MARGIN
        self.board_x = MARGIN
        self.board_y = HEADER_HEIGHT + MARGIN

        self.font = ImageFont.load_default()

    def render(self, state: GameState) -> Image.Image:
        """Render a single frame for the snapshot"""
        if state.grid_size != self.grid_size:
            raise ValueError(
                f"Renderer built for a {self.grid_size} grid, got a {state.grid_size} grid"
            )

        game_over = state.phase == GAME_OVER
        screen = ColorScheme.GAME_OVER_SCREEN if game_over else ColorScheme.SCREEN
        ink = ColorScheme.GAME_OVER_INK if game_over else ColorScheme.INK

        img = Image.new('RGB', (self.width, self.height), hex_to_rgb(screen))
        draw = ImageDraw.Draw(img)

        self._draw_header(draw, state.score, ink)
        self._draw_board(draw, state, ink, game_over)

        if game_over:
            self._draw_overlay(draw, ["GAME OVER", f"Final Score: {state.score}", "Press SPACE to restart"], ink)
        elif state.phase == PAUSED:
            self._draw_overlay(draw, ["PAUSED", "Press SPACE to resume"], ink)

        self._draw_footer(draw, ink)
        return img

    def render_array(self, state: GameState) -> np.ndarray:
        """Render a frame as an (height, width, 3) uint8 array"""
        return np.array(self.render(state))

    def save(self, state: GameState, output_path: str) -> str:
        """Render the snapshot and write it as a PNG"""
        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        self.render(state).save(output_path, format="PNG")
        logger.info(f"Frame for tick {state.tick} saved to {output_path}")
        return output_path

    def _draw_header(self, draw: ImageDraw.ImageDraw, score: int, ink: str):
        draw.text((MARGIN, HEADER_HEIGHT // 2 - 6), "NOKIA", fill=hex_to_rgb(ink), font=self.font)

        score_text = f"SCORE: {score}"
        bbox = draw.textbbox((0, 0), score_text, font=self.font)
        text_width = bbox[2] - bbox[0]
        draw.text(
            (self.width - MARGIN - text_width, HEADER_HEIGHT // 2 - 6),
            score_text,
            fill=hex_to_rgb(ink),
            font=self.font
        )

    def _draw_board(self, draw: ImageDraw.ImageDraw, state: GameState, ink: str, game_over: bool):
        """Draw the grid, food and snake"""
        grid_line = ColorScheme.GAME_OVER_GRID_LINE if game_over else ColorScheme.GRID_LINE

        # Board outline
        draw.rectangle(
            [self.board_x - 2, self.board_y - 2,
             self.board_x + self.board_pixels + 1, self.board_y + self.board_pixels + 1],
            outline=hex_to_rgb(ink),
            width=2
        )

        for i in range(self.grid_size + 1):
            offset = i * self.cell_size
            draw.line(
                [self.board_x + offset, self.board_y, self.board_x + offset, self.board_y + self.board_pixels],
                fill=hex_to_rgb(grid_line),
                width=1
            )
            draw.line(
                [self.board_x, self.board_y + offset, self.board_x + self.board_pixels, self.board_y + offset],
                fill=hex_to_rgb(grid_line),
                width=1
            )

        grid = state.to_grid()

        for y, x in np.argwhere(grid == FOOD):
            self._draw_cell(draw, int(x), int(y), hex_to_rgb(ColorScheme.FOOD), padding=4)

        for y, x in np.argwhere(grid == BODY):
            self._draw_cell(draw, int(x), int(y), hex_to_rgb(ink), padding=1)

        self._draw_head(draw, state, ink)

    def _draw_head(self, draw: ImageDraw.ImageDraw, state: GameState, ink: str):
        head_x, head_y = state.head
        self._draw_cell(draw, head_x, head_y, darken_color(ink, 0.3), padding=0)

        left = self.board_x + head_x * self.cell_size
        top = self.board_y + head_y * self.cell_size
        eye = max(2, self.cell_size // 5)

        # Eyes sit on the side the snake is facing
        if state.direction in (UP, DOWN):
            eye_y = top + (self.cell_size // 4 if state.direction == UP else 3 * self.cell_size // 4 - eye)
            eyes = [(left + self.cell_size // 4, eye_y), (left + 3 * self.cell_size // 4 - eye, eye_y)]
        else:
            eye_x = left + (self.cell_size // 4 if state.direction == LEFT else 3 * self.cell_size // 4 - eye)
            eyes = [(eye_x, top + self.cell_size // 4), (eye_x, top + 3 * self.cell_size // 4 - eye)]

        for ex, ey in eyes:
            draw.ellipse([ex, ey, ex + eye, ey + eye], fill=hex_to_rgb(ColorScheme.SCREEN))

    def _draw_cell(self, draw: ImageDraw.ImageDraw, x: int, y: int, color: Tuple[int, int, int], padding: int = 1):
        """Draw a single cell (for snake segments or food)"""
        padding = min(padding, self.cell_size // 2)
        left = self.board_x + x * self.cell_size
        top = self.board_y + y * self.cell_size
        draw.rectangle(
            [left + padding, top + padding, left + self.cell_size - padding, top + self.cell_size - padding],
            fill=color
        )

    def _draw_overlay(self, draw: ImageDraw.ImageDraw, lines, ink: str):
        line_height = 18
        box_height = line_height * len(lines) + 24
        box_top = self.board_y + (self.board_pixels - box_height) // 2
        # Small boards get a narrower inset so the box never inverts
        inset = min(16, self.board_pixels // 4)
        draw.rectangle(
            [self.board_x + inset, box_top, self.board_x + self.board_pixels - inset, box_top + box_height],
            fill=hex_to_rgb(ColorScheme.OVERLAY),
            outline=hex_to_rgb(ink),
            width=2
        )

        y = box_top + 12
        for line in lines:
            bbox = draw.textbbox((0, 0), line, font=self.font)
            text_width = bbox[2] - bbox[0]
            draw.text((self.width // 2 - text_width // 2, y), line, fill=hex_to_rgb(ink), font=self.font)
            y += line_height

    def _draw_footer(self, draw: ImageDraw.ImageDraw, ink: str):
        y = self.board_y + self.board_pixels + MARGIN
        for hint in ("Use Arrow Keys to play", "SPACE to pause"):
            bbox = draw.textbbox((0, 0), hint, font=self.font)
            text_width = bbox[2] - bbox[0]
            draw.text((self.width // 2 - text_width // 2, y), hint, fill=hex_to_rgb(ink), font=self.font)
            y += 16
