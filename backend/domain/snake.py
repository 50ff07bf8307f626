"""
Snake entity for the game engine.
"""

from collections import deque
from typing import Iterable, List, Tuple


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
    """

    def __init__(self, positions: Iterable[Tuple[int, int]]):
        self.positions = deque(positions)
        if not self.positions:
            raise ValueError("A snake needs at least one segment.")

    @property
    def head(self) -> Tuple[int, int]:
        """Return the head position (first element)."""
        return self.positions[0]

    @property
    def tail(self) -> Tuple[int, int]:
        """Return the tail position (last element)."""
        return self.positions[-1]

    def next_head(self, direction: Tuple[int, int]) -> Tuple[int, int]:
        hx, hy = self.head
        return (hx + direction[0], hy + direction[1])

    def occupies(self, position: Tuple[int, int]) -> bool:
        return position in self.positions

    def advance(self, new_head: Tuple[int, int], grow: bool = False):
        """Move the head to new_head, dropping the tail unless growing."""
        self.positions.appendleft(new_head)
        if not grow:
            self.positions.pop()

    def as_list(self) -> List[Tuple[int, int]]:
        return list(self.positions)

    def __len__(self):
        return len(self.positions)

    def __repr__(self):
        return f"<Snake head={self.head}, length={len(self)}>"
