"""Snake representation, steering, and movement logic."""

from __future__ import annotations

import enum
import logging
from collections import deque
from collections.abc import Iterable
from typing import TYPE_CHECKING

from glyph_snake.errors import FruitPlacementExhausted
from glyph_snake.fruit import place_fruit
from glyph_snake.grid import Cell

if TYPE_CHECKING:
    import numpy as np

    from glyph_snake.grid import Grid

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    """Cardinal headings with (row_delta, col_delta) values."""

    UP = (-1, 0)
    RIGHT = (0, 1)
    DOWN = (1, 0)
    LEFT = (0, -1)


class Button(enum.Enum):
    """Logical buttons a host reports as newly pressed each tick."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    CONFIRM = "confirm"
    EXIT = "exit"


class StepOutcome(enum.Enum):
    """Result of a single advance step."""

    MOVED = "moved"
    GREW = "grew"
    OUT_OF_BOUNDS = "out_of_bounds"
    SELF_COLLISION = "self_collision"
    BOARD_FULL = "board_full"

    @property
    def ends_game(self) -> bool:
        return self not in (StepOutcome.MOVED, StepOutcome.GREW)


# Clockwise order; turning right walks forward, turning left walks back.
_CLOCKWISE: tuple[Direction, ...] = (
    Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT,
)

# (turn-left trigger, turn-right trigger) for each heading.
_TURN_TRIGGERS: dict[Direction, tuple[Button, Button]] = {
    Direction.UP: (Button.LEFT, Button.RIGHT),
    Direction.RIGHT: (Button.UP, Button.DOWN),
    Direction.DOWN: (Button.RIGHT, Button.LEFT),
    Direction.LEFT: (Button.DOWN, Button.UP),
}

INITIAL_LENGTH = 3


def rotate_left(direction: Direction) -> Direction:
    """Return the heading one step counter-clockwise from *direction*."""
    return _CLOCKWISE[(_CLOCKWISE.index(direction) - 1) % len(_CLOCKWISE)]


def rotate_right(direction: Direction) -> Direction:
    """Return the heading one step clockwise from *direction*."""
    return _CLOCKWISE[(_CLOCKWISE.index(direction) + 1) % len(_CLOCKWISE)]


class Snake:
    """A snake represented as an ordered deque of (row, col) segments.

    The head is ``segments[0]``; the tail is ``segments[-1]``. A freshly
    reset snake has no segments; the session seeds them onto the board.
    """

    def __init__(self) -> None:
        self.segments: deque[tuple[int, int]] = deque()
        self.direction = Direction.DOWN
        self.target_length = INITIAL_LENGTH

    @property
    def head(self) -> tuple[int, int]:
        """Return the head coordinate."""
        return self.segments[0]

    @property
    def tail(self) -> tuple[int, int]:
        """Return the tail coordinate."""
        return self.segments[-1]

    def __len__(self) -> int:
        return len(self.segments)

    def reset_properties(self, length: int = INITIAL_LENGTH) -> None:
        """Drop all segments and restore the starting heading and length."""
        self.segments.clear()
        self.direction = Direction.DOWN
        self.target_length = length

    def seed_segment(self, coordinate: tuple[int, int]) -> None:
        """Insert *coordinate* as the new head without moving."""
        self.segments.appendleft(coordinate)

    def turn_left(self) -> None:
        self.direction = rotate_left(self.direction)

    def turn_right(self) -> None:
        self.direction = rotate_right(self.direction)

    def adjust_direction(self, pressed: Iterable[Button]) -> None:
        """Steer from a set of newly pressed buttons.

        Only the two buttons perpendicular to the current heading count;
        pressing forward or backward does nothing, so the snake can never
        reverse onto its own neck.
        """
        pressed = set(pressed)
        left_trigger, right_trigger = _TURN_TRIGGERS[self.direction]
        if left_trigger in pressed:
            self.turn_left()
        elif right_trigger in pressed:
            self.turn_right()

    def next_head(self) -> tuple[int, int]:
        """Compute the next head position without moving."""
        dr, dc = self.direction.value
        r, c = self.head
        return r + dr, c + dc

    def advance(self, grid: Grid, rng: np.random.Generator) -> StepOutcome:
        """Move one cell forward, updating *grid* in place.

        Collisions leave both the snake and the grid untouched. Eating a
        fruit keeps the tail and places a replacement fruit after the head
        has been painted, so the new fruit never lands on the head.
        """
        row, col = self.next_head()

        if not grid.in_bounds(row, col):
            return StepOutcome.OUT_OF_BOUNDS

        target = grid.get(row, col)
        if target == Cell.BODY:
            return StepOutcome.SELF_COLLISION

        if target == Cell.FRUIT:
            self.target_length += 1
            self.segments.appendleft((row, col))
            grid.set(row, col, Cell.BODY)
            try:
                place_fruit(grid, rng)
            except FruitPlacementExhausted:
                logger.warning(
                    "Board filled at length %d.", self.target_length,
                )
                return StepOutcome.BOARD_FULL
            return StepOutcome.GREW

        tail_r, tail_c = self.segments.pop()
        grid.set(tail_r, tail_c, Cell.EMPTY)
        self.segments.appendleft((row, col))
        grid.set(row, col, Cell.BODY)
        return StepOutcome.MOVED

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "segments": [list(seg) for seg in self.segments],
            "direction": self.direction.name.lower(),
            "target_length": self.target_length,
        }
