"""Fruit placement logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from glyph_snake.errors import FruitPlacementExhausted
from glyph_snake.grid import Cell

if TYPE_CHECKING:
    import numpy as np

    from glyph_snake.grid import Grid

logger = logging.getLogger(__name__)


def place_fruit(grid: Grid, rng: np.random.Generator) -> tuple[int, int]:
    """Put one fruit on a uniformly chosen free cell and return its position.

    Free cells are gathered in a single pass, so placement never retries.
    Raises :class:`FruitPlacementExhausted` when the board has no free cell,
    leaving the grid untouched.
    """
    free = grid.free_cells()
    if not free:
        logger.warning("No free cells available for fruit placement.")
        raise FruitPlacementExhausted(
            f"No free cell left on a {grid.height}x{grid.width} grid.",
        )

    row, col = free[int(rng.choice(len(free)))]
    grid.set(row, col, Cell.FRUIT)
    return row, col
