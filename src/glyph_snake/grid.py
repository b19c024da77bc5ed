"""Grid representation for the snake game."""

from __future__ import annotations

import enum

import numpy as np


class Cell(enum.IntEnum):
    """Integer codes stored in the grid array."""

    EMPTY = 0
    BODY = 1
    FRUIT = 2


GLYPHS: dict[Cell, str] = {
    Cell.EMPTY: ".",
    Cell.BODY: "*",
    Cell.FRUIT: "@",
}

# Indexed by cell code for vectorised rendering.
_GLYPH_TABLE = np.array([GLYPHS[cell] for cell in Cell])


class Grid:
    """NumPy-backed board of ``height`` rows by ``width`` columns.

    The grid stores cell states as integers for O(1) collision checks.
    Coordinates use (row, col) ordering consistent with NumPy indexing.
    """

    def __init__(self, height: int = 8, width: int = 10) -> None:
        if width < 4 or height < 4:
            raise ValueError("Grid dimensions must be at least 4×4.")
        self.height = height
        self.width = width
        self.cells = np.zeros((height, width), dtype=np.int8)

    def clear(self) -> None:
        """Reset all cells to empty."""
        self.cells[:] = Cell.EMPTY

    def in_bounds(self, row: int, col: int) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 0 <= row < self.height and 0 <= col < self.width

    def get(self, row: int, col: int) -> Cell:
        """Return the cell at the given coordinate."""
        return Cell(self.cells[row, col])

    def set(self, row: int, col: int, cell: Cell) -> None:
        """Set the cell at the given coordinate."""
        self.cells[row, col] = cell

    def free_cells(self) -> list[tuple[int, int]]:
        """Return a list of all empty cell coordinates."""
        rows, cols = np.where(self.cells == Cell.EMPTY)
        return list(zip(rows.tolist(), cols.tolist(), strict=True))

    def count(self, cell: Cell) -> int:
        """Return how many cells hold *cell*."""
        return int(np.count_nonzero(self.cells == cell))

    def render(self, separator: str = " ") -> list[str]:
        """Project the board onto one glyph string per row, top to bottom."""
        glyphs = _GLYPH_TABLE[self.cells]
        return [separator.join(row) for row in glyphs.tolist()]

    def to_dict(self) -> dict:
        """Serialize grid state to a dictionary."""
        return {
            "height": self.height,
            "width": self.width,
            "cells": self.cells.tolist(),
        }
