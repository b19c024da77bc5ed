"""Tick-driven game session composing grid, snake, and fruit logic."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np

from glyph_snake.config import GameConfig
from glyph_snake.fruit import place_fruit
from glyph_snake.grid import Cell, Grid
from glyph_snake.snake import Button, Snake, StepOutcome

logger = logging.getLogger(__name__)


class GameSession:
    """Single-player game driven by host ticks.

    The session owns the grid, the snake, and the random generator. The
    host calls :meth:`tick` once per polling iteration with the buttons
    pressed since the previous tick; the snake advances every
    ``config.step_cadence`` ticks while the game is running.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.rng = rng if rng is not None else np.random.default_rng(
            self.config.seed,
        )
        self.snake = Snake()
        self.grid = Grid(height=self.config.height, width=self.config.width)
        self._lay_out_board()
        self.frames_since_last_step = 0
        self.is_running = False
        self.score = 0
        self.steps = 0
        self.outcome: StepOutcome | None = None

    def _lay_out_board(self) -> None:
        """Reset the snake and clear the board down to the seed and one fruit."""
        self.snake.reset_properties(self.config.initial_length)
        grid = self.grid
        grid.clear()

        # Stack the body downward from row 1 so the head is the lowest cell.
        col = self.config.width // 2
        for row in range(1, self.snake.target_length + 1):
            grid.set(row, col, Cell.BODY)
            self.snake.seed_segment((row, col))

        place_fruit(grid, self.rng)

    def start(self) -> list[str]:
        """Begin a fresh game, discarding any game in progress."""
        self._lay_out_board()
        self.frames_since_last_step = 0
        self.is_running = True
        self.score = 0
        self.steps = 0
        self.outcome = None
        logger.info(
            "Game started on a %dx%d board.",
            self.config.height, self.config.width,
        )
        return self.render()

    def tick(self, pressed: Iterable[Button] = ()) -> list[str] | None:
        """Process one host tick.

        Returns the rendered rows when the board changed this tick,
        otherwise ``None``.
        """
        pressed = set(pressed)
        rows = None

        if Button.CONFIRM in pressed:
            rows = self.start()

        if not self.is_running:
            return rows

        self.snake.adjust_direction(pressed)

        if self.frames_since_last_step == 0:
            rows = self.step()
        elif self.frames_since_last_step >= self.config.step_cadence:
            rows = self.step()
            self.frames_since_last_step = 0

        self.frames_since_last_step += 1
        return rows

    def step(self) -> list[str]:
        """Advance the snake once and render the result."""
        outcome = self.snake.advance(self.grid, self.rng)
        self.steps += 1
        if outcome in (StepOutcome.GREW, StepOutcome.BOARD_FULL):
            self.score += 1
        if outcome.ends_game:
            self.game_over(outcome)
        return self.render()

    def game_over(self, outcome: StepOutcome) -> None:
        """Stop the game; the board stays as it was until the next start."""
        self.is_running = False
        self.outcome = outcome
        logger.info(
            "Game over (%s) after %d steps with score %d.",
            outcome.value, self.steps, self.score,
        )

    def render(self) -> list[str]:
        """Return the board as glyph rows."""
        return self.grid.render()

    def snapshot(self) -> dict:
        """Return the full, serializable session state."""
        return {
            "running": self.is_running,
            "score": self.score,
            "steps": self.steps,
            "outcome": self.outcome.value if self.outcome else None,
            "rows": self.render(),
            "snake": self.snake.to_dict(),
            "grid": self.grid.to_dict(),
        }
