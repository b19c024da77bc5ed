"""Glyph Snake — text-grid snake game core."""

from glyph_snake.config import GameConfig
from glyph_snake.errors import (
    ConfigError,
    FruitPlacementExhausted,
    GlyphSnakeError,
)
from glyph_snake.fruit import place_fruit
from glyph_snake.grid import Cell, Grid
from glyph_snake.session import GameSession
from glyph_snake.snake import (
    Button,
    Direction,
    Snake,
    StepOutcome,
    rotate_left,
    rotate_right,
)

__all__ = [
    "Button",
    "Cell",
    "ConfigError",
    "Direction",
    "FruitPlacementExhausted",
    "GameConfig",
    "GameSession",
    "GlyphSnakeError",
    "Grid",
    "Snake",
    "StepOutcome",
    "place_fruit",
    "rotate_left",
    "rotate_right",
]
