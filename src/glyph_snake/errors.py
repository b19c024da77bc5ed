"""Exception hierarchy for the glyph snake game."""

from __future__ import annotations


class GlyphSnakeError(Exception):
    """Base class for all game errors."""


class ConfigError(GlyphSnakeError, ValueError):
    """Raised when a game configuration is invalid."""


class FruitPlacementExhausted(GlyphSnakeError):
    """Raised when no free cell is left to hold a fruit."""
