"""Game configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from glyph_snake.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Startup constants for a game session.

    Supports JSON serialization so a board setup can be shared and replayed.
    """

    # Board
    height: int = 8
    width: int = 10
    initial_length: int = 3

    # Timing
    step_cadence: int = 30
    tick_rate_ms: int = 16

    # Randomness
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.height < 4 or self.width < 4:
            raise ConfigError("Grid dimensions must be at least 4×4.")
        if not 1 <= self.initial_length <= self.height - 1:
            raise ConfigError(
                "initial_length must fit between row 1 and the bottom edge.",
            )
        if self.step_cadence < 1:
            raise ConfigError("step_cadence must be at least 1.")
        if self.tick_rate_ms < 1:
            raise ConfigError("tick_rate_ms must be at least 1.")

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {path} must hold a JSON object.")
        try:
            return cls(**raw)
        except TypeError as exc:
            raise ConfigError(str(exc)) from exc
