"""Synchronous polling loop that connects a session to input and display."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from glyph_snake.session import GameSession
from glyph_snake.snake import Button

logger = logging.getLogger(__name__)

_SCRIPT_TOKENS: dict[str, Button] = {
    "U": Button.UP,
    "D": Button.DOWN,
    "L": Button.LEFT,
    "R": Button.RIGHT,
    "C": Button.CONFIRM,
    "X": Button.EXIT,
}


def parse_script(text: str) -> list[set[Button]]:
    """Turn a whitespace separated script into per-tick button sets.

    Each token is one tick: ``U D L R C X`` name a button, ``.`` is a tick
    with no input, and ``+`` joins buttons pressed on the same tick
    (``C+R``). A ``*N`` suffix repeats the token, so ``.*29`` is 29 idle
    ticks.
    """
    ticks: list[set[Button]] = []
    for token in text.split():
        body, _, repeat = token.partition("*")
        count = int(repeat) if repeat else 1
        if count < 1:
            raise ValueError(f"Repeat count must be positive in {token!r}.")

        pressed: set[Button] = set()
        if body != ".":
            for name in body.upper().split("+"):
                if name not in _SCRIPT_TOKENS:
                    raise ValueError(f"Unknown button {name!r} in {token!r}.")
                pressed.add(_SCRIPT_TOKENS[name])
        ticks.extend(set(pressed) for _ in range(count))
    return ticks


def run_loop(
    session: GameSession,
    read_buttons: Callable[[], Iterable[Button]],
    show: Callable[[list[str]], None],
    tick_interval: float,
    sleep: Callable[[float], None] = time.sleep,
    max_ticks: int | None = None,
) -> int:
    """Drive *session* until Exit is pressed or *max_ticks* elapse.

    Returns the number of ticks processed.
    """
    ticks = 0
    while max_ticks is None or ticks < max_ticks:
        pressed = set(read_buttons())
        if Button.EXIT in pressed:
            logger.info("Exit requested after %d ticks.", ticks)
            break

        rows = session.tick(pressed)
        if rows is not None:
            show(rows)

        ticks += 1
        sleep(tick_interval)
    return ticks
