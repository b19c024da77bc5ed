"""Command line entry point for Glyph Snake."""

from __future__ import annotations

import argparse
import curses
import logging
import sys

from glyph_snake.config import GameConfig
from glyph_snake.errors import ConfigError
from glyph_snake.host import parse_script, run_loop
from glyph_snake.session import GameSession
from glyph_snake.snake import Button

logger = logging.getLogger(__name__)

_KEY_MAP: dict[int, Button] = {
    curses.KEY_UP: Button.UP,
    curses.KEY_DOWN: Button.DOWN,
    curses.KEY_LEFT: Button.LEFT,
    curses.KEY_RIGHT: Button.RIGHT,
    curses.KEY_ENTER: Button.CONFIRM,
    ord("\n"): Button.CONFIRM,
    ord(" "): Button.CONFIRM,
    ord("q"): Button.EXIT,
    27: Button.EXIT,
}

_HELP_LINE = "(Enter) Start / restart.  (q) Exit."


def _add_config_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override its values).",
    )
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument(
        "--cadence", type=int, default=None,
        help="Ticks between snake steps.",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--tick-ms", type=int, default=None,
        help="Milliseconds between host ticks.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="glyph-snake",
        description="Single-player snake drawn with text glyphs.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- play ---
    play_p = sub.add_parser("play", help="Play in the terminal.")
    _add_config_flags(play_p)

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Run a scripted game without a terminal.",
    )
    _add_config_flags(sim_p)
    sim_p.add_argument(
        "--script", type=str, default="C",
        help="Per-tick input, e.g. 'C .*29 R .*30'.",
    )
    sim_p.add_argument(
        "--ticks", type=int, default=None,
        help="Ticks to run (defaults to the script length).",
    )

    return parser


def _config_from_args(args: argparse.Namespace) -> GameConfig:
    config = GameConfig.load(args.config) if args.config else GameConfig()

    flag_map = {
        "height": "height",
        "width": "width",
        "cadence": "step_cadence",
        "seed": "seed",
        "tick_ms": "tick_rate_ms",
    }
    overrides: dict = {}
    for cli_name, cfg_name in flag_map.items():
        val = getattr(args, cli_name, None)
        if val is not None:
            overrides[cfg_name] = val

    if overrides:
        d = config.to_dict()
        d.update(overrides)
        config = GameConfig(**d)
    return config


def _read_keys(window: curses.window) -> list[Button]:
    pressed: list[Button] = []
    while (key := window.getch()) != -1:
        button = _KEY_MAP.get(key)
        if button is not None:
            pressed.append(button)
    return pressed


def _play(window: curses.window, config: GameConfig) -> int:
    curses.curs_set(0)
    window.nodelay(True)
    window.keypad(True)

    session = GameSession(config)
    window.erase()
    window.addstr(0, 0, _HELP_LINE)
    window.refresh()

    def show(rows: list[str]) -> None:
        window.erase()
        for i, row in enumerate(rows):
            window.addstr(i, 0, row)
        status = f"score {session.score}"
        if session.outcome is not None:
            status += f"  game over: {session.outcome.value}"
        window.addstr(len(rows) + 1, 0, status)
        window.addstr(len(rows) + 2, 0, _HELP_LINE)
        window.refresh()

    return run_loop(
        session,
        read_buttons=lambda: _read_keys(window),
        show=show,
        tick_interval=config.tick_rate_ms / 1000.0,
    )


def _run_play(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    # Log lines would scribble over the curses screen.
    logging.getLogger("glyph_snake").setLevel(logging.WARNING)
    ticks = curses.wrapper(_play, config)
    logger.info("Terminal session ended after %d ticks.", ticks)
    return 0


def _run_simulate(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    script = parse_script(args.script)
    total = args.ticks if args.ticks is not None else len(script)

    session = GameSession(config)
    frames = iter(script)

    def show(rows: list[str]) -> None:
        print("\n".join(rows))  # noqa: T201
        print()  # noqa: T201

    run_loop(
        session,
        read_buttons=lambda: next(frames, set()),
        show=show,
        tick_interval=0.0,
        sleep=lambda _: None,
        max_ticks=total,
    )

    if session.outcome is not None:
        outcome = session.outcome.value
    elif session.is_running:
        outcome = "running"
    else:
        outcome = "not_started"
    print(  # noqa: T201
        f"Result: {outcome} score={session.score} steps={session.steps}",
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``glyph-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "play": _run_play,
        "simulate": _run_simulate,
    }
    try:
        return handlers[args.command](args)
    except ConfigError as exc:
        parser.error(f"invalid configuration: {exc}")
    except (OSError, ValueError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    sys.exit(main())
