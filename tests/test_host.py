"""Tests for the host loop and input scripts."""

import pytest

from glyph_snake.config import GameConfig
from glyph_snake.host import parse_script, run_loop
from glyph_snake.session import GameSession
from glyph_snake.snake import Button


class TestParseScript:
    def test_single_buttons(self):
        assert parse_script("C U d") == [
            {Button.CONFIRM}, {Button.UP}, {Button.DOWN},
        ]

    def test_idle_and_repeat(self):
        ticks = parse_script("C .*3 R")
        assert ticks == [{Button.CONFIRM}, set(), set(), set(), {Button.RIGHT}]

    def test_combined_buttons(self):
        assert parse_script("C+R") == [{Button.CONFIRM, Button.RIGHT}]

    def test_empty_script(self):
        assert parse_script("   ") == []

    def test_repeated_sets_are_independent(self):
        ticks = parse_script("L*2")
        ticks[0].add(Button.EXIT)
        assert ticks[1] == {Button.LEFT}

    def test_unknown_button(self):
        with pytest.raises(ValueError, match="Unknown button"):
            parse_script("C Q")

    def test_bad_repeat(self):
        with pytest.raises(ValueError, match="positive"):
            parse_script(".*0")


class TestRunLoop:
    def _session(self, **kwargs):
        return GameSession(GameConfig(seed=0, **kwargs))

    def test_exit_stops_loop(self):
        script = iter(parse_script("C . . X . ."))
        shown = []
        ticks = run_loop(
            self._session(),
            read_buttons=lambda: next(script),
            show=shown.append,
            tick_interval=0.0,
            sleep=lambda _: None,
        )
        assert ticks == 3
        assert len(shown) == 1

    def test_max_ticks(self):
        session = self._session(step_cadence=1)
        presses = iter([{Button.CONFIRM}])
        shown = []
        ticks = run_loop(
            session,
            read_buttons=lambda: next(presses, set()),
            show=shown.append,
            tick_interval=0.0,
            sleep=lambda _: None,
            max_ticks=3,
        )
        assert ticks == 3
        assert len(shown) == 3
        assert session.steps == 3

    def test_sleeps_each_tick(self):
        naps = []
        run_loop(
            self._session(),
            read_buttons=lambda: set(),
            show=lambda rows: None,
            tick_interval=0.25,
            sleep=naps.append,
            max_ticks=4,
        )
        assert naps == [0.25] * 4

    def test_nothing_shown_before_start(self):
        shown = []
        run_loop(
            self._session(),
            read_buttons=lambda: {Button.LEFT},
            show=shown.append,
            tick_interval=0.0,
            sleep=lambda _: None,
            max_ticks=10,
        )
        assert shown == []
