"""
Tests for the command-assembly state machine.
"""

import pytest

from simulation.command import BuilderState, CommandBuilder, InstructionKind
from simulation.events import GameEvent
from simulation.heading import Heading


def press_all(builder, keys):
    return [builder.press(key) for key in keys]


class TestBuilderTransitions:
    """Keys are interpreted according to the builder state."""

    def test_turn_command(self):
        builder = CommandBuilder()

        events = press_all(builder, ["b", "t", "d"])

        assert events == [GameEvent.DRAW] * 3
        assert builder.aircraft_id == "b"
        assert builder.kind is InstructionKind.TURN
        assert builder.heading == Heading.EAST
        assert builder.is_complete()

    def test_turn_with_beacon(self):
        builder = CommandBuilder()
        press_all(builder, ["c", "t", "w", "1"])

        assert builder.heading == Heading.NORTH
        assert builder.beacon == 1
        assert builder.describe() == "c: turn: North via *1"

    def test_altitude_command(self):
        builder = CommandBuilder()
        press_all(builder, ["b", "a", "9"])

        assert builder.state is BuilderState.ALTITUDE_PENDING
        assert builder.altitude == 9
        assert builder.describe() == "b: altitude: 9000"

    def test_idle_ignores_non_letters(self):
        builder = CommandBuilder()
        press_all(builder, ["1", "B", " "])
        assert builder.state is BuilderState.IDLE

    def test_selected_ignores_other_keys(self):
        builder = CommandBuilder()
        press_all(builder, ["b", "x", "5"])
        assert builder.state is BuilderState.AIRCRAFT_SELECTED
        assert builder.describe() == "b:"

    def test_altitude_ignores_letters(self):
        builder = CommandBuilder()
        press_all(builder, ["b", "a", "w"])
        assert builder.altitude is None
        assert not builder.is_complete()

    def test_later_keys_overwrite(self):
        builder = CommandBuilder()
        press_all(builder, ["b", "t", "d", "x", "2", "3"])
        assert builder.heading == Heading.SOUTH
        assert builder.beacon == 3

        builder = CommandBuilder()
        press_all(builder, ["b", "a", "3", "6"])
        assert builder.altitude == 6


class TestEnterAndExit:
    """Enter commits a complete command and ticks otherwise."""

    def test_enter_on_empty_builder_ticks(self):
        assert CommandBuilder().press("\r") is GameEvent.TICK

    def test_enter_on_partial_command_ticks(self):
        builder = CommandBuilder()
        press_all(builder, ["b", "t"])
        assert builder.press("\n") is GameEvent.TICK
        assert builder.aircraft_id == "b"

    def test_enter_on_complete_command_sends(self):
        builder = CommandBuilder()
        press_all(builder, ["b", "a", "0"])
        assert builder.press("\r") is GameEvent.SEND

    @pytest.mark.parametrize("key", ["\x03", "\x04", "\x1b"])
    def test_exit_keys(self, key):
        builder = CommandBuilder()
        press_all(builder, ["b", "t"])
        assert builder.press(key) is GameEvent.EXIT


class TestUndo:
    """Backspace removes the most recently filled field."""

    def test_undo_order_for_turn(self):
        builder = CommandBuilder()
        press_all(builder, ["b", "t", "d", "1"])

        assert builder.press("\x7f") is GameEvent.DRAW
        assert builder.beacon is None and builder.heading == Heading.EAST

        builder.press("\x7f")
        assert builder.heading is None
        assert builder.state is BuilderState.TURN_PENDING

        builder.press("\x08")
        assert builder.state is BuilderState.AIRCRAFT_SELECTED

        builder.press("\x7f")
        assert builder.state is BuilderState.IDLE

    def test_undo_altitude(self):
        builder = CommandBuilder()
        press_all(builder, ["b", "a", "4", "\x7f"])
        assert builder.altitude is None
        assert builder.state is BuilderState.ALTITUDE_PENDING

    def test_undo_on_empty_builder(self):
        builder = CommandBuilder()
        assert builder.press("\x7f") is GameEvent.DRAW
        assert builder.is_empty()

    def test_clear(self):
        builder = CommandBuilder()
        press_all(builder, ["b", "t", "d", "1"])
        builder.clear()
        assert builder == CommandBuilder()
        assert builder.describe() == ""
