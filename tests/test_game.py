"""
Tests for the simulation engine: commands, safety rules, spawning and the
event loop.
"""

import logging

import numpy as np
import pytest

from simulation.aircraft import AircraftKind, Destination, DestinationKind, TurnInstruction
from simulation.events import GameEvent
from simulation.exceptions import CommandError, EventError
from simulation.game import Game
from simulation.heading import Heading
from simulation.interface import ScriptedUI
from simulation.state import create_state

TO_E0 = Destination(DestinationKind.EXIT, 0)
TO_E1 = Destination(DestinationKind.EXIT, 1)
TO_A0 = Destination(DestinationKind.AIRPORT, 0)


class TestCommands:
    """Committing commands from the builder."""

    def test_keystroke_round_trip(self, quiet_state, game, make_aircraft):
        aircraft = make_aircraft(aircraft_id="b", x=5, y=5, heading=Heading.NORTH)
        quiet_state.aircraft.append(aircraft)

        events = [quiet_state.command.press(key) for key in ["b", "t", "d", "\r"]]
        assert events[-1] is GameEvent.SEND

        game.handle_event(events[-1])

        assert aircraft.command.turn == TurnInstruction(Heading.EAST)
        assert quiet_state.command.is_empty()
        assert quiet_state.tick == 1
        assert quiet_state.metrics.commands_by_kind["turn"] == 1

    def test_unknown_aircraft_is_rejected(self, quiet_state, game, caplog):
        for key in ["z", "a", "9"]:
            quiet_state.command.press(key)

        with caplog.at_level(logging.WARNING):
            assert game.send_command() is False

        assert "unknown aircraft" in caplog.text
        assert quiet_state.command.is_empty()
        assert quiet_state.tick == 1
        assert quiet_state.metrics.rejected_commands == 1

    def test_partial_command_raises(self, quiet_state, game):
        quiet_state.command.press("b")
        quiet_state.command.press("t")

        with pytest.raises(CommandError):
            game.send_command()
        assert quiet_state.command.is_empty()

    def test_apply_command_validates(self, quiet_state, game, make_aircraft):
        quiet_state.aircraft.append(make_aircraft())

        with pytest.raises(CommandError):
            game.apply_command("b")
        with pytest.raises(CommandError):
            game.apply_command("b", altitude=10)

    def test_new_command_replaces_pending(self, quiet_state, game, make_aircraft):
        aircraft = make_aircraft()
        quiet_state.aircraft.append(aircraft)

        game.apply_command("b", altitude=3)
        game.apply_command("b", altitude=8)

        assert aircraft.command.altitude == 8


class TestExitRules:
    """Reaching the border is only safe at the right exit at 9000ft."""

    def test_successful_exit(self, quiet_state, game, make_aircraft):
        quiet_state.aircraft.append(make_aircraft(x=9, y=5, altitude=9, destination=TO_E1))

        assert game.step() is True

        assert quiet_state.aircraft == []
        assert quiet_state.safe == 1
        assert quiet_state.tick == 2
        assert quiet_state.metrics.successful_exits == 1

    def test_exit_below_9000ft(self, quiet_state, game, make_aircraft):
        quiet_state.aircraft.append(make_aircraft(x=9, y=5, altitude=7, destination=TO_E1))

        assert game.step() is False

        assert quiet_state.failure == "b7 exited at 7000ft rather than 9000ft"
        assert quiet_state.tick == 1
        assert quiet_state.safe == 0

    def test_wrong_exit(self, quiet_state, game, make_aircraft):
        quiet_state.aircraft.append(make_aircraft(x=9, y=5, altitude=9, destination=TO_E0))
        game.step()
        assert quiet_state.failure == "b9 exited at E1 instead of E0"

    def test_exit_when_bound_for_airport(self, quiet_state, game, make_aircraft):
        quiet_state.aircraft.append(make_aircraft(x=9, y=5, altitude=9, destination=TO_A0))
        game.step()
        assert quiet_state.failure == "b9 exited at E1 but was bound for A0"

    def test_border_without_exit(self, quiet_state, game, make_aircraft):
        quiet_state.aircraft.append(make_aircraft(x=9, y=3, altitude=9, destination=TO_E1))
        game.step()
        assert quiet_state.failure == "b9 exited at the wrong location"

    def test_prop_label_in_failure(self, quiet_state, game, make_aircraft):
        quiet_state.aircraft.append(
            make_aircraft(x=9, y=3, altitude=9, kind=AircraftKind.PROP, destination=TO_E1)
        )
        game.step()
        assert quiet_state.failure == "B9 exited at the wrong location"


class TestLandingRules:
    """Altitude zero is only safe on the destination airport, heading the right way."""

    def test_successful_landing(self, quiet_state, game, make_aircraft):
        aircraft = make_aircraft(x=5, y=7, altitude=1, heading=Heading.SOUTH, destination=TO_A0)
        aircraft.command.altitude = 0
        quiet_state.aircraft.append(aircraft)

        assert game.step() is True

        assert quiet_state.aircraft == []
        assert quiet_state.safe == 1
        assert quiet_state.metrics.successful_landings == 1

    def test_ground_crash(self, quiet_state, game, make_aircraft):
        quiet_state.aircraft.append(make_aircraft(x=3, y=3, altitude=0, heading=Heading.EAST))
        game.step()
        assert quiet_state.failure == "b0 crashed into the ground"

    def test_wrong_approach_direction(self, quiet_state, game, make_aircraft):
        quiet_state.aircraft.append(
            make_aircraft(x=4, y=8, altitude=0, heading=Heading.EAST, destination=TO_A0)
        )
        game.step()
        assert quiet_state.failure == "b0 crashed into airport (wrong direction)"

    def test_wrong_airport(self, quiet_state, game, make_aircraft):
        quiet_state.aircraft.append(
            make_aircraft(x=5, y=7, altitude=0, heading=Heading.SOUTH, destination=TO_E1)
        )
        game.step()
        assert quiet_state.failure == "b0 landed at the wrong airport"

    def test_retiring_does_not_stop_other_aircraft(self, quiet_state, game, make_aircraft):
        other = make_aircraft(aircraft_id="c", x=2, y=2, heading=Heading.EAST)
        quiet_state.aircraft.append(other)
        quiet_state.aircraft.append(
            make_aircraft(x=9, y=5, altitude=9, destination=TO_E1)
        )

        game.step()

        assert quiet_state.aircraft == [other]
        assert other.x == 3


class TestCollisions:
    """Aircraft sharing a cell within 3000ft collide."""

    def test_collision_halts_tick(self, quiet_state, game, make_aircraft):
        c = make_aircraft(aircraft_id="c", x=2, y=7, altitude=7, heading=Heading.EAST)
        a = make_aircraft(aircraft_id="a", x=3, y=3, altitude=5, heading=Heading.EAST)
        b = make_aircraft(aircraft_id="b", x=5, y=3, altitude=7, heading=Heading.WEST)
        quiet_state.aircraft.extend([c, a, b])

        assert game.step() is False

        assert quiet_state.failure == "a5 collided with b7"
        assert c.x == 2
        assert quiet_state.tick == 1

    def test_altitude_separation_avoids_collision(self, quiet_state, game, make_aircraft):
        a = make_aircraft(aircraft_id="a", x=3, y=3, altitude=3, heading=Heading.EAST)
        b = make_aircraft(aircraft_id="b", x=5, y=3, altitude=7, heading=Heading.WEST)
        quiet_state.aircraft.extend([a, b])

        assert game.step() is True
        assert (a.x, a.y) == (b.x, b.y)
        assert quiet_state.failure is None

    def test_no_collision_in_different_cells(self, quiet_state, game, make_aircraft):
        a = make_aircraft(aircraft_id="a", x=3, y=3, altitude=7, heading=Heading.EAST)
        b = make_aircraft(aircraft_id="b", x=3, y=4, altitude=7, heading=Heading.EAST)
        quiet_state.aircraft.extend([a, b])

        assert game.step() is True


class TestCadence:
    """Props resolve and move only on odd ticks."""

    def test_prop_skips_even_tick(self, quiet_state, game, make_aircraft):
        quiet_state.tick = 2
        prop = make_aircraft(x=3, y=3, kind=AircraftKind.PROP)
        prop.command.altitude = 9
        quiet_state.aircraft.append(prop)

        game.step()
        assert (prop.x, prop.altitude) == (3, 7)
        assert quiet_state.tick == 3

        game.step()
        assert (prop.x, prop.altitude) == (4, 8)

    def test_jet_moves_every_tick(self, quiet_state, game, make_aircraft):
        quiet_state.tick = 2
        jet = make_aircraft(x=3, y=3)
        quiet_state.aircraft.append(jet)

        game.step()
        game.step()

        assert jet.x == 5


class TestSpawning:
    def test_spawn_on_first_tick(self, state, game):
        assert game.step() is True

        assert len(state.aircraft) == 1
        assert state.aircraft[0].id == "a"
        assert state.tick == 1
        assert state.metrics.aircraft_spawned == 1

    def test_failed_tick_does_not_spawn(self, state, game, make_aircraft):
        state.aircraft.append(make_aircraft(x=3, y=3, altitude=0))

        game.step()

        assert len(state.aircraft) == 1
        assert state.tick == 0
        assert state.metrics.aircraft_spawned == 0

    def test_tick_records_clock(self, quiet_state, game, clock):
        clock.advance(2.5)
        game.step()
        assert quiet_state.last_tick == clock()

    def test_same_seed_same_spawns(self, game_map, clock):

        def spawned(seed):
            state = create_state(game_map, now=clock())
            state.spawn_rate = 1
            game = Game(state, rng=np.random.default_rng(seed), clock=clock)
            for _ in range(3):
                game.step()
            return [(a.id, a.x, a.y, a.kind, a.destination) for a in state.aircraft]

        assert spawned(99) == spawned(99)


class TestEventLoop:
    """The run loop against a scripted UI."""

    def test_scripted_session(self, state, rng, clock):
        ui = ScriptedUI([GameEvent.TICK, "a", "a", "9", "\r"])
        game = Game(state, ui=ui, rng=rng, clock=clock)

        final = game.run()

        frames = ui.renderer.frames
        assert len(frames) == 7
        assert frames[0]["tick"] == 0 and frames[0]["aircraft"] == []
        assert frames[1]["tick"] == 1 and len(frames[1]["aircraft"]) == 1
        assert frames[4]["command"] == "a: altitude: 9000"
        assert frames[5]["command"] == ""
        assert final.failure == "exited"
        assert frames[-1]["failure"] == "exited"
        assert state.aircraft[0].command.altitude == 9

    def test_run_requires_ui(self, game):
        with pytest.raises(ValueError):
            game.run()

    def test_unknown_event(self, game):
        with pytest.raises(EventError):
            game.handle_event("tick")

    def test_exit_event(self, state, game):
        game.handle_event(GameEvent.EXIT)
        assert state.is_over
        assert state.failure == "exited"

    def test_draw_event_changes_nothing(self, state, game):
        game.handle_event(GameEvent.DRAW)
        assert state.tick == 0
        assert state.failure is None

    def test_observer_called_per_tick(self, quiet_state, game):
        ticks = []
        game.add_observer(lambda s: ticks.append(s.tick))

        game.step()
        game.step()

        assert ticks == [2, 3]
