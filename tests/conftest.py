"""
Pytest configuration and shared fixtures for the ATC game tests.
"""

from pathlib import Path
from typing import Optional

import numpy as np
import pytest

from simulation.aircraft import (
    Aircraft,
    AircraftCommand,
    AircraftKind,
    Destination,
    DestinationKind,
)
from simulation.game import Game
from simulation.game_map import GameMap, MapInfo, build_map
from simulation.heading import Direction, Heading
from simulation.state import GameState, create_state

MAPS_DIR = Path(__file__).parent.parent / "maps"


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def maps_dir() -> Path:
    return MAPS_DIR


@pytest.fixture
def map_info() -> MapInfo:
    """
    11x11 test map.

    E0 west edge heading East, E1 east edge heading West, E2 north edge
    heading South; A0 in the lower middle approached heading South; one
    beacon in the centre.
    """
    return MapInfo(
        width=11,
        height=11,
        tick_rate=1.0,
        spawn_rate=10,
        exits=[(0, 5, Heading.EAST), (10, 5, Heading.WEST), (5, 0, Heading.SOUTH)],
        airports=[(5, 8, Direction.DOWN)],
        beacons=[(5, 5)],
        paths=[((0, 5), (10, 5)), ((5, 0), (5, 8))],
    )


@pytest.fixture
def game_map(map_info) -> GameMap:
    return build_map(map_info)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(100.0)


@pytest.fixture
def state(game_map, clock) -> GameState:
    return create_state(game_map, now=clock())


@pytest.fixture
def quiet_state(state) -> GameState:
    """State at tick 1 with spawning effectively disabled."""
    state.tick = 1
    state.spawn_rate = 1000
    return state


@pytest.fixture
def game(state, rng, clock) -> Game:
    return Game(state, rng=rng, clock=clock)


@pytest.fixture
def make_aircraft():
    """Factory for aircraft with sensible defaults."""

    def _make(
        aircraft_id: str = "b",
        x: int = 3,
        y: int = 3,
        altitude: int = 7,
        heading: Heading = Heading.EAST,
        kind: AircraftKind = AircraftKind.JET,
        destination: Optional[Destination] = None,
    ) -> Aircraft:
        return Aircraft(
            id=aircraft_id,
            kind=kind,
            x=x,
            y=y,
            altitude=altitude,
            heading=heading,
            destination=destination or Destination(DestinationKind.EXIT, 1),
            command=AircraftCommand(),
        )

    return _make
