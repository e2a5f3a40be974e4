"""
Aircraft spawn policy.

New traffic enters at exits that are clear of other aircraft. The spawn
interval starts at the map's spawn rate and shrinks as the player brings
aircraft home safely, down to one spawn per tick.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from .aircraft import Aircraft, AircraftKind, Destination, DestinationKind
from .constants import AIRCRAFT_IDS, SAFE_PER_SPAWN_STEP, SPAWN_ALTITUDE, SPAWN_CLEARANCE
from .game_map import GameMap


logger = logging.getLogger(__name__)


def spawn_interval(spawn_rate: int, safe: int) -> int:
    return max(1, spawn_rate - safe // SAFE_PER_SPAWN_STEP)


def should_spawn(tick: int, spawn_rate: int, safe: int) -> bool:
    """Spawn on the first tick, then every ``spawn_interval`` ticks."""
    if tick == 0:
        return True
    return tick % spawn_interval(spawn_rate, safe) == 0


def next_free_id(aircraft: Sequence[Aircraft]) -> Optional[str]:
    """First letter not used by a live aircraft, or None when all 26 are taken."""
    used = {a.id for a in aircraft}
    for aircraft_id in AIRCRAFT_IDS:
        if aircraft_id not in used:
            return aircraft_id
    return None


def available_exits(game_map: GameMap, aircraft: Sequence[Aircraft]) -> List[int]:
    """
    Exit ids with no live aircraft within Chebyshev distance < SPAWN_CLEARANCE.

    Args:
        game_map: Map holding the exits
        aircraft: Live aircraft

    Returns:
        Ids of exits that are clear for spawning
    """
    exits = np.array([[x, y] for x, y, _ in game_map.info.exits], dtype=int)
    if not aircraft:
        return list(range(len(exits)))

    positions = np.array([[a.x, a.y] for a in aircraft], dtype=int)
    # Chebyshev distance from every exit to every aircraft
    distances = np.abs(exits[:, None, :] - positions[None, :, :]).max(axis=-1)
    blocked = (distances < SPAWN_CLEARANCE).any(axis=1)
    return [int(i) for i in np.flatnonzero(~blocked)]


def choose_destination(
    game_map: GameMap, spawn_exit: int, rng: np.random.Generator
) -> Optional[Destination]:
    """
    Coin-flip between a random airport and a random exit other than the spawn exit.

    Falls back to the other kind when one is unavailable on this map.
    """
    airports = list(range(game_map.airport_count))
    other_exits = [i for i in range(game_map.exit_count) if i != spawn_exit]

    want_airport = bool(rng.integers(2))
    if want_airport and not airports:
        want_airport = False
    if not want_airport and not other_exits:
        want_airport = bool(airports)

    if want_airport:
        return Destination(DestinationKind.AIRPORT, int(rng.choice(airports)))
    if other_exits:
        return Destination(DestinationKind.EXIT, int(rng.choice(other_exits)))
    return None


def create_aircraft(
    game_map: GameMap, aircraft: Sequence[Aircraft], rng: np.random.Generator
) -> Optional[Aircraft]:
    """
    Attempt one spawn.

    Returns None, without raising, when no id is free, every exit is
    crowded, or the map offers no destination.
    """
    aircraft_id = next_free_id(aircraft)
    if aircraft_id is None:
        logger.debug("Spawn skipped: no free aircraft id")
        return None

    exits = available_exits(game_map, aircraft)
    if not exits:
        logger.debug("Spawn skipped: every exit is crowded")
        return None

    exit_id = int(rng.choice(exits))
    destination = choose_destination(game_map, exit_id, rng)
    if destination is None:
        logger.debug("Spawn skipped: map offers no destination")
        return None

    x, y, heading = game_map.info.exits[exit_id]
    kind = AircraftKind.JET if rng.integers(2) == 0 else AircraftKind.PROP
    return Aircraft(
        id=aircraft_id,
        kind=kind,
        x=x,
        y=y,
        altitude=SPAWN_ALTITUDE,
        heading=heading,
        destination=destination,
    )
