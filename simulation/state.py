"""
Mutable game state.

One ``GameState`` value is created per session and threaded explicitly
through the engine, the command builder and the renderer.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .aircraft import Aircraft
from .command import CommandBuilder
from .game_map import GameMap
from .metrics import SessionMetrics


@dataclass
class GameState:
    """Root of all mutable simulation state."""

    map: GameMap
    tick_rate: float
    spawn_rate: int
    last_tick: float
    tick: int = 0
    safe: int = 0
    command: CommandBuilder = field(default_factory=CommandBuilder)
    # Insertion order matters: the engine walks this list backwards
    aircraft: List[Aircraft] = field(default_factory=list)
    failure: Optional[str] = None
    metrics: SessionMetrics = field(default_factory=SessionMetrics)

    @property
    def is_over(self) -> bool:
        return self.failure is not None

    def find_aircraft(self, aircraft_id: str) -> Optional[Aircraft]:
        for aircraft in self.aircraft:
            if aircraft.id == aircraft_id:
                return aircraft
        return None


def create_state(
    game_map: GameMap,
    now: float,
    tick_rate: Optional[float] = None,
    spawn_rate: Optional[int] = None,
) -> GameState:
    """
    Build a fresh session state with an empty roster.

    Args:
        game_map: Loaded map
        now: Current clock reading, taken as the last tick boundary
        tick_rate: Seconds per tick, defaults to the map's value
        spawn_rate: Baseline ticks between spawns, defaults to the map's value
    """
    state = GameState(
        map=game_map,
        tick_rate=tick_rate if tick_rate is not None else game_map.info.tick_rate,
        spawn_rate=spawn_rate if spawn_rate is not None else game_map.info.spawn_rate,
        last_tick=now,
    )
    state.metrics.start_session()
    return state
