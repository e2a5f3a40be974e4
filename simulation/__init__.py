"""
Simulation module for the ATC terminal game.

This module provides the engine and its supporting components: the map and
heading models, aircraft command resolution, the command-assembly state
machine, the spawn policy and the renderer boundary.
"""

from .aircraft import (
    Aircraft,
    AircraftCommand,
    AircraftKind,
    Destination,
    DestinationKind,
    TurnInstruction,
    aircraft_label,
    updates_on_tick,
)
from .command import BuilderState, CommandBuilder, InstructionKind
from .config import (
    GameConfig,
    LoggingConfig,
    create_default_config,
    load_config,
    validate_config,
)
from .events import GameEvent
from .exceptions import (
    AtcError,
    CommandError,
    ConfigurationError,
    EventError,
    MapError,
    RendererError,
)
from .game import Game
from .game_map import Cell, GameMap, MapInfo, build_map, load_map, parse_map_info
from .gym_env import AtcGridEnv
from .heading import Direction, Heading, heading_matches_direction
from .interface import UI, Renderer, ScriptedRenderer, ScriptedUI
from .metrics import SessionMetrics
from .spawn import create_aircraft, should_spawn, spawn_interval
from .state import GameState, create_state

# Public API
__all__ = [
    # Engine
    "Game",
    "GameState",
    "create_state",
    "GameEvent",

    # Map and headings
    "GameMap",
    "MapInfo",
    "Cell",
    "build_map",
    "load_map",
    "parse_map_info",
    "Heading",
    "Direction",
    "heading_matches_direction",

    # Aircraft
    "Aircraft",
    "AircraftCommand",
    "AircraftKind",
    "Destination",
    "DestinationKind",
    "TurnInstruction",
    "aircraft_label",
    "updates_on_tick",

    # Spawning
    "create_aircraft",
    "should_spawn",
    "spawn_interval",

    # Command assembly
    "CommandBuilder",
    "BuilderState",
    "InstructionKind",

    # Configuration
    "GameConfig",
    "LoggingConfig",
    "create_default_config",
    "load_config",
    "validate_config",

    # Exceptions
    "AtcError",
    "ConfigurationError",
    "MapError",
    "CommandError",
    "EventError",
    "RendererError",

    # Renderer boundary
    "UI",
    "Renderer",
    "ScriptedUI",
    "ScriptedRenderer",

    # Metrics and gymnasium driver
    "SessionMetrics",
    "AtcGridEnv",
]

# Version info
__version__ = "0.1.0"
