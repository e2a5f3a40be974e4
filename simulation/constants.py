"""
Constants module for the ATC terminal simulation.

This module defines all constants used throughout the engine,
including key bindings, altitude limits and the separation rules.
"""

from typing import List

# Aircraft identifiers (one live aircraft per letter)
AIRCRAFT_IDS: List[str] = list("abcdefghijklmnopqrstuvwxyz")
MAX_AIRCRAFT = len(AIRCRAFT_IDS)

# Altitude in thousands of feet
MIN_ALTITUDE = 0
MAX_ALTITUDE = 9
SPAWN_ALTITUDE = 7
EXIT_ALTITUDE = 9
FEET_PER_LEVEL = 1000

# Turn-rate policy: heading steps (of 45 degrees) per tick
DEFAULT_MAX_TURN_STEP = 2
MAX_TURN_STEP_LIMIT = 4

# Aircraft closer than this (Chebyshev, in cells) block an exit for spawning
SPAWN_CLEARANCE = 3

# Two aircraft in the same cell collide when their altitudes differ by at most this
COLLISION_ALTITUDE_BAND = 3

# Spawn interval shrinks by one tick for every SAFE_PER_SPAWN_STEP safe aircraft
SAFE_PER_SPAWN_STEP = 5

# Key bindings
EXIT_KEYS = ("\x03", "\x04", "\x1b")
ENTER_KEYS = ("\r", "\n")
BACKSPACE_KEYS = ("\x7f", "\x08")
TURN_KEY = "t"
ALTITUDE_KEY = "a"
DIGIT_KEYS = "0123456789"

# Game defaults
DEFAULT_MAP = "default"
DEFAULT_MAPS_DIR = "maps"
DEFAULT_LOG_FILE = "atc.log"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
