"""
Observation and action space definitions for the gymnasium driver.

Each aircraft letter owns a fixed slot, so slot ``i`` always refers to
aircraft ``chr(ord('a') + i)``.
"""

import numpy as np
from gymnasium import spaces

from .constants import MAX_AIRCRAFT, MAX_ALTITUDE
from .heading import HEADING_COUNT

AIRCRAFT_FEATURE_DIM = 9

# Command types in the action vector
COMMAND_NONE = 0
COMMAND_TURN = 1
COMMAND_ALTITUDE = 2
COMMAND_TYPE_COUNT = 3

NO_OP_SLOT = MAX_AIRCRAFT


def create_observation_space(max_aircraft: int = MAX_AIRCRAFT) -> spaces.Dict:
    """
    Create observation space for the environment.

    Returns:
        Dict space with per-slot aircraft features and an occupancy mask
    """
    return spaces.Dict({
        "aircraft": spaces.Box(
            low=-1.0,
            high=1.0,
            shape=(max_aircraft, AIRCRAFT_FEATURE_DIM),
            dtype=np.float32
        ),
        "aircraft_mask": spaces.Box(
            low=0,
            high=1,
            shape=(max_aircraft,),
            dtype=np.uint8
        ),
    })


def create_action_space(max_aircraft: int = MAX_AIRCRAFT) -> spaces.MultiDiscrete:
    """
    Create action space for the environment.

    Returns:
        MultiDiscrete of [slot (+1 for no-op), command type, heading, altitude]
    """
    return spaces.MultiDiscrete([max_aircraft + 1, COMMAND_TYPE_COUNT, HEADING_COUNT, MAX_ALTITUDE + 1])
