"""
Gymnasium driver for the ATC simulation.

Runs the same engine as the terminal game, one tick per ``step``, so agents
and scripted controllers can play without a keyboard.
"""

import logging
from typing import Any, Dict, Optional

import gymnasium as gym
import numpy as np

from .aircraft import AircraftKind, DestinationKind, TurnInstruction
from .constants import AIRCRAFT_IDS, DEFAULT_MAX_TURN_STEP, MAX_AIRCRAFT, MAX_ALTITUDE
from .game import Game
from .game_map import GameMap
from .heading import HEADING_COUNT, Heading
from .spaces import (
    AIRCRAFT_FEATURE_DIM,
    COMMAND_ALTITUDE,
    COMMAND_NONE,
    COMMAND_TURN,
    NO_OP_SLOT,
    create_action_space,
    create_observation_space,
)
from .state import GameState, create_state


logger = logging.getLogger(__name__)

# Rewards
SAFE_REWARD = 1.0
FAILURE_PENALTY = -10.0
TIMESTEP_PENALTY = -0.01


class AtcGridEnv(gym.Env):
    """
    Grid ATC environment backed by the game engine.

    Observation, action and reward follow the layout in ``spaces``:
    the action picks an aircraft slot and optionally a turn or an altitude
    command, then exactly one tick is simulated.
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 1}

    def __init__(
        self,
        game_map: GameMap,
        max_steps: int = 500,
        max_turn_step: int = DEFAULT_MAX_TURN_STEP,
        spawn_rate: Optional[int] = None,
        render_mode: Optional[str] = None,
    ):
        super().__init__()

        self.game_map = game_map
        self.max_steps = max_steps
        self.max_turn_step = max_turn_step
        self.spawn_rate = spawn_rate
        self.render_mode = render_mode

        self.observation_space = create_observation_space(MAX_AIRCRAFT)
        self.action_space = create_action_space(MAX_AIRCRAFT)

        self.state: Optional[GameState] = None
        self.game: Optional[Game] = None
        self.current_step = 0

    def reset(
        self, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None
    ):
        super().reset(seed=seed)
        self.state = create_state(self.game_map, now=0.0, spawn_rate=self.spawn_rate)
        self.game = Game(
            self.state,
            rng=self.np_random,
            max_turn_step=self.max_turn_step,
            clock=lambda: float(self.current_step),
        )
        self.current_step = 0
        return self._get_observation(), self._get_info()

    def step(self, action):
        if self.game is None:
            raise RuntimeError("Call reset() before step()")

        slot, command_type, heading_idx, altitude = (int(v) for v in action)
        if slot != NO_OP_SLOT and slot < len(AIRCRAFT_IDS) and command_type != COMMAND_NONE:
            aircraft_id = AIRCRAFT_IDS[slot]
            if self.state.find_aircraft(aircraft_id) is None:
                logger.debug(f"Action for empty slot {slot} ignored")
            elif command_type == COMMAND_TURN:
                self.game.apply_command(aircraft_id, turn=TurnInstruction(Heading(heading_idx)))
            elif command_type == COMMAND_ALTITUDE:
                self.game.apply_command(aircraft_id, altitude=altitude)

        safe_before = self.state.safe
        self.current_step += 1
        ok = self.game.step()

        reward = TIMESTEP_PENALTY + SAFE_REWARD * (self.state.safe - safe_before)
        if not ok:
            reward += FAILURE_PENALTY

        terminated = not ok
        truncated = ok and self.current_step >= self.max_steps

        return self._get_observation(), float(reward), terminated, truncated, self._get_info()

    def _get_observation(self) -> Dict[str, np.ndarray]:
        features = np.zeros((MAX_AIRCRAFT, AIRCRAFT_FEATURE_DIM), dtype=np.float32)
        mask = np.zeros(MAX_AIRCRAFT, dtype=np.uint8)

        exits = max(1, self.game_map.exit_count - 1)
        airports = max(1, self.game_map.airport_count - 1)
        for aircraft in self.state.aircraft:
            slot = AIRCRAFT_IDS.index(aircraft.id)
            destination = aircraft.destination
            is_exit = destination.kind is DestinationKind.EXIT
            turn = aircraft.command.turn
            target_altitude = aircraft.command.altitude

            features[slot] = [
                aircraft.x / self.game_map.width,
                aircraft.y / self.game_map.height,
                aircraft.altitude / MAX_ALTITUDE,
                aircraft.heading / (HEADING_COUNT - 1),
                1.0 if aircraft.kind is AircraftKind.PROP else 0.0,
                1.0 if is_exit else 0.0,
                destination.id / (exits if is_exit else airports),
                turn.heading / (HEADING_COUNT - 1) if turn is not None else -1.0,
                target_altitude / MAX_ALTITUDE if target_altitude is not None else -1.0,
            ]
            mask[slot] = 1

        return {"aircraft": features, "aircraft_mask": mask}

    def _get_info(self) -> Dict[str, Any]:
        return {
            "tick": self.state.tick,
            "safe": self.state.safe,
            "failure": self.state.failure,
            "aircraft": [a.to_dict() for a in self.state.aircraft],
            "metrics": self.state.metrics.to_dict(),
        }

    def render(self) -> Optional[str]:
        if self.render_mode != "ansi" or self.state is None:
            return None
        from ui.layout import compose_frame

        return "\n".join(compose_frame(self.state))

    def close(self) -> None:
        self.state = None
        self.game = None
