"""
Command-assembly state machine.

Turns single keystrokes into one committed instruction: an aircraft id,
then either a turn (heading plus optional beacon) or an altitude. Every key
returns a ``GameEvent`` telling the loop what to do next, so input never
blocks the simulation.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import (
    ALTITUDE_KEY,
    BACKSPACE_KEYS,
    DIGIT_KEYS,
    ENTER_KEYS,
    EXIT_KEYS,
    FEET_PER_LEVEL,
    TURN_KEY,
)
from .events import GameEvent
from .heading import Heading, heading_for_key


logger = logging.getLogger(__name__)


class InstructionKind(Enum):
    TURN = "turn"
    ALTITUDE = "altitude"


class BuilderState(Enum):
    """Where the builder is in assembling a command."""
    IDLE = "idle"
    AIRCRAFT_SELECTED = "aircraft_selected"
    TURN_PENDING = "turn_pending"
    ALTITUDE_PENDING = "altitude_pending"


@dataclass
class CommandBuilder:
    """Partially built player command."""

    aircraft_id: Optional[str] = None
    kind: Optional[InstructionKind] = None
    heading: Optional[Heading] = None
    beacon: Optional[int] = None
    altitude: Optional[int] = None

    @property
    def state(self) -> BuilderState:
        if self.aircraft_id is None:
            return BuilderState.IDLE
        if self.kind is InstructionKind.TURN:
            return BuilderState.TURN_PENDING
        if self.kind is InstructionKind.ALTITUDE:
            return BuilderState.ALTITUDE_PENDING
        return BuilderState.AIRCRAFT_SELECTED

    def is_complete(self) -> bool:
        """An aircraft plus either a turn heading or an altitude value."""
        if self.aircraft_id is None:
            return False
        if self.kind is InstructionKind.TURN:
            return self.heading is not None
        if self.kind is InstructionKind.ALTITUDE:
            return self.altitude is not None
        return False

    def is_empty(self) -> bool:
        return self.aircraft_id is None

    def clear(self) -> None:
        self.aircraft_id = None
        self.kind = None
        self.heading = None
        self.beacon = None
        self.altitude = None

    def undo(self) -> None:
        """Remove the last field: beacon, heading/altitude, slot, then id."""
        if self.beacon is not None:
            self.beacon = None
        elif self.heading is not None:
            self.heading = None
        elif self.altitude is not None:
            self.altitude = None
        elif self.kind is not None:
            self.kind = None
        else:
            self.aircraft_id = None

    def press(self, key: str) -> GameEvent:
        """
        Feed one keystroke into the builder.

        Args:
            key: Single character as read from the keyboard

        Returns:
            GameEvent: EXIT for the cancel keys, SEND or TICK for enter
            depending on whether the command is complete, DRAW otherwise
        """
        if key in EXIT_KEYS:
            return GameEvent.EXIT
        if key in ENTER_KEYS:
            return GameEvent.SEND if self.is_complete() else GameEvent.TICK
        if key in BACKSPACE_KEYS:
            self.undo()
            return GameEvent.DRAW

        state = self.state
        if state is BuilderState.IDLE:
            if len(key) == 1 and "a" <= key <= "z":
                self.aircraft_id = key
        elif state is BuilderState.AIRCRAFT_SELECTED:
            if key == TURN_KEY:
                self.kind = InstructionKind.TURN
            elif key == ALTITUDE_KEY:
                self.kind = InstructionKind.ALTITUDE
        elif state is BuilderState.TURN_PENDING:
            heading = heading_for_key(key)
            if heading is not None:
                self.heading = heading
            elif key in DIGIT_KEYS and len(key) == 1:
                self.beacon = int(key)
        elif state is BuilderState.ALTITUDE_PENDING:
            if key in DIGIT_KEYS and len(key) == 1:
                self.altitude = int(key)

        return GameEvent.DRAW

    def describe(self) -> str:
        """Prompt text for the command so far, e.g. ``b: turn: North via *1``."""
        parts = []
        if self.aircraft_id is not None:
            parts.append(f"{self.aircraft_id}:")
        if self.kind is not None:
            parts.append(f"{self.kind.value}:")
        if self.heading is not None:
            parts.append(self.heading.display_name)
        if self.beacon is not None:
            parts.append(f"via *{self.beacon}")
        if self.altitude is not None:
            parts.append(str(self.altitude * FEET_PER_LEVEL))
        return " ".join(parts)
