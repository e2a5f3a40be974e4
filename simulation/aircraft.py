"""
Aircraft entity and per-tick command resolution.

Aircraft come in two classes that differ only in how they are labelled and
how often they update. The class is a plain discriminant on the aircraft;
behaviour is selected by the functions below rather than by subclassing.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .constants import DEFAULT_MAX_TURN_STEP, MAX_ALTITUDE, MIN_ALTITUDE
from .heading import Heading, rotate, turn_step


class AircraftKind(Enum):
    """Aircraft class."""
    JET = "jet"
    PROP = "prop"


class DestinationKind(Enum):
    AIRPORT = "airport"
    EXIT = "exit"


@dataclass(frozen=True)
class Destination:
    """Where an aircraft must go; fixed at spawn."""
    kind: DestinationKind
    id: int

    @property
    def label(self) -> str:
        prefix = "A" if self.kind is DestinationKind.AIRPORT else "E"
        return f"{prefix}{self.id}"


@dataclass(frozen=True)
class TurnInstruction:
    heading: Heading
    beacon: Optional[int] = None


@dataclass
class AircraftCommand:
    """Pending instructions, cleared field by field as they are achieved."""
    turn: Optional[TurnInstruction] = None
    altitude: Optional[int] = None

    def is_empty(self) -> bool:
        return self.turn is None and self.altitude is None


def updates_on_tick(kind: AircraftKind, tick: int) -> bool:
    """Jets update every tick, props only on odd ticks."""
    if kind is AircraftKind.JET:
        return True
    if kind is AircraftKind.PROP:
        return tick % 2 == 1
    raise ValueError(f"Unknown aircraft kind: {kind!r}")


def aircraft_label(kind: AircraftKind, aircraft_id: str, altitude: int) -> str:
    """Display label: lowercase id for jets, uppercase for props, then altitude."""
    if kind is AircraftKind.JET:
        return f"{aircraft_id.lower()}{altitude}"
    if kind is AircraftKind.PROP:
        return f"{aircraft_id.upper()}{altitude}"
    raise ValueError(f"Unknown aircraft kind: {kind!r}")


@dataclass
class Aircraft:
    """A live aircraft on the map."""

    id: str
    kind: AircraftKind
    x: int
    y: int
    altitude: int
    heading: Heading
    destination: Destination
    command: AircraftCommand = field(default_factory=AircraftCommand)

    def label(self) -> str:
        return aircraft_label(self.kind, self.id, self.altitude)

    def should_update(self, tick: int) -> bool:
        return updates_on_tick(self.kind, tick)

    def perform_command(self, max_turn_step: int = DEFAULT_MAX_TURN_STEP) -> None:
        """
        Resolve pending instructions by one tick's worth of change.

        Altitude moves one level towards its target; heading turns the
        shorter way by at most ``max_turn_step``. Each instruction is cleared
        once reached.
        """
        target_altitude = self.command.altitude
        if target_altitude is not None:
            if self.altitude < target_altitude:
                self.altitude = min(self.altitude + 1, MAX_ALTITUDE)
            elif self.altitude > target_altitude:
                self.altitude = max(self.altitude - 1, MIN_ALTITUDE)
            if self.altitude == target_altitude:
                self.command.altitude = None

        turn = self.command.turn
        if turn is not None:
            self.heading = rotate(self.heading, turn_step(self.heading, turn.heading, max_turn_step))
            if self.heading == turn.heading:
                self.command.turn = None

    def move(self) -> None:
        """Advance one cell along the current heading."""
        dx, dy = self.heading.offset
        self.x += dx
        self.y += dy

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "x": self.x,
            "y": self.y,
            "altitude": self.altitude,
            "heading": self.heading.display_name,
            "destination": self.destination.label,
            "turn": self.command.turn.heading.display_name if self.command.turn else None,
            "beacon": self.command.turn.beacon if self.command.turn else None,
            "target_altitude": self.command.altitude,
        }
