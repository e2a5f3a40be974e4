"""
Simulation engine.

The ``Game`` owns the tick loop: it applies committed commands, resolves and
moves aircraft, evaluates the safety rules in a fixed order, spawns new
traffic and advances the clock. Any rule violation ends the session by
setting ``state.failure``; nothing after it in the same tick is evaluated.
"""

import logging
import time
from typing import Callable, List, Optional

import numpy as np

from .aircraft import Aircraft, DestinationKind, TurnInstruction
from .command import InstructionKind
from .constants import (
    COLLISION_ALTITUDE_BAND,
    DEFAULT_MAX_TURN_STEP,
    EXIT_ALTITUDE,
    FEET_PER_LEVEL,
    MAX_ALTITUDE,
    MIN_ALTITUDE,
)
from .events import GameEvent
from .exceptions import CommandError, EventError
from .heading import heading_matches_direction
from .interface import UI
from .spawn import create_aircraft, should_spawn
from .state import GameState


logger = logging.getLogger(__name__)

TickObserver = Callable[[GameState], None]


class Game:
    """
    Drives one game session.

    Example:
        >>> state = create_state(load_map("default"), now=time.monotonic())
        >>> game = Game(state, ui=TerminalUI(), rng=np.random.default_rng(7))
        >>> game.run()
    """

    def __init__(
        self,
        state: GameState,
        ui: Optional[UI] = None,
        rng: Optional[np.random.Generator] = None,
        max_turn_step: int = DEFAULT_MAX_TURN_STEP,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the engine.

        Args:
            state: Fresh session state
            ui: Renderer boundary, only needed for ``run``
            rng: Random generator used by the spawn policy
            max_turn_step: Turn-rate policy, heading steps per tick
            clock: Monotonic clock in seconds
        """
        self.state = state
        self.ui = ui
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_turn_step = max_turn_step
        self.clock = clock
        self.observers: List[TickObserver] = []

    def add_observer(self, observer: TickObserver) -> None:
        """Call ``observer(state)`` after every completed tick."""
        self.observers.append(observer)

    def run(self) -> GameState:
        """
        Run the draw / wait / apply loop until the session ends.

        Returns:
            GameState: Final state, with ``failure`` set
        """
        if self.ui is None:
            raise ValueError("Game.run needs a UI")

        renderer = self.ui.open(self.state)
        logger.info(
            f"Session started on {self.state.map.width}x{self.state.map.height} map "
            f"(tick rate {self.state.tick_rate}s, spawn rate {self.state.spawn_rate})"
        )

        while True:
            renderer.draw(self.state)
            if self.state.is_over:
                break
            self.handle_event(renderer.next_event(self.state))

        logger.info(f"Game over ({self.state.failure}) at tick {self.state.tick}, safe {self.state.safe}")
        return self.state

    def handle_event(self, event: GameEvent) -> None:
        """Apply one boundary event to the state."""
        if event is GameEvent.DRAW:
            return
        if event is GameEvent.EXIT:
            self.state.failure = "exited"
        elif event is GameEvent.TICK:
            self.step()
        elif event is GameEvent.SEND:
            self.send_command()
        else:
            raise EventError(f"Unrecognised input: {event!r}")

    def send_command(self) -> bool:
        """
        Commit the command builder to its aircraft and reset the builder.

        Returns:
            bool: False if the aircraft does not exist

        Raises:
            CommandError: If the builder holds a partial command
        """
        builder = self.state.command
        aircraft_id, kind = builder.aircraft_id, builder.kind
        heading, beacon, altitude = builder.heading, builder.beacon, builder.altitude
        complete = builder.is_complete()
        builder.clear()

        if not complete:
            raise CommandError("unexpected partial game command")

        if kind is InstructionKind.TURN:
            return self.apply_command(aircraft_id, turn=TurnInstruction(heading, beacon))
        return self.apply_command(aircraft_id, altitude=altitude)

    def apply_command(
        self,
        aircraft_id: str,
        turn: Optional[TurnInstruction] = None,
        altitude: Optional[int] = None,
    ) -> bool:
        """
        Set pending instructions on a live aircraft.

        Args:
            aircraft_id: Letter of the aircraft
            turn: New turn target, replaces any pending turn
            altitude: New altitude target, replaces any pending altitude

        Returns:
            bool: False (and no change) if the aircraft does not exist
        """
        if turn is None and altitude is None:
            raise CommandError("command needs a turn or an altitude")
        if altitude is not None and not MIN_ALTITUDE <= altitude <= MAX_ALTITUDE:
            raise CommandError(f"altitude {altitude} outside [{MIN_ALTITUDE}, {MAX_ALTITUDE}]")

        aircraft = self.state.find_aircraft(aircraft_id)
        if aircraft is None:
            logger.warning(f"Command for unknown aircraft {aircraft_id!r} ignored")
            self.state.metrics.record_rejected_command()
            return False

        if altitude is not None:
            aircraft.command.altitude = altitude
            self.state.metrics.record_command("altitude")
            logger.debug(f"{aircraft.label()} cleared to {altitude * FEET_PER_LEVEL}ft")
        if turn is not None:
            aircraft.command.turn = turn
            self.state.metrics.record_command("turn")
            logger.debug(f"{aircraft.label()} turning {turn.heading.display_name}")
        return True

    def step(self) -> bool:
        """
        Run one tick.

        Returns:
            bool: False if the tick ended the session
        """
        self.resolve_commands()
        if not self.move_aircraft_and_check_rules():
            return False

        self.spawn_aircraft()

        self.state.tick += 1
        self.state.last_tick = self.clock()
        self.state.metrics.increment_tick()
        self.state.metrics.update_aircraft_count(len(self.state.aircraft))

        for observer in self.observers:
            observer(self.state)
        return True

    def resolve_commands(self) -> None:
        for aircraft in self.state.aircraft:
            if aircraft.should_update(self.state.tick):
                aircraft.perform_command(self.max_turn_step)

    def move_aircraft_and_check_rules(self) -> bool:
        """
        Move every aircraft due this tick and evaluate the safety rules.

        Walks the roster from the end so that retiring an aircraft never
        shifts one still to be visited.

        Returns:
            bool: False on the first violation, leaving later aircraft unmoved
        """
        aircraft_list = self.state.aircraft
        for i in range(len(aircraft_list) - 1, -1, -1):
            aircraft = aircraft_list[i]
            if not aircraft.should_update(self.state.tick):
                continue

            aircraft.move()

            if self.state.map.is_border(aircraft.x, aircraft.y):
                failure = self._check_exit(aircraft)
                if failure is None:
                    self._retire(i, landed=False)
                    continue
            elif aircraft.altitude == MIN_ALTITUDE:
                failure = self._check_landing(aircraft)
                if failure is None:
                    self._retire(i, landed=True)
                    continue
            else:
                failure = self._check_collision(i, aircraft)

            if failure is not None:
                self._fail(failure)
                return False

        return True

    def _check_exit(self, aircraft: Aircraft) -> Optional[str]:
        cell = self.state.map.cell(aircraft.x, aircraft.y)
        if cell is None or cell.exit is None:
            return f"{aircraft.label()} exited at the wrong location"

        destination = aircraft.destination
        if destination.kind is not DestinationKind.EXIT:
            return f"{aircraft.label()} exited at E{cell.exit.id} but was bound for {destination.label}"
        if destination.id != cell.exit.id:
            return f"{aircraft.label()} exited at E{cell.exit.id} instead of E{destination.id}"
        if aircraft.altitude != EXIT_ALTITUDE:
            return (
                f"{aircraft.label()} exited at {aircraft.altitude * FEET_PER_LEVEL}ft "
                f"rather than {EXIT_ALTITUDE * FEET_PER_LEVEL}ft"
            )
        return None

    def _check_landing(self, aircraft: Aircraft) -> Optional[str]:
        cell = self.state.map.cell(aircraft.x, aircraft.y)
        if cell is None or cell.airport is None:
            return f"{aircraft.label()} crashed into the ground"
        if not heading_matches_direction(aircraft.heading, cell.airport.direction):
            return f"{aircraft.label()} crashed into airport (wrong direction)"

        destination = aircraft.destination
        if destination.kind is not DestinationKind.AIRPORT or destination.id != cell.airport.id:
            return f"{aircraft.label()} landed at the wrong airport"
        return None

    def _check_collision(self, index: int, aircraft: Aircraft) -> Optional[str]:
        aircraft_list = self.state.aircraft
        for j in range(len(aircraft_list) - 1, -1, -1):
            if j == index:
                continue
            other = aircraft_list[j]
            if (other.x, other.y) != (aircraft.x, aircraft.y):
                continue
            if abs(aircraft.altitude - other.altitude) <= COLLISION_ALTITUDE_BAND:
                return f"{aircraft.label()} collided with {other.label()}"
        return None

    def _retire(self, index: int, landed: bool) -> None:
        aircraft = self.state.aircraft.pop(index)
        self.state.safe += 1
        if landed:
            self.state.metrics.record_landing()
        else:
            self.state.metrics.record_exit()
        logger.info(f"{aircraft.label()} arrived safely at {aircraft.destination.label} (safe: {self.state.safe})")

    def _fail(self, reason: str) -> None:
        self.state.failure = reason
        logger.info(f"Failure at tick {self.state.tick}: {reason}")

    def spawn_aircraft(self) -> Optional[Aircraft]:
        """Run the spawn policy for the current tick."""
        if not should_spawn(self.state.tick, self.state.spawn_rate, self.state.safe):
            return None

        aircraft = create_aircraft(self.state.map, self.state.aircraft, self.rng)
        self.state.metrics.record_spawn(aircraft is not None)
        if aircraft is not None:
            self.state.aircraft.append(aircraft)
            logger.info(
                f"Spawned {aircraft.label()} ({aircraft.kind.value}) at E"
                f"{self._exit_at(aircraft)} bound for {aircraft.destination.label}"
            )
        return aircraft

    def _exit_at(self, aircraft: Aircraft) -> Optional[int]:
        cell = self.state.map.cell(aircraft.x, aircraft.y)
        return cell.exit.id if cell is not None and cell.exit is not None else None
