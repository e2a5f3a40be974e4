"""
Session metrics tracking for the ATC simulation.

This module provides a small record of what happened during one game, used
for the final summary and the session recording.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import time


@dataclass
class SessionMetrics:
    """
    Tracks metrics for a single game session.

    The engine updates it as ticks run, commands are committed and aircraft
    arrive or spawn.
    """

    # Session tracking
    ticks: int = 0
    session_start_time: Optional[float] = None

    # Command tracking
    commands_issued: int = 0
    commands_by_kind: Dict[str, int] = field(default_factory=lambda: {
        'turn': 0, 'altitude': 0
    })
    rejected_commands: int = 0

    # Aircraft tracking
    aircraft_spawned: int = 0
    spawns_skipped: int = 0
    peak_aircraft: int = 0

    # Arrivals
    successful_exits: int = 0
    successful_landings: int = 0

    def start_session(self) -> None:
        """Start tracking a new session."""
        self.ticks = 0
        self.session_start_time = time.time()
        self.commands_issued = 0
        self.commands_by_kind = {'turn': 0, 'altitude': 0}
        self.rejected_commands = 0
        self.aircraft_spawned = 0
        self.spawns_skipped = 0
        self.peak_aircraft = 0
        self.successful_exits = 0
        self.successful_landings = 0

    def increment_tick(self) -> None:
        self.ticks += 1

    def record_command(self, kind: str) -> None:
        """Record a command being applied to an aircraft."""
        self.commands_issued += 1
        if kind in self.commands_by_kind:
            self.commands_by_kind[kind] += 1

    def record_rejected_command(self) -> None:
        self.rejected_commands += 1

    def record_spawn(self, spawned: bool) -> None:
        if spawned:
            self.aircraft_spawned += 1
        else:
            self.spawns_skipped += 1

    def update_aircraft_count(self, count: int) -> None:
        """Update peak concurrent aircraft count."""
        self.peak_aircraft = max(self.peak_aircraft, count)

    def record_exit(self) -> None:
        self.successful_exits += 1

    def record_landing(self) -> None:
        self.successful_landings += 1

    @property
    def safe_total(self) -> int:
        return self.successful_exits + self.successful_landings

    def duration(self) -> float:
        """Get session duration in seconds."""
        if self.session_start_time is None:
            return 0.0
        return time.time() - self.session_start_time

    def to_dict(self) -> Dict[str, Any]:
        """Get session metrics as a dictionary."""
        return {
            'ticks': self.ticks,
            'duration': self.duration(),
            'commands_issued': self.commands_issued,
            'commands_by_kind': dict(self.commands_by_kind),
            'rejected_commands': self.rejected_commands,
            'aircraft_spawned': self.aircraft_spawned,
            'spawns_skipped': self.spawns_skipped,
            'peak_aircraft': self.peak_aircraft,
            'successful_exits': self.successful_exits,
            'successful_landings': self.successful_landings,
            'safe_total': self.safe_total,
        }
