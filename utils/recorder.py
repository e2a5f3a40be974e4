"""
Session recording.

Writes one JSON object per line: a header describing the map, one record
per completed tick, and a final record with the outcome and metrics.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from simulation.metrics import SessionMetrics
from simulation.state import GameState


logger = logging.getLogger(__name__)


class SessionRecorder:
    """Records a game session to a JSONL file."""

    def __init__(self, filepath: str):
        """
        Initialize session recorder.

        Args:
            filepath: Destination JSONL file, created or truncated on start
        """
        self.filepath = Path(filepath)
        self.records_written = 0
        self._file: Optional[TextIO] = None

    def _write(self, record: Dict[str, Any]) -> None:
        if self._file is None:
            raise RuntimeError("Recorder is not started")
        self._file.write(json.dumps(record) + "\n")
        self._file.flush()
        self.records_written += 1

    def start(self, state: GameState) -> None:
        """Open the file and write the header record."""
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.filepath, "w")
        self.records_written = 0

        info = state.map.info
        self._write({
            "type": "header",
            "width": info.width,
            "height": info.height,
            "tick_rate": state.tick_rate,
            "spawn_rate": state.spawn_rate,
            "exits": [[x, y, heading.display_name] for x, y, heading in info.exits],
            "airports": [[x, y, direction.value] for x, y, direction in info.airports],
            "beacons": [list(beacon) for beacon in info.beacons],
            "start_time": time.time(),
        })
        logger.debug(f"Recording session to {self.filepath}")

    def record_tick(self, state: GameState) -> None:
        """Write the state after a completed tick; usable as a Game observer."""
        self._write({
            "type": "tick",
            "tick": state.tick,
            "safe": state.safe,
            "aircraft": [aircraft.to_dict() for aircraft in state.aircraft],
        })

    def finish(self, state: GameState, metrics: Optional[SessionMetrics] = None) -> None:
        """Write the outcome and close the file."""
        if self._file is None:
            return

        metrics = metrics if metrics is not None else state.metrics
        self._write({
            "type": "final",
            "failure": state.failure,
            "tick": state.tick,
            "safe": state.safe,
            "aircraft": [aircraft.to_dict() for aircraft in state.aircraft],
            "metrics": metrics.to_dict(),
        })
        self._file.close()
        self._file = None
        logger.info(f"Session recording saved to {self.filepath} ({self.records_written} records)")
