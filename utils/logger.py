"""
Logging utilities for game sessions.
"""

import logging
from pathlib import Path
from typing import Optional

from simulation.constants import LOG_FORMAT


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure root logging for a session.

    The terminal belongs to the renderer while a game runs, so a log file is
    the normal destination; without one, records go to stderr.

    Args:
        level: Log level name
        log_file: Path of the log file, or None for stderr
    """
    handlers = None
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(log_file)]

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
