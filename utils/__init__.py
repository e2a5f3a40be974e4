"""Utility modules"""

from .logger import configure_logging
from .recorder import SessionRecorder

__all__ = ["configure_logging", "SessionRecorder"]
