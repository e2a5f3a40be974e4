"""
Custom exceptions for the ATC simulation.

These cover programming and configuration errors only. Losing the game
(crashes, wrong exits, quitting) is a normal outcome recorded on the game
state, never an exception.
"""


class AtcError(Exception):
    """Base exception for all ATC simulation errors."""
    pass


class ConfigurationError(AtcError):
    """Exception raised for configuration validation errors."""
    pass


class MapError(ConfigurationError):
    """Exception raised for invalid or inconsistent map data."""
    pass


class CommandError(AtcError):
    """Exception raised when a partial command is committed to the engine."""
    pass


class EventError(AtcError):
    """Exception raised for unrecognised game events."""
    pass


class RendererError(AtcError):
    """Exception raised when the terminal cannot host the game."""
    pass
