"""Terminal front end for the ATC game."""

from .layout import compose_frame, prompt_text, sidebar_lines
from .terminal import TerminalRenderer, TerminalUI

__all__ = [
    "compose_frame",
    "sidebar_lines",
    "prompt_text",
    "TerminalUI",
    "TerminalRenderer",
]
