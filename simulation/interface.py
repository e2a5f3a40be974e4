"""
Abstract interface for the renderer boundary.

The engine only talks to a ``UI`` that opens a ``Renderer``. This allows:
1. Driving the game headless from a script in tests
2. Swapping the terminal front end for another one
3. Keeping drawing and keyboard handling out of the engine
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Optional, Union

from .events import GameEvent
from .state import GameState


class Renderer(ABC):
    """Draws state snapshots and produces the next event for the loop."""

    @abstractmethod
    def draw(self, state: GameState) -> None:
        """Render the current state."""
        pass

    @abstractmethod
    def next_event(self, state: GameState) -> GameEvent:
        """
        Wait for the next event.

        Returns TICK when the tick interval elapses, otherwise whatever the
        next keystroke produces through the command builder.
        """
        pass


class UI(ABC):
    """Owns the lifetime of a renderer."""

    @abstractmethod
    def open(self, state: GameState) -> Renderer:
        pass

    @abstractmethod
    def close(self, error: Optional[BaseException] = None) -> None:
        """Release the front end and report the outcome or the error."""
        pass


ScriptItem = Union[str, GameEvent]


class ScriptedRenderer(Renderer):
    """
    Renderer fed from a fixed script instead of a keyboard and a timer.

    Strings are keystrokes passed through the command builder; ``GameEvent``
    items are returned as-is. An exhausted script behaves like the player
    quitting.
    """

    def __init__(self, script: Iterable[ScriptItem]):
        self.script: Deque[ScriptItem] = deque(script)
        self.frames: List[Dict[str, Any]] = []

    def draw(self, state: GameState) -> None:
        self.frames.append({
            "tick": state.tick,
            "safe": state.safe,
            "failure": state.failure,
            "aircraft": [a.label() for a in state.aircraft],
            "command": state.command.describe(),
        })

    def next_event(self, state: GameState) -> GameEvent:
        if not self.script:
            return GameEvent.EXIT

        item = self.script.popleft()
        if isinstance(item, GameEvent):
            return item
        return state.command.press(item)


class ScriptedUI(UI):
    """Mock UI for driving the engine without a terminal."""

    def __init__(self, script: Iterable[ScriptItem] = ()):
        self.renderer = ScriptedRenderer(script)
        self.opened = False
        self.closed = False
        self.error: Optional[BaseException] = None

    def open(self, state: GameState) -> ScriptedRenderer:
        self.opened = True
        return self.renderer

    def close(self, error: Optional[BaseException] = None) -> None:
        self.closed = True
        self.error = error
