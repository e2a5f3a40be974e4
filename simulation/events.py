"""Events passed from the renderer boundary to the engine loop."""

from enum import Enum


class GameEvent(Enum):
    TICK = "tick"
    EXIT = "exit"
    SEND = "send"
    DRAW = "draw"
