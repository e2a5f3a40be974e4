"""
Heading and direction model.

Headings are the 8 compass points, numbered clockwise from North so that
turning is plain modular arithmetic. Directions are the 4 cardinal
orientations an airport can be approached from.
"""

from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple, Union

HEADING_COUNT = 8


class Heading(IntEnum):
    """8-point compass heading, clockwise from North."""
    NORTH = 0
    NORTH_EAST = 1
    EAST = 2
    SOUTH_EAST = 3
    SOUTH = 4
    SOUTH_WEST = 5
    WEST = 6
    NORTH_WEST = 7

    @property
    def display_name(self) -> str:
        return HEADING_NAMES[self]

    @property
    def key(self) -> str:
        return HEADING_TO_KEY[self]

    @property
    def offset(self) -> Tuple[int, int]:
        """Unit (dx, dy) grid offset; y grows southwards."""
        return HEADING_OFFSETS[self]


class Direction(Enum):
    """Cardinal orientation of an airport approach."""
    UP = "^"
    DOWN = "v"
    LEFT = "<"
    RIGHT = ">"


HEADING_NAMES: Dict[Heading, str] = {
    Heading.NORTH: "North",
    Heading.NORTH_EAST: "NorthEast",
    Heading.EAST: "East",
    Heading.SOUTH_EAST: "SouthEast",
    Heading.SOUTH: "South",
    Heading.SOUTH_WEST: "SouthWest",
    Heading.WEST: "West",
    Heading.NORTH_WEST: "NorthWest",
}

# Keyboard layout: the keys around "s" point the way they sit on the keyboard
HEADING_TO_KEY: Dict[Heading, str] = {
    Heading.NORTH: "w",
    Heading.NORTH_EAST: "e",
    Heading.EAST: "d",
    Heading.SOUTH_EAST: "c",
    Heading.SOUTH: "x",
    Heading.SOUTH_WEST: "z",
    Heading.WEST: "a",
    Heading.NORTH_WEST: "q",
}

KEY_TO_HEADING: Dict[str, Heading] = {key: heading for heading, key in HEADING_TO_KEY.items()}

HEADING_OFFSETS: Dict[Heading, Tuple[int, int]] = {
    Heading.NORTH: (0, -1),
    Heading.NORTH_EAST: (1, -1),
    Heading.EAST: (1, 0),
    Heading.SOUTH_EAST: (1, 1),
    Heading.SOUTH: (0, 1),
    Heading.SOUTH_WEST: (-1, 1),
    Heading.WEST: (-1, 0),
    Heading.NORTH_WEST: (-1, -1),
}

DIRECTION_TO_HEADING: Dict[Direction, Heading] = {
    Direction.UP: Heading.NORTH,
    Direction.DOWN: Heading.SOUTH,
    Direction.LEFT: Heading.WEST,
    Direction.RIGHT: Heading.EAST,
}


def heading_for_key(key: str) -> Optional[Heading]:
    """Return the heading bound to a key, or None."""
    return KEY_TO_HEADING.get(key)


def heading_matches_direction(heading: Heading, direction: Direction) -> bool:
    """
    Check whether an aircraft flying ``heading`` approaches along ``direction``.

    Airports are only approachable on the four cardinal headings; diagonals
    never match.
    """
    return DIRECTION_TO_HEADING[direction] == heading


def turn_step(heading: Heading, target: Heading, max_step: int) -> int:
    """
    Compute the signed heading change for one tick.

    The shorter rotation wins, ties turn clockwise, and the magnitude is
    capped at ``max_step``.

    Args:
        heading: Current heading
        target: Heading to turn towards
        max_step: Largest change allowed in one tick

    Returns:
        Signed step, negative for counter-clockwise
    """
    cw = (target - heading + HEADING_COUNT) % HEADING_COUNT
    ccw = (heading - target + HEADING_COUNT) % HEADING_COUNT
    if ccw < cw:
        return max(-max_step, -ccw)
    return min(max_step, cw)


def rotate(heading: Heading, step: int) -> Heading:
    return Heading((heading + step + HEADING_COUNT) % HEADING_COUNT)


def parse_heading(value: Union[str, int, Heading]) -> Heading:
    """
    Parse a heading from a map file.

    Accepts the key symbol (``"w"``), the display or enum name
    (``"NorthEast"``, ``"NORTH_EAST"``) or the integer value.

    Raises:
        ValueError: If the value names no heading
    """
    if isinstance(value, Heading):
        return value
    if isinstance(value, int):
        return Heading(value)

    text = str(value).strip()
    if text in KEY_TO_HEADING:
        return KEY_TO_HEADING[text]
    for heading, name in HEADING_NAMES.items():
        if text.lower() in (name.lower(), heading.name.lower()):
            return heading
    raise ValueError(f"Unknown heading: {value!r}")


def parse_direction(value: Union[str, Direction]) -> Direction:
    """Parse an airport direction from its symbol or name."""
    if isinstance(value, Direction):
        return value

    text = str(value).strip()
    for direction in Direction:
        if text == direction.value or text.upper() == direction.name:
            return direction
    raise ValueError(f"Unknown direction: {value!r}")
