"""
Map model for the ATC simulation.

A map is loaded once from a YAML file into a ``MapInfo`` and rasterised into
a grid of cells. The engine only ever reads it afterwards.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .exceptions import MapError
from .heading import Direction, Heading, parse_direction, parse_heading


logger = logging.getLogger(__name__)

Point = Tuple[int, int]


@dataclass(frozen=True)
class ExitMarker:
    id: int
    heading: Heading


@dataclass(frozen=True)
class AirportMarker:
    id: int
    direction: Direction


@dataclass(frozen=True)
class BeaconMarker:
    id: int


@dataclass
class Cell:
    """Markers on a single grid cell."""
    exit: Optional[ExitMarker] = None
    airport: Optional[AirportMarker] = None
    beacon: Optional[BeaconMarker] = None
    path: bool = False


@dataclass
class MapInfo:
    """Map metadata as supplied by the map file."""

    width: int
    height: int
    tick_rate: float = 1.0
    spawn_rate: int = 10
    exits: List[Tuple[int, int, Heading]] = field(default_factory=list)
    airports: List[Tuple[int, int, Direction]] = field(default_factory=list)
    beacons: List[Point] = field(default_factory=list)
    paths: List[Tuple[Point, Point]] = field(default_factory=list)


@dataclass
class GameMap:
    """Grid of cells indexed ``grid[y][x]`` plus the originating metadata."""

    width: int
    height: int
    info: MapInfo
    grid: List[List[Cell]]

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_border(self, x: int, y: int) -> bool:
        """True for cells on the outer row/column and for anything off the grid."""
        return x <= 0 or y <= 0 or x >= self.width - 1 or y >= self.height - 1

    def cell(self, x: int, y: int) -> Optional[Cell]:
        if not self.contains(x, y):
            return None
        return self.grid[y][x]

    @property
    def exit_count(self) -> int:
        return len(self.info.exits)

    @property
    def airport_count(self) -> int:
        return len(self.info.airports)

    @property
    def beacon_count(self) -> int:
        return len(self.info.beacons)


def _path_cells(start: Point, end: Point) -> List[Point]:
    """Cells from start to end, stepping both axes towards the end each move."""
    (x, y), (x2, y2) = start, end
    cells = [(x, y)]
    while (x, y) != (x2, y2):
        if x < x2:
            x += 1
        elif x > x2:
            x -= 1
        if y < y2:
            y += 1
        elif y > y2:
            y -= 1
        cells.append((x, y))
    return cells


def build_map(info: MapInfo) -> GameMap:
    """
    Build and validate the engine grid from map metadata.

    Args:
        info: Parsed map metadata

    Returns:
        GameMap: Read-only grid for the engine

    Raises:
        MapError: If the metadata is inconsistent
    """
    if info.width < 3 or info.height < 3:
        raise MapError(f"Map must be at least 3x3, got {info.width}x{info.height}")
    if info.tick_rate <= 0:
        raise MapError("tick_rate must be positive")
    if info.spawn_rate <= 0:
        raise MapError("spawn_rate must be positive")
    if not info.exits:
        raise MapError("Map needs at least one exit")

    game_map = GameMap(
        width=info.width,
        height=info.height,
        info=info,
        grid=[[Cell() for _ in range(info.width)] for _ in range(info.height)],
    )

    def check_bounds(x: int, y: int, what: str) -> Cell:
        if not game_map.contains(x, y):
            raise MapError(f"{what} [{x}, {y}] out of bounds of Map[{info.width}, {info.height}]")
        return game_map.grid[y][x]

    for start, end in info.paths:
        check_bounds(*start, "path start")
        check_bounds(*end, "path end")
        for x, y in _path_cells(start, end):
            game_map.grid[y][x].path = True

    for exit_id, (x, y, heading) in enumerate(info.exits):
        cell = check_bounds(x, y, f"exit {exit_id}")
        if not game_map.is_border(x, y):
            raise MapError(f"exit {exit_id} at [{x}, {y}] is not on the map border")
        cell.exit = ExitMarker(id=exit_id, heading=heading)

    for airport_id, (x, y, direction) in enumerate(info.airports):
        cell = check_bounds(x, y, f"airport {airport_id}")
        if cell.exit is not None:
            raise MapError(f"airport and exit cannot exist on the same cell [{x}, {y}]")
        if game_map.is_border(x, y):
            raise MapError(f"airport {airport_id} at [{x}, {y}] is on the map border")
        cell.airport = AirportMarker(id=airport_id, direction=direction)

    for beacon_id, (x, y) in enumerate(info.beacons):
        cell = check_bounds(x, y, f"beacon {beacon_id}")
        cell.beacon = BeaconMarker(id=beacon_id)

    logger.debug(
        f"Built {info.width}x{info.height} map with {len(info.exits)} exits, "
        f"{len(info.airports)} airports, {len(info.beacons)} beacons"
    )
    return game_map


def parse_map_info(data: Dict[str, Any]) -> MapInfo:
    """
    Convert a raw map document into ``MapInfo``.

    Raises:
        MapError: If a required key is missing or a value cannot be parsed
    """
    try:
        return MapInfo(
            width=int(data["width"]),
            height=int(data["height"]),
            tick_rate=float(data.get("tick_rate", 1.0)),
            spawn_rate=int(data.get("spawn_rate", 10)),
            exits=[(int(x), int(y), parse_heading(h)) for x, y, h in data.get("exits", [])],
            airports=[(int(x), int(y), parse_direction(d)) for x, y, d in data.get("airports", [])],
            beacons=[(int(x), int(y)) for x, y in data.get("beacons", [])],
            paths=[((int(a[0]), int(a[1])), (int(b[0]), int(b[1]))) for a, b in data.get("paths", [])],
        )
    except KeyError as e:
        raise MapError(f"Map is missing required key: {e}") from e
    except (TypeError, ValueError) as e:
        raise MapError(f"Invalid map data: {e}") from e


def load_map(name: str, maps_dir: str = "maps") -> GameMap:
    """
    Load a map by name from ``<maps_dir>/<name>.yaml``.

    Args:
        name: Map name without extension
        maps_dir: Directory holding map files

    Returns:
        GameMap: Validated grid

    Raises:
        MapError: If the file is missing or invalid
    """
    map_path = Path(maps_dir) / f"{name}.yaml"
    if not map_path.exists():
        raise MapError(f"Map file not found: {map_path}")

    with open(map_path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise MapError(f"Map file {map_path} is not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise MapError(f"Map file {map_path} does not contain a mapping")

    logger.info(f"Map loaded from: {map_path}")
    return build_map(parse_map_info(data))
