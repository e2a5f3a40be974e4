"""
Text layout of a game frame.

Pure functions that turn a ``GameState`` into lines of text: the map with
its markers and aircraft, the sidebar and the command prompt. The terminal
renderer styles these; the gymnasium driver returns them as-is.
"""

from typing import List, Optional, Tuple

from simulation.aircraft import Aircraft
from simulation.game_map import Cell, GameMap
from simulation.state import GameState

# Each map cell is three characters wide on screen
X_SCALE = 3
SIDEBAR_GAP = 2
SIDEBAR_WIDTH = 30


def base_char(game_map: GameMap, x: int, y: int) -> str:
    if y == 0 or y == game_map.height - 1:
        return "-"
    if x == 0 or x == game_map.width - 1:
        return "|"
    return "."


def cell_marker(cell: Cell) -> Optional[Tuple[str, int]]:
    """Marker text for a cell and its column shift, or None for a plain cell."""
    if cell.exit is not None:
        return str(cell.exit.id), 0
    if cell.airport is not None:
        return f"{cell.airport.direction.value}{cell.airport.id}", -1
    if cell.beacon is not None:
        return f"*{cell.beacon.id}", -1
    if cell.path:
        return "+", 0
    return None


def screen_column(x: int, shift: int = 0) -> int:
    return max(0, x * X_SCALE + shift)


def aircraft_summary(aircraft: Aircraft, game_map: GameMap) -> str:
    """Sidebar line: label, destination and pending instructions."""
    text = f"{aircraft.label()} {aircraft.destination.label}"

    if aircraft.command.altitude is not None:
        text += f" alt -> {aircraft.command.altitude}"

    turn = aircraft.command.turn
    if turn is not None:
        text += f" dir -> {turn.heading.display_name}"
        if turn.beacon is not None:
            known = 0 <= turn.beacon < game_map.beacon_count
            text += f" via *{turn.beacon}" if known else f" via ?{turn.beacon}"

    return text


def sidebar_lines(state: GameState) -> List[str]:
    lines = [f"time: {state.tick} safe: {state.safe}", "", "pl dt comm"]
    lines.extend(aircraft_summary(aircraft, state.map) for aircraft in state.aircraft)
    return lines


def prompt_text(state: GameState) -> str:
    if state.failure is not None:
        return state.failure
    return f"> {state.command.describe()}"


def _place(line: List[str], col: int, text: str) -> None:
    for i, ch in enumerate(text):
        if 0 <= col + i < len(line):
            line[col + i] = ch


def map_lines(state: GameState) -> List[str]:
    """Map rows with markers and aircraft labels drawn in."""
    game_map = state.map
    width = game_map.width * X_SCALE
    rows: List[List[str]] = []

    for y, row in enumerate(game_map.grid):
        line = [" "] * width
        if y == 0 or y == game_map.height - 1:
            _place(line, 0, "-" * ((game_map.width - 1) * X_SCALE + 1))
        for x in range(game_map.width):
            _place(line, screen_column(x), base_char(game_map, x, y))
        for x, cell in enumerate(row):
            marker = cell_marker(cell)
            if marker is not None:
                text, shift = marker
                _place(line, screen_column(x, shift), text)
        rows.append(line)

    for aircraft in state.aircraft:
        if game_map.contains(aircraft.x, aircraft.y):
            _place(rows[aircraft.y], screen_column(aircraft.x, -1), aircraft.label())

    return ["".join(line) for line in rows]


def compose_frame(state: GameState) -> List[str]:
    """
    Full frame as plain text.

    Returns:
        Map rows with the sidebar to their right, a blank line, then the prompt
    """
    lines = map_lines(state)
    sidebar = sidebar_lines(state)
    height = max(len(lines), len(sidebar))
    map_width = state.map.width * X_SCALE

    frame = []
    for y in range(height):
        left = lines[y] if y < len(lines) else " " * map_width
        right = sidebar[y] if y < len(sidebar) else ""
        frame.append((left + " " * SIDEBAR_GAP + right).rstrip())

    frame.append("")
    frame.append(prompt_text(state).rstrip())
    return frame
