"""
Terminal front end.

Puts the keyboard in raw mode, draws frames with ANSI escapes and races the
tick timer against keystrokes with ``select``. Keys go straight through the
command builder, so the prompt updates on every press.
"""

import logging
import os
import select
import shutil
import sys
import termios
import time
import tty
from collections import deque
from typing import Callable, Deque, List, Optional, TextIO

from simulation.events import GameEvent
from simulation.exceptions import RendererError
from simulation.interface import UI, Renderer
from simulation.state import GameState

from .layout import X_SCALE, cell_marker, compose_frame, screen_column

logger = logging.getLogger(__name__)

# ANSI escapes
RESET = "\033[0m"
BOLD = "\033[1m"
INVERSE = "\033[30;47m"
GREEN = "\033[92m"
RED = "\033[91m"
CLEAR_SCREEN = "\033[2J"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"

SIDEBAR_MIN_COLUMNS = 20
PROMPT_ROWS = 3

# Bytes read per keyboard wakeup; large enough for any escape sequence
READ_CHUNK = 32
ESCAPE = b"\x1b"


def cursor_to(col: int, row: int) -> str:
    """Escape moving the cursor to a zero-based column and row."""
    return f"\033[{row + 1};{col + 1}H"


def seconds_until_tick(state: GameState, now: float) -> float:
    """Time left before the next tick is due, measured from the last tick boundary."""
    return max(0.0, state.tick_rate - (now - state.last_tick))


def decode_key(data: bytes) -> str:
    return data.decode("utf-8", errors="ignore")


class TerminalRenderer(Renderer):
    """Raw-mode keyboard plus full-screen ANSI drawing."""

    def __init__(
        self,
        stdin: TextIO = sys.stdin,
        stdout: TextIO = sys.stdout,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.stdout = stdout
        self.clock = clock
        self.fd = stdin.fileno()
        self._pending: Deque[str] = deque()
        if not os.isatty(self.fd):
            raise RendererError("stdin is not a terminal")

        self._saved_attrs = termios.tcgetattr(self.fd)
        tty.setraw(self.fd)
        self.stdout.write(HIDE_CURSOR)
        self.stdout.flush()

    def next_event(self, state: GameState) -> GameEvent:
        """
        Race the tick deadline against the keyboard.

        Everything available is read at once so that escape sequences
        (arrow and function keys) arrive whole and are dropped; only a lone
        ESC cancels. Keys typed faster than the loop runs are queued and fed
        to the command builder one per call.
        """
        if not self._pending:
            timeout = seconds_until_tick(state, self.clock())
            ready, _, _ = select.select([self.fd], [], [], timeout)
            if not ready:
                return GameEvent.TICK

            data = os.read(self.fd, READ_CHUNK)
            if not data:
                return GameEvent.EXIT
            if data.startswith(ESCAPE) and data != ESCAPE:
                logger.debug(f"Ignored escape sequence {data!r}")
                return GameEvent.DRAW
            self._pending.extend(decode_key(data))
            if not self._pending:
                return GameEvent.DRAW

        return state.command.press(self._pending.popleft())

    def check_size(self, state: GameState) -> None:
        columns, rows = shutil.get_terminal_size()
        if rows < state.map.height + PROMPT_ROWS:
            raise RendererError("terminal needs more rows")
        if columns < state.map.width * X_SCALE + SIDEBAR_MIN_COLUMNS:
            raise RendererError("terminal needs more columns")

    def draw(self, state: GameState) -> None:
        self.check_size(state)
        frame = compose_frame(state)
        out: List[str] = [CLEAR_SCREEN]

        for row, line in enumerate(frame[:-1]):
            out.append(cursor_to(0, row) + line)

        # markers in bold over the plain frame
        for y, cells in enumerate(state.map.grid):
            for x, cell in enumerate(cells):
                marker = cell_marker(cell)
                if marker is not None:
                    text, shift = marker
                    out.append(cursor_to(screen_column(x, shift), y) + BOLD + text + RESET)

        for aircraft in state.aircraft:
            if state.map.contains(aircraft.x, aircraft.y):
                col = screen_column(aircraft.x, -1)
                out.append(cursor_to(col, aircraft.y) + INVERSE + aircraft.label() + RESET)

        prompt_row = len(frame) - 1
        out.append(cursor_to(0, prompt_row))
        if state.failure is not None:
            out.append(RED + state.failure + RESET)
        else:
            out.append(self._styled_prompt(state))

        self.stdout.write("".join(out))
        self.stdout.flush()

    def _styled_prompt(self, state: GameState) -> str:
        command = state.command
        text = "> "
        if command.aircraft_id is not None:
            colour = GREEN if state.find_aircraft(command.aircraft_id) else RED
            text += colour + command.aircraft_id + RESET
        rest = command.describe()
        if command.aircraft_id is not None:
            rest = rest[len(command.aircraft_id):]
        return text + rest

    def close(self) -> None:
        termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_attrs)
        logger.debug("Terminal restored")
        self.stdout.write(SHOW_CURSOR + CLEAR_SCREEN + cursor_to(0, 0))
        self.stdout.flush()


class TerminalUI(UI):
    """Terminal front end; prints the outcome once the terminal is restored."""

    def __init__(self, stdout: TextIO = sys.stdout, clock: Callable[[], float] = time.monotonic):
        self.stdout = stdout
        self.clock = clock
        self.renderer: Optional[TerminalRenderer] = None
        self.state: Optional[GameState] = None

    def open(self, state: GameState) -> TerminalRenderer:
        self.state = state
        self.renderer = TerminalRenderer(stdout=self.stdout, clock=self.clock)
        return self.renderer

    def close(self, error: Optional[BaseException] = None) -> None:
        if self.renderer is not None:
            self.renderer.close()
            self.renderer = None

        if error is not None:
            print(f"Error: {error}", file=sys.stderr)
            return

        if self.state is not None:
            print(f"Game over! ({self.state.failure})", file=self.stdout)
            print(f"time: {self.state.tick} safe: {self.state.safe}", file=self.stdout)
