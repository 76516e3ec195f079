"""In-place terminal output with anchored fields.

A :class:`Terminal` wraps a Rich console and keeps track of the logical
cursor position of everything written through it. An :class:`Anchor`
remembers a position on screen so that a field written earlier can be
overwritten later without redrawing the surrounding text::

    terminal.write("Created: ")
    anchor = terminal.capture()
    terminal.write_line()
    ...
    anchor.write("12", style="yellow")
    anchor.write_and_reset(" ( 340 ) ")

Cursor movement is relative (row delta plus absolute column) so anchors
stay valid while the screen scrolls, as long as they remain visible.
When cursor addressing is unavailable (pipes, CI, ``NO_COLOR``) anchored
writes fall through to plain sequential output.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from rich.cells import cell_len
from rich.console import Console
from rich.control import Control

logger = logging.getLogger(__name__)


def _resolve_rich(use_rich: bool | None, console: Console) -> bool:
    """Determine whether the console supports cursor addressing."""
    if use_rich is None:
        from migration_console.cli.rich_output import should_use_rich

        use_rich = should_use_rich()
    return use_rich and not console.is_dumb_terminal


class Terminal:
    """Console output with a tracked cursor position.

    All writes go through ``lock`` so that anchored redraws from
    different callers cannot interleave their cursor movements.
    """

    def __init__(
        self,
        console: Console | None = None,
        use_rich: bool | None = None,
    ) -> None:
        self.console = console or Console(highlight=False)
        self.addressable = _resolve_rich(use_rich, self.console)
        self.lock = threading.RLock()
        self._row = 0
        self._column = 0
        if not self.addressable:
            logger.debug("Cursor addressing unavailable, using sequential output")

    @property
    def position(self) -> tuple[int, int]:
        """Current logical (row, column) of the cursor."""
        return self._row, self._column

    def write(self, text: str, style: str | None = None) -> None:
        """Write ``text`` at the cursor, optionally styled."""
        if not text:
            return
        with self.lock:
            self.console.out(text, style=style, highlight=False, end="")
            self._advance(text)

    def write_line(self, text: str = "", style: str | None = None) -> None:
        """Write ``text`` followed by a newline."""
        with self.lock:
            self.write(text, style=style)
            self.write("\n")

    def capture(self) -> Anchor:
        """Anchor a field at the current cursor position."""
        row, column = self.position
        return Anchor(terminal=self, row=row, column=column)

    def move_to(self, row: int, column: int) -> None:
        """Move the cursor to a logical position written earlier."""
        if not self.addressable:
            return
        with self.lock:
            self.console.control(Control.move_to_column(column, row - self._row))
            self._row = row
            self._column = column

    def show_cursor(self, show: bool = True) -> None:
        if self.addressable:
            self.console.show_cursor(show)

    def _advance(self, text: str) -> None:
        # Lines wider than the console wrap onto extra rows. A line that
        # exactly fills the width leaves the cursor on the same row.
        width = max(self.console.width, 1)
        for index, line in enumerate(text.split("\n")):
            if index:
                self._row += 1
                self._column = 0
            end = self._column + cell_len(line)
            if end > width:
                wrapped = (end - 1) // width
                self._row += wrapped
                end -= wrapped * width
            self._column = end


@dataclass(eq=False)
class Anchor:
    """A fixed screen position for a field that is redrawn in place.

    ``row`` and ``column`` never change; ``offset`` advances by the width
    of every chunk written so that composite fields build up left to
    right, and returns to zero after :meth:`write_and_reset`.
    """

    terminal: Terminal = field(repr=False)
    row: int
    column: int
    offset: int = 0

    def write(self, text: str, style: str | None = None) -> None:
        """Write ``text`` at the anchor and restore the cursor."""
        terminal = self.terminal
        with terminal.lock:
            if not terminal.addressable:
                terminal.write(text, style=style)
                self.offset += cell_len(text)
                return
            saved_row, saved_column = terminal.position
            terminal.move_to(self.row, self.column + self.offset)
            terminal.show_cursor(False)
            try:
                terminal.write(text, style=style)
                self.offset += cell_len(text)
                terminal.move_to(saved_row, saved_column)
            finally:
                terminal.show_cursor(True)

    def write_and_reset(self, text: str, style: str | None = None) -> None:
        """Write the last chunk of a field; the next write starts over."""
        self.write(text, style=style)
        self.offset = 0
