"""The terminal frame buffer and its differential renderer."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TextIO

from .palette import Palette

LEVEL_BACKGROUND = 0
LEVEL_ZERO = 0


@dataclass
class TermCell:
    """What one terminal cell shows."""

    c: str = " "
    fg: int = 0
    bg: int = 0
    bold: bool = False
    diffuse: float = 0.0


def _is_changed(new: TermCell, old: TermCell) -> bool:
    if new.c != old.c or new.bg != old.bg:
        return True
    if new.c == " ":
        return False
    return new.fg != old.fg or new.bold != old.bold


class Screen:
    """Keeps the desired and the displayed frame and writes the difference."""

    def __init__(self, file: TextIO, palette: Palette) -> None:
        self.file = file
        self.palette = palette
        self.preserve_background = False
        self.synchronized_update = False
        self.cols = 80
        self.rows = 25
        self.new_content: list[TermCell] = []
        self.old_content: list[TermCell] = []
        self.px = -1
        self.py = -1
        self.fg: int | None = None
        self.bg: int | None = None
        self.bold = False

    def resize(self, cols: int, rows: int) -> None:
        """Start over with a blank cols x rows frame."""
        self.cols = cols
        self.rows = rows
        self.new_content = [TermCell() for _ in range(cols * rows)]
        self.old_content = [TermCell() for _ in range(cols * rows)]

    def cell(self, x: int, y: int) -> TermCell:
        """The cell of the frame being built at (x, y)."""
        return self.new_content[y * self.cols + x]

    def reset_attributes(self) -> None:
        """Home the cursor and reset graphic attributes."""
        self.file.write("\x1b[H\x1b[m")
        self.px = self.py = 0
        self.fg = None
        self.bg = None
        self.bold = False

    def set_color(self, tcell: TermCell) -> None:
        """Emit whatever SGR changes are needed to draw ``tcell``."""
        if tcell.bg != self.bg:
            self.bg = tcell.bg
            if self.preserve_background and self.bg == LEVEL_BACKGROUND:
                self.file.write("\x1b[49m")
            else:
                self.file.write(self.palette.bg[self.bg])
        if tcell.c != " ":
            if tcell.fg != self.fg:
                self.fg = tcell.fg
                self.file.write(self.palette.fg[self.fg])
            if tcell.bold != self.bold:
                self.bold = tcell.bold
                self.file.write(f"\x1b[{1 if self.bold else 22}m")

    def goto_xy(self, x: int, y: int) -> None:
        """Move the cursor to (x, y) using the shortest known sequence."""
        out = self.file
        if y == self.py:
            if x != self.px:
                if x == 0:
                    out.write("\r")
                elif self.px - 3 <= x < self.px:
                    out.write("\b" * (self.px - x))
                else:
                    out.write(f"\x1b[{x + 1}G")
                self.px = x
            return

        if x == 0:
            out.write(f"\x1b[{y + 1}H")
        elif x == self.px:
            if y < self.py:
                out.write(f"\x1b[{self.py - y}A")
            else:
                out.write(f"\x1b[{y - self.py}B")
        else:
            out.write(f"\x1b[{y + 1};{x + 1}H")
        self.px = x
        self.py = y

    def _draw_cell(self, x: int, y: int, index: int, force_write: bool) -> bool:
        ncell = self.new_content[index]
        if ncell.fg == ncell.bg:
            ncell.c = " "
        if force_write or _is_changed(ncell, self.old_content[index]):
            self.goto_xy(x, y)
            self.set_color(ncell)
            self.file.write(ncell.c)
            self.px += 1
            self.old_content[index] = dataclasses.replace(ncell)
            return True
        return False

    def _flush(self) -> None:
        flush = getattr(self.file, "flush", None)
        if flush is not None:
            flush()

    def redraw(self) -> None:
        """Repaint the whole frame unconditionally."""
        self.goto_xy(0, 0)
        cols, rows = self.cols, self.rows
        for y in range(rows):
            for x in range(cols):
                if y == rows - 1:
                    # Fill the last column without scrolling the screen.
                    if x == cols - 2:
                        last = self.new_content[y * cols + x + 1]
                        self.set_color(last)
                        self.file.write(last.c)
                        self.file.write("\b\x1b[@")
                    elif x == cols - 1:
                        continue
                tcell = self.new_content[y * cols + x]
                self.set_color(tcell)
                self.file.write(tcell.c)
        self.file.write("\x1b[H")
        self._flush()
        self.old_content = [dataclasses.replace(c) for c in self.new_content]

    def draw_content(self) -> None:
        """Write only the cells that differ from what is displayed."""
        if self.synchronized_update:
            self.file.write("\x1b[?2026h")
        cols = self.cols
        for y in range(self.rows):
            for x in range(cols - 1):
                index = y * cols + x
                dirty = False
                # The last column is drawn one to the left and shifted in.
                if x == cols - 2 and self._draw_cell(x, y, index + 1, False):
                    self.file.write("\b\x1b[@")
                    self.px -= 1
                    dirty = True
                self._draw_cell(x, y, index, dirty)
        if self.synchronized_update:
            self.file.write("\x1b[?2026l")
        self._flush()

    def clear_content(self) -> None:
        """Blank every cell of the frame being built."""
        for tcell in self.new_content:
            tcell.c = " "
            tcell.fg = LEVEL_ZERO
            tcell.bg = LEVEL_ZERO
            tcell.bold = False

    def clear_diffuse(self) -> None:
        """Reset the glow accumulated around lit cells."""
        for tcell in self.new_content:
            tcell.diffuse = 0.0
            tcell.bg = LEVEL_ZERO

    def add_diffuse(self, x: int, y: int, value: float) -> None:
        """Add positive glow to the cell at (x, y) if it is on screen."""
        if 0 <= y < self.rows and 0 <= x < self.cols and value > 0:
            self.new_content[y * self.cols + x].diffuse += value

    def resolve_diffuse(self) -> None:
        """Turn accumulated glow into background levels."""
        for tcell in self.new_content:
            tcell.bg = self.palette.intensity_to_level(min(0.04 * tcell.diffuse, 0.3))