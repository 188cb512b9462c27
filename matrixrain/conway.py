"""Conway's Game of Life on a Klein-bottle board, projected onto the screen."""

from __future__ import annotations

import math

from . import util

_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1), (1, 1), (1, -1), (-1, 1), (-1, -1))

_XSCALE = 0.5 * 0.7
_YSCALE = -1.0


class Conway:
    """A Game of Life board with a rotating, zooming view transform."""

    def __init__(self, width: int = 128, height: int = 128) -> None:
        self.width = width
        self.height = height
        self._cells = bytearray(width * height)
        self._neighbours = [
            tuple(self._index(x + dx, y + dy) for dx, dy in _OFFSETS)
            for y in range(height)
            for x in range(width)
        ]
        self._time = 1
        self.origin_x = 0
        self.origin_y = 0
        self.u_x = self.u_y = self.v_x = self.v_y = 0.0

    def _index(self, x: int, y: int) -> int:
        x = util.mod(x, 2 * self.width)
        if x >= self.width:
            # Klein-bottle boundary: crossing the side flips the vertical axis.
            y = -1 - y
            x -= self.width
        return util.mod(y, self.height) * self.width + x

    def initialize(self) -> None:
        """Fill the board with random cells and reset the generation clock."""
        self._time = 1
        self._cells = bytearray(util.rand() & 1 for _ in range(self.width * self.height))

    def alive(self, x: int, y: int) -> bool:
        """Whether the cell at (x, y), wrapped onto the board, is alive."""
        return bool(self._cells[self._index(x, y)])

    def set_alive(self, x: int, y: int, value: bool) -> None:
        """Set the cell at (x, y), wrapped onto the board."""
        self._cells[self._index(x, y)] = 1 if value else 0

    def _seed_block(self) -> None:
        # The spawn probability works out to 1 for every board size, so a
        # random 4x4 block is written on each generation.
        x0 = util.rand() % self.width
        y0 = util.rand() % self.height
        bits = util.rand()
        for a in range(4):
            for b in range(4):
                self.set_alive(x0 + a, y0 + b, bool(bits & 1))
                bits >>= 1

    def step(self, time: float) -> None:
        """Advance one generation if ``time`` has reached the next one."""
        if time < self._time:
            return
        self._time += 1

        old = self._cells
        new = bytearray(len(old))
        for i, neighbours in enumerate(self._neighbours):
            count = sum(old[j] for j in neighbours)
            if count == 2:
                new[i] = old[i]
            elif count == 3:
                new[i] = 1
        self._cells = new
        self._seed_block()

    def set_size(self, cols: int, rows: int) -> None:
        """Place the view origin at the centre of a cols x rows screen."""
        self.origin_x = cols // 2
        self.origin_y = rows // 2

    def set_transform(self, scale: float, theta: float) -> None:
        """Set the view's zoom and rotation."""
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        self.u_x = +scale * _XSCALE * cos_t
        self.u_y = -scale * _YSCALE * sin_t
        self.v_x = +scale * _XSCALE * sin_t
        self.v_y = +scale * _YSCALE * cos_t

    def get_pixel(self, x: int, y: int, power: float) -> int:
        """Return 1 for a live cell, 2 for a cell edge, 0 otherwise."""
        dx = x - self.origin_x
        dy = y - self.origin_y
        u = 0.5 + self.u_x * dx + self.u_y * dy
        v = 0.5 + self.v_x * dx + self.v_y * dy
        if self.alive(math.ceil(u), math.ceil(v)):
            return 1

        if power >= 0.4:
            du_a = 0.5 * self.u_x + 0.5 * self.u_y
            dv_a = 0.5 * self.v_x + 0.5 * self.v_y
            du_b = 0.5 * self.u_x - 0.5 * self.u_y
            dv_b = -0.5 * self.v_x + 0.5 * self.v_y
            if (
                math.ceil(u + du_a) != math.ceil(u - du_a)
                or math.ceil(v + dv_a) != math.ceil(v - dv_a)
                or math.ceil(u + du_b) != math.ceil(u - du_b)
                or math.ceil(v + dv_b) != math.ceil(v - dv_b)
            ):
                return 2

        return 0