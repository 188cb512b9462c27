"""Progressive rendering of a zooming Mandelbrot set."""

from __future__ import annotations

import math

from . import util

MAX_ITERATE = 5000
_MIX_RATIO = 0.2
_LEVEL_BINS = 100
_U0 = -0.743643887037158704752191506114774
_V0 = +0.131825904205311970493132056385139


def _round(value: float) -> int:
    """Round half away from zero."""
    if value >= 0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def mandel_iterations(u: float, v: float) -> int:
    """Escape-time count for c = u + iv, minus a small offset, never negative."""
    c = complex(u, v)
    z = c
    count = 0
    while count < MAX_ITERATE:
        if abs(z) > 2.0:
            break
        z = z * z + c
        count += 1
    return max(0, count - 5)


class Mandelbrot:
    """A cols x rows buffer of Mandelbrot intensities that is refined frame by frame."""

    def __init__(self) -> None:
        self.cols = 0
        self.rows = 0
        self.data: list[float] = []
        self.scale = 1.0
        self.theta = 0.0
        self._prev_avail = False
        self.u_x = self.u_y = self.v_x = self.v_y = 0.0
        self.min_power = 0.0
        self.max_power = 1.0
        self.value_range = 1.0
        self.level_mapping = [i / _LEVEL_BINS for i in range(_LEVEL_BINS)] + [1.0]

    def resize(self, cols: int, rows: int) -> None:
        """Resize the buffer, discarding its content when the size changes."""
        if cols == self.cols and rows == self.rows:
            return
        self.cols = cols
        self.rows = rows
        self.data = [-1.0] * (cols * rows)
        self._prev_avail = False

    def _get_nearest(self, x: float, y: float) -> float:
        x = _round(x)
        y = _round(y)
        if x < 0 or self.cols <= x or y < 0 or self.rows <= y:
            return -1.0
        return self.data[y * self.cols + x]

    def _get_average(self, x: int, y: int, radius: int) -> float:
        x0 = _round(x)
        y0 = _round(y)
        values = [
            self.data[b * self.cols + a]
            for a in range(max(x0 - radius, 0), min(x0 + radius, self.cols - 1) + 1)
            for b in range(max(y0 - radius, 0), min(y0 + radius, self.rows - 1) + 1)
        ]
        if not values:
            return -1.0
        return sum(values) / len(values)

    def _resample_prev(self, theta: float, scale: float) -> None:
        if not self._prev_avail:
            return
        dtheta = theta - self.theta
        dscale = scale / self.scale
        ox, oy = self.cols // 2, self.rows // 2
        u_x = +dscale * math.cos(dtheta) * 0.5 * 2.0
        u_y = -dscale * math.sin(dtheta) * 2.0
        v_x = +dscale * math.sin(dtheta) * 0.5
        v_y = +dscale * math.cos(dtheta)
        samples = [(a + 0.5) / 5 - 0.5 for a in range(5)]

        resampled = []
        for y in range(self.rows):
            for x in range(self.cols):
                u = ox + (u_x * (x - ox) + u_y * (oy - y))
                v = oy - (v_x * (x - ox) + v_y * (oy - y))
                found = [
                    value
                    for dx in samples
                    for dy in samples
                    if (value := self._get_nearest(u + u_x * dx + u_y * dy, v + v_x * dx + v_y * dy))
                    >= 0.0
                ]
                resampled.append(sum(found) / len(found) if found else -1.0)
        self.data = resampled

    def _is_close(self, a: float, b: float) -> bool:
        denominator = abs(a + b)
        if denominator == 0.0:
            return False
        return abs(a - b) / denominator < self.value_range * 0.01

    def _resample_safe(self, x: int, y: int) -> bool:
        if not self._prev_avail:
            return False
        if x <= 0 or self.cols - 1 <= x or y <= 0 or self.rows - 1 <= y:
            return False
        cols = self.cols
        value = self.data[y * cols + x]
        if value == self.min_power or value < 0.0:
            return False
        return all(
            self._is_close(value, self.data[(y + dy) * cols + x + dx])
            for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1), (1, 1), (1, -1), (-1, 1), (-1, -1))
        )

    def _calculate_power_at(self, x: int, y: int) -> tuple[float, int]:
        ox, oy = self.cols // 2, self.rows // 2
        u = _U0 + (self.u_x * (x - ox) + self.u_y * (oy - y))
        v = _V0 + (self.v_x * (x - ox) + self.v_y * (oy - y))
        iterations = mandel_iterations(
            u + self.u_x * 0.5 + self.u_y * 0.5,
            v + self.v_x * 0.5 + self.v_y * 0.5,
        )
        return iterations / MAX_ITERATE, iterations

    def update_frame(self, theta: float, scale: float) -> None:
        """Move the view and recompute as many pixels as the frame budget allows."""
        self._resample_prev(theta, scale)

        self.theta = theta
        self.scale = scale
        self.u_x = +scale * math.cos(theta) * 0.5
        self.u_y = -scale * math.sin(theta)
        self.v_x = +scale * math.sin(theta) * 0.5
        self.v_y = +scale * math.cos(theta)

        total = self.cols * self.rows
        positions = sorted(range(total), key=lambda _: util.randf())

        total_iterate = 0
        min_value = 1.0
        max_value = 0.0
        for processed, pos in enumerate(positions, start=1):
            x = pos % self.cols
            y = pos // self.cols
            if self._resample_safe(x, y):
                continue

            power, iterations = self._calculate_power_at(x, y)
            total_iterate += iterations
            self.data[pos] = power
            min_value = min(min_value, power)
            max_value = max(max_value, power)

            if (total_iterate > 1_000_000 and processed / total > 0.2) or total_iterate > 5_000_000:
                break

        self._prev_avail = True
        self.update_range(min_value, max_value)

    def update_range(self, min_value: float, max_value: float) -> None:
        """Blend in a new value range and rebuild the histogram-equalising map."""
        self.min_power = (1.0 - _MIX_RATIO) * self.min_power + _MIX_RATIO * min_value
        self.max_power = (1.0 - _MIX_RATIO) * self.max_power + _MIX_RATIO * max_value
        self.value_range = max(self.max_power - self.min_power, 1.0 / MAX_ITERATE)

        histogram = [0] * _LEVEL_BINS
        max_bin_content = self.cols * self.rows // 10
        count = 0
        for power in self.data:
            value = (power - self.min_power) / self.value_range
            if value < 0.0 or 1.0 < value:
                continue
            bin_index = min(int(value * _LEVEL_BINS), _LEVEL_BINS - 1)
            if histogram[bin_index] < max_bin_content:
                histogram[bin_index] += 1
                count += 1

        mapping = []
        accum = 0
        for index, height in enumerate(histogram):
            mapping.append(accum / count if count else index / _LEVEL_BINS)
            accum += height
        mapping.append(1.0)
        self.level_mapping = mapping

    def power(self, x: int, y: int) -> float:
        """Display intensity in [0, 1] of the pixel at (x, y)."""
        pos = y * self.cols + x
        power = self.data[pos]
        if power < 0:
            if util.rand() % 10 == 0:
                power, _ = self._calculate_power_at(x, y)
                self.data[pos] = power
            else:
                power = self._get_average(x, y, 3)

        value = _clamp((power - self.min_power) / self.value_range, 0.0, 1.0)

        frac = value * _LEVEL_BINS
        index = min(math.ceil(frac), _LEVEL_BINS - 1)
        p1 = self.level_mapping[index]
        p2 = self.level_mapping[index + 1]
        p = p1 + (frac - index) * (p2 - p1)
        pscale = _clamp(p - 0.2, 0.0, 0.7) / 0.7

        return value + 0.5 * (pscale * pscale - value)