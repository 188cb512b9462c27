"""Colour palettes: tables of SGR sequences from dark to bright."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum


class ColorSpace(IntEnum):
    """Ways of telling the terminal which colour to use."""

    ANSI_8 = 11
    AIX_16 = 12
    XTERM_88 = 101
    XTERM_256 = 102
    XTERM_RGB = 103
    ISO8613_6_RGB = 2
    ISO8613_6_CMY = 3
    ISO8613_6_CMYK = 4
    ISO8613_6_INDEX = 5


_RGB_SPACES = frozenset(
    {
        ColorSpace.XTERM_RGB,
        ColorSpace.ISO8613_6_RGB,
        ColorSpace.ISO8613_6_CMY,
        ColorSpace.ISO8613_6_CMYK,
    }
)
_ANSI_SPACES = frozenset({ColorSpace.ANSI_8, ColorSpace.AIX_16})

_BLACK_FG = "\x1b[30m"
_BLACK_BG = "\x1b[40m"


def _round(value: float) -> int:
    """Round half away from zero."""
    if value >= 0:
        return math.floor(value + 0.5)
    return -math.floor(-value + 0.5)


def _trunc_div(a: int, b: int) -> int:
    """Integer division truncating towards zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def _components(color: int) -> tuple[int, int, int]:
    return color & 0xFF, (color >> 8) & 0xFF, (color >> 16) & 0xFF


def index2color(index: int) -> int:
    """Return the 0xBBGGRR colour of an xterm 256-colour palette index."""
    if index < 16:
        mx = 0x80 if index < 8 else 0xFF
        r = mx * (1 & index)
        g = mx * (1 & (index // 2))
        b = mx * (1 & (index // 4))
    elif index < 232:
        index -= 16
        r, g, b = index // 36, index // 6 % 6, index % 6
        r, g, b = (c * 40 + 55 if c else 0 for c in (r, g, b))
    else:
        r = g = b = 8 + 10 * (index - 232)
    return r | g << 8 | b << 16


@dataclass(frozen=True)
class Palette:
    """Foreground and background SGR sequences, one pair per brightness level."""

    colorspace: ColorSpace
    fg: tuple[str, ...]
    bg: tuple[str, ...]

    @property
    def level_count(self) -> int:
        return len(self.fg)

    def intensity_to_level(self, value: float) -> int:
        """Map an intensity in [0, 1] onto a level index."""
        return int((self.level_count - 1) * value)


def _rgb_levels(color: int) -> list[tuple[int, int, int]]:
    red, green, blue = _components(color)
    mx = max(red, green, blue)
    mn = min(red, green, blue)

    levels = []
    # Up to 128 levels rising from black to the colour itself.
    for i in range(0, mx + 1, 2):
        ratio = i / mx if mx else 0.0
        levels.append((_round(red * ratio), _round(green * ratio), _round(blue * ratio)))

    # Up to 127 levels rising from the colour to white.
    n = (255 - mn) // 2
    for i in range(n - 1, -1, -1):
        frac = (i * 2.0) / (255 - mn)
        levels.append(
            (
                _round(255 - (255 - red) * frac),
                _round(255 - (255 - green) * frac),
                _round(255 - (255 - blue) * frac),
            )
        )
    return levels


def _rgb_sequence(colorspace: ColorSpace, prefix: str, r: int, g: int, b: int) -> str:
    if colorspace is ColorSpace.XTERM_RGB:
        return f"\x1b[{prefix}8;2;{r};{g};{b}m"
    if colorspace is ColorSpace.ISO8613_6_RGB:
        return f"\x1b[{prefix}8:2::{r}:{g}:{b}m"

    a = 0xFF
    if colorspace is ColorSpace.ISO8613_6_CMYK:
        a = max(r, g, b)
        if a:
            r, g, b = r * 255 // a, g * 255 // a, b * 255 // a
    c, m, y, k = 0xFF ^ r, 0xFF ^ g, 0xFF ^ b, 0xFF ^ a
    if colorspace is ColorSpace.ISO8613_6_CMY:
        return f"\x1b[{prefix}8:3::{c}:{m}:{y}m"
    return f"\x1b[{prefix}8:4::{c}:{m}:{y}:{k}m"


def _rgb_palette(color: int, colorspace: ColorSpace) -> Palette:
    fg, bg = [], []
    for r, g, b in _rgb_levels(color):
        if r == g == b == 0:
            fg.append(_BLACK_FG)
            bg.append(_BLACK_BG)
        else:
            fg.append(_rgb_sequence(colorspace, "3", r, g, b))
            bg.append(_rgb_sequence(colorspace, "4", r, g, b))
    return Palette(colorspace, tuple(fg), tuple(bg))


def _color2index(r: float, g: float, b: float, size: int) -> int:
    ri = _round(r * (size - 1))
    gi = _round(g * (size - 1))
    bi = _round(b * (size - 1))
    return (16 + (ri * size + gi) * size + bi) & 0xFF


def _index_levels(color: int, colorspace: ColorSpace) -> list[int]:
    offset, modulo, size, ncolor = 35, 40, 6, 256
    if colorspace is ColorSpace.XTERM_88:
        offset, modulo, size, ncolor = 52, 58, 4, 88
    edge = size - 1
    gray0 = 16 + size * size * size

    red, green, blue = (_trunc_div(c - offset, modulo) for c in _components(color))
    mx = max(red, green, blue)
    mn = min(red, green, blue)
    if mx == mn:
        # Grayscale ramp.
        return [16, *range(gray0, ncolor), gray0 - 1]

    indices = []
    for i in range(size):
        t = i / edge
        indices.append(_color2index(red / edge * t, green / edge * t, blue / edge * t, size))
    for i in range(mn + 1, size):
        t = (edge - i) / (edge - mn)
        indices.append(
            _color2index(
                1.0 - (1.0 - red / edge) * t,
                1.0 - (1.0 - green / edge) * t,
                1.0 - (1.0 - blue / edge) * t,
                size,
            )
        )
    return indices


def _index_palette(color: int, colorspace: ColorSpace) -> Palette:
    colon = colorspace is ColorSpace.ISO8613_6_INDEX
    fg, bg = [], []
    for index in _index_levels(color, colorspace):
        if index in (0, 16):
            fg.append(_BLACK_FG)
            bg.append(_BLACK_BG)
        elif colon:
            fg.append(f"\x1b[38:5:{index}m")
            bg.append(f"\x1b[48:5:{index}m")
        else:
            fg.append(f"\x1b[38;5;{index}m")
            bg.append(f"\x1b[48;5;{index}m")
    return Palette(colorspace, tuple(fg), tuple(bg))


def _ansi_palette(color: int, colorspace: ColorSpace) -> Palette:
    red, green, blue = _components(color)
    half = max(red, green, blue) // 2
    c = (1 if red > half else 0) + (2 if green > half else 0) + (4 if blue > half else 0)
    if c == 0:
        c = 7
    aix = colorspace is ColorSpace.AIX_16

    indices = [0]
    if aix:
        indices.append(8)
    if 1 <= c <= 6:
        indices += [c, c]
        if aix:
            indices += [8 + c, 8 + c]
        indices.append(7)
        if aix:
            indices.append(15)
    else:
        indices += [7, 7]
        if aix:
            indices += [15, 15]

    fg, bg = [], []
    for index in indices:
        if index < 8:
            fg.append(f"\x1b[3{index}m")
            bg.append(f"\x1b[4{index}m")
        else:
            fg.append(f"\x1b[9{index & 7}m")
            bg.append(f"\x1b[10{index & 7}m")
    return Palette(colorspace, tuple(fg), tuple(bg))


def build_palette(color: int, colorspace: ColorSpace) -> Palette:
    """Build the brightness ramp for a 0xBBGGRR colour in the given colour space."""
    colorspace = ColorSpace(colorspace)
    if colorspace in _RGB_SPACES:
        return _rgb_palette(color, colorspace)
    if colorspace in _ANSI_SPACES:
        return _ansi_palette(color, colorspace)
    return _index_palette(color, colorspace)