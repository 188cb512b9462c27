"""Banner messages: UTF-8 decoding, glyph lookup and width layout."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import ClassVar

REPLACEMENT = "\ufffd"

INITIAL_INPUT = 40
CELL_WIDTH = 10
CELL_HEIGHT = 7
MAX_MESSAGE_SIZE = 0x1000
DEFAULT_GLYPH_WIDTH = 5

# (upper bound of lead byte, continuation bytes, smallest code point allowed)
_LEAD_BYTES = (
    (0xE0, 1, 1 << 7),
    (0xF0, 2, 1 << 11),
    (0xF8, 3, 1 << 16),
    (0xFC, 4, 1 << 21),
    (0xFE, 5, 1 << 26),
)


def decode_utf8(data: bytes | str, limit: int = MAX_MESSAGE_SIZE) -> str:
    """Leniently decode UTF-8, yielding at most ``limit`` characters.

    Stray or overlong sequences, and code points outside Unicode, become
    U+FFFD. Decoding stops at a NUL byte.
    """
    if isinstance(data, str):
        data = data.encode("utf-8", "surrogateescape")
    out: list[str] = []
    pos = 0
    size = len(data)
    while len(out) < limit and pos < size and data[pos] != 0:
        code = data[pos]
        pos += 1
        if code < 0x80:
            out.append(chr(code))
            continue
        if code < 0xC0 or code >= 0xFE:
            out.append(REPLACEMENT)
            continue

        remain, min_code = next((r, m) for bound, r, m in _LEAD_BYTES if code < bound)
        code &= (1 << (6 - remain)) - 1
        while remain and pos < size and 0x80 <= data[pos] < 0xC0:
            code = code << 6 | (data[pos] & 0x3F)
            pos += 1
            remain -= 1
        if code < min_code or code > 0x10FFFF:
            out.append(REPLACEMENT)
        else:
            out.append(chr(code))
    return "".join(out)


@dataclass(frozen=True)
class GlyphDefinition:
    """A bitmap glyph: one integer per row, bit x set where the pixel is lit."""

    HEIGHT: ClassVar[int] = CELL_HEIGHT

    c: str
    w: int
    lines: tuple[int, ...]

    def is_set(self, x: int, y: int) -> bool:
        return bool(self.lines[y] & (1 << x))


@dataclass
class Glyph:
    """A glyph placed in a message, with its layout width."""

    h: int
    w: int
    render_width: int
    definition: GlyphDefinition | None = None

    def is_set(self, x: int, y: int) -> bool:
        return self.definition is not None and self.definition.is_set(x, y)


class BannerMessage:
    """A message decoded into glyphs and laid out for a given screen width."""

    def __init__(
        self,
        text: bytes | str,
        glyph_table: Mapping[str, GlyphDefinition] | None = None,
    ) -> None:
        self.glyph_table: Mapping[str, GlyphDefinition] = glyph_table or {}
        self.text = decode_utf8(text)
        self.glyphs: list[Glyph] = []
        self.min_width = 0
        self.render_width = 0
        self.render_height = GlyphDefinition.HEIGHT
        self.min_progress = 0
        self.resolve_glyph()

    def _glyph_data(self, c: str) -> GlyphDefinition | None:
        definition = self.glyph_table.get(c)
        if definition is None and c != " ":
            definition = self.glyph_table.get(REPLACEMENT)
        return definition

    def resolve_glyph(self) -> None:
        """Look up a glyph for every character and compute the minimum width."""
        self.glyphs = []
        self.min_width = 0
        for c in self.text:
            if "a" <= c <= "z":
                c = c.upper()
            definition = self._glyph_data(c)
            width = definition.w if definition is not None else DEFAULT_GLYPH_WIDTH
            if self.glyphs:
                self.min_width += 1
            self.min_width += width
            self.glyphs.append(Glyph(GlyphDefinition.HEIGHT, width, width + 1, definition))

    def adjust_width(self, cols: int) -> None:
        """Widen the narrowest glyphs evenly while the message fits in ``cols``."""
        rest = cols - self.min_width - 2
        self.render_width = self.min_width
        if not self.glyphs:
            return

        while rest > 0:
            min_progress = min(g.render_width for g in self.glyphs)
            count = sum(1 for g in self.glyphs if g.render_width == min_progress)
            if min_progress >= CELL_WIDTH * 3 // 2:
                break
            rest -= count
            if rest < 0:
                break
            for g in self.glyphs:
                if g.render_width == min_progress:
                    g.render_width += 1
            self.render_width += count
            self.min_progress = min_progress


@dataclass
class Banner:
    """The list of messages shown by the banner scene."""

    glyph_table: Mapping[str, GlyphDefinition] | None = None
    messages: list[BannerMessage] = field(default_factory=list)

    def __init__(self, glyph_table: Mapping[str, GlyphDefinition] | None = None) -> None:
        self.glyph_table = glyph_table
        self.messages = []

    def add_message(self, message: bytes | str) -> None:
        self.messages.append(BannerMessage(message, self.glyph_table))

    def __iter__(self) -> Iterator[BannerMessage]:
        return iter(self.messages)

    def __len__(self) -> int:
        return len(self.messages)

    def max_min_width(self) -> int:
        """The largest minimum width among the messages."""
        return max((m.min_width for m in self.messages), default=0)

    def max_number_of_characters(self) -> int:
        """The length of the longest message in characters."""
        return max((len(m.text) for m in self.messages), default=0)