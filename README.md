# matrixrain

Building blocks for Matrix-style digital rain and related animations in a
Unix terminal: colour ramps as escape sequences, a differential frame
buffer, banner text layout, Conway's Game of Life on a rotating Klein
bottle, and a progressively rendered zoom into the Mandelbrot set.

## Installation

```
pip install .
```

## Modules

### `matrixrain.util`

A shared random engine and small helpers.

- `seed(value)` reseeds the engine (`None` picks a fresh seed).
- `rand()` returns an unsigned 32-bit integer; `randf()` a float in [0, 1).
- `rand_char()` returns a random digit, half-width katakana or one of
  `<>*+.:=_|`.
- `mod(value, modulo)` is a remainder that is never negative for a positive
  modulo; `interpolate(value, a, b)` is linear interpolation; `split(text, sep)`
  splits keeping empty fields.

### `matrixrain.palette`

- `ColorSpace` lists the supported ways of selecting colours: `ANSI_8`,
  `AIX_16`, `XTERM_88`, `XTERM_256`, `XTERM_RGB`, `ISO8613_6_RGB`,
  `ISO8613_6_CMY`, `ISO8613_6_CMYK` and `ISO8613_6_INDEX`.
- `index2color(index)` gives the `0xBBGGRR` colour of an xterm 256-colour
  index.
- `build_palette(color, colorspace)` returns a `Palette`: tuples `fg` and
  `bg` of SGR sequences ordered from black through the colour to white,
  with `level_count` and `intensity_to_level(value)`.

```python
from matrixrain.palette import ColorSpace, build_palette, index2color

palette = build_palette(index2color(47), ColorSpace.XTERM_256)
print(palette.level_count, repr(palette.fg[-1]))
```

### `matrixrain.screen`

`Screen(file, palette)` holds the frame being built (`TermCell` objects
with a character, foreground and background level, bold flag and glow
value) and the frame already displayed. `draw_content()` writes only the
cells that changed, using short cursor movements; `redraw()` repaints
everything. `clear_content()`, `clear_diffuse()`, `add_diffuse(x, y, value)`
and `resolve_diffuse()` manage the background glow around lit cells. The
attributes `preserve_background` and `synchronized_update` make it keep the
terminal's own background and wrap each frame in DECSET 2026.

### `matrixrain.banner`

`decode_utf8(data, limit)` decodes leniently, turning bad sequences into
U+FFFD. `BannerMessage(text, glyph_table)` maps each character to a
`GlyphDefinition` (upper-casing ASCII letters, falling back to the U+FFFD
glyph) and `adjust_width(cols)` widens the glyphs evenly to fill a line.
`Banner` collects messages and reports `max_min_width()` and
`max_number_of_characters()`. No glyph bitmaps are built in: pass a mapping
from characters to `GlyphDefinition` objects; without one every glyph is
blank and five columns wide.

### `matrixrain.conway`

`Conway(width, height)` is a Game of Life board whose left and right edges
join with a vertical flip. `initialize()` fills it at random, `step(time)`
advances a generation once `time` reaches the next one (and drops a random
4x4 block in), and `set_size`, `set_transform(scale, theta)` and
`get_pixel(x, y, power)` project it onto the screen, returning 1 for a live
cell, 2 for a cell edge and 0 otherwise.

### `matrixrain.mandel`

`mandel_iterations(u, v)` is the escape-time count. `Mandelbrot` keeps a
`cols x rows` buffer: `resize(cols, rows)`, `update_frame(theta, scale)`
reuses the previous frame and recomputes pixels within an iteration budget,
and `power(x, y)` returns a histogram-equalised intensity in [0, 1].

### `matrixrain.terminal`

`get_size(fd, environ)` returns `(cols, rows)` of the terminal, falling back
to `COLUMNS` and `LINES` via `winsize_from_env(environ)`. `RawTerminal(fd)`
switches the terminal to raw, non-echoing mode with keyboard signals still
enabled, usable as a context manager, and `read(size)` returns whatever
input is ready without blocking.

## What this package does not do

There is no command to run and no animation loop. The package does not
itself play the scenes, manage layers of falling rain, decode arrow keys or
show a scene menu; it supplies the pieces above for a program that does.

## Tests

```
pip install .[test]
pytest
```