import pytest

from matrixrain.palette import ColorSpace, Palette, build_palette, index2color

ALL_SPACES = list(ColorSpace)
COLORS = [index2color(i) for i in (0, 1, 2, 4, 7, 15, 47, 100, 200, 240)]


def test_index2color_black_and_white():
    assert index2color(0) == 0
    assert index2color(15) == 0xFFFFFF


def test_index2color_grayscale_is_gray():
    for index in range(232, 256):
        color = index2color(index)
        r, g, b = color & 0xFF, (color >> 8) & 0xFF, (color >> 16) & 0xFF
        assert r == g == b


def test_index2color_cube_corner_is_white():
    assert index2color(231) == 0xFFFFFF


def test_colorspace_values_from_source():
    assert ColorSpace(102) is ColorSpace.XTERM_256
    assert ColorSpace(2) is ColorSpace.ISO8613_6_RGB


@pytest.mark.parametrize("space", ALL_SPACES)
@pytest.mark.parametrize("color", COLORS)
def test_tables_have_equal_length(space, color):
    palette = build_palette(color, space)
    assert len(palette.fg) == len(palette.bg) == palette.level_count
    assert palette.level_count >= 2
    assert palette.colorspace is space


@pytest.mark.parametrize("space", ALL_SPACES)
@pytest.mark.parametrize("color", COLORS)
def test_every_sequence_is_sgr(space, color):
    palette = build_palette(color, space)
    for seq in palette.fg + palette.bg:
        assert seq.startswith("\x1b[")
        assert seq.endswith("m")


@pytest.mark.parametrize(
    "space",
    [s for s in ALL_SPACES if s not in (ColorSpace.ANSI_8, ColorSpace.AIX_16)],
)
@pytest.mark.parametrize("color", COLORS)
def test_first_level_is_black(space, color):
    palette = build_palette(color, space)
    assert palette.fg[0] == "\x1b[30m"
    assert palette.bg[0] == "\x1b[40m"


@pytest.mark.parametrize("color", COLORS)
def test_xterm_256_ends_at_white(color):
    palette = build_palette(color, ColorSpace.XTERM_256)
    assert palette.fg[-1] == "\x1b[38;5;231m"
    assert palette.bg[-1] == "\x1b[48;5;231m"


@pytest.mark.parametrize("color", COLORS)
def test_iso_index_uses_colon_form(color):
    semicolon = build_palette(color, ColorSpace.XTERM_256)
    colon = build_palette(color, ColorSpace.ISO8613_6_INDEX)
    assert colon.level_count == semicolon.level_count
    for a, b in zip(semicolon.fg, colon.fg):
        assert a.replace(";", ":") == b


def test_gray_ramp_is_longer_in_256_than_88():
    white = index2color(15)
    assert (
        build_palette(white, ColorSpace.XTERM_256).level_count
        > build_palette(white, ColorSpace.XTERM_88).level_count
    )


def test_ansi_green_ramp():
    palette = build_palette(index2color(2), ColorSpace.ANSI_8)
    assert palette.fg == ("\x1b[30m", "\x1b[32m", "\x1b[32m", "\x1b[37m")


def test_aix_uses_bright_codes():
    palette = build_palette(index2color(2), ColorSpace.AIX_16)
    assert palette.level_count > build_palette(index2color(2), ColorSpace.ANSI_8).level_count
    assert any(seq.startswith("\x1b[9") for seq in palette.fg)
    assert any(seq.startswith("\x1b[10") for seq in palette.bg)


def test_ansi_black_is_monochrome():
    palette = build_palette(0, ColorSpace.ANSI_8)
    assert palette.fg[1:] == ("\x1b[37m",) * (palette.level_count - 1)


@pytest.mark.parametrize("space", ALL_SPACES)
def test_intensity_to_level_bounds_and_monotonic(space):
    palette = build_palette(index2color(47), space)
    assert palette.intensity_to_level(0.0) == 0
    assert palette.intensity_to_level(1.0) == palette.level_count - 1
    levels = [palette.intensity_to_level(i / 50) for i in range(51)]
    assert levels == sorted(levels)


def test_palette_is_constructible_directly():
    palette = Palette(ColorSpace.ANSI_8, ("a", "b", "c"), ("d", "e", "f"))
    assert palette.level_count == 3
    assert palette.intensity_to_level(0.5) == 1