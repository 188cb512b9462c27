import io

import pytest

from matrixrain.palette import ColorSpace, build_palette, index2color
from matrixrain.screen import Screen, TermCell


@pytest.fixture
def palette():
    return build_palette(index2color(47), ColorSpace.XTERM_256)


def _screen(palette, cols=6, rows=3):
    out = io.StringIO()
    screen = Screen(out, palette)
    screen.resize(cols, rows)
    screen.reset_attributes()
    screen.redraw()
    out.seek(0)
    out.truncate()
    return screen, out


def test_reset_attributes_sequence(palette):
    out = io.StringIO()
    screen = Screen(out, palette)
    screen.reset_attributes()
    assert out.getvalue() == "\x1b[H\x1b[m"
    assert (screen.px, screen.py) == (0, 0)


def test_goto_same_position_writes_nothing(palette):
    screen, out = _screen(palette)
    screen.goto_xy(0, 0)
    assert out.getvalue() == ""


def test_goto_carriage_return_and_backspace(palette):
    screen, out = _screen(palette)
    screen.px = 5
    screen.goto_xy(3, 0)
    assert out.getvalue() == "\b" * 2
    screen.goto_xy(0, 0)
    assert out.getvalue().endswith("\r")
    assert (screen.px, screen.py) == (0, 0)


def test_redraw_copies_frame(palette):
    screen, out = _screen(palette)
    screen.cell(1, 1).c = "Z"
    screen.cell(1, 1).fg = 3
    screen.redraw()
    text = out.getvalue()
    assert "Z" in text
    assert text.endswith("\x1b[H")
    assert screen.old_content == screen.new_content


def test_draw_content_without_changes_is_empty(palette):
    screen, out = _screen(palette)
    screen.draw_content()
    assert out.getvalue() == ""


def test_draw_content_writes_change_once(palette):
    screen, out = _screen(palette)
    screen.cell(2, 1).c = "Q"
    screen.cell(2, 1).fg = 5
    screen.draw_content()
    first = out.getvalue()
    assert "Q" in first
    assert palette.fg[5] in first
    out.seek(0)
    out.truncate()
    screen.draw_content()
    assert out.getvalue() == ""


def test_last_column_uses_insert_character(palette):
    screen, out = _screen(palette)
    screen.cell(5, 0).c = "W"
    screen.cell(5, 0).fg = 4
    screen.draw_content()
    assert "W\b\x1b[@" in out.getvalue()
    assert screen.old_content[5].c == "W"


def test_cell_with_fg_equal_bg_is_blanked(palette):
    screen, out = _screen(palette)
    screen.cell(0, 0).c = "X"
    screen.draw_content()
    assert screen.cell(0, 0).c == " "
    assert "X" not in out.getvalue()


def test_synchronized_update_wraps_output(palette):
    screen, out = _screen(palette)
    screen.synchronized_update = True
    screen.draw_content()
    assert out.getvalue() == "\x1b[?2026h\x1b[?2026l"


def test_preserve_background(palette):
    out = io.StringIO()
    screen = Screen(out, palette)
    screen.preserve_background = True
    screen.set_color(TermCell())
    assert out.getvalue() == "\x1b[49m"


def test_set_color_bold(palette):
    out = io.StringIO()
    screen = Screen(out, palette)
    screen.set_color(TermCell(c="A", fg=2, bold=True))
    assert out.getvalue() == palette.bg[0] + palette.fg[2] + "\x1b[1m"


def test_diffuse_bounds_and_resolution(palette):
    screen, _ = _screen(palette)
    screen.clear_diffuse()
    screen.add_diffuse(-1, 0, 5.0)
    screen.add_diffuse(0, 10, 5.0)
    screen.add_diffuse(1, 1, -2.0)
    assert all(c.diffuse == 0.0 for c in screen.new_content)
    screen.add_diffuse(1, 1, 100.0)
    screen.resolve_diffuse()
    assert screen.cell(1, 1).bg == palette.intensity_to_level(0.3)
    assert screen.cell(0, 0).bg == 0


def test_clear_content(palette):
    screen, _ = _screen(palette)
    screen.cell(0, 0).c = "A"
    screen.cell(0, 0).fg = 7
    screen.cell(0, 0).bold = True
    screen.clear_content()
    assert all(c == TermCell() for c in screen.new_content)