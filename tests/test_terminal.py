import fcntl
import os
import pty
import struct
import termios

import pytest

from matrixrain.terminal import RawTerminal, get_size, winsize_from_env


@pytest.fixture
def pipe():
    r, w = os.pipe()
    yield r, w
    os.close(r)
    os.close(w)


@pytest.fixture
def pty_pair():
    master, slave = pty.openpty()
    yield master, slave
    os.close(master)
    os.close(slave)


def test_winsize_from_env_reads_both():
    assert winsize_from_env({"COLUMNS": "132", "LINES": "43"}) == (132, 43)


def test_winsize_from_env_parses_leading_digits():
    assert winsize_from_env({"COLUMNS": " 90x", "LINES": "30rows"}) == (90, 30)


@pytest.mark.parametrize(
    "environ",
    [
        {},
        {"COLUMNS": "80"},
        {"LINES": "24"},
        {"COLUMNS": "0", "LINES": "24"},
        {"COLUMNS": "-5", "LINES": "24"},
        {"COLUMNS": "abc", "LINES": "24"},
    ],
)
def test_winsize_from_env_rejects_incomplete(environ):
    assert winsize_from_env(environ) is None


def test_get_size_falls_back_to_environment(pipe):
    r, _ = pipe
    assert get_size(r, {"COLUMNS": "100", "LINES": "40"}) == (100, 40)
    assert get_size(r, {}) is None


def test_get_size_reads_terminal(pty_pair):
    _, slave = pty_pair
    fcntl.ioctl(slave, termios.TIOCSWINSZ, struct.pack("HHHH", 33, 77, 0, 0))
    assert get_size(slave, {"COLUMNS": "1", "LINES": "1"}) == (77, 33)


def test_read_returns_available_bytes(pipe):
    r, w = pipe
    term = RawTerminal(r)
    assert term.read() == b""
    os.write(w, b"\x1b[A")
    assert term.read(1024) == b"\x1b[A"
    assert term.read() == b""


def test_read_respects_size(pipe):
    r, w = pipe
    os.write(w, b"abc")
    term = RawTerminal(r)
    assert term.read(2) == b"ab"
    assert term.read(2) == b"c"


def test_enter_on_non_terminal_is_harmless(pipe):
    r, w = pipe
    term = RawTerminal(r)
    term.enter()
    assert term.active
    os.write(w, b"x")
    assert term.read() == b"x"
    term.leave()
    assert not term.active


def test_enter_sets_raw_mode_and_leave_restores(pty_pair):
    _, slave = pty_pair
    before = termios.tcgetattr(slave)
    term = RawTerminal(slave)
    term.enter()
    raw = termios.tcgetattr(slave)
    assert raw[3] & termios.ECHO == 0
    assert raw[3] & termios.ICANON == 0
    assert raw[3] & termios.ISIG == before[3] & termios.ISIG
    assert raw[1] & termios.OPOST == 0
    assert raw[0] & termios.ICRNL == 0
    term.leave()
    assert termios.tcgetattr(slave)[:4] == before[:4]


def test_context_manager_restores(pty_pair):
    _, slave = pty_pair
    before = termios.tcgetattr(slave)
    with RawTerminal(slave) as term:
        assert term.active
        assert termios.tcgetattr(slave)[3] & termios.ECHO == 0
    assert not term.active
    assert termios.tcgetattr(slave)[3] == before[3]


def test_read_from_terminal_input(pty_pair):
    master, slave = pty_pair
    with RawTerminal(slave) as term:
        os.write(master, b"q")
        data = b""
        for _ in range(100):
            data += term.read()
            if data:
                break
            os.sched_yield()
        assert data == b"q"