"""Random numbers, character choice and small arithmetic helpers."""

from __future__ import annotations

import random

_engine = random.Random()

_SYMBOLS = "<>*+.:=_|"
_KATAKANA_BASE = ord("\uff70")


def seed(value: int | None) -> None:
    """Reseed the shared random engine (``None`` picks a fresh seed)."""
    _engine.seed(value)


def rand() -> int:
    """Return a uniformly distributed unsigned 32-bit integer."""
    return _engine.getrandbits(32)


def randf() -> float:
    """Return a uniformly distributed float in [0, 1)."""
    return _engine.random()


def rand_char() -> str:
    """Return a random digit, half-width katakana or symbol."""
    r = rand() % 80
    if r < 10:
        return chr(ord("0") + r)
    r -= 10
    if r < 46:
        return chr(_KATAKANA_BASE + r)
    r -= 46
    return _SYMBOLS[r % 9]


def mod(value: int, modulo: int) -> int:
    """Remainder of truncating division, shifted up by ``modulo`` when negative."""
    remainder = abs(value) % abs(modulo)
    if value < 0:
        remainder = -remainder
    if remainder < 0:
        remainder += modulo
    return remainder


def interpolate(value: float, a: float, b: float) -> float:
    """Linear interpolation between ``a`` (value 0) and ``b`` (value 1)."""
    return a + (b - a) * value


def split(text: str, sep: str) -> list[str]:
    """Split ``text`` at every ``sep``, keeping empty fields."""
    return text.split(sep)