from __future__ import annotations

import random
from typing import Protocol


_MASK32 = 0xFFFFFFFF
_LCG_MULTIPLIER = 1664525
_LCG_INCREMENT = 1013904223
_GOLDEN_STRIDE = 0x9E3779B9


def plate_seed(plate: str) -> int:
    """Rolling ``h * 31 + ord(ch)`` hash with 32-bit signed wraparound."""
    h = 0
    for ch in plate:
        h = (h * 31 + ord(ch)) & _MASK32
        if h >= 0x80000000:
            h -= 0x100000000
    return abs(h)


def _fmix32(value: int) -> int:
    value &= _MASK32
    value ^= value >> 16
    value = (value * 0x85EBCA6B) & _MASK32
    value ^= value >> 13
    value = (value * 0xC2B2AE35) & _MASK32
    value ^= value >> 16
    return value


def seeded_draw(seed: int, offset: int, lo: int, hi: int) -> int:
    """Map ``(seed, offset)`` to an integer in ``[lo, hi]``.

    The seed goes through one LCG step and the murmur3 finalizer, the offset is
    added with a golden-ratio stride, and the sum is finalized again before
    being scaled into the range. Neighbouring seeds and offsets give unrelated
    values.
    """
    base = _fmix32(_LCG_MULTIPLIER * seed + _LCG_INCREMENT)
    fraction = _fmix32(base + offset * _GOLDEN_STRIDE) / 2**32
    value = lo + int(fraction * (hi - lo + 1))
    return max(lo, min(hi, value))


class Filler(Protocol):
    def randint(self, lo: int, hi: int) -> int: ...


class SeededFiller:
    """Deterministic draws; each call consumes the next offset."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self.offset = 0

    def randint(self, lo: int, hi: int) -> int:
        value = seeded_draw(self.seed, self.offset, lo, hi)
        self.offset += 1
        return value


class RandomFiller:
    """Entropy-backed draws for gap-filling; not reproducible."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def randint(self, lo: int, hi: int) -> int:
        return self._rng.randint(lo, hi)
