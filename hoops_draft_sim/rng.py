"""Seeded 32-bit generator that supplies every random draw of a match.

Mulberry32 with the constants used for stored recaps. One instance per
simulation call; the draw order is part of the output contract.
"""
from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")

MASK32 = 0xFFFFFFFF
GOLDEN_STEP = 0x6D2B79F5


class Mulberry32:
    """Deterministic stream of floats in [0, 1) from a 32-bit seed."""

    def __init__(self, seed: int):
        self._state = seed & MASK32
        self.draws = 0

    def random(self) -> float:
        self._state = (self._state + GOLDEN_STEP) & MASK32
        t = self._state
        t = ((t ^ (t >> 15)) * (t | 1)) & MASK32
        mixed = ((t ^ (t >> 7)) * (t | 61)) & MASK32
        t ^= (t + mixed) & MASK32
        self.draws += 1
        return ((t ^ (t >> 14)) & MASK32) / 4294967296

    __call__ = random

    def index(self, n: int) -> int:
        """Uniform index into a sequence of length n (n >= 1)."""
        return int(self.random() * n)

    def pick(self, items: Sequence[T]) -> T:
        return items[self.index(len(items))]

    def gaussianish(self) -> float:
        """Sum of four uniforms, centered and halved: a bell shape on [-1, 1]."""
        return (self.random() + self.random() + self.random() + self.random() - 2) / 2

    def shuffled(self, items: Sequence[T]) -> list:
        """Fisher-Yates shuffle of a copy, walking from the back."""
        out = list(items)
        for i in range(len(out) - 1, 0, -1):
            j = self.index(i + 1)
            out[i], out[j] = out[j], out[i]
        return out
