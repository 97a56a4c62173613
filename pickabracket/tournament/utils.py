"""Utility functions for tournament management."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Optional, Protocol, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that can return a uniformly random permutation of a sequence."""

    def uniform_shuffle(self, items: Sequence[T]) -> list[T]: ...


class SeededRandomSource:
    """Shuffle with a fixed seed when one is given, system randomness otherwise.

    With a seed every call starts from the same generator state, so the same
    input always yields the same permutation.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._system = random.SystemRandom()

    def uniform_shuffle(self, items: Sequence[T]) -> list[T]:
        shuffled = list(items)
        rng = random.Random(self.seed) if self.seed is not None else self._system
        rng.shuffle(shuffled)
        return shuffled


def parse_seed(raw: str | int | None) -> Optional[int]:
    """Convert a configured seed into an int, treating blanks as unset."""
    if raw is None:
        return None
    if isinstance(raw, int):
        return raw
    raw = raw.strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"TOURNAMENT_SEED must be an integer, got {raw!r}") from e
