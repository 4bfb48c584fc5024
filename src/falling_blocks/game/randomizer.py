"""Piece randomizers.

The default draw is uniform and independent, so repeats and droughts
happen. ``BagRandomizer`` is the opt-in alternative that deals each of the
seven kinds exactly once per bag.
"""

from __future__ import annotations

import random
from typing import List, Optional, Protocol

from .pieces import TetrominoType


class Randomizer(Protocol):
    def next_kind(self) -> TetrominoType: ...


class UniformRandomizer:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)

    def next_kind(self) -> TetrominoType:
        return self.rng.choice(list(TetrominoType))


class BagRandomizer:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)
        self.bag: List[TetrominoType] = []

    def _refill(self) -> None:
        self.bag = list(TetrominoType)
        self.rng.shuffle(self.bag)

    def next_kind(self) -> TetrominoType:
        if not self.bag:
            self._refill()
        return self.bag.pop()


RANDOMIZERS = {
    "uniform": UniformRandomizer,
    "bag": BagRandomizer,
}


def make_randomizer(name: str = "uniform", seed: Optional[int] = None) -> Randomizer:
    try:
        factory = RANDOMIZERS[name]
    except KeyError:
        raise ValueError(f"Unknown randomizer {name!r}, expected one of {sorted(RANDOMIZERS)}") from None
    return factory(seed)
