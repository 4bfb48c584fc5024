from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def rotate_cw(shape: Shape) -> Shape:
    """Quarter turn clockwise: an R x C matrix becomes C x R."""
    return np.rot90(shape, 1, axes=(1, 0))


def _rot90(shape: Shape, k: int) -> Shape:
    k = k % 4
    for _ in range(k):
        shape = rotate_cw(shape)
    return shape


BASE_SHAPES = {
    TetrominoType.I: np.array([[1, 1, 1, 1]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1]], dtype=np.int8),
}

for _base in BASE_SHAPES.values():
    _base.flags.writeable = False


def shape_of(kind: TetrominoType, rotation: int = 0) -> Shape:
    return _rot90(BASE_SHAPES[TetrominoType(kind)], rotation)


@dataclass(frozen=True)
class ActivePiece:
    kind: TetrominoType
    rotation: int = 0  # 0..3
    x: int = 0
    y: int = 0  # may be negative while spawning above the board

    @property
    def position(self) -> Tuple[int, int]:
        return self.x, self.y

    def shape(self) -> Shape:
        return shape_of(self.kind, self.rotation)

    def moved(self, dx: int, dy: int) -> "ActivePiece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self, delta: int = 1) -> "ActivePiece":
        return replace(self, rotation=(self.rotation + delta) % 4)
