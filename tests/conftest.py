from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Tuple

import numpy as np
import pytest

from falling_blocks.game import ActivePiece, FallingBlocksGame, GameConfig, TetrominoType


def board_with(cells: Iterable[Tuple[int, int]] = (), width: int = 10, height: int = 20, value: int = 1) -> np.ndarray:
    board = np.zeros((height, width), dtype=np.int8)
    for x, y in cells:
        board[y, x] = value
    return board


def row_except(y: int, *gaps: int, width: int = 10):
    return [(x, y) for x in range(width) if x not in gaps]


def set_piece(
    game: FallingBlocksGame,
    kind: TetrominoType,
    x: int = 4,
    y: int = 0,
    rotation: int = 0,
    board: Optional[np.ndarray] = None,
    next_kind: TetrominoType = TetrominoType.O,
    **fields,
) -> None:
    state = game.state
    game.state = replace(
        state,
        active=ActivePiece(kind, rotation, x, y),
        next_kind=next_kind,
        board=state.board if board is None else board,
        **fields,
    )


@pytest.fixture
def game() -> FallingBlocksGame:
    return FallingBlocksGame(GameConfig(random_seed=1234))
