from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np

from .pieces import Shape, TetrominoType


Coordinate = Tuple[int, int]
Board = np.ndarray

EMPTY = 0


def _frozen(board: Board) -> Board:
    board.flags.writeable = False
    return board


def empty_board(width: int = 10, height: int = 20) -> Board:
    """Grid of ``height`` rows by ``width`` columns, all cells empty.

    Cells hold 0 when empty and the ``TetrominoType`` value of the piece
    that filled them otherwise. Row 0 is the top of the board.
    """
    return _frozen(np.zeros((int(height), int(width)), dtype=np.int8))


def _occupied(shape: Shape, position: Coordinate) -> Iterator[Coordinate]:
    origin_x, origin_y = position
    h, w = shape.shape
    for dy in range(h):
        for dx in range(w):
            if shape[dy, dx]:
                yield origin_x + dx, origin_y + dy


def is_valid_placement(shape: Shape, position: Coordinate, board: Board) -> bool:
    """True if ``shape`` fits at ``position`` (top-left of its bounding box).

    Cells above the board (y < 0) only collide with the side walls.
    """
    height, width = board.shape
    for x, y in _occupied(shape, position):
        if x < 0 or x >= width or y >= height:
            return False
        if y >= 0 and board[y, x] != EMPTY:
            return False
    return True


def merge(board: Board, shape: Shape, position: Coordinate, kind: TetrominoType) -> Board:
    """Return a new board with the shape's cells set to ``kind``.

    Cells above the visible board are dropped.
    """
    merged = board.copy()
    value = int(kind)
    for x, y in _occupied(shape, position):
        if y >= 0:
            merged[y, x] = value
    return _frozen(merged)


def clear_full_lines(board: Board) -> Tuple[Board, int]:
    full = np.all(board != EMPTY, axis=1)
    num = int(np.count_nonzero(full))
    if num == 0:
        return board, 0
    # Keep non-full rows in order and pad with empty rows on top
    kept = board[~full]
    new_rows = np.zeros((num, board.shape[1]), dtype=board.dtype)
    return _frozen(np.vstack((new_rows, kept))), num


def get_max_height(board: Board) -> int:
    # y=0 is top; find first non-empty from top
    non_empty_rows = np.where(np.any(board != EMPTY, axis=1))[0]
    if non_empty_rows.size == 0:
        return 0
    return board.shape[0] - int(non_empty_rows[0])


def count_holes(board: Board) -> int:
    holes = 0
    for x in range(board.shape[1]):
        seen_block = False
        for cell in board[:, x]:
            if cell != EMPTY:
                seen_block = True
            elif seen_block:
                holes += 1
    return holes
