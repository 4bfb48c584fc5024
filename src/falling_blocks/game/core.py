from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Optional

import numpy as np

from .grid import clear_full_lines, empty_board, is_valid_placement, merge
from .pieces import ActivePiece, TetrominoType, shape_of
from .randomizer import RANDOMIZERS, Randomizer, make_randomizer
from .rules import ScoringRules


class Action(IntEnum):
    NONE = 0
    LEFT = 1
    RIGHT = 2
    ROTATE = 3
    SOFT_DROP_START = 4
    SOFT_DROP_STOP = 5
    HARD_DROP = 6
    TICK = 7
    TOGGLE_PAUSE = 8
    RESET = 9


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    spawn_x: int = 4
    spawn_y: int = 0
    random_seed: Optional[int] = None
    randomizer: str = "uniform"

    def __post_init__(self) -> None:
        if self.width < 4:
            raise ValueError(f"width must be at least 4, got {self.width}")
        if self.height < 2:
            raise ValueError(f"height must be at least 2, got {self.height}")
        if not 0 <= self.spawn_x <= self.width - 4:
            raise ValueError(f"spawn_x {self.spawn_x} does not fit a 4-wide piece on width {self.width}")
        if self.randomizer not in RANDOMIZERS:
            raise ValueError(f"Unknown randomizer {self.randomizer!r}")


@dataclass(frozen=True, eq=False)
class GameState:
    """Everything the engine owns for one game session.

    Commands never mutate a state in place; they swap in a new one, so a
    reference taken by the driver stays consistent. A command that does
    nothing leaves the very same object in place.
    """

    board: np.ndarray
    active: ActivePiece
    next_kind: TetrominoType
    score: int = 0
    lines_cleared: int = 0
    level: int = 1
    game_over: bool = False
    paused: bool = False
    soft_drop: bool = False

    @property
    def playing(self) -> bool:
        return not self.game_over and not self.paused


@dataclass(frozen=True, eq=False)
class Snapshot:
    board: np.ndarray  # active piece overlaid
    next_kind: TetrominoType
    next_shape: np.ndarray
    score: int
    lines_cleared: int
    level: int
    game_over: bool
    paused: bool
    elapsed_ms: int = 0


class FallingBlocksGame:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        randomizer: Optional[Randomizer] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.randomizer = randomizer or make_randomizer(self.config.randomizer, self.config.random_seed)
        self.state: GameState
        self.reset()

    def reset(self) -> None:
        active = self._spawn(self.randomizer.next_kind())
        self.state = GameState(
            board=empty_board(self.config.width, self.config.height),
            active=active,
            next_kind=self.randomizer.next_kind(),
        )

    def _spawn(self, kind: TetrominoType) -> ActivePiece:
        return ActivePiece(kind=kind, rotation=0, x=self.config.spawn_x, y=self.config.spawn_y)

    def _fits(self, piece: ActivePiece, board: Optional[np.ndarray] = None) -> bool:
        if board is None:
            board = self.state.board
        return is_valid_placement(piece.shape(), piece.position, board)

    def _commit(self, piece: ActivePiece) -> bool:
        if self._fits(piece):
            self.state = replace(self.state, active=piece)
            return True
        return False

    def _lock_piece(self) -> int:
        s = self.state
        board = merge(s.board, s.active.shape(), s.active.position, s.active.kind)
        board, lines = clear_full_lines(board)
        score = s.score + self.rules.score_for_lines(lines, s.level)
        total = s.lines_cleared + lines
        level = self.rules.level_for_lines(total)

        spawned = self._spawn(s.next_kind)
        if not self._fits(spawned, board):
            # Blocked spawn: the locked piece stays as the last active one
            self.state = replace(s, board=board, score=score, lines_cleared=total, level=level, game_over=True)
            return lines
        self.state = replace(
            s,
            board=board,
            active=spawned,
            next_kind=self.randomizer.next_kind(),
            score=score,
            lines_cleared=total,
            level=level,
        )
        return lines

    def tick(self) -> None:
        """Gravity step: fall one row, or lock and spawn when blocked."""
        if not self.state.playing:
            return
        if not self._commit(self.state.active.moved(0, 1)):
            self._lock_piece()

    def move_horizontal(self, direction: int) -> None:
        if direction not in (-1, 1):
            raise ValueError(f"direction must be -1 or +1, got {direction}")
        if not self.state.playing:
            return
        self._commit(self.state.active.moved(direction, 0))

    def rotate(self) -> None:
        # No wall kicks: a blocked rotation simply fails
        if not self.state.playing:
            return
        self._commit(self.state.active.rotated(1))

    def soft_drop(self, active: bool) -> None:
        active = bool(active)
        if active == self.state.soft_drop:
            return
        if active and not self.state.playing:
            return
        self.state = replace(self.state, soft_drop=active)

    def drop_distance(self) -> int:
        piece = self.state.active
        distance = 0
        while self._fits(piece.moved(0, distance + 1)):
            distance += 1
        return distance

    def hard_drop(self) -> None:
        if not self.state.playing:
            return
        distance = self.drop_distance()
        if distance:
            self.state = replace(self.state, active=self.state.active.moved(0, distance))
        self._lock_piece()

    def toggle_pause(self) -> None:
        if self.state.game_over:
            return
        self.state = replace(self.state, paused=not self.state.paused)

    def step(self, action: Action) -> Snapshot:
        action = Action(action)
        if action == Action.LEFT:
            self.move_horizontal(-1)
        elif action == Action.RIGHT:
            self.move_horizontal(1)
        elif action == Action.ROTATE:
            self.rotate()
        elif action == Action.SOFT_DROP_START:
            self.soft_drop(True)
        elif action == Action.SOFT_DROP_STOP:
            self.soft_drop(False)
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.TICK:
            self.tick()
        elif action == Action.TOGGLE_PAUSE:
            self.toggle_pause()
        elif action == Action.RESET:
            self.reset()
        elif action == Action.NONE:
            pass
        return self.snapshot()

    def snapshot(self, elapsed_ms: int = 0) -> Snapshot:
        s = self.state
        board = s.board
        if not s.game_over:
            board = merge(board, s.active.shape(), s.active.position, s.active.kind)
        return Snapshot(
            board=board,
            next_kind=s.next_kind,
            next_shape=shape_of(s.next_kind),
            score=s.score,
            lines_cleared=s.lines_cleared,
            level=s.level,
            game_over=s.game_over,
            paused=s.paused,
            elapsed_ms=int(elapsed_ms),
        )
