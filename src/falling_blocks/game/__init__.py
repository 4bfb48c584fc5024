"""Game module for Falling Blocks.

Exports the rules engine and supporting classes:
- TetrominoType / ActivePiece: piece catalog, rotation and the falling piece
- grid helpers: placement test, merge and line clearing on numpy boards
- ScoringRules / TimingRules: score table, level and drop-speed settings
- FallingBlocksGame: command handlers and immutable game state
- DropScheduler: the single clock that drives ticks in real time
"""

from .pieces import ActivePiece, TetrominoType, shape_of, rotate_cw
from .grid import clear_full_lines, empty_board, is_valid_placement, merge
from .rules import ScoringRules, TimingRules
from .randomizer import BagRandomizer, Randomizer, UniformRandomizer, make_randomizer
from .core import Action, FallingBlocksGame, GameConfig, GameState, Snapshot
from .scheduler import DropScheduler

__all__ = [
    "ActivePiece",
    "TetrominoType",
    "shape_of",
    "rotate_cw",
    "clear_full_lines",
    "empty_board",
    "is_valid_placement",
    "merge",
    "ScoringRules",
    "TimingRules",
    "BagRandomizer",
    "Randomizer",
    "UniformRandomizer",
    "make_randomizer",
    "Action",
    "FallingBlocksGame",
    "GameConfig",
    "GameState",
    "Snapshot",
    "DropScheduler",
]
