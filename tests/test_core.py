from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from falling_blocks.game import Action, FallingBlocksGame, GameConfig, Snapshot, TetrominoType

from conftest import board_with, row_except, set_piece


def test_new_game_starts_playing_at_spawn(game):
    s = game.state
    assert s.active.position == (4, 0)
    assert s.active.rotation == 0
    assert (s.score, s.lines_cleared, s.level) == (0, 0, 1)
    assert not s.game_over and not s.paused and not s.soft_drop
    assert not s.board.any()
    assert s.board.shape == (20, 10)


def test_seeded_games_are_reproducible():
    a = FallingBlocksGame(GameConfig(random_seed=9))
    b = FallingBlocksGame(GameConfig(random_seed=9))
    for _ in range(10):
        assert a.state.active.kind == b.state.active.kind
        assert a.state.next_kind == b.state.next_kind
        a.hard_drop()
        b.hard_drop()


def test_invalid_config_is_rejected():
    with pytest.raises(ValueError):
        GameConfig(width=3)
    with pytest.raises(ValueError):
        GameConfig(spawn_x=8)
    with pytest.raises(ValueError):
        GameConfig(randomizer="bag7")


def test_move_left_stops_at_wall(game):
    set_piece(game, TetrominoType.I)
    for _ in range(4):
        game.move_horizontal(-1)
    assert game.state.active.x == 0
    before = game.state
    game.move_horizontal(-1)
    assert game.state is before


def test_move_right_stops_at_wall(game):
    set_piece(game, TetrominoType.O)
    for _ in range(10):
        game.move_horizontal(1)
    assert game.state.active.x == 8


def test_move_blocked_by_settled_cells(game):
    set_piece(game, TetrominoType.O, board=board_with([(3, 1)]))
    before = game.state
    game.move_horizontal(-1)
    assert game.state is before


def test_bad_direction_raises(game):
    with pytest.raises(ValueError):
        game.move_horizontal(2)


def test_tick_moves_piece_down_without_touching_board(game):
    board = game.state.board
    game.tick()
    assert game.state.active.position == (4, 1)
    assert game.state.board is board


def test_tick_on_floor_locks_and_spawns(game):
    set_piece(game, TetrominoType.O, y=18, next_kind=TetrominoType.T)
    game.tick()
    s = game.state
    assert s.board[18:20, 4:6].tolist() == [[2, 2], [2, 2]]
    assert s.active.kind == TetrominoType.T
    assert s.active.position == (4, 0)
    assert s.active.rotation == 0
    assert s.score == 0


def test_rotate_commits_when_it_fits(game):
    set_piece(game, TetrominoType.I)
    game.rotate()
    assert game.state.active.rotation == 1
    assert game.state.active.position == (4, 0)


def test_rotate_without_wall_kick_fails_at_wall(game):
    set_piece(game, TetrominoType.I, x=9, rotation=1)
    before = game.state
    game.rotate()
    assert game.state is before


def test_rotate_wraps_after_four_turns(game):
    set_piece(game, TetrominoType.T, y=5)
    for _ in range(4):
        game.rotate()
    assert game.state.active.rotation == 0


def test_hard_drop_o_piece_on_empty_board(game):
    set_piece(game, TetrominoType.O, next_kind=TetrominoType.S)
    assert game.drop_distance() == 18
    game.hard_drop()
    s = game.state
    assert np.all(s.board[18:20, 4:6] == TetrominoType.O)
    assert int(np.count_nonzero(s.board)) == 4
    assert s.active.kind == TetrominoType.S
    assert s.active.position == (4, 0)


def test_filling_single_gap_clears_one_line(game):
    board = board_with(row_except(19, 9))
    set_piece(game, TetrominoType.I, x=9, rotation=1, board=board)
    game.hard_drop()
    s = game.state
    assert s.lines_cleared == 1
    assert s.score == 100
    assert s.board.shape == (20, 10)
    assert s.board[19, 9] == TetrominoType.I
    assert not s.board[19, :9].any()
    assert int(np.count_nonzero(s.board)) == 3


def test_four_line_clear_scores_800_at_level_one(game):
    cells = [c for y in range(16, 20) for c in row_except(y, 9)]
    set_piece(game, TetrominoType.I, x=9, rotation=1, board=board_with(cells))
    game.hard_drop()
    assert game.state.lines_cleared == 4
    assert game.state.score == 800
    assert not game.state.board.any()


def test_two_lines_at_level_three_scores_900(game):
    cells = row_except(18, 9) + row_except(19, 9)
    set_piece(game, TetrominoType.I, x=9, rotation=1, board=board_with(cells), lines_cleared=20, level=3, score=50)
    game.hard_drop()
    s = game.state
    assert s.score == 950
    assert s.lines_cleared == 22
    assert s.level == 3


def test_tenth_line_raises_level(game):
    set_piece(game, TetrominoType.I, x=9, rotation=1, board=board_with(row_except(19, 9)), lines_cleared=9)
    game.hard_drop()
    s = game.state
    assert s.lines_cleared == 10
    assert s.level == 2
    # points use the level in force when the piece locked
    assert s.score == 100


def test_lock_without_lines_leaves_score(game):
    set_piece(game, TetrominoType.T, score=300)
    game.hard_drop()
    assert game.state.score == 300
    assert game.state.lines_cleared == 0


def _top_out(game):
    board = board_with([(5, 1)])
    set_piece(game, TetrominoType.I, x=0, y=19, board=board, next_kind=TetrominoType.O)
    game.tick()


def test_blocked_spawn_ends_game(game):
    _top_out(game)
    s = game.state
    assert s.game_over
    assert np.all(s.board[19, 0:4] == TetrominoType.I)
    assert s.next_kind == TetrominoType.O


def test_commands_are_ignored_after_game_over(game):
    _top_out(game)
    before = game.state
    game.tick()
    game.move_horizontal(-1)
    game.move_horizontal(1)
    game.rotate()
    game.soft_drop(True)
    game.hard_drop()
    game.toggle_pause()
    for action in (Action.LEFT, Action.ROTATE, Action.HARD_DROP, Action.TICK, Action.TOGGLE_PAUSE):
        game.step(action)
    assert game.state is before


def test_reset_leaves_game_over(game):
    _top_out(game)
    game.reset()
    s = game.state
    assert not s.game_over
    assert not s.board.any()
    assert (s.score, s.lines_cleared, s.level) == (0, 0, 1)
    assert s.active.position == (4, 0)


def test_pause_blocks_commands_until_resumed(game):
    game.toggle_pause()
    assert game.state.paused
    before = game.state
    game.tick()
    game.move_horizontal(1)
    game.rotate()
    game.hard_drop()
    game.soft_drop(True)
    assert game.state is before
    game.toggle_pause()
    assert not game.state.paused
    game.tick()
    assert game.state.active.y == 1


def test_soft_drop_only_sets_flag(game):
    game.soft_drop(True)
    assert game.state.soft_drop
    assert game.state.active.position == (4, 0)
    game.soft_drop(False)
    assert not game.state.soft_drop


def test_soft_drop_release_is_honoured_while_paused(game):
    game.soft_drop(True)
    game.toggle_pause()
    game.soft_drop(False)
    assert not game.state.soft_drop


def test_reset_from_play_clears_everything(game):
    set_piece(game, TetrominoType.O, score=1200, lines_cleared=15, level=2, paused=True, soft_drop=True)
    game.reset()
    s = game.state
    assert (s.score, s.lines_cleared, s.level) == (0, 0, 1)
    assert not s.paused and not s.soft_drop


def test_snapshot_overlays_active_piece(game):
    set_piece(game, TetrominoType.O, y=3, next_kind=TetrominoType.L)
    snap = game.snapshot(elapsed_ms=1500)
    assert isinstance(snap, Snapshot)
    assert snap.board[3:5, 4:6].tolist() == [[2, 2], [2, 2]]
    assert not game.state.board.any()
    assert snap.next_kind == TetrominoType.L
    assert snap.next_shape.tolist() == [[0, 0, 1], [1, 1, 1]]
    assert snap.elapsed_ms == 1500
    assert not snap.board.flags.writeable


def test_snapshot_clips_cells_above_board(game):
    set_piece(game, TetrominoType.I, y=-2, rotation=1)
    snap = game.snapshot()
    assert int(np.count_nonzero(snap.board)) == 2


def test_step_dispatches_actions(game):
    set_piece(game, TetrominoType.O)
    snap = game.step(Action.RIGHT)
    assert game.state.active.x == 5
    assert isinstance(snap, Snapshot)
    game.step(Action.TICK)
    assert game.state.active.y == 1
    game.step(Action.SOFT_DROP_START)
    assert game.state.soft_drop
    game.step(Action.SOFT_DROP_STOP)
    assert not game.state.soft_drop
    game.step(Action.TOGGLE_PAUSE)
    assert game.state.paused
    game.step(Action.RESET)
    assert not game.state.paused
    before = game.state
    game.step(Action.NONE)
    assert game.state is before
    with pytest.raises(ValueError):
        game.step(42)


def test_state_is_replaced_not_mutated(game):
    before = game.state
    board = before.board
    game.hard_drop()
    assert game.state is not before
    assert not board.any()
    assert before.active.position == (4, 0)
    with pytest.raises(FrozenInstanceError):
        before.score = 10


class _Repeat:
    def __init__(self, kind):
        self.kind = kind

    def next_kind(self):
        return self.kind


def test_engine_accepts_any_randomizer():
    game = FallingBlocksGame(randomizer=_Repeat(TetrominoType.S))
    assert game.state.active.kind == TetrominoType.S
    assert game.state.next_kind == TetrominoType.S
    game.hard_drop()
    assert game.state.active.kind == TetrominoType.S
