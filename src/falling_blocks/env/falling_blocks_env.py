from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import Action, FallingBlocksGame, GameConfig, TetrominoType, make_randomizer
from falling_blocks.game.grid import count_holes, get_max_height, merge


# Agent-facing action index -> engine command
ENV_ACTIONS = (Action.NONE, Action.LEFT, Action.RIGHT, Action.ROTATE, Action.HARD_DROP)

_PALETTE = np.array(
    [
        (30, 30, 36),
        (0, 240, 240),  # I
        (240, 240, 0),  # O
        (160, 0, 240),  # T
        (0, 240, 0),    # S
        (240, 0, 0),    # Z
        (0, 0, 240),    # J
        (240, 160, 0),  # L
    ],
    dtype=np.uint8,
)


class FallingBlocksEnv(gym.Env):
    """Step-based environment: every step applies one command, then gravity.

    Actions (5 total):
      0: No-op
      1: Move Left
      2: Move Right
      3: Rotate
      4: Hard Drop

    Reward is the engine score gained during the step.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.game = FallingBlocksGame(self.config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)
        self._steps = 0

        h, w = self.config.height, self.config.width
        n_kinds = len(TetrominoType)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0, high=n_kinds, shape=(h, w), dtype=np.int8),
                "active": spaces.Box(low=0, high=n_kinds, shape=(h, w), dtype=np.int8),
                "next_kind": spaces.Discrete(n_kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(len(ENV_ACTIONS))

    def _get_obs(self) -> Dict[str, Any]:
        s = self.game.state
        active = np.zeros_like(s.board)
        if not s.game_over:
            active = merge(active, s.active.shape(), s.active.position, s.active.kind)
        return {
            "board": np.array(s.board, dtype=np.int8),
            "active": np.array(active, dtype=np.int8),
            "next_kind": int(s.next_kind),
        }

    def _get_info(self) -> Dict[str, Any]:
        s = self.game.state
        return {
            "score": s.score,
            "lines_cleared": s.lines_cleared,
            "level": s.level,
            "max_height": get_max_height(s.board),
            "holes": count_holes(s.board),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.randomizer = make_randomizer(self.config.randomizer, seed)
        self.game.reset()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        score_before = self.game.state.score
        command = ENV_ACTIONS[int(action)]
        self.game.step(command)
        if command != Action.HARD_DROP:
            self.game.tick()
        self._steps += 1

        reward = float(self.game.state.score - score_before)
        terminated = bool(self.game.state.game_over)
        truncated = self._steps >= self.max_episode_steps and not terminated
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self.game.snapshot().board
            cell = 12
            img = _PALETTE[grid]
            return np.repeat(np.repeat(img, cell, axis=0), cell, axis=1)
        return None

    def close(self) -> None:
        pass
