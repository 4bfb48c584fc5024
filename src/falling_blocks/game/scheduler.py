"""Single drop clock for driving a game in real time.

Gravity and soft drop share one deadline. Whenever the active period
changes (level up, soft drop pressed or released, pause, game over) the
pending deadline is dropped and a fresh one is scheduled from "now", so
there is never more than one pending tick.
"""

from __future__ import annotations

from typing import Optional

from .core import Action, FallingBlocksGame, Snapshot
from .rules import TimingRules


class DropScheduler:
    def __init__(self, game: FallingBlocksGame, timing: Optional[TimingRules] = None) -> None:
        self.game = game
        self.timing = timing or TimingRules()
        self.now_ms = 0
        self.elapsed_ms = 0
        self._period: Optional[int] = None
        self._deadline: Optional[int] = None
        self._sync()

    def interval_ms(self) -> Optional[int]:
        state = self.game.state
        if not state.playing:
            return None
        if state.soft_drop:
            return self.timing.soft_drop_ms
        return self.timing.gravity_interval_ms(state.level)

    @property
    def deadline_ms(self) -> Optional[int]:
        return self._deadline

    def _reschedule(self, delay_ms: int = 0) -> None:
        self._period = self.interval_ms()
        self._deadline = None if self._period is None else self.now_ms + self._period + delay_ms

    def _sync(self) -> None:
        if self.interval_ms() != self._period:
            self._reschedule()

    def update(self, dt_ms: int) -> int:
        """Advance the clock by ``dt_ms`` and fire every tick that came due.

        The game may have been paused, resumed or reset behind the
        scheduler's back, so the period is re-read before advancing.
        """
        self._sync()
        target = self.now_ms + max(0, int(dt_ms))
        fired = 0
        while self._deadline is not None and self._deadline <= target:
            if self.game.state.playing:
                self.elapsed_ms += self._deadline - self.now_ms
                self.game.tick()
                fired += 1
            self.now_ms = self._deadline
            self._reschedule()
        if self.game.state.playing:
            self.elapsed_ms += target - self.now_ms
        self.now_ms = target
        return fired

    def dispatch(self, action: Action) -> Snapshot:
        action = Action(action)
        self.game.step(action)
        if action == Action.RESET:
            self.elapsed_ms = 0
            self._reschedule()
        elif action == Action.HARD_DROP and self.game.state.playing:
            # The new piece gets a full period plus a short grace delay
            self._reschedule(self.timing.hard_drop_delay_ms)
        else:
            self._sync()
        return self.snapshot()

    def snapshot(self) -> Snapshot:
        return self.game.snapshot(elapsed_ms=self.elapsed_ms)
