from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    lines_per_level: int = 10

    def score_for_lines(self, lines: int, level: int = 1) -> int:
        if lines <= 0:
            return 0
        lines = min(lines, len(self.line_clear_scores))
        return self.line_clear_scores[lines - 1] * level

    def level_for_lines(self, total_lines: int) -> int:
        return total_lines // self.lines_per_level + 1


@dataclass
class TimingRules:
    base_gravity_ms: int = 800
    gravity_step_ms: int = 80
    min_gravity_ms: int = 100
    soft_drop_ms: int = 50
    hard_drop_delay_ms: int = 100

    def gravity_interval_ms(self, level: int) -> int:
        return max(self.min_gravity_ms, self.base_gravity_ms - (level - 1) * self.gravity_step_ms)
