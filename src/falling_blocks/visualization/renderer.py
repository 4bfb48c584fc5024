from __future__ import annotations

from typing import Tuple

import numpy as np
import pygame

from falling_blocks.game import Snapshot


def _color_for_value(v: int) -> Tuple[int, int, int]:
    palette = {
        0: (20, 20, 26),
        1: (0, 240, 240),  # I
        2: (240, 240, 0),  # O
        3: (160, 0, 240),  # T
        4: (0, 240, 0),    # S
        5: (240, 0, 0),    # Z
        6: (0, 0, 240),    # J
        7: (240, 160, 0),  # L
    }
    return palette.get(v, (200, 200, 200))


def format_time(elapsed_ms: int) -> str:
    seconds = elapsed_ms // 1000
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_width: int = 200) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self._font = None

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return (
            self.margin * 3 + width * self.cell_size + self.panel_width,
            self.margin * 2 + height * self.cell_size,
        )

    def _cells_surface(self, cells: np.ndarray, background: Tuple[int, int, int], skip_empty: bool = False) -> pygame.Surface:
        h, w = cells.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill(background)
        for y in range(h):
            for x in range(w):
                v = int(cells[y, x])
                if v == 0 and skip_empty:
                    continue
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, _color_for_value(v), rect)
        return surf

    def _text(self, screen: pygame.Surface, text: str, pos: Tuple[int, int], color=(230, 230, 230)) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        screen.blit(self._font.render(text, True, color), pos)

    def _overlay(self, screen: pygame.Surface, board_rect: pygame.Rect, lines) -> None:
        shade = pygame.Surface(board_rect.size, pygame.SRCALPHA)
        shade.fill((0, 0, 0, 200))
        screen.blit(shade, board_rect.topleft)
        for i, (text, color) in enumerate(lines):
            self._text(screen, text, (board_rect.x + 20, board_rect.centery - 20 + i * 30), color)

    def draw(self, screen: pygame.Surface, snapshot: Snapshot) -> None:
        screen.fill((10, 10, 14))
        grid_surf = self._cells_surface(snapshot.board, (30, 30, 36))
        board_rect = screen.blit(grid_surf, (self.margin, self.margin))

        # Side panel: next piece and stats
        x0 = self.margin * 2 + board_rect.width
        self._text(screen, "Next", (x0, self.margin))
        next_kind = int(snapshot.next_kind)
        next_cells = np.where(snapshot.next_shape != 0, next_kind, 0)
        screen.blit(self._cells_surface(next_cells, (10, 10, 14), skip_empty=True), (x0, self.margin + 30))

        stats = [
            f"Score: {snapshot.score}",
            f"Lines: {snapshot.lines_cleared}",
            f"Level: {snapshot.level}",
            f"Time: {format_time(snapshot.elapsed_ms)}",
            "",
            "A/D or arrows: move",
            "W/Up: rotate",
            "S/Down: soft drop",
            "Space: hard drop",
            "P: pause  R: reset",
        ]
        y_text = self.margin + 30 + 3 * self.cell_size
        for i, txt in enumerate(stats):
            self._text(screen, txt, (x0, y_text + i * 24))

        if snapshot.game_over:
            self._overlay(screen, board_rect, [
                ("Game Over!", (255, 100, 100)),
                (f"Final Score: {snapshot.score}", (255, 255, 255)),
                ("Press R to play again", (255, 255, 255)),
            ])
        elif snapshot.paused:
            self._overlay(screen, board_rect, [
                ("Paused", (102, 224, 255)),
                ("Press P to continue", (255, 255, 255)),
            ])
        pygame.display.flip()
