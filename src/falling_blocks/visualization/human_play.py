from __future__ import annotations

import argparse
from typing import Dict, Optional

import pygame

from falling_blocks.game import Action, DropScheduler, FallingBlocksGame, GameConfig
from .renderer import Renderer


# Edge-triggered: one command per key press
KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_a: Action.LEFT,
    pygame.K_LEFT: Action.LEFT,
    pygame.K_d: Action.RIGHT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_w: Action.ROTATE,
    pygame.K_UP: Action.ROTATE,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_p: Action.TOGGLE_PAUSE,
    pygame.K_r: Action.RESET,
}

# Held keys: soft drop runs while pressed
SOFT_DROP_KEYS = (pygame.K_s, pygame.K_DOWN)


class KeyboardController:
    """Turns pygame key events into scheduler commands.

    Soft drop is level-triggered: the key state is remembered so a key
    still held when play resumes starts soft drop again.
    """

    def __init__(self, scheduler: DropScheduler) -> None:
        self.scheduler = scheduler
        self.soft_drop_held = False

    def handle(self, event: pygame.event.Event) -> bool:
        """Apply one event; returns False when the player asked to quit."""
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            if event.key in SOFT_DROP_KEYS:
                self.soft_drop_held = True
                self.scheduler.dispatch(Action.SOFT_DROP_START)
            else:
                action = KEY_TO_ACTION.get(event.key)
                if action is not None:
                    self.scheduler.dispatch(action)
        elif event.type == pygame.KEYUP and event.key in SOFT_DROP_KEYS:
            self.soft_drop_held = False
            self.scheduler.dispatch(Action.SOFT_DROP_STOP)
        self._resume_soft_drop()
        return True

    def _resume_soft_drop(self) -> None:
        state = self.scheduler.game.state
        if self.soft_drop_held and state.playing and not state.soft_drop:
            self.scheduler.dispatch(Action.SOFT_DROP_START)


def run(seed: Optional[int] = None, randomizer: str = "uniform", fps: int = 60) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = FallingBlocksGame(GameConfig(random_seed=seed, randomizer=randomizer))
        scheduler = DropScheduler(game)
        controller = KeyboardController(scheduler)
        renderer = Renderer(cell_size=28)

        screen = pygame.display.set_mode(renderer.window_size(game.config.width, game.config.height))
        pygame.display.set_caption("Falling Blocks")

        running = True
        while running:
            for event in pygame.event.get():
                if not controller.handle(event):
                    running = False

            scheduler.update(clock.tick(fps))
            renderer.draw(screen, scheduler.snapshot())
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--randomizer", choices=["uniform", "bag"], default="uniform")
    p.add_argument("--fps", type=int, default=60)
    return p


def main() -> None:
    args = build_parser().parse_args()
    run(seed=args.seed, randomizer=args.randomizer, fps=args.fps)


if __name__ == "__main__":  # pragma: no cover
    main()
