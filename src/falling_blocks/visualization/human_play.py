from __future__ import annotations

import logging
import sys
from typing import Dict

import pygame

from falling_blocks.game import Action, GameConfig, ManualClock, TetrisEngine
from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_p: Action.TOGGLE_PAUSE,
    pygame.K_RETURN: Action.START,
    pygame.K_m: Action.MENU,
}


def run() -> None:
    log_level = logging.DEBUG if "--debug" in sys.argv else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    pygame.init()
    try:
        clock = pygame.time.Clock()
        # Engine time only moves when this loop advances it, so input
        # handling and drop ticks never interleave.
        ticks = ManualClock()
        config = GameConfig()
        engine = TetrisEngine(scheduler=ticks, config=config)
        renderer = Renderer(cell_size=28)

        screen = pygame.display.set_mode(renderer.window_size(config.width, config.height))
        pygame.display.set_caption("Falling Blocks")

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            engine.step(action)

            dt_ms = clock.tick(60)
            ticks.advance(dt_ms / 1000.0)
            renderer.draw(screen, engine.snapshot())
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
