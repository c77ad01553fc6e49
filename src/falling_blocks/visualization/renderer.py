from __future__ import annotations

from typing import Optional, Tuple

import pygame

from falling_blocks.game import GamePhase, GameSnapshot


BACKGROUND = (10, 10, 14)
EMPTY_CELL = (20, 20, 26)
FLASH_CELL = (90, 90, 110)
TEXT = (230, 230, 230)

PANEL_CELLS = 6


class Renderer:
    def __init__(self, cell_size: int = 28, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        board_w = width * self.cell_size
        board_h = height * self.cell_size
        return board_w + PANEL_CELLS * self.cell_size + self.margin * 3, board_h + self.margin * 2

    def _cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            self.margin + x * self.cell_size,
            self.margin + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _draw_board(self, screen: pygame.Surface, snap: GameSnapshot) -> None:
        empty = FLASH_CELL if snap.lines_just_cleared else EMPTY_CELL
        for y, row in enumerate(snap.board):
            for x, color in enumerate(row):
                pygame.draw.rect(screen, color.rgb if color is not None else empty, self._cell_rect(x, y))

    def _draw_piece(self, screen: pygame.Surface, snap: GameSnapshot) -> None:
        if snap.active_color is None:
            return
        rgb = snap.active_color.rgb
        for x, y in snap.ghost_cells:
            if y >= 0:
                pygame.draw.rect(screen, rgb, self._cell_rect(x, y), 2)
        for x, y in snap.active_cells:
            # Cells above the skyline are not drawn
            if y >= 0:
                pygame.draw.rect(screen, rgb, self._cell_rect(x, y))

    def _draw_panel(self, screen: pygame.Surface, snap: GameSnapshot, font: pygame.font.Font) -> None:
        width = len(snap.board[0]) if snap.board else 0
        x0 = self.margin * 2 + width * self.cell_size
        y0 = self.margin
        screen.blit(font.render("Next", True, TEXT), (x0, y0))
        if snap.next_color is not None:
            for py, row in enumerate(snap.next_shape):
                for px, filled in enumerate(row):
                    if filled:
                        rect = pygame.Rect(
                            x0 + px * self.cell_size,
                            y0 + 24 + py * self.cell_size,
                            self.cell_size - 1,
                            self.cell_size - 1,
                        )
                        pygame.draw.rect(screen, snap.next_color.rgb, rect)
        info_lines = [
            f"Score: {snap.score}",
            f"Level: {snap.level}",
            f"Lines: {snap.lines}",
            "",
            "Move: Left/Right",
            "Rotate: Up",
            "Soft drop: Down",
            "Hard drop: Space",
            "Pause: P",
            "Menu: M",
        ]
        y_text = y0 + 24 + 5 * self.cell_size
        for i, txt in enumerate(info_lines):
            screen.blit(font.render(txt, True, TEXT), (x0, y_text + i * 22))

    def _draw_overlay(self, screen: pygame.Surface, snap: GameSnapshot, font: pygame.font.Font) -> None:
        messages = {
            GamePhase.MENU: ("Falling Blocks", "Press Enter to start"),
            GamePhase.PAUSED: ("Paused", "Press P to resume"),
            GamePhase.GAME_OVER: (f"Game Over - Score {snap.score}", "Enter: play again  M: menu"),
        }
        if snap.phase not in messages:
            return
        shade = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 180))
        screen.blit(shade, (0, 0))
        cx = screen.get_width() // 2
        cy = screen.get_height() // 2
        for i, txt in enumerate(messages[snap.phase]):
            img = font.render(txt, True, (255, 255, 255))
            screen.blit(img, img.get_rect(center=(cx, cy + i * 32)))

    def draw(self, screen: pygame.Surface, snap: GameSnapshot) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 26)
        screen.fill(BACKGROUND)
        self._draw_board(screen, snap)
        self._draw_piece(screen, snap)
        self._draw_panel(screen, snap, self._font)
        self._draw_overlay(screen, snap, self._font)
        pygame.display.flip()
