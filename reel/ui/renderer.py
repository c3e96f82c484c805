"""
Renderer - All drawing/rendering logic for the Reel UI.
"""
import logging
from typing import Dict, Optional, Tuple

import pygame

from .context import RenderContext
from .helpers import (
    draw_aa_circle, draw_aa_rounded_rect, draw_pause_icon, draw_play_icon,
    draw_reload_icon, draw_speaker_icon, fit_size,
)
from ..config import (
    SCREEN_WIDTH, SCREEN_HEIGHT, COLORS,
    BTN_SIZE, BTN_MARGIN, PROGRESS_BAR_HEIGHT, LOADING_BAR_WIDTH, LOADING_BAR_HEIGHT,
)
from ..utils import format_time

logger = logging.getLogger(__name__)


class Renderer:
    """Handles all drawing/rendering for the Reel UI."""

    def __init__(self, screen: pygame.Surface):
        self.screen = screen

        # Fonts
        self.font_large = pygame.font.Font(None, 48)
        self.font_medium = pygame.font.Font(None, 32)
        self.font_small = pygame.font.Font(None, 24)

        self._text_cache: Dict[Tuple[str, int, tuple], pygame.Surface] = {}
        self._scaled_frame: Optional[Tuple[int, pygame.Surface]] = None

        # Button hit rectangles (player screen)
        x = SCREEN_WIDTH - BTN_MARGIN - BTN_SIZE
        self.button_rects: Dict[str, pygame.Rect] = {
            'reload': pygame.Rect(x, BTN_MARGIN, BTN_SIZE, BTN_SIZE),
            'mute': pygame.Rect(x, SCREEN_HEIGHT - 200, BTN_SIZE, BTN_SIZE),
            'play': pygame.Rect(x, SCREEN_HEIGHT - 200 - BTN_SIZE - BTN_MARGIN, BTN_SIZE, BTN_SIZE),
        }

    def button_at(self, pos: Tuple[int, int]) -> Optional[str]:
        """Name of the player button under pos, if any."""
        for name, rect in self.button_rects.items():
            if rect.collidepoint(pos):
                return name
        return None

    def draw(self, ctx: RenderContext):
        """Draw the current screen."""
        self.screen.fill(COLORS['bg_primary'])
        if ctx.screen == 'welcome':
            self._draw_welcome()
        elif ctx.screen == 'loading':
            self._draw_loading(ctx)
        elif ctx.screen == 'error':
            self._draw_error(ctx)
        else:
            self._draw_player(ctx)

    # ============================================
    # TEXT
    # ============================================

    def _text(self, text: str, font: pygame.font.Font, color: tuple) -> pygame.Surface:
        key = (text, id(font), color)
        surf = self._text_cache.get(key)
        if surf is None:
            surf = font.render(text, True, color)
            if len(self._text_cache) > 200:
                self._text_cache.clear()
            self._text_cache[key] = surf
        return surf

    def _blit_centered(self, text: str, font: pygame.font.Font, color: tuple, y: int):
        surf = self._text(text, font, color)
        self.screen.blit(surf, ((SCREEN_WIDTH - surf.get_width()) // 2, y))

    def _blit_wrapped(self, text: str, font: pygame.font.Font, color: tuple, y: int,
                      width: int = SCREEN_WIDTH - 80) -> int:
        """Centered word-wrapped text. Returns y below the last line."""
        line = ''
        for word in text.split():
            trial = f'{line} {word}'.strip()
            if font.size(trial)[0] > width and line:
                self._blit_centered(line, font, color, y)
                y += font.get_linesize()
                line = word
            else:
                line = trial
        if line:
            self._blit_centered(line, font, color, y)
            y += font.get_linesize()
        return y

    def _truncate(self, text: str, font: pygame.font.Font, max_width: int) -> str:
        if font.size(text)[0] <= max_width:
            return text
        while text and font.size(text + '...')[0] > max_width:
            text = text[:-1]
        return text + '...'

    # ============================================
    # SCREENS
    # ============================================

    def _draw_welcome(self):
        cy = SCREEN_HEIGHT // 2
        draw_aa_circle(self.screen, COLORS['accent'], (SCREEN_WIDTH // 2, cy - 140), 48)
        draw_play_icon(self.screen, COLORS['text_primary'], (SCREEN_WIDTH // 2 + 4, cy - 140), 40)
        self._blit_centered('Reel', self.font_large, COLORS['text_primary'], cy - 60)
        self._blit_wrapped('Short videos from your own folder, one swipe at a time.',
                           self.font_small, COLORS['text_secondary'], cy - 10)

        rect = pygame.Rect(0, 0, 260, 56)
        rect.center = (SCREEN_WIDTH // 2, cy + 90)
        draw_aa_rounded_rect(self.screen, COLORS['accent'], rect, 28)
        label = self._text('Choose Folder', self.font_medium, COLORS['text_primary'])
        self.screen.blit(label, label.get_rect(center=rect.center))
        self._blit_centered('Tap or press O', self.font_small, COLORS['text_muted'], cy + 140)

    def _draw_loading(self, ctx: RenderContext):
        cy = SCREEN_HEIGHT // 2
        self._blit_wrapped(ctx.loading_status or 'Loading...', self.font_medium,
                           COLORS['text_primary'], cy - 60)

        fraction = ctx.progress.fraction if ctx.progress else 0.0
        percent = ctx.progress.percent if ctx.progress else 0
        x = (SCREEN_WIDTH - LOADING_BAR_WIDTH) // 2
        draw_aa_rounded_rect(self.screen, COLORS['bg_elevated'],
                             (x, cy, LOADING_BAR_WIDTH, LOADING_BAR_HEIGHT), LOADING_BAR_HEIGHT // 2)
        fill = int(LOADING_BAR_WIDTH * fraction)
        if fill > 0:
            draw_aa_rounded_rect(self.screen, COLORS['accent'],
                                 (x, cy, fill, LOADING_BAR_HEIGHT), LOADING_BAR_HEIGHT // 2)
        self._blit_centered(f'{percent}%', self.font_small, COLORS['text_secondary'], cy + 24)

    def _draw_error(self, ctx: RenderContext):
        cy = SCREEN_HEIGHT // 2
        self._blit_centered(ctx.error_title, self.font_large, COLORS['error'], cy - 100)
        y = self._blit_wrapped(ctx.error_message, self.font_small, COLORS['text_secondary'], cy - 40)
        self._blit_centered('Tap or press any key to try again', self.font_small,
                            COLORS['text_muted'], y + 40)

    def _draw_player(self, ctx: RenderContext):
        self._draw_frame(ctx)

        # Bottom info: title, counter, time
        name = self._truncate(ctx.item_name, self.font_medium, SCREEN_WIDTH - 2 * BTN_MARGIN - BTN_SIZE - 20)
        self.screen.blit(self._text(name, self.font_medium, COLORS['text_primary']),
                         (BTN_MARGIN, SCREEN_HEIGHT - 90))
        info = f'{ctx.index + 1}/{ctx.total}    {format_time(ctx.current_time)} / {format_time(ctx.duration)}'
        self.screen.blit(self._text(info, self.font_small, COLORS['text_secondary']),
                         (BTN_MARGIN, SCREEN_HEIGHT - 56))

        # Progress bar
        y = SCREEN_HEIGHT - PROGRESS_BAR_HEIGHT
        pygame.draw.rect(self.screen, COLORS['bg_elevated'], (0, y, SCREEN_WIDTH, PROGRESS_BAR_HEIGHT))
        if ctx.duration > 0:
            width = int(SCREEN_WIDTH * min(1.0, ctx.current_time / ctx.duration))
            pygame.draw.rect(self.screen, COLORS['accent'], (0, y, width, PROGRESS_BAR_HEIGHT))

        self._draw_buttons(ctx)

        if ctx.show_hint:
            self._draw_hint()

    def _draw_frame(self, ctx: RenderContext):
        frame = ctx.frame
        if frame is None:
            return

        # Scale once per decoded frame
        if self._scaled_frame is None or self._scaled_frame[0] != id(frame):
            size = fit_size(frame.get_size(), (SCREEN_WIDTH, SCREEN_HEIGHT))
            self._scaled_frame = (id(frame), pygame.transform.smoothscale(frame, size))

        scaled = self._scaled_frame[1]
        rect = scaled.get_rect(center=(SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2 + ctx.drag_offset))
        self.screen.blit(scaled, rect)

    def _draw_buttons(self, ctx: RenderContext):
        icon_color = COLORS['text_primary']
        for name, rect in self.button_rects.items():
            draw_aa_circle(self.screen, COLORS['bg_elevated'], rect.center, BTN_SIZE // 2)
            if name == 'play':
                if ctx.is_playing:
                    draw_pause_icon(self.screen, icon_color, rect.center, BTN_SIZE // 2)
                else:
                    draw_play_icon(self.screen, icon_color, (rect.centerx + 2, rect.centery), BTN_SIZE // 2)
            elif name == 'mute':
                draw_speaker_icon(self.screen, icon_color, rect.center, BTN_SIZE // 2, ctx.is_muted)
            else:
                draw_reload_icon(self.screen, icon_color, rect.center, BTN_SIZE // 2)

    def _draw_hint(self):
        rect = pygame.Rect(0, 0, 300, 56)
        rect.center = (SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2)
        draw_aa_rounded_rect(self.screen, COLORS['bg_elevated'], rect, 28)
        label = self._text('Swipe up for next video', self.font_small, COLORS['text_primary'])
        self.screen.blit(label, label.get_rect(center=rect.center))
