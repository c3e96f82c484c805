"""
UI Helpers - Drawing utilities for pygame.
"""
from typing import Tuple

import pygame
import pygame.gfxdraw


def draw_aa_circle(surface: pygame.Surface, color: tuple, center: tuple, radius: int):
    """Draw an anti-aliased filled circle."""
    cx, cy = int(center[0]), int(center[1])
    r = int(radius)
    pygame.gfxdraw.aacircle(surface, cx, cy, r, color)
    pygame.gfxdraw.filled_circle(surface, cx, cy, r, color)


def draw_aa_rounded_rect(surface: pygame.Surface, color: tuple, rect: tuple, radius: int):
    """Draw an anti-aliased rounded rectangle using circles for corners."""
    x, y, w, h = rect
    r = min(radius, w // 2, h // 2)
    if r <= 0:
        pygame.draw.rect(surface, color, rect)
        return

    pygame.draw.rect(surface, color, (x + r, y, w - 2 * r, h))
    pygame.draw.rect(surface, color, (x, y + r, w, h - 2 * r))

    corners = [
        (x + r, y + r),
        (x + w - r - 1, y + r),
        (x + r, y + h - r - 1),
        (x + w - r - 1, y + h - r - 1),
    ]
    for cx, cy in corners:
        pygame.gfxdraw.aacircle(surface, int(cx), int(cy), r, color)
        pygame.gfxdraw.filled_circle(surface, int(cx), int(cy), r, color)


def draw_play_icon(surface: pygame.Surface, color: tuple, center: tuple, size: int):
    """Right-pointing triangle."""
    cx, cy = center
    half = size // 2
    left = int(cx - half * 0.6)
    points = [(left, cy - half), (left, cy + half), (cx + half, cy)]
    pygame.gfxdraw.aapolygon(surface, points, color)
    pygame.gfxdraw.filled_polygon(surface, points, color)


def draw_pause_icon(surface: pygame.Surface, color: tuple, center: tuple, size: int):
    """Two vertical bars."""
    cx, cy = center
    bar_w = max(2, size // 4)
    gap = max(2, size // 5)
    pygame.draw.rect(surface, color, (cx - gap // 2 - bar_w, cy - size // 2, bar_w, size))
    pygame.draw.rect(surface, color, (cx + gap // 2, cy - size // 2, bar_w, size))


def draw_speaker_icon(surface: pygame.Surface, color: tuple, center: tuple, size: int, muted: bool):
    """Speaker with sound waves, or with a cross when muted."""
    cx, cy = center
    s = size // 2
    body = [(cx - s, cy - s // 3), (cx - s // 3, cy - s // 3), (cx + s // 6, cy - s),
            (cx + s // 6, cy + s), (cx - s // 3, cy + s // 3), (cx - s, cy + s // 3)]
    pygame.gfxdraw.aapolygon(surface, body, color)
    pygame.gfxdraw.filled_polygon(surface, body, color)

    if muted:
        x0 = cx + s // 2
        pygame.draw.line(surface, color, (x0, cy - s // 2), (x0 + s // 2, cy + s // 2), 3)
        pygame.draw.line(surface, color, (x0, cy + s // 2), (x0 + s // 2, cy - s // 2), 3)
    else:
        for i, r in enumerate((s // 2, s)):
            rect = pygame.Rect(cx + s // 6 - r, cy - r, r * 2, r * 2)
            pygame.draw.arc(surface, color, rect, -0.8, 0.8, 2 + i)


def draw_reload_icon(surface: pygame.Surface, color: tuple, center: tuple, size: int):
    """Circular arrow."""
    cx, cy = center
    r = size // 2
    pygame.draw.arc(surface, color, pygame.Rect(cx - r, cy - r, r * 2, r * 2), 0.6, 5.8, 3)
    tip = (cx + r, cy - 2)
    pygame.draw.polygon(surface, color, [tip, (tip[0] - 7, tip[1] - 8), (tip[0] + 6, tip[1] - 8)])


def fit_size(src: Tuple[int, int], dst: Tuple[int, int]) -> Tuple[int, int]:
    """Largest size with src's aspect ratio that fits inside dst."""
    sw, sh = src
    dw, dh = dst
    if sw <= 0 or sh <= 0:
        return 0, 0
    scale = min(dw / sw, dh / sh)
    return max(1, int(sw * scale)), max(1, int(sh * scale))
