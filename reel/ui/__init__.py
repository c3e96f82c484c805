"""
Reel UI - Rendering and visual components.
"""
from .helpers import (
    draw_aa_circle,
    draw_aa_rounded_rect,
    fit_size,
)
from .renderer import Renderer
from .context import RenderContext

__all__ = [
    'draw_aa_circle',
    'draw_aa_rounded_rect',
    'fit_size',
    'Renderer',
    'RenderContext',
]
