"""
Render Context - Bundles all state needed for rendering.
"""
from dataclasses import dataclass
from typing import Literal, Optional

import pygame

from ..models import LoadProgress

Screen = Literal['welcome', 'loading', 'error', 'player']


@dataclass
class RenderContext:
    """All state needed to render a frame."""
    screen: Screen
    loading_status: str = ''
    progress: Optional[LoadProgress] = None
    error_title: str = ''
    error_message: str = ''
    frame: Optional[pygame.Surface] = None
    item_name: str = ''
    index: int = 0
    total: int = 0
    current_time: float = 0.0
    duration: float = 0.0
    is_playing: bool = False
    is_muted: bool = True
    drag_offset: int = 0
    show_hint: bool = False
    transitioning: bool = False
