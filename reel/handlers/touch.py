"""
Touch Handler - Vertical swipe gestures for the clip feed.
"""
import logging
from typing import Literal, Optional, Tuple

from ..config import SWIPE_THRESHOLD

logger = logging.getLogger(__name__)

Gesture = Literal['advance', 'retreat', 'tap']


class TouchHandler:
    """Turn a press/drag/release into a swipe or a tap."""

    # Movement before the drag counts as a swipe in progress (for drag feedback)
    SWIPE_MOVEMENT_THRESHOLD = 15

    def __init__(self, threshold: int = SWIPE_THRESHOLD):
        self.threshold = threshold
        self.start_y = 0
        self.end_y = 0
        self.dragging = False
        self.drag_offset = 0  # Current vertical drag in pixels (negative = up)
        self.is_swiping = False

    def on_down(self, pos: Tuple[int, int]):
        """Called on touch/mouse down."""
        self.start_y = pos[1]
        self.end_y = pos[1]
        self.dragging = True
        self.drag_offset = 0
        self.is_swiping = False
        logger.debug(f'Touch down at ({pos[0]}, {pos[1]})')

    def on_move(self, pos: Tuple[int, int]) -> int:
        """Called on touch/mouse move. Returns drag offset."""
        if not self.dragging:
            return 0
        self.end_y = pos[1]
        self.drag_offset = self.end_y - self.start_y

        if not self.is_swiping and abs(self.drag_offset) > self.SWIPE_MOVEMENT_THRESHOLD:
            self.is_swiping = True
            logger.debug(f'Swipe started, offset={self.drag_offset}px')

        return self.drag_offset

    def on_up(self, pos: Optional[Tuple[int, int]] = None) -> Optional[Gesture]:
        """
        Called on touch/mouse up.

        Returns 'advance' for an upward swipe (content dragged up reveals the
        next clip), 'retreat' for a downward swipe, 'tap' for anything shorter
        than the threshold, or None without a prior down.
        """
        if not self.dragging:
            return None

        if pos is not None:
            self.end_y = pos[1]
        self.dragging = False
        self.drag_offset = 0
        self.is_swiping = False

        delta = self.start_y - self.end_y
        if abs(delta) > self.threshold:
            gesture = 'advance' if delta > 0 else 'retreat'
            logger.debug(f'Touch up: swipe {gesture}, dy={delta}px')
            return gesture

        logger.debug(f'Touch up: tap, dy={delta}px')
        return 'tap'
