"""
Transition Guard - Only one clip change at a time.
"""
import logging

logger = logging.getLogger(__name__)


class TransitionGuard:
    """Single-flight flag. A second request while one is running is dropped, not queued."""

    def __init__(self):
        self._in_progress = False

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def try_enter(self) -> bool:
        """Claim the guard. Returns False immediately if already held."""
        if self._in_progress:
            logger.debug('Transition already in progress, request dropped')
            return False
        self._in_progress = True
        return True

    def exit(self):
        """Release the guard. Must run on every exit path of a transition."""
        self._in_progress = False
