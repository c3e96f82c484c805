"""
Preloader - Warms the cache with a likely next clip.
"""
import logging
from typing import Optional

from .selector import next_random_index

logger = logging.getLogger(__name__)


class Preloader:
    """Best-effort buffering of one upcoming clip."""

    def __init__(self, surface, library, rng=None):
        """
        Args:
            surface: Playback surface that buffers clips off screen
            library: Library the candidates are drawn from
            rng: Optional random.Random for the candidate draw
        """
        self.surface = surface
        self.library = library
        self.rng = rng
        self.last_primed: Optional[int] = None

    def prime_next(self, current_index: int, library_length: Optional[int] = None):
        """
        Ask the surface to buffer a random clip other than current_index.

        The draw is independent from the one made on the next advance, so the
        primed clip may not be the one played next. Failures are logged only.
        """
        if library_length is None:
            library_length = len(self.library)

        index = next_random_index(current_index, library_length, self.rng)
        if index is None:
            return

        try:
            self.surface.preload(self.library[index])
            self.last_primed = index
            logger.debug(f'Preloading clip {index}')
        except Exception as e:
            logger.warning(f'Preload of clip {index} failed: {e}')
