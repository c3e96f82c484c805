"""
Playback Surface - What the controller drives to show clips.
"""
import asyncio
import logging
import time
from typing import Callable, List, Optional, Set

from ..errors import PlaybackStartFailure
from ..models import Item

logger = logging.getLogger(__name__)


class PlaybackSurface:
    """
    Interface between the playback controller and whatever renders clips.

    Keeps the play clock (elapsed time survives pause/resume). Subclasses
    implement play() and preload() and may hook pause/resume/mute.
    `on_ended` is called once when the current clip reaches its natural end.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.on_ended: Optional[Callable[[], None]] = None
        self.item: Optional[Item] = None
        self.muted = True
        self._clock = clock
        self._playing = False
        self._started_at = 0.0
        self._elapsed = 0.0  # Time played before the last pause
        self._ended = False

    async def play(self, item: Item):
        """Start playing item. Raises PlaybackStartFailure if it cannot start."""
        raise NotImplementedError

    def preload(self, item: Item):
        """Buffer item off screen. Best-effort."""
        raise NotImplementedError

    def update(self):
        """Advance playback by wall clock. Called once per frame."""

    def frame(self):
        """Latest video frame as a pygame Surface, or None."""
        return None

    def close(self):
        """Stop playback and free media resources."""
        self._playing = False
        self.item = None

    def pause(self):
        if self._playing:
            self._elapsed = self.current_time
            self._playing = False

    def resume(self):
        if not self._playing and self.item and not self._ended:
            self._started_at = self._clock()
            self._playing = True

    def set_muted(self, muted: bool):
        self.muted = muted

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def current_time(self) -> float:
        if not self._playing:
            return self._elapsed
        return min(self.duration, self._elapsed + self._clock() - self._started_at)

    @property
    def duration(self) -> float:
        return self.item.duration_seconds if self.item else 0.0

    def _start_clock(self, item: Item):
        self.item = item
        self._elapsed = 0.0
        self._started_at = self._clock()
        self._playing = True
        self._ended = False

    def _fire_ended(self):
        if self._ended:
            return
        self._ended = True
        self._elapsed = self.current_time
        self._playing = False
        logger.debug(f'Clip ended: {self.item.name if self.item else None}')
        if self.on_ended:
            self.on_ended()


class NullSurface(PlaybackSurface):
    """Clock-driven stand-in with no media (mock mode and tests)."""

    def __init__(self, clock: Callable[[], float] = time.monotonic,
                 fail_sources: Optional[Set[str]] = None,
                 start_delay: float = 0.0):
        super().__init__(clock)
        self.fail_sources = set(fail_sources or ())
        self.start_delay = start_delay
        self.played: List[int] = []
        self.preloaded: List[int] = []

    async def play(self, item: Item):
        if self.start_delay:
            await asyncio.sleep(self.start_delay)
        if str(item.source) in self.fail_sources:
            raise PlaybackStartFailure(f'Cannot play {item.name}')

        self.played.append(item.id)
        self._start_clock(item)
        logger.debug(f'Mock playing {item.name}')

    def preload(self, item: Item):
        self.preloaded.append(item.id)

    def update(self):
        if self._playing and self.current_time >= self.duration:
            self._fire_ended()
