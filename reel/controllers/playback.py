"""
Playback Controller - Decides which clip plays next.

States:
- 'idle': a clip is on screen, ready for the next command
- 'transitioning': a clip change is in flight, other commands are dropped
- 'error': the last clip change failed; the previous clip stays on screen
  and the next successful change returns to 'idle'
"""
import asyncio
import logging
from typing import Awaitable, Callable, Literal, Optional

from ..errors import PlaybackStartFailure
from ..managers import HistoryTrack, Preloader, TransitionGuard, next_random_index
from ..models import Session
from ..utils import run_async

logger = logging.getLogger(__name__)

Status = Literal['idle', 'transitioning', 'error']


class PlaybackController:
    """Owns the session and runs every clip change through one guard."""

    def __init__(self, session: Session, surface, rng=None):
        """
        Args:
            session: Freshly loaded session (history seeded with the first clip)
            surface: PlaybackSurface that plays the clips
            rng: Optional random.Random for fresh draws
        """
        self.session = session
        self.surface = surface
        self.rng = rng
        self.guard = TransitionGuard()
        self.preloader = Preloader(surface, session.library, rng)
        self.status: Status = 'idle'
        self.last_error: Optional[PlaybackStartFailure] = None
        self._task: Optional[asyncio.Task] = None

        surface.on_ended = self.on_playback_ended
        surface.set_muted(session.state.is_muted)

    @property
    def history(self) -> HistoryTrack:
        return self.session.history

    @property
    def current_index(self) -> int:
        return self.session.state.current_index

    @property
    def total(self) -> int:
        return len(self.session.library)

    # ============================================
    # NAVIGATION
    # ============================================

    async def start(self) -> bool:
        """Play the clip the history was seeded with."""
        if not self.guard.try_enter():
            return False
        return await self._transition(self.history.current, self.history.checkpoint())

    async def advance(self) -> bool:
        """
        Go to the next clip. Replays history when behind the newest entry,
        otherwise draws a fresh random clip. Returns True if a clip started.
        """
        if not self.guard.try_enter():
            return False

        checkpoint = self.history.checkpoint()
        index = self.history.advance_replay_or_none()
        if index is None:
            index = next_random_index(self.current_index, self.total, self.rng)
            if index is None:
                logger.debug('Only one clip, nothing to advance to')
                self.guard.exit()
                return False
            self.history.record_forward(index)
        else:
            logger.debug(f'Replaying history entry {self.history.cursor}: clip {index}')

        return await self._transition(index, checkpoint)

    async def retreat(self) -> bool:
        """Go back one history entry. No-op at the oldest entry."""
        if not self.guard.try_enter():
            return False

        checkpoint = self.history.checkpoint()
        index = self.history.retreat()
        if index is None:
            logger.debug('No older history entry')
            self.guard.exit()
            return False

        return await self._transition(index, checkpoint)

    async def _transition(self, index: int, checkpoint) -> bool:
        """Play index. Holds the guard until playback started or failed."""
        session = self.session
        state = session.state
        state.transitioning = True
        self.status = 'transitioning'
        item = session.library[index]
        committed = False
        try:
            await self.surface.play(item)
            if session.closed:
                logger.debug(f'Session closed while starting {item.name}, discarding')
                return False

            state.current_index = index
            state.is_playing = True
            self.status = 'idle'
            self.last_error = None
            committed = True
            logger.info(f'Clip {index + 1}/{self.total}: {item.name}')

            self.preloader.prime_next(index, self.total)
            return True
        except PlaybackStartFailure as e:
            logger.error(f'Error playing {item.name}: {e}')
            self.last_error = e
            self.status = 'error'
            return False
        finally:
            if not committed:
                self.history.rollback(checkpoint)
                if self.status == 'transitioning':
                    self.status = 'idle'
            state.transitioning = False
            self.guard.exit()

    # ============================================
    # ENTRY POINTS FOR EVENT HANDLERS
    # ============================================

    def request_advance(self) -> Optional[asyncio.Task]:
        """Schedule advance(). Returns None if a transition is already running."""
        return self._schedule(self.advance)

    def request_retreat(self) -> Optional[asyncio.Task]:
        """Schedule retreat(). Returns None if a transition is already running."""
        return self._schedule(self.retreat)

    def request_start(self) -> Optional[asyncio.Task]:
        return self._schedule(self.start)

    def _schedule(self, command: Callable[[], Awaitable[bool]]) -> Optional[asyncio.Task]:
        if self.session.closed or self.guard.in_progress:
            logger.debug(f'Dropped {command.__name__}: transition in progress')
            return None
        self._task = run_async(command())
        return self._task

    def on_playback_ended(self):
        """A clip reached its end: same as swiping up."""
        if self.session.closed:
            return
        self.session.state.is_playing = False
        self.request_advance()

    # ============================================
    # PLAY / PAUSE / MUTE
    # ============================================

    def toggle_play(self):
        """Pause or resume the current clip."""
        state = self.session.state
        if state.is_playing:
            self.surface.pause()
            state.is_playing = False
            logger.debug('Paused')
        else:
            self.surface.resume()
            state.is_playing = self.surface.is_playing
            logger.debug(f'Resumed (playing={state.is_playing})')

    def toggle_mute(self):
        state = self.session.state
        state.is_muted = not state.is_muted
        self.surface.set_muted(state.is_muted)
        logger.debug(f'Muted: {state.is_muted}')

    # ============================================
    # LIFECYCLE
    # ============================================

    def close(self):
        """End the session. A transition still in flight is cancelled and never commits."""
        self.session.closed = True
        if self.surface.on_ended == self.on_playback_ended:
            self.surface.on_ended = None
        if self._task and not self._task.done():
            self._task.cancel()
        self._task = None
        logger.info('Playback session closed')
