"""
Video Surface - Decodes clips with PyAV and hands frames to pygame.

Video frames are decoded lazily and paced by the play clock. The audio
track of a clip is decoded once up front (clips are short) into a
pygame mixer Sound so pause and mute are instant.
"""
import asyncio
import logging
import time
from typing import Callable, Optional, Tuple

import av
import numpy as np
import pygame

from ..config import AUDIO_SAMPLE_RATE
from ..errors import PlaybackStartFailure
from ..models import Item
from .surface import PlaybackSurface

logger = logging.getLogger(__name__)


class _Clip:
    """An opened clip: video decoder positioned after its first frame, plus audio samples."""

    def __init__(self, item: Item):
        self.item = item
        self.container = av.open(str(item.source))
        try:
            stream = next((s for s in self.container.streams if s.type == 'video'), None)
            if stream is None:
                raise PlaybackStartFailure(f'No video stream in {item.name}')
            stream.thread_type = 'AUTO'
            self.frames = self.container.decode(video=stream.index)
            self.next_frame = next(self.frames, None)
            if self.next_frame is None:
                raise PlaybackStartFailure(f'No frames in {item.name}')
            # Timestamps need not start at zero (MP4 edit lists, trimmed clips)
            first = self.next_frame.time
            self.origin = first if first is not None else _start_seconds(stream)
        except Exception:
            self.container.close()
            raise
        self.samples = _decode_audio(item)

    def frame_time(self, frame) -> float:
        """Seconds from the first frame of the clip."""
        if frame.time is None:
            return 0.0
        return frame.time - self.origin

    def advance(self):
        """Move to the next decoded frame (None at the end)."""
        self.next_frame = next(self.frames, None)

    def close(self):
        try:
            self.container.close()
        except av.error.FFmpegError as e:
            logger.debug(f'Closing {self.item.name}: {e}')


def _start_seconds(stream) -> float:
    if stream.start_time is not None and stream.time_base:
        return float(stream.start_time * stream.time_base)
    return 0.0


def _decode_audio(item: Item) -> Optional[np.ndarray]:
    """Whole audio track as interleaved int16 stereo samples, or None."""
    try:
        with av.open(str(item.source)) as container:
            stream = next((s for s in container.streams if s.type == 'audio'), None)
            if stream is None:
                return None
            resampler = av.AudioResampler(format='s16', layout='stereo', rate=AUDIO_SAMPLE_RATE)
            chunks = []
            for frame in container.decode(audio=stream.index):
                for out in resampler.resample(frame):
                    chunks.append(out.to_ndarray().reshape(-1, 2))
            for out in resampler.resample(None):
                chunks.append(out.to_ndarray().reshape(-1, 2))
            if not chunks:
                return None
            return np.ascontiguousarray(np.concatenate(chunks))
    except (av.error.FFmpegError, ValueError) as e:
        logger.warning(f'No audio for {item.name}: {e}')
        return None


def _open_clip(item: Item) -> _Clip:
    """Open a clip (blocking). Wraps decoder errors as PlaybackStartFailure."""
    try:
        return _Clip(item)
    except PlaybackStartFailure:
        raise
    except (av.error.FFmpegError, OSError) as e:
        raise PlaybackStartFailure(f'Cannot open {item.name}: {e}') from e


def _to_surface(frame) -> pygame.Surface:
    """Convert a PyAV video frame to a pygame Surface."""
    arr = np.ascontiguousarray(frame.to_ndarray(format='rgb24'))
    return pygame.image.frombuffer(arr.tobytes(), arr.shape[1::-1], 'RGB')


class VideoSurface(PlaybackSurface):
    """Plays clips from disk into pygame."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        super().__init__(clock)
        self._clip: Optional[_Clip] = None
        self._frame: Optional[pygame.Surface] = None
        self._channel: Optional[pygame.mixer.Channel] = None
        self._preload: Optional[Tuple[int, asyncio.Task]] = None
        self._audio_ok = self._init_mixer()

    def _init_mixer(self) -> bool:
        """Initialize the mixer for stereo int16 playback."""
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=AUDIO_SAMPLE_RATE, size=-16, channels=2)
            return True
        except pygame.error as e:
            logger.warning(f'Audio disabled: {e}')
            return False

    async def play(self, item: Item):
        clip = await self._take_preloaded(item)
        if clip is None:
            clip = await _await_clip(asyncio.ensure_future(asyncio.to_thread(_open_clip, item)))

        self._stop_media()
        self._clip = clip
        self._frame = _to_surface(clip.next_frame)
        clip.advance()
        self._start_audio(clip)
        self._start_clock(item)
        logger.info(f'Playing {item.name} ({item.duration_seconds:.1f}s)')

    def preload(self, item: Item):
        if self._preload and self._preload[0] == item.id:
            return
        self._discard_preload()
        task = asyncio.get_running_loop().create_task(asyncio.to_thread(_open_clip, item))
        self._preload = (item.id, task)

    async def _take_preloaded(self, item: Item) -> Optional[_Clip]:
        """Claim the preloaded clip if it is item, else drop it."""
        if not self._preload:
            return None
        if self._preload[0] != item.id:
            self._discard_preload()
            return None

        _, task = self._preload
        self._preload = None
        try:
            return await _await_clip(task)
        except PlaybackStartFailure as e:
            logger.debug(f'Preloaded clip unusable, reopening: {e}')
            return None

    def _discard_preload(self):
        if not self._preload:
            return
        _, task = self._preload
        self._preload = None
        task.add_done_callback(_close_unused)

    def update(self):
        clip = self._clip
        if not self._playing or clip is None:
            return

        now = self.current_time
        try:
            latest = None
            while clip.next_frame is not None and clip.frame_time(clip.next_frame) <= now:
                latest = clip.next_frame
                clip.advance()
            if latest is not None:
                self._frame = _to_surface(latest)
        except av.error.FFmpegError as e:
            logger.warning(f'Decode error in {clip.item.name}: {e}')
            clip.next_frame = None

        # The probed duration is the clock limit; trailing frames past it are dropped
        if now >= self.duration:
            self._fire_ended()

    def frame(self) -> Optional[pygame.Surface]:
        return self._frame

    def pause(self):
        super().pause()
        if self._channel:
            self._channel.pause()

    def resume(self):
        super().resume()
        if self._channel and self._playing:
            self._channel.unpause()

    def set_muted(self, muted: bool):
        super().set_muted(muted)
        if self._channel:
            self._channel.set_volume(0.0 if muted else 1.0)

    def close(self):
        self._discard_preload()
        self._stop_media()
        self._frame = None
        super().close()

    def _start_audio(self, clip: _Clip):
        if not self._audio_ok or clip.samples is None:
            return
        try:
            sound = pygame.sndarray.make_sound(clip.samples)
            self._channel = sound.play()
            if self._channel:
                self._channel.set_volume(0.0 if self.muted else 1.0)
        except (pygame.error, ValueError) as e:
            logger.warning(f'Could not start audio for {clip.item.name}: {e}')
            self._channel = None

    def _stop_media(self):
        if self._channel:
            self._channel.stop()
            self._channel = None
        if self._clip:
            self._clip.close()
            self._clip = None


async def _await_clip(future: asyncio.Future) -> _Clip:
    """Wait for a clip being opened in a worker thread.

    If the waiter is cancelled the open still finishes in its thread, so the
    clip is closed once it arrives instead of being left to the collector.
    """
    try:
        return await asyncio.shield(future)
    except asyncio.CancelledError:
        future.add_done_callback(_close_unused)
        raise


def _close_unused(task: asyncio.Task):
    """Done-callback for dropped preloads: close whatever was opened."""
    if task.cancelled():
        return
    if task.exception() is None:
        task.result().close()
