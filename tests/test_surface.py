"""
Tests for playback surfaces - play clock, end of clip, preload cache.
"""
import asyncio
import os
import time
import pytest
from fractions import Fraction
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import av
import numpy as np

from reel.api import video
from reel.api.library import probe_duration
from reel.api.surface import NullSurface
from reel.api.video import VideoSurface
from reel.errors import PlaybackStartFailure
from reel.models import Item
from conftest import FakeClock


def write_clip(path: Path, frames: int = 10, fps: int = 10, first_pts: int = 0) -> Path:
    """Encode a tiny silent clip. first_pts shifts every timestamp."""
    with av.open(str(path), mode='w') as container:
        stream = container.add_stream('mpeg4', rate=fps)
        stream.width = 64
        stream.height = 48
        stream.pix_fmt = 'yuv420p'
        for i in range(frames):
            pixels = np.full((48, 64, 3), (i * 25) % 256, dtype=np.uint8)
            frame = av.VideoFrame.from_ndarray(pixels, format='rgb24')
            frame.pts = first_pts + i
            frame.time_base = Fraction(1, fps)
            for packet in stream.encode(frame):
                container.mux(packet)
        for packet in stream.encode():
            container.mux(packet)
    return path


def clip_item(path: Path, id: int = 0) -> Item:
    return Item(id=id, source=path, duration_seconds=probe_duration(path))


def run_until_ended(surface, clock, ended, steps=50, step=0.25):
    for _ in range(steps):
        clock.advance(step)
        surface.update()
        if ended:
            break


# ============================================
# PLAY CLOCK (shared by every surface)
# ============================================

class TestPlayClock:
    """Tests for elapsed time, pause and the end callback."""

    @pytest.fixture
    def item(self):
        return Item(id=0, source=Path('/clips/a.mp4'), duration_seconds=10.0)

    def test_elapsed_survives_pause(self, surface, clock, item):
        """Time paused does not count as played."""
        asyncio.run(surface.play(item))
        clock.advance(3)
        surface.pause()
        clock.advance(100)
        assert surface.current_time == 3

        surface.resume()
        clock.advance(2)
        assert surface.current_time == 5
        assert surface.is_playing

    def test_current_time_capped_at_duration(self, surface, clock, item):
        asyncio.run(surface.play(item))
        clock.advance(25)
        assert surface.current_time == 10

    def test_on_ended_fires_once(self, surface, clock, item):
        """Further updates after the end do not repeat the callback."""
        ended = []
        surface.on_ended = lambda: ended.append(True)
        asyncio.run(surface.play(item))

        clock.advance(9)
        surface.update()
        assert ended == []

        for _ in range(3):
            clock.advance(5)
            surface.update()
        assert ended == [True]
        assert not surface.is_playing

    def test_resume_after_end_is_noop(self, surface, clock, item):
        asyncio.run(surface.play(item))
        clock.advance(11)
        surface.update()

        surface.resume()
        assert not surface.is_playing
        assert surface.current_time == 10

    def test_play_restarts_clock(self, surface, clock, item):
        """A new clip starts from zero even after the last one ended."""
        asyncio.run(surface.play(item))
        clock.advance(11)
        surface.update()

        asyncio.run(surface.play(item))
        assert surface.current_time == 0
        assert surface.is_playing

    def test_failing_source(self, clock, item):
        surface = NullSurface(clock=clock, fail_sources={str(item.source)})
        with pytest.raises(PlaybackStartFailure):
            asyncio.run(surface.play(item))
        assert surface.played == []
        assert not surface.is_playing


# ============================================
# VIDEO SURFACE (real clips encoded with PyAV)
# ============================================

class TestVideoSurface:
    """Tests for decoding, pacing and end detection on real files."""

    def test_plays_to_end(self, temp_dir, clock):
        """A clip starting at zero advances frames and ends."""
        item = clip_item(write_clip(temp_dir / 'plain.mp4'))
        surface = VideoSurface(clock=clock)
        ended = []
        surface.on_ended = lambda: ended.append(True)

        asyncio.run(surface.play(item))
        first = surface.frame()
        assert first is not None
        assert first.get_size() == (64, 48)

        clock.advance(0.55)
        surface.update()
        assert surface.frame() is not first

        run_until_ended(surface, clock, ended)
        assert ended == [True]
        surface.close()

    def test_offset_timestamps_still_end(self, temp_dir, clock):
        """Frames stamped from 2.0 s are paced from the first frame, and the clip ends."""
        item = clip_item(write_clip(temp_dir / 'offset.mp4', first_pts=20))
        surface = VideoSurface(clock=clock)
        ended = []
        surface.on_ended = lambda: ended.append(True)

        asyncio.run(surface.play(item))
        first = surface.frame()

        clock.advance(0.55)
        surface.update()
        assert surface.frame() is not first

        run_until_ended(surface, clock, ended)
        assert ended == [True]

        for _ in range(3):
            clock.advance(1)
            surface.update()
        assert ended == [True]
        surface.close()

    def test_ends_on_clock_with_frames_left(self, temp_dir, clock):
        """End is decided by the probed duration, not by running out of frames."""
        path = write_clip(temp_dir / 'long.mp4', frames=30)
        item = Item(id=0, source=path, duration_seconds=1.0)
        surface = VideoSurface(clock=clock)
        ended = []
        surface.on_ended = lambda: ended.append(True)

        asyncio.run(surface.play(item))
        clock.advance(1.0)
        surface.update()

        assert ended == [True]
        surface.close()

    def test_unreadable_file(self, temp_dir, clock):
        path = temp_dir / 'broken.mp4'
        path.write_bytes(b'definitely not a video')
        surface = VideoSurface(clock=clock)

        with pytest.raises(PlaybackStartFailure):
            asyncio.run(surface.play(Item(id=0, source=path, duration_seconds=1.0)))
        assert surface.frame() is None
        assert not surface.is_playing


class TestPreloadCache:
    """Tests for the one-slot preload cache."""

    @pytest.fixture
    def opened(self, monkeypatch):
        """Record every clip opened, and which of them got closed."""
        calls = {'opened': [], 'closed': []}
        real_open = video._open_clip

        def open_clip(item):
            clip = real_open(item)
            calls['opened'].append(item.id)
            real_close = clip.close

            def close():
                calls['closed'].append(item.id)
                real_close()
            clip.close = close
            return clip

        monkeypatch.setattr(video, '_open_clip', open_clip)
        return calls

    def test_preloaded_clip_is_used(self, temp_dir, clock, opened):
        item = clip_item(write_clip(temp_dir / 'a.mp4'))
        surface = VideoSurface(clock=clock)

        async def scenario():
            surface.preload(item)
            await surface.play(item)

        asyncio.run(scenario())
        assert opened['opened'] == [0]
        assert surface.is_playing
        surface.close()

    def test_preload_same_item_twice_opens_once(self, temp_dir, clock, opened):
        item = clip_item(write_clip(temp_dir / 'a.mp4'))
        surface = VideoSurface(clock=clock)

        async def scenario():
            surface.preload(item)
            surface.preload(item)
            await surface.play(item)

        asyncio.run(scenario())
        assert opened['opened'] == [0]
        surface.close()

    def test_other_clip_discards_preload(self, temp_dir, clock, opened):
        """Playing a different clip closes the unused preload."""
        a = clip_item(write_clip(temp_dir / 'a.mp4'), id=0)
        b = clip_item(write_clip(temp_dir / 'b.mp4'), id=1)
        surface = VideoSurface(clock=clock)

        async def scenario():
            surface.preload(a)
            _, discarded = surface._preload
            await surface.play(b)
            await asyncio.gather(discarded, return_exceptions=True)
            await asyncio.sleep(0)

        asyncio.run(scenario())
        assert sorted(opened['opened']) == [0, 1]
        assert opened['closed'] == [0]
        assert surface.item is b
        surface.close()


class TestCancelledPlay:
    """A play() cancelled while the clip opens must not leak it."""

    def test_clip_closed_after_cancel(self, monkeypatch, clock):
        closed = []

        class SlowClip:
            def close(self):
                closed.append(True)

        def open_clip(item):
            time.sleep(0.05)
            return SlowClip()

        monkeypatch.setattr(video, '_open_clip', open_clip)
        surface = VideoSurface(clock=clock)
        item = Item(id=0, source=Path('/clips/a.mp4'), duration_seconds=5.0)

        async def scenario():
            task = asyncio.ensure_future(surface.play(item))
            await asyncio.sleep(0.01)
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            for _ in range(100):
                if closed:
                    break
                await asyncio.sleep(0.01)

        asyncio.run(scenario())
        assert closed == [True]
        assert surface.item is None
        assert not surface.is_playing
