"""
Library Loader - Scans a folder for short video clips.
"""
import asyncio
import logging
import random
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import av

from ..config import VIDEO_EXTENSIONS, MAX_CLIP_SECONDS
from ..errors import LoadFailure, EmptyLibrary, NoEligibleItems
from ..models import Item, Library, LoadProgress

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[LoadProgress], None]


def probe_duration(path: Path) -> float:
    """Clip length in seconds. Raises av.error.FFmpegError/OSError if unreadable."""
    with av.open(str(path)) as container:
        stream = next((s for s in container.streams if s.type == 'video'), None)
        if stream is None:
            raise ValueError(f'No video stream in {path.name}')
        if stream.duration and stream.time_base:
            return float(stream.duration * stream.time_base)
        if container.duration:
            return container.duration / av.time_base
    raise ValueError(f'Unknown duration for {path.name}')


def is_video_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower().lstrip('.') in VIDEO_EXTENSIONS


class LibraryLoader:
    """Builds a shuffled Library of clips no longer than MAX_CLIP_SECONDS."""

    def __init__(self, mock_mode: bool = False, probe: Callable[[Path], float] = probe_duration,
                 rng: Optional[random.Random] = None):
        self.mock_mode = mock_mode
        self.probe = probe
        self.rng = rng or random.Random()

    async def load(self, folder: Path, on_progress: Optional[ProgressCallback] = None) -> Library:
        """
        Scan folder (not recursive) and return the eligible clips, shuffled.

        Raises:
            LoadFailure: folder missing or unreadable
            EmptyLibrary: no video files at all
            NoEligibleItems: videos found, none short enough
        """
        if self.mock_mode:
            return self._load_mock_data()

        folder = Path(folder)
        files = await asyncio.to_thread(self._list_videos, folder)
        total = len(files)
        if total == 0:
            raise EmptyLibrary(
                'No video files found in the selected folder. Please select a folder '
                'containing video files (.mp4, .webm, .mov, etc.).'
            )

        logger.info(f'Analyzing {total} videos in {folder}')
        clips: List[Tuple[Path, float]] = []
        for processed, path in enumerate(files, start=1):
            try:
                duration = await asyncio.to_thread(self.probe, path)
                if duration <= MAX_CLIP_SECONDS:
                    clips.append((path, max(0.0, duration)))
                else:
                    logger.debug(f'Skipping {path.name}: {duration:.1f}s')
            except (av.error.FFmpegError, OSError, ValueError) as e:
                logger.warning(f'Failed to process {path.name}: {e}')

            if on_progress:
                on_progress(LoadProgress(processed, total))

        if not clips:
            raise NoEligibleItems(
                f'Found {total} videos, but none are {MAX_CLIP_SECONDS} seconds or less. '
                'Please add shorter videos to your folder.',
                found=total,
            )

        self.rng.shuffle(clips)
        library = Library.from_clips(clips)
        logger.info(f'Loaded {len(library)} of {total} videos')
        return library

    def _list_videos(self, folder: Path) -> List[Path]:
        """Video files directly inside folder, sorted by name."""
        try:
            if not folder.is_dir():
                raise LoadFailure(f'Not a folder: {folder}')
            return sorted((p for p in folder.iterdir() if is_video_file(p)), key=lambda p: p.name.lower())
        except PermissionError as e:
            raise LoadFailure(f'Permission denied: {folder}') from e
        except OSError as e:
            raise LoadFailure(f'Cannot read {folder}: {e}') from e

    def _load_mock_data(self) -> Library:
        """Synthetic clips for UI testing."""
        names = ['sunset.mp4', 'cat_jump.mp4', 'skate_trick.mov', 'rain_window.webm',
                 'latte_art.mp4', 'street_dance.mkv', 'waves.mp4']
        return Library([
            Item(id=i, source=Path('/mock') / name, duration_seconds=8.0 + 3 * i, name=name)
            for i, name in enumerate(names)
        ])
