"""
Tests for LibraryLoader - folder scan, duration filter, error states.
"""
import asyncio
import random
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from reel.api.library import LibraryLoader, is_video_file
from reel.errors import EmptyLibrary, LoadFailure, NoEligibleItems


def fake_probe(durations):
    """Probe that looks durations up by file name; missing names fail."""
    def probe(path):
        if path.name not in durations:
            raise ValueError(f'cannot decode {path.name}')
        return durations[path.name]
    return probe


def touch_files(folder, *names):
    for name in names:
        (folder / name).write_bytes(b'\x00')


def load(loader, folder, progress=None):
    return asyncio.run(loader.load(folder, progress.append if progress is not None else None))


class TestScan:
    """Tests for picking up and filtering files."""

    def test_keeps_short_videos(self, temp_dir):
        """Only clips of 60 seconds or less enter the library."""
        touch_files(temp_dir, 'a.mp4', 'b.webm', 'long.mov')
        loader = LibraryLoader(probe=fake_probe({'a.mp4': 12.0, 'b.webm': 60.0, 'long.mov': 61.5}))

        library = load(loader, temp_dir)

        assert sorted(item.name for item in library) == ['a.mp4', 'b.webm']
        assert [item.id for item in library] == [0, 1]

    def test_ignores_other_files(self, temp_dir):
        """Non-video files and subfolders are skipped."""
        touch_files(temp_dir, 'clip.MKV', 'notes.txt', 'cover.jpg')
        (temp_dir / 'nested.mp4').mkdir()
        loader = LibraryLoader(probe=fake_probe({'clip.MKV': 5.0}))

        library = load(loader, temp_dir)

        assert [item.name for item in library] == ['clip.MKV']

    def test_extension_check_case_insensitive(self, temp_dir):
        touch_files(temp_dir, 'A.MP4', 'b.Ogg')
        assert is_video_file(temp_dir / 'A.MP4')
        assert is_video_file(temp_dir / 'b.Ogg')
        assert not is_video_file(temp_dir / 'missing.mp4')

    def test_probe_failure_skips_file(self, temp_dir):
        """Unreadable files are counted but not kept."""
        touch_files(temp_dir, 'good.mp4', 'broken.mp4')
        loader = LibraryLoader(probe=fake_probe({'good.mp4': 3.0}))
        progress = []

        library = load(loader, temp_dir, progress)

        assert [item.name for item in library] == ['good.mp4']
        assert progress[-1].processed == 2

    def test_progress_reported_per_file(self, temp_dir):
        touch_files(temp_dir, 'a.mp4', 'b.mp4', 'c.mp4', 'd.mp4')
        loader = LibraryLoader(probe=fake_probe({n: 1.0 for n in ('a.mp4', 'b.mp4', 'c.mp4', 'd.mp4')}))
        progress = []

        load(loader, temp_dir, progress)

        assert [(p.processed, p.total) for p in progress] == [(1, 4), (2, 4), (3, 4), (4, 4)]
        assert [p.percent for p in progress] == [25, 50, 75, 100]

    def test_shuffled_with_rng(self, temp_dir):
        """Order comes from the loader's random source."""
        names = [f'{i:02d}.mp4' for i in range(12)]
        touch_files(temp_dir, *names)
        probe = fake_probe({n: 1.0 for n in names})

        first = load(LibraryLoader(probe=probe, rng=random.Random(3)), temp_dir)
        second = load(LibraryLoader(probe=probe, rng=random.Random(3)), temp_dir)

        assert [i.name for i in first] == [i.name for i in second]
        assert sorted(i.name for i in first) == names


class TestErrors:
    """Tests for the distinct load failures."""

    def test_empty_folder(self, temp_dir):
        touch_files(temp_dir, 'readme.txt')
        with pytest.raises(EmptyLibrary):
            load(LibraryLoader(probe=fake_probe({})), temp_dir)

    def test_no_short_videos(self, temp_dir):
        """Videos exist but all are too long."""
        touch_files(temp_dir, 'movie.mp4', 'episode.mkv')
        loader = LibraryLoader(probe=fake_probe({'movie.mp4': 5400.0, 'episode.mkv': 1300.0}))

        with pytest.raises(NoEligibleItems) as info:
            load(loader, temp_dir)
        assert info.value.found == 2
        assert 'Found 2 videos' in str(info.value)

    def test_missing_folder(self, temp_dir):
        with pytest.raises(LoadFailure):
            load(LibraryLoader(probe=fake_probe({})), temp_dir / 'nope')

    def test_file_instead_of_folder(self, temp_dir):
        touch_files(temp_dir, 'a.mp4')
        with pytest.raises(LoadFailure):
            load(LibraryLoader(probe=fake_probe({})), temp_dir / 'a.mp4')

    def test_error_titles_distinct(self):
        assert EmptyLibrary.title != NoEligibleItems.title != LoadFailure.title


class TestMockMode:
    def test_mock_library(self, temp_dir):
        """Mock mode never touches the disk."""
        library = load(LibraryLoader(mock_mode=True), temp_dir / 'does-not-exist')
        assert len(library) > 1
        assert all(item.duration_seconds <= 60 for item in library)
