"""
Reel Data Models - Core data structures.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple

from .config import MAX_CLIP_SECONDS
from .errors import EmptyLibrary
from .managers.history import HistoryTrack


@dataclass(frozen=True)
class Item:
    """One playable clip. `id` is its position in the Library."""
    id: int
    source: Path
    duration_seconds: float
    name: str = ''

    def __post_init__(self):
        if not 0 <= self.duration_seconds <= MAX_CLIP_SECONDS:
            raise ValueError(f'Clip duration out of range: {self.duration_seconds}s')
        if not self.name:
            object.__setattr__(self, 'name', Path(self.source).name)


class Library:
    """Immutable ordered set of clips loaded for one session."""

    def __init__(self, items: Sequence[Item]):
        if not items:
            raise EmptyLibrary('Library needs at least one clip')
        self._items: Tuple[Item, ...] = tuple(items)

    @classmethod
    def from_clips(cls, clips: Sequence[Tuple[Path, float]]) -> 'Library':
        """Build a library from (path, duration) pairs, numbering them in order."""
        return cls([
            Item(id=i, source=Path(path), duration_seconds=duration)
            for i, (path, duration) in enumerate(clips)
        ])

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Item:
        return self._items[index]

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    @property
    def items(self) -> Tuple[Item, ...]:
        return self._items


@dataclass
class PlaybackState:
    """What the player is doing right now."""
    current_index: int = 0
    is_playing: bool = False
    is_muted: bool = True  # Start muted so autoplay is never loud
    transitioning: bool = False


@dataclass(frozen=True)
class LoadProgress:
    """Progress of the folder scan."""
    processed: int
    total: int

    @property
    def percent(self) -> int:
        """Rounded 0-100 progress."""
        if self.total <= 0:
            return 0
        return round(self.processed / self.total * 100)

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 0.0
        return min(1.0, self.processed / self.total)


@dataclass
class Session:
    """
    Everything that belongs to one loaded folder.

    Created when a library loads successfully and closed on reload,
    so a stale transition can tell it no longer owns the screen.
    """
    library: Library
    history: Optional[HistoryTrack] = None
    state: PlaybackState = field(default_factory=PlaybackState)
    closed: bool = False

    def __post_init__(self):
        if self.history is None:
            self.history = HistoryTrack(seed=self.state.current_index)

    @property
    def current_item(self) -> Optional[Item]:
        if self.closed:
            return None
        return self.library[self.state.current_index]
