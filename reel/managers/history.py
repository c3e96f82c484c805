"""
History Track - Bounded log of watched clips for going back.
"""
import logging
from typing import List, Optional, Tuple

from ..config import HISTORY_CAPACITY

logger = logging.getLogger(__name__)

Checkpoint = Tuple[Tuple[int, ...], int]


class HistoryTrack:
    """
    Visited library indices plus a cursor at the clip on screen.

    Going back moves the cursor; going forward replays the same entries
    until the newest one is reached again. Only then do new entries get
    recorded, evicting the oldest once capacity is exceeded.
    """

    def __init__(self, seed: int = 0, capacity: int = HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError('History capacity must be at least 1')
        self.capacity = capacity
        self._entries: List[int] = [seed]
        self._cursor = 0

    @property
    def entries(self) -> List[int]:
        return list(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> int:
        """Library index of the clip on screen."""
        return self._entries[self._cursor]

    @property
    def is_replaying(self) -> bool:
        """True when the cursor is behind the newest entry."""
        return self._cursor < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def record_forward(self, index: int):
        """Append a freshly drawn index. Only valid at the newest entry."""
        if self.is_replaying:
            raise ValueError('Cannot record while replaying history')

        self._entries.append(index)
        self._cursor += 1

        if len(self._entries) > self.capacity:
            evicted = self._entries.pop(0)
            self._cursor -= 1
            logger.debug(f'History full, evicted index {evicted}')

    def retreat(self) -> Optional[int]:
        """Step back one entry. Returns None if already at the oldest."""
        if self._cursor == 0:
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def advance_replay_or_none(self) -> Optional[int]:
        """Step forward through existing entries. None at the newest entry."""
        if not self.is_replaying:
            return None
        self._cursor += 1
        return self._entries[self._cursor]

    def checkpoint(self) -> Checkpoint:
        """Snapshot for undoing a move whose playback failed."""
        return tuple(self._entries), self._cursor

    def rollback(self, checkpoint: Checkpoint):
        """Restore a snapshot taken with checkpoint()."""
        entries, cursor = checkpoint
        self._entries = list(entries)
        self._cursor = cursor
