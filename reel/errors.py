"""
Reel Errors - Load-time and playback failure conditions.
"""


class ReelError(Exception):
    """Base class for all Reel errors."""

    title = 'Something Went Wrong'


class LoadFailure(ReelError):
    """Folder could not be opened or listed. Retrying the load may help."""

    title = 'Failed to Load Videos'


class EmptyLibrary(ReelError):
    """The chosen folder holds no recognized video files."""

    title = 'No Videos Found'


class NoEligibleItems(ReelError):
    """Video files exist, but none is short enough to play."""

    title = 'No Short Videos Found'

    def __init__(self, message: str, found: int = 0):
        super().__init__(message)
        self.found = found


class PlaybackStartFailure(ReelError):
    """A clip could not begin playing."""

    title = 'Playback Failed'
