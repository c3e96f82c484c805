"""
Reel API modules - Media loading and playback backends.
"""
from .library import LibraryLoader
from .surface import PlaybackSurface, NullSurface

__all__ = ['LibraryLoader', 'PlaybackSurface', 'NullSurface']
