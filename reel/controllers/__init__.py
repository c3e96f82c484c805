"""
Reel Controllers - Playback orchestration.
"""
from .playback import PlaybackController

__all__ = ['PlaybackController']
