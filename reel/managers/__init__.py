"""
Reel Managers - Playback sequencing building blocks.
"""
from .selector import next_random_index
from .history import HistoryTrack
from .transition import TransitionGuard
from .preloader import Preloader

__all__ = ['next_random_index', 'HistoryTrack', 'TransitionGuard', 'Preloader']
