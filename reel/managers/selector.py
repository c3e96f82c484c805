"""
Selector - Picks the next random clip.
"""
import random
from typing import Optional


def next_random_index(current_index: int, library_length: int, rng=None) -> Optional[int]:
    """
    Draw a random index in [0, library_length) that is not current_index.

    Returns None when there is no other clip to go to.
    """
    if library_length <= 1:
        return None

    rng = rng or random
    index = rng.randrange(library_length)
    while index == current_index:
        index = rng.randrange(library_length)
    return index
