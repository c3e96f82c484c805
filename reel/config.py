"""
Reel Configuration - All constants and settings.
"""
import os
import sys
from pathlib import Path

# ============================================
# SCREEN & DISPLAY (Portrait, phone-like feed)
# ============================================

SCREEN_WIDTH = 540
SCREEN_HEIGHT = 960
FPS_PLAYING = 30
FPS_IDLE = 10

# ============================================
# PATHS
# ============================================

LOG_DIR = Path(os.environ.get('REEL_LOG_DIR', Path.home() / '.reel' / 'logs'))
LOG_FILE = LOG_DIR / 'reel.log'
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB per file
LOG_BACKUP_COUNT = 5

# ============================================
# COMMAND LINE FLAGS
# ============================================

MOCK_MODE = '--mock' in sys.argv or '-m' in sys.argv
FULLSCREEN = '--fullscreen' in sys.argv or '-f' in sys.argv


def folder_argument(argv=None):
    """First non-flag command line argument (folder to open), or None."""
    args = sys.argv[1:] if argv is None else argv
    for arg in args:
        if not arg.startswith('-'):
            return Path(arg).expanduser()
    return None

# ============================================
# COLORS
# ============================================

COLORS = {
    'bg_primary': (0, 0, 0),
    'bg_secondary': (24, 24, 27),
    'bg_elevated': (39, 39, 42),
    'accent': (254, 44, 85),
    'text_primary': (255, 255, 255),
    'text_secondary': (170, 170, 178),
    'text_muted': (113, 113, 122),
    'overlay': (0, 0, 0, 110),
    'error': (232, 80, 80),
}

# ============================================
# LAYOUT & SIZES
# ============================================

BTN_SIZE = 56
BTN_MARGIN = 20
PROGRESS_BAR_HEIGHT = 4
LOADING_BAR_WIDTH = 360
LOADING_BAR_HEIGHT = 8

# ============================================
# LIBRARY
# ============================================

VIDEO_EXTENSIONS = ('mp4', 'webm', 'mov', 'avi', 'mkv', 'ogg')
MAX_CLIP_SECONDS = 60  # Only clips this long or shorter are kept

# ============================================
# PLAYBACK ENGINE
# ============================================

HISTORY_CAPACITY = 10  # Visited clips kept for going back
AUDIO_SAMPLE_RATE = 44100

# ============================================
# TOUCH & INPUT
# ============================================

SWIPE_THRESHOLD = 50      # Minimum vertical distance for a swipe
WHEEL_DEBOUNCE = 0.5      # Seconds between accepted wheel events

# ============================================
# TIMING
# ============================================

SWIPE_HINT_DELAY = 1.0     # Show swipe hint this long after first clip
SWIPE_HINT_DURATION = 3.0  # ...and keep it for this long
