#!/usr/bin/env python3
"""
Reel - Random short-video feed for a local folder

Usage:
    reel                     # Choose a folder from the welcome screen
    reel ~/Videos/shorts     # Open a folder directly
    reel --fullscreen        # Fullscreen (kiosk)
    reel --mock              # Mock mode (UI testing, no media)
"""
import os
import sys
import asyncio
import logging
import platform
from logging.handlers import RotatingFileHandler

from .config import (
    SCREEN_WIDTH, SCREEN_HEIGHT, MOCK_MODE, FULLSCREEN,
    LOG_DIR, LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT,
    folder_argument,
)


def setup_logging():
    """Configure logging with console and rotating file handler."""
    level_name = os.environ.get('REEL_LOG_LEVEL', 'INFO').upper()
    level = getattr(logging, level_name, logging.INFO)

    console_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )
    file_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(console_formatter)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(min(level, logging.DEBUG))
    root.addHandler(console)

    # File handler with rotation (skipped when LOG_DIR is not writable)
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(logging.DEBUG)
        root.addHandler(file_handler)
        root.info(f'Logging to: {LOG_FILE}')
    except (OSError, PermissionError) as e:
        root.warning(f'Could not create log file: {e}')

    # Quiet down noisy libraries
    logging.getLogger('libav').setLevel(logging.ERROR)
    logging.getLogger('asyncio').setLevel(logging.WARNING)


def log_system_info(logger: logging.Logger):
    """Log system information at startup."""
    logger.info('=' * 50)
    logger.info('REEL STARTUP')
    logger.info('=' * 50)
    logger.info(f'Python: {sys.version.split()[0]}')
    logger.info(f'Platform: {platform.system()} {platform.release()}')

    try:
        import pygame
        import av
        logger.info(f'pygame: {pygame.version.ver}, SDL: {".".join(map(str, pygame.get_sdl_version()))}')
        logger.info(f'PyAV: {av.__version__}')
    except ImportError as e:
        logger.warning(f'Media library missing: {e}')

    logger.info('=' * 50)


def main():
    """Entry point for Reel application."""
    setup_logging()

    logger = logging.getLogger(__name__)
    log_system_info(logger)

    folder = folder_argument()
    if MOCK_MODE:
        logger.info('Mode: MOCK (UI testing)')
    elif folder:
        logger.info(f'Folder: {folder}')
    logger.info(f'Screen: {SCREEN_WIDTH}x{SCREEN_HEIGHT}')
    logger.info(f'Fullscreen: {FULLSCREEN}')

    print()
    print('Controls:')
    print('   Swipe / scroll / ↑ ↓   Previous / next video')
    print('   Space or K             Play/Pause')
    print('   M                      Mute')
    print('   O                      Open another folder')
    print('   Esc                    Quit')
    print()

    from .app import Reel

    app = Reel(fullscreen=FULLSCREEN, mock_mode=MOCK_MODE, folder=folder)
    asyncio.run(app.run())


if __name__ == '__main__':
    main()
