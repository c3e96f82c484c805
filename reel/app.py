"""
Reel Application - Main application class.
"""
import asyncio
import logging
import signal
import time
from pathlib import Path
from typing import Optional

import pygame

from .config import (
    SCREEN_WIDTH, SCREEN_HEIGHT, FPS_PLAYING, FPS_IDLE,
    SWIPE_HINT_DELAY, SWIPE_HINT_DURATION,
)
from .api import LibraryLoader, NullSurface
from .controllers import PlaybackController
from .errors import LoadFailure, ReelError
from .handlers import InputDebouncer
from .models import LoadProgress, Session
from .ui import Renderer, RenderContext
from .utils import run_async

logger = logging.getLogger(__name__)


def choose_folder() -> Optional[Path]:
    """Native folder dialog. Returns None if the user cancels."""
    import tkinter
    from tkinter import filedialog

    root = tkinter.Tk()
    root.withdraw()
    try:
        start = Path.home() / 'Videos'
        chosen = filedialog.askdirectory(
            title='Choose a folder with videos',
            initialdir=str(start if start.is_dir() else Path.home()),
            mustexist=True,
        )
    finally:
        root.destroy()
    return Path(chosen) if chosen else None


class Reel:
    """Main Reel application."""

    def __init__(self, fullscreen: bool = False, mock_mode: bool = False,
                 folder: Optional[Path] = None):
        pygame.init()
        pygame.display.set_caption('Reel')

        self._init_display(fullscreen)
        self._init_components(mock_mode, folder)

    def _init_display(self, fullscreen: bool):
        """Initialize the display."""
        flags = pygame.FULLSCREEN if fullscreen else 0
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT), flags)
        self.clock = pygame.time.Clock()
        pygame.mouse.set_visible(True)

        info = pygame.display.Info()
        logger.info(f'Display: {pygame.display.get_driver()} {info.current_w}x{info.current_h}')

    def _init_components(self, mock_mode: bool, folder: Optional[Path]):
        """Initialize all application components."""
        self.mock_mode = mock_mode
        self.initial_folder = folder

        self.loader = LibraryLoader(mock_mode=mock_mode)
        if mock_mode:
            self.surface = NullSurface()
        else:
            from .api.video import VideoSurface
            self.surface = VideoSurface()

        self.renderer = Renderer(self.screen)
        self.input = InputDebouncer(
            on_advance=self._advance,
            on_retreat=self._retreat,
            on_toggle_play=self._toggle_play,
            on_toggle_mute=self._toggle_mute,
        )
        self.controller: Optional[PlaybackController] = None

        # Screen state
        self.screen_name = 'welcome'
        self.loading_status = ''
        self.progress: Optional[LoadProgress] = None
        self.error_title = ''
        self.error_message = ''
        self.hint_from = 0.0
        self.hint_until = 0.0
        self._loading = False
        self.running = True

        signal.signal(signal.SIGTERM, self._handle_signal)
        signal.signal(signal.SIGINT, self._handle_signal)

    def _handle_signal(self, signum, frame):
        """Handle SIGTERM/SIGINT for graceful shutdown."""
        sig_name = 'SIGTERM' if signum == signal.SIGTERM else 'SIGINT'
        logger.info(f'Received {sig_name}, shutting down...')
        self.running = False

    # ============================================
    # MAIN LOOP
    # ============================================

    async def run(self):
        """Run until quit."""
        logger.info('Starting Reel...')
        if self.mock_mode:
            logger.info('Running in MOCK MODE')
            self._start_load(Path('/mock'))
        elif self.initial_folder:
            self._start_load(self.initial_folder)

        while self.running:
            self._handle_events()
            self.surface.update()
            self.renderer.draw(self._render_context())
            pygame.display.flip()

            target_fps = FPS_PLAYING if self.screen_name in ('player', 'loading') else FPS_IDLE
            self.clock.tick()
            await asyncio.sleep(1.0 / target_fps)

        logger.info('Shutting down...')
        if self.controller:
            self.controller.close()
        self.surface.close()
        pygame.quit()
        logger.info('Reel stopped')

    def _render_context(self) -> RenderContext:
        ctx = RenderContext(
            screen=self.screen_name,
            loading_status=self.loading_status,
            progress=self.progress,
            error_title=self.error_title,
            error_message=self.error_message,
        )
        if self.screen_name == 'player' and self.controller:
            session = self.controller.session
            item = session.current_item
            now = time.monotonic()
            ctx.frame = self.surface.frame()
            ctx.item_name = item.name if item else ''
            ctx.index = session.state.current_index
            ctx.total = len(session.library)
            ctx.current_time = self.surface.current_time
            ctx.duration = self.surface.duration
            ctx.is_playing = session.state.is_playing
            ctx.is_muted = session.state.is_muted
            ctx.transitioning = session.state.transitioning
            ctx.drag_offset = self.input.touch.drag_offset if self.input.touch.is_swiping else 0
            ctx.show_hint = self.hint_from <= now < self.hint_until
        return ctx

    # ============================================
    # EVENTS
    # ============================================

    def _handle_events(self):
        """Handle pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                self._handle_key(event.key)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_touch_down(event.pos)

            elif event.type == pygame.MOUSEMOTION:
                if self.input.touch.dragging:
                    self.input.touch_move(event.pos)

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                if self.screen_name == 'player':
                    self.input.touch_up(event.pos)

            elif event.type == pygame.MOUSEWHEEL:
                if self.screen_name == 'player':
                    # pygame: positive y scrolls up; feed: positive delta means next
                    self.input.wheel(-event.y)

    def _handle_key(self, key):
        """Handle keyboard input."""
        if key == pygame.K_ESCAPE:
            self.running = False
        elif self.screen_name == 'welcome':
            if key in (pygame.K_o, pygame.K_RETURN, pygame.K_SPACE):
                self._pick_and_load()
        elif self.screen_name == 'error':
            self._dismiss_error()
        elif self.screen_name == 'player':
            if key in (pygame.K_o, pygame.K_r):
                self._pick_and_load()
            else:
                self.input.key(pygame.key.name(key), player_active=True)

    def _handle_touch_down(self, pos):
        if self.screen_name == 'welcome':
            self._pick_and_load()
        elif self.screen_name == 'error':
            self._dismiss_error()
        elif self.screen_name == 'player':
            button = self.renderer.button_at(pos)
            if button == 'play':
                self._toggle_play()
            elif button == 'mute':
                self._toggle_mute()
            elif button == 'reload':
                self._pick_and_load()
            else:
                self.input.touch_down(pos)

    # ============================================
    # COMMANDS
    # ============================================

    def _advance(self):
        if self.controller:
            self.controller.request_advance()

    def _retreat(self):
        if self.controller:
            self.controller.request_retreat()

    def _toggle_play(self):
        if self.controller:
            self.controller.toggle_play()

    def _toggle_mute(self):
        if self.controller:
            self.controller.toggle_mute()

    def _dismiss_error(self):
        """Back to the player if a session survived, else to the start."""
        self.screen_name = 'player' if self.controller else 'welcome'

    # ============================================
    # LOADING
    # ============================================

    def _pick_and_load(self):
        if self._loading:
            return
        if self.mock_mode:
            self._start_load(Path('/mock'))
            return

        # The dialog is modal and blocks the event loop until it closes, so no
        # frames are drawn and preloads do not complete. Hold the clip still meanwhile.
        was_playing = self.surface.is_playing
        self.surface.pause()
        try:
            folder = choose_folder()
        except Exception as e:
            logger.error(f'Folder dialog failed: {e}', exc_info=True)
            self._show_error(LoadFailure(str(e)))
            return
        finally:
            if was_playing:
                self.surface.resume()

        if folder is None:
            logger.info('Folder selection cancelled')
            return
        self._start_load(folder)

    def _start_load(self, folder: Path):
        self._loading = True
        run_async(self._load(folder))

    async def _load(self, folder: Path):
        """Scan folder and start a new session. The old session keeps playing until then."""
        previous_screen = self.screen_name
        self.screen_name = 'loading'
        self.loading_status = 'Scanning videos...'
        self.progress = LoadProgress(0, 0)
        try:
            library = await self.loader.load(folder, self._on_progress)
        except ReelError as e:
            logger.warning(f'Load failed for {folder}: {e}')
            self._show_error(e)
            return
        except asyncio.CancelledError:
            self.screen_name = previous_screen
            raise
        except Exception as e:
            logger.error(f'Unexpected error loading {folder}: {e}', exc_info=True)
            self._show_error(LoadFailure(str(e)))
            return
        finally:
            self._loading = False

        if self.controller:
            self.controller.close()
        self.input.reset()

        self.controller = PlaybackController(Session(library), self.surface)
        self.screen_name = 'player'
        logger.info(f'Session started with {len(library)} clips')

        await self.controller.start()
        now = time.monotonic()
        self.hint_from = now + SWIPE_HINT_DELAY
        self.hint_until = self.hint_from + SWIPE_HINT_DURATION

    def _on_progress(self, progress: LoadProgress):
        self.progress = progress
        self.loading_status = f'Analyzed {progress.processed}/{progress.total} videos'

    def _show_error(self, error: ReelError):
        self.error_title = error.title
        if isinstance(error, LoadFailure):
            self.error_message = 'An error occurred while loading your videos. Please try again.'
        else:
            self.error_message = str(error)
        self.screen_name = 'error'
