"""
Input Debouncer - Touch, wheel and keyboard to feed commands.

Every channel ends in the same four callbacks. Navigation still goes
through the controller's transition guard, so overlap protection does
not depend on which channel fired.
"""
import time
import logging
from typing import Callable, Dict, Literal, Optional, Tuple

from ..config import WHEEL_DEBOUNCE
from .touch import TouchHandler

logger = logging.getLogger(__name__)

Command = Literal['advance', 'retreat', 'toggle_play', 'toggle_mute']

# pygame.key.name() values
KEY_COMMANDS: Dict[str, Command] = {
    'space': 'toggle_play',
    'k': 'toggle_play',
    'm': 'toggle_mute',
    'up': 'retreat',
    'down': 'advance',
}


class RateLimiter:
    """Admits at most one event per interval. Rejected events do not extend the window."""

    def __init__(self, interval: float):
        self.interval = interval
        self._last: Optional[float] = None

    def try_admit(self, now: float) -> bool:
        if self._last is not None and now - self._last < self.interval:
            return False
        self._last = now
        return True

    def reset(self):
        self._last = None


class InputDebouncer:
    """Normalizes raw input into feed commands."""

    def __init__(self,
                 on_advance: Callable[[], None],
                 on_retreat: Callable[[], None],
                 on_toggle_play: Callable[[], None],
                 on_toggle_mute: Callable[[], None],
                 clock: Callable[[], float] = time.monotonic,
                 wheel_interval: float = WHEEL_DEBOUNCE):
        self._handlers: Dict[Command, Callable[[], None]] = {
            'advance': on_advance,
            'retreat': on_retreat,
            'toggle_play': on_toggle_play,
            'toggle_mute': on_toggle_mute,
        }
        self._clock = clock
        self.touch = TouchHandler()
        # One gate for both scroll directions
        self.wheel_gate = RateLimiter(wheel_interval)

    def _emit(self, command: Command) -> Command:
        logger.debug(f'Command: {command}')
        self._handlers[command]()
        return command

    # Touch ------------------------------------------------------------

    def touch_down(self, pos: Tuple[int, int]):
        self.touch.on_down(pos)

    def touch_move(self, pos: Tuple[int, int]):
        self.touch.on_move(pos)

    def touch_up(self, pos: Optional[Tuple[int, int]] = None) -> Optional[Command]:
        """Finish a gesture. A swipe navigates; a tap toggles play/pause."""
        gesture = self.touch.on_up(pos)
        if gesture is None:
            return None
        if gesture == 'tap':
            return self._emit('toggle_play')
        return self._emit(gesture)

    # Wheel ------------------------------------------------------------

    def wheel(self, delta_y: float, now: Optional[float] = None) -> Optional[Command]:
        """
        Scroll tick. Positive delta (scrolling down) advances.

        The gate is checked before the direction, so even a zero delta
        uses up the window.
        """
        now = self._clock() if now is None else now
        if not self.wheel_gate.try_admit(now):
            logger.debug(f'Wheel event dropped (delta={delta_y})')
            return None
        if delta_y > 0:
            return self._emit('advance')
        if delta_y < 0:
            return self._emit('retreat')
        return None

    # Keyboard ---------------------------------------------------------

    def key(self, name: str, player_active: bool = True) -> Optional[Command]:
        """Key press by pygame key name. Ignored unless the player is on screen."""
        if not player_active:
            return None
        command = KEY_COMMANDS.get(name)
        if command is None:
            return None
        return self._emit(command)

    def reset(self):
        """Forget partial gestures and the wheel window (new session)."""
        self.touch = TouchHandler()
        self.wheel_gate.reset()
