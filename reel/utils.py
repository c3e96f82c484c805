"""
Reel Utilities - Shared helper functions.
"""
import asyncio
import logging
from typing import Coroutine

logger = logging.getLogger(__name__)


def run_async(coro: Coroutine) -> asyncio.Task:
    """Fire-and-forget task on the running loop.

    Logs the exception if the task fails instead of leaving it unretrieved.
    """
    name = getattr(coro, '__qualname__', repr(coro))

    def done(task: asyncio.Task):
        if task.cancelled():
            logger.debug(f'Task {name} cancelled')
            return
        exc = task.exception()
        if exc is not None:
            logger.warning(f'Async task {name} failed: {exc}', exc_info=exc)

    task = asyncio.get_running_loop().create_task(coro)
    task.add_done_callback(done)
    return task


def format_time(seconds: float) -> str:
    """Format seconds as m:ss."""
    seconds = max(0, int(seconds))
    return f'{seconds // 60}:{seconds % 60:02d}'
