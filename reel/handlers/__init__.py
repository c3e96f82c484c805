"""
Reel Handlers - Input handling.
"""
from .touch import TouchHandler
from .input import InputDebouncer, RateLimiter

__all__ = ['TouchHandler', 'InputDebouncer', 'RateLimiter']
