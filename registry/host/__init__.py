"""Host interface for the land registry.

Provides abstractions for host platform operations (filesystem, environment, time).
"""

from .environment import get_db_path, get_env, resolve_context
from .filesystem import ensure_dir
from .time import Clock, SystemClock

__all__ = [
    "Clock",
    "SystemClock",
    "ensure_dir",
    "get_db_path",
    "get_env",
    "resolve_context",
]
