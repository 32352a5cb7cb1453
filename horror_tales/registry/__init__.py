"""
Registry module - SQLite-based persistent storage for stories.
"""

from .story_registry import (
    Story,
    StoryRegistry,
    EPHEMERAL_ID_PREFIX,
    init_registry,
    get_registry,
    close_registry,
)

__all__ = [
    "Story",
    "StoryRegistry",
    "EPHEMERAL_ID_PREFIX",
    "init_registry",
    "get_registry",
    "close_registry",
]
