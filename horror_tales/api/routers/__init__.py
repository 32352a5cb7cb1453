"""
API Routers package.
"""

from . import story, audio

__all__ = ["story", "audio"]
