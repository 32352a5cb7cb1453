"""
API Dependencies package.

Collaborators injected into route handlers. Tests replace them through
``app.dependency_overrides``.
"""

from .services import get_story_registry, get_story_generator, get_audio_synthesizer

__all__ = ["get_story_registry", "get_story_generator", "get_audio_synthesizer"]
