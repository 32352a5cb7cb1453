"""
Service dependencies for route handlers.

The registry is process-wide (opened in the app lifespan, or lazily on first
use). Generators and synthesizers are cheap and built per request so that
credential pools pick up environment changes.
"""

from fastapi import Depends

from horror_tales.infra.settings import get_settings
from horror_tales.registry.story_registry import StoryRegistry, get_registry, init_registry
from horror_tales.story.audio import AudioSynthesizer
from horror_tales.story.generator import StoryGenerator


def get_story_registry() -> StoryRegistry:
    """Return the global registry, opening it on first use."""
    registry = get_registry()
    if registry is None:
        registry = init_registry(get_settings().db_path)
    return registry


def get_story_generator(
    registry: StoryRegistry = Depends(get_story_registry),
) -> StoryGenerator:
    """Build a generator bound to the global registry."""
    return StoryGenerator(registry)


def get_audio_synthesizer() -> AudioSynthesizer:
    """Build a synthesizer with the OpenAI credential pool."""
    return AudioSynthesizer()
