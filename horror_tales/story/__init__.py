"""
Story module - generation pipeline components.

- Content fingerprinting for duplicate detection
- Theme rotation and prompt building
- Text model providers (OpenAI, Claude)
- Generation pipeline and narration
"""

from .content_hash import hash_content, normalize_content
from .themes import THEMES, select_theme, pick_theme
from .model_provider import get_provider, parse_model_spec, GenerationResult
from .generator import StoryGenerator, GenerationStage
from .audio import AudioSynthesizer, VALID_VOICES

__all__ = [
    # content_hash
    "hash_content",
    "normalize_content",
    # themes
    "THEMES",
    "select_theme",
    "pick_theme",
    # model_provider
    "get_provider",
    "parse_model_spec",
    "GenerationResult",
    # generator
    "StoryGenerator",
    "GenerationStage",
    # audio
    "AudioSynthesizer",
    "VALID_VOICES",
]
