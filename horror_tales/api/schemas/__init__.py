"""
API Schemas package.

Pydantic models for request/response validation.
"""

from .story import (
    StoryResponse,
    StoryListResponse,
    ThemeListResponse,
    ErrorResponse,
)
from .audio import (
    AudioGenerateRequest,
    AudioGenerateResponse,
)

__all__ = [
    "StoryResponse",
    "StoryListResponse",
    "ThemeListResponse",
    "ErrorResponse",
    "AudioGenerateRequest",
    "AudioGenerateResponse",
]
