"""
Story operation schemas.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class StoryResponse(BaseModel):
    """A persisted or ephemeral story."""

    id: str = Field(
        description="Story id. Unsaved results carry a 'temp-<millis>' placeholder.",
        json_schema_extra={"examples": ["3f2b8c1e-0a4d-4f7e-9c8b-2d1e5a6f7b90", "temp-1767225600000"]}
    )
    title: str
    content: str
    theme: str
    content_hash: Optional[str] = None
    created_at: Optional[str] = Field(
        default=None,
        description="ISO-8601 insert time. Absent for unsaved results."
    )


class StoryListResponse(BaseModel):
    """One archive page."""

    stories: List[StoryResponse] = Field(default=[])
    total_count: int
    page: int
    page_size: int
    total_pages: int


class ThemeListResponse(BaseModel):
    """Themes stories are generated from."""

    themes: List[str]


class ErrorResponse(BaseModel):
    """Uniform failure body."""

    error: str
