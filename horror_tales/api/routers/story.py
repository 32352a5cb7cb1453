"""
Story router for generation and archive browsing.

Endpoints:
- POST /generate-story - Generate, fingerprint, and persist one story (blocking)
- GET /stories - Archive page, newest first, optional theme filter
- GET /stories/{story_id} - Single story
- GET /themes - Theme list
"""

import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from horror_tales.registry.story_registry import StoryRegistry
from horror_tales.story.generator import StoryGenerator
from horror_tales.story.themes import THEMES

from ..cors import preflight_response
from ..dependencies import get_story_generator, get_story_registry
from ..schemas.story import (
    ErrorResponse,
    StoryListResponse,
    StoryResponse,
    ThemeListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ALL_THEMES = "all"
DEFAULT_PAGE_SIZE = 5


@router.options("/generate-story", include_in_schema=False)
def generate_story_preflight():
    return preflight_response()


@router.post(
    "/generate-story",
    response_model=StoryResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
def generate_story(generator: StoryGenerator = Depends(get_story_generator)):
    """
    Generate a story directly (blocking).

    Returns the persisted story. If an identical story was saved
    concurrently, the generated story is returned unsaved with a
    'temp-<millis>' id instead of failing.
    """
    try:
        story = generator.generate()
    except Exception as e:
        logger.error(f"[StoryAPI] Generation error: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": f"Failed to generate story: {e}"},
        )

    return StoryResponse(**story.to_dict())


@router.get("/stories", response_model=StoryListResponse)
def list_stories(
    theme: Optional[str] = Query(default=None, description="Exact theme, or 'all'"),
    page: int = Query(default=1, ge=1, description="1-based page number"),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=50, description="Stories per page"),
    registry: StoryRegistry = Depends(get_story_registry),
):
    """
    List stories from the registry.

    Returns stories sorted by creation time (newest first).
    """
    theme_filter = None if theme in (None, "", ALL_THEMES) else theme

    try:
        stories, total = registry.list_stories(
            theme=theme_filter,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
    except Exception as e:
        logger.error(f"[StoryAPI] List error: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": f"Failed to list stories: {e}"})

    return StoryListResponse(
        stories=[StoryResponse(**s.to_dict()) for s in stories],
        total_count=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


@router.get("/stories/{story_id}", response_model=StoryResponse, responses={404: {"model": ErrorResponse}})
def get_story_detail(story_id: str, registry: StoryRegistry = Depends(get_story_registry)):
    """
    Get a specific story.
    """
    try:
        story = registry.get_story(story_id)
    except Exception as e:
        logger.error(f"[StoryAPI] Detail error: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": f"Failed to get story: {e}"})

    if story is None:
        return JSONResponse(status_code=404, content={"error": f"Story not found: {story_id}"})

    return StoryResponse(**story.to_dict())


@router.get("/themes", response_model=ThemeListResponse)
def list_themes():
    """Themes stories are generated from."""
    return ThemeListResponse(themes=list(THEMES))
