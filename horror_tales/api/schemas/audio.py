"""
Audio narration schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field


class AudioGenerateRequest(BaseModel):
    """Request for story narration."""

    text: Optional[str] = Field(
        default=None,
        description="Text to narrate (required)",
        json_schema_extra={"examples": ["I heard the door open again."]}
    )
    voice: Optional[str] = Field(
        default="onyx",
        description="Voice id: alloy, echo, fable, onyx, nova, shimmer. Unknown ids fall back to the default voice.",
        json_schema_extra={"examples": ["onyx", "nova"]}
    )


class AudioGenerateResponse(BaseModel):
    """Narrated audio, base64-encoded."""

    audio: str
    format: str = "mp3"
