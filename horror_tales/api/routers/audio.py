"""
Audio router for story narration.

Endpoints:
- POST /generate-audio - Narrate text, returns base64 MP3
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from horror_tales.story.audio import AUDIO_FORMAT, AudioSynthesizer

from ..cors import preflight_response
from ..dependencies import get_audio_synthesizer
from ..schemas.audio import AudioGenerateRequest, AudioGenerateResponse
from ..schemas.story import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.options("/generate-audio", include_in_schema=False)
def generate_audio_preflight():
    return preflight_response()


@router.post(
    "/generate-audio",
    response_model=AudioGenerateResponse,
    responses={500: {"model": ErrorResponse}},
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": AudioGenerateRequest.model_json_schema()}
            },
        }
    },
)
async def generate_audio(
    request: Request,
    synthesizer: AudioSynthesizer = Depends(get_audio_synthesizer),
):
    """
    Narrate text with upstream text-to-speech.

    The body is parsed inside the handler so malformed JSON and invalid
    fields fail with the same 500 error body as upstream failures.
    Unknown voices fall back to the default voice.
    """
    try:
        body = AudioGenerateRequest.model_validate(await request.json())
        audio = await run_in_threadpool(
            synthesizer.synthesize_base64, body.text or "", body.voice
        )
    except Exception as e:
        logger.error(f"[AudioAPI] Generation error: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": f"Failed to generate audio: {e}"},
        )

    return AudioGenerateResponse(audio=audio, format=AUDIO_FORMAT)
