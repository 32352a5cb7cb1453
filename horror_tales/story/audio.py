"""
Story narration via upstream text-to-speech.

Converts text to MP3 bytes with the OpenAI speech endpoint. Unknown voice ids
fall back to the default voice instead of failing. Every call synthesizes
from scratch (no cache) and draws a fresh key from the credential pool.
"""

import base64
import logging
from typing import Optional

import openai

from horror_tales.errors import UpstreamSynthesisError
from horror_tales.infra.credentials import CredentialPool, openai_pool
from horror_tales.infra.settings import Settings, get_settings

logger = logging.getLogger(__name__)

VALID_VOICES = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")
AUDIO_FORMAT = "mp3"


def resolve_voice(voice: Optional[str], default_voice: str = "onyx") -> str:
    """Return ``voice`` if supported, otherwise the default voice."""
    if voice in VALID_VOICES:
        return voice
    if voice:
        logger.info(f"[Audio] Unsupported voice '{voice}', using '{default_voice}'")
    return default_voice


class AudioSynthesizer:
    """
    Text-to-speech adapter.

    Args:
        credentials: OpenAI key pool; defaults to OPENAI_API_KEY[_1.._5]
        settings: Runtime settings (TTS model, default voice, timeout)
    """

    def __init__(
        self,
        credentials: Optional[CredentialPool] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.credentials = credentials if credentials is not None else openai_pool()
        self.default_voice = (
            self.settings.default_voice
            if self.settings.default_voice in VALID_VOICES
            else "onyx"
        )

    def synthesize(self, text: str, voice: Optional[str] = None) -> bytes:
        """
        Synthesize ``text`` to MP3 bytes.

        Raises:
            ValueError: Empty text
            NoCredentialsConfigured: Credential pool is empty
            UpstreamSynthesisError: Speech endpoint failed
        """
        if not text:
            raise ValueError("Text is required")

        selected_voice = resolve_voice(voice, self.default_voice)
        api_key = self.credentials.next()

        logger.info(f"[Audio] Generating audio with voice: {selected_voice}, text length: {len(text)}")

        client = openai.OpenAI(
            api_key=api_key,
            timeout=self.settings.upstream_timeout,
            max_retries=0,
        )

        try:
            response = client.audio.speech.create(
                model=self.settings.tts_model,
                voice=selected_voice,
                input=text,
                response_format=AUDIO_FORMAT,
            )
            audio = response.read()
        except openai.APIStatusError as e:
            logger.error(f"[Audio] TTS API error: {e.status_code} {e.message}")
            raise UpstreamSynthesisError(
                f"OpenAI TTS API error: {e.message}",
                status_code=e.status_code,
            ) from e
        except openai.APIError as e:
            logger.error(f"[Audio] TTS request failed: {e}")
            raise UpstreamSynthesisError(f"OpenAI TTS request failed: {e}") from e

        logger.info(f"[Audio] Audio generated successfully, size: {len(audio)}")
        return audio

    def synthesize_base64(self, text: str, voice: Optional[str] = None) -> str:
        """Synthesize and base64-encode for JSON transport."""
        return base64.b64encode(self.synthesize(text, voice)).decode("ascii")
