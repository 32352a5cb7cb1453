"""
Model provider abstraction for story generation.

Supports two LLM backends:
- OpenAI chat completions - default (e.g. "gpt-4o-mini")
- Claude (Anthropic) - any spec starting with "claude" or prefixed "anthropic:"

Usage:
    provider = get_provider("gpt-4o-mini")
    result = provider.generate(system_prompt, user_prompt, config)

Upstream failures are raised as UpstreamGenerationError carrying the HTTP
status code and response body when the SDK exposes them. SDK-level retries
are disabled; the caller sees exactly one attempt.
"""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import anthropic
import openai

from horror_tales.errors import UpstreamGenerationError
from horror_tales.infra.settings import DEFAULT_STORY_MODEL

logger = logging.getLogger(__name__)


@dataclass
class ModelInfo:
    """Model identification information."""
    provider: str  # "openai", "anthropic"
    model_name: str  # e.g., "gpt-4o-mini", "claude-sonnet-4-5-20250929"
    full_spec: str  # e.g., "gpt-4o-mini", "anthropic:claude-sonnet-4-5-20250929"


@dataclass
class GenerationResult:
    """Result from text generation."""
    text: str
    usage: Optional[Dict[str, int]]
    provider: str
    model: str


def parse_model_spec(model_spec: Optional[str]) -> ModelInfo:
    """
    Parse model specification string into provider and model name.

    Formats:
    - "gpt-4o-mini" -> provider="openai", model="gpt-4o-mini"
    - "openai:gpt-4o" -> provider="openai", model="gpt-4o"
    - "claude-sonnet-4-5-20250929" -> provider="anthropic"
    - "anthropic:claude-haiku-4-5" -> provider="anthropic", model="claude-haiku-4-5"
    - None -> STORY_MODEL env var, else gpt-4o-mini
    """
    if model_spec is None:
        model_spec = os.getenv("STORY_MODEL", DEFAULT_STORY_MODEL)

    if model_spec.startswith("anthropic:"):
        return ModelInfo(
            provider="anthropic",
            model_name=model_spec.split(":", 1)[1],
            full_spec=model_spec
        )

    if model_spec.startswith("openai:"):
        return ModelInfo(
            provider="openai",
            model_name=model_spec.split(":", 1)[1],
            full_spec=model_spec
        )

    if model_spec.startswith("claude"):
        return ModelInfo(
            provider="anthropic",
            model_name=model_spec,
            full_spec=model_spec
        )

    return ModelInfo(
        provider="openai",
        model_name=model_spec,
        full_spec=model_spec
    )


class ModelProvider(ABC):
    """Abstract base class for model providers."""

    @abstractmethod
    def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        config: Dict[str, Any]
    ) -> GenerationResult:
        """
        Generate text using the model.

        Args:
            system_prompt: System prompt text
            user_prompt: User prompt text
            config: api_key (required), max_tokens, temperature, timeout

        Returns:
            GenerationResult with generated text and metadata

        Raises:
            UpstreamGenerationError: On non-success status or connection failure
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return provider name for metadata."""
        pass

    @property
    @abstractmethod
    def credential_family(self) -> str:
        """Credential pool this provider draws keys from."""
        pass


class OpenAIProvider(ModelProvider):
    """OpenAI chat completions provider."""

    def __init__(self, model_name: str):
        self.model_name = model_name

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def credential_family(self) -> str:
        return "OPENAI_API_KEY"

    def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        config: Dict[str, Any]
    ) -> GenerationResult:
        """Generate using the OpenAI chat completions API."""
        logger.info(f"[OpenAIProvider] Generating with {self.model_name}")
        client = openai.OpenAI(
            api_key=config["api_key"],
            timeout=config.get("timeout"),
            max_retries=0,
        )

        try:
            response = client.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=int(config.get("max_tokens", 800)),
                temperature=float(config.get("temperature", 0.9)),
            )
        except openai.APIStatusError as e:
            logger.error(f"[OpenAIProvider] API error: {e.status_code} {e.message}")
            raise UpstreamGenerationError(
                f"OpenAI API error: {e.message}",
                status_code=e.status_code,
                body=_response_text(e.response),
            ) from e
        except openai.APIError as e:
            logger.error(f"[OpenAIProvider] Request failed: {e}")
            raise UpstreamGenerationError(f"OpenAI request failed: {e}") from e

        text = response.choices[0].message.content or ""

        usage = None
        if getattr(response, "usage", None):
            usage = {
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        logger.info(f"[OpenAIProvider] Generated {len(text)} chars")

        return GenerationResult(
            text=text,
            usage=usage,
            provider=self.provider_name,
            model=self.model_name
        )


class ClaudeProvider(ModelProvider):
    """Claude (Anthropic) model provider."""

    def __init__(self, model_name: str):
        self.model_name = model_name

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def credential_family(self) -> str:
        return "ANTHROPIC_API_KEY"

    def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        config: Dict[str, Any]
    ) -> GenerationResult:
        """Generate using Claude API."""
        logger.info(f"[ClaudeProvider] Generating with {self.model_name}")
        client = anthropic.Anthropic(
            api_key=config["api_key"],
            timeout=config.get("timeout"),
            max_retries=0,
        )

        try:
            message = client.messages.create(
                model=self.model_name,
                max_tokens=int(config.get("max_tokens", 800)),
                temperature=float(config.get("temperature", 0.9)),
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}]
            )
        except anthropic.APIStatusError as e:
            logger.error(f"[ClaudeProvider] API error: {e.status_code} {e.message}")
            raise UpstreamGenerationError(
                f"Anthropic API error: {e.message}",
                status_code=e.status_code,
                body=_response_text(e.response),
            ) from e
        except anthropic.APIError as e:
            logger.error(f"[ClaudeProvider] Request failed: {e}")
            raise UpstreamGenerationError(f"Anthropic request failed: {e}") from e

        text = "".join(
            block.text for block in message.content if getattr(block, "type", "text") == "text"
        )

        usage = None
        if getattr(message, "usage", None):
            try:
                usage = {
                    "input_tokens": message.usage.input_tokens,
                    "output_tokens": message.usage.output_tokens,
                    "total_tokens": message.usage.input_tokens + message.usage.output_tokens
                }
            except (AttributeError, TypeError):
                pass

        logger.info(f"[ClaudeProvider] Generated {len(text)} chars")

        return GenerationResult(
            text=text,
            usage=usage,
            provider=self.provider_name,
            model=self.model_name
        )


def _response_text(response: Any) -> Optional[str]:
    try:
        return response.text
    except (AttributeError, UnicodeDecodeError):
        return None


def get_provider(model_spec: Optional[str] = None) -> ModelProvider:
    """
    Get appropriate model provider for the given model specification.

    Args:
        model_spec: Model specification (e.g., "gpt-4o-mini" or "claude-sonnet-4-5-20250929").
                    None uses STORY_MODEL from the environment.

    Returns:
        ModelProvider instance
    """
    info = parse_model_spec(model_spec)

    if info.provider == "anthropic":
        return ClaudeProvider(info.model_name)
    return OpenAIProvider(info.model_name)


def get_model_info(model_spec: Optional[str] = None) -> ModelInfo:
    """Get model information without creating a provider."""
    return parse_model_spec(model_spec)
