"""
Story generation pipeline.

One invocation produces one new story:

    IDLE -> GENERATING_CONTENT -> GENERATING_TITLE -> HASHING
         -> CHECKING_DUPLICATE -> PERSISTING -> DONE | DONE_EPHEMERAL | FAILED

Content and title calls are sequential (the title is derived from the
content). No stage is retried; the first failure ends the invocation.

Duplicate handling:
- The lookup by content_hash before insert is advisory and only logged.
- The registry's UNIQUE constraint is authoritative. When an insert loses a
  race on content_hash, the caller still gets the generated story back as an
  ephemeral (unsaved) result with a "temp-<millis>" id.
"""

import logging
import random
import time
from enum import Enum
from typing import Callable, Optional, Sequence

from horror_tales.errors import (
    DuplicateKeyError,
    PersistenceError,
    UpstreamGenerationError,
)
from horror_tales.infra.credentials import CredentialPool
from horror_tales.infra.settings import Settings, get_settings
from horror_tales.registry.story_registry import EPHEMERAL_ID_PREFIX, Story, StoryRegistry

from .content_hash import hash_content
from .model_provider import ModelProvider, get_provider
from .prompt_builder import (
    TITLE_SYSTEM_PROMPT,
    build_system_prompt,
    build_user_prompt,
    clean_title,
    make_unique_seed,
)
from .themes import THEMES, pick_theme

logger = logging.getLogger(__name__)

STORY_MAX_TOKENS = 800
STORY_TEMPERATURE = 0.9
TITLE_MAX_TOKENS = 20
TITLE_TEMPERATURE = 0.8


class GenerationStage(str, Enum):
    """Pipeline stage of a single generation run."""

    IDLE = "IDLE"
    GENERATING_CONTENT = "GENERATING_CONTENT"
    GENERATING_TITLE = "GENERATING_TITLE"
    HASHING = "HASHING"
    CHECKING_DUPLICATE = "CHECKING_DUPLICATE"
    PERSISTING = "PERSISTING"
    DONE = "DONE"
    DONE_EPHEMERAL = "DONE_EPHEMERAL"
    FAILED = "FAILED"


class StoryGenerator:
    """
    Generates, fingerprints, and persists horror stories.

    Holds only collaborators, never per-run state, so one instance may serve
    concurrent requests.

    Args:
        registry: Story repository (count, find_by_hash, insert)
        provider: Text model provider; defaults to get_provider(settings.story_model)
        credentials: Key pool for the provider; defaults to the provider's env pool
        settings: Runtime settings; defaults to get_settings()
        themes: Theme list to rotate through
        rng: Random source for theme draws and unique seeds
        clock: Epoch-seconds clock used for seeds and ephemeral ids
    """

    def __init__(
        self,
        registry: StoryRegistry,
        provider: Optional[ModelProvider] = None,
        credentials: Optional[CredentialPool] = None,
        settings: Optional[Settings] = None,
        themes: Sequence[str] = THEMES,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings or get_settings()
        self.registry = registry
        self.provider = provider or get_provider(self.settings.story_model)
        self.credentials = (
            credentials if credentials is not None
            else CredentialPool.from_env(self.provider.credential_family)
        )
        self.themes = tuple(themes)
        self.rng = rng or random.Random()
        self.clock = clock

    def generate(self) -> Story:
        """
        Run the pipeline once.

        Returns:
            The persisted Story, or an ephemeral Story if the insert hit a
            duplicate content_hash.

        Raises:
            NoCredentialsConfigured: Credential pool is empty
            UpstreamGenerationError: Content or title call failed
            PersistenceError: Registry failure other than a duplicate key
        """
        stage = GenerationStage.IDLE
        try:
            api_key = self.credentials.next()

            story_count = self.registry.count()
            theme = pick_theme(story_count, self.themes, self.rng)
            logger.info(f"[Pipeline] Theme selected: {theme} (corpus size {story_count})")

            config = {
                "api_key": api_key,
                "timeout": self.settings.upstream_timeout,
            }

            stage = self._advance(stage, GenerationStage.GENERATING_CONTENT)
            content = self._generate_content(theme, story_count, config)

            stage = self._advance(stage, GenerationStage.GENERATING_TITLE)
            title = self._generate_title(content, config)

            stage = self._advance(stage, GenerationStage.HASHING)
            content_hash = hash_content(content)

            stage = self._advance(stage, GenerationStage.CHECKING_DUPLICATE)
            self._check_duplicate(content_hash)

            stage = self._advance(stage, GenerationStage.PERSISTING)
            try:
                story = self.registry.insert(
                    title=title,
                    content=content,
                    content_hash=content_hash,
                    theme=theme,
                )
            except DuplicateKeyError:
                story = Story(
                    id=f"{EPHEMERAL_ID_PREFIX}{int(self.clock() * 1000)}",
                    title=title,
                    content=content,
                    theme=theme,
                )
                self._advance(stage, GenerationStage.DONE_EPHEMERAL)
                logger.warning(
                    f"[Pipeline] content_hash {content_hash} already persisted, "
                    f"returning unsaved story {story.id}"
                )
                return story

            self._advance(stage, GenerationStage.DONE)
            logger.info(f"[Pipeline] Story generated: '{story.title}' ({story.id})")
            return story

        except Exception:
            self._advance(stage, GenerationStage.FAILED)
            raise

    @staticmethod
    def _advance(current: GenerationStage, nxt: GenerationStage) -> GenerationStage:
        level = logging.ERROR if nxt == GenerationStage.FAILED else logging.DEBUG
        logger.log(level, f"[Pipeline] {current.value} -> {nxt.value}")
        return nxt

    def _generate_content(self, theme: str, story_count: int, config: dict) -> str:
        unique_seed = make_unique_seed(int(self.clock() * 1000), self.rng)
        system_prompt = build_system_prompt(theme, self.settings.length_band, unique_seed)
        user_prompt = build_user_prompt(theme, story_count + 1)

        result = self.provider.generate(
            system_prompt,
            user_prompt,
            dict(config, max_tokens=STORY_MAX_TOKENS, temperature=STORY_TEMPERATURE),
        )
        content = result.text.strip()
        if not content:
            raise UpstreamGenerationError("Text generation returned empty content")

        logger.info(f"[Pipeline] Content generated: {len(content)} chars ({result.provider}/{result.model})")
        return content

    def _generate_title(self, content: str, config: dict) -> str:
        result = self.provider.generate(
            TITLE_SYSTEM_PROMPT,
            content,
            dict(config, max_tokens=TITLE_MAX_TOKENS, temperature=TITLE_TEMPERATURE),
        )
        title = clean_title(result.text)
        if not title:
            raise UpstreamGenerationError("Title generation returned an empty title")
        return title

    def _check_duplicate(self, content_hash: str) -> None:
        if not self.settings.duplicate_precheck:
            return
        try:
            existing = self.registry.find_by_hash(content_hash)
        except PersistenceError as e:
            logger.warning(f"[Pipeline] Duplicate pre-check skipped: {e}")
            return
        if existing:
            logger.warning(
                f"[Pipeline] Duplicate content detected: hash {content_hash} matches story {existing.id}"
            )
