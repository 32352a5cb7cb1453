"""
Pytest configuration and shared fixtures.
"""

import logging
import os
import random
from unittest.mock import MagicMock

import pytest

from horror_tales.infra.credentials import CredentialPool
from horror_tales.infra.settings import Settings
from horror_tales.registry.story_registry import StoryRegistry
from horror_tales.story.model_provider import GenerationResult

_ISOLATED_ENV = [
    "STORY_MODEL",
    "STORY_LENGTH",
    "UPSTREAM_TIMEOUT_SECONDS",
    "DUPLICATE_PRECHECK_ENABLED",
    "TTS_MODEL",
    "TTS_DEFAULT_VOICE",
    "STORY_REGISTRY_DB_PATH",
    "LOG_LEVEL",
    "LOG_DIR",
    "CORS_ALLOW_ORIGINS",
]


@pytest.fixture(autouse=True, scope="function")
def isolate_environment(monkeypatch):
    """
    Remove configuration variables inherited from the developer's shell or .env
    so every test starts from defaults.
    """
    for key in _ISOLATED_ENV:
        monkeypatch.delenv(key, raising=False)
    for key in list(os.environ):
        if key.startswith("OPENAI_API_KEY") or key.startswith("ANTHROPIC_API_KEY"):
            monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture(autouse=True, scope="function")
def reset_package_logger():
    """Undo setup_logging() so handlers and files don't leak between tests."""
    yield
    logger = logging.getLogger("horror_tales")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class FixedDrawRandom(random.Random):
    """Random source whose randrange always returns a fixed draw."""

    def __init__(self, draw: int = 0):
        super().__init__(1234)
        self.draw = draw

    def randrange(self, *args, **kwargs):
        return self.draw


@pytest.fixture
def fixed_rng():
    """Factory for FixedDrawRandom instances."""
    return FixedDrawRandom


@pytest.fixture
def registry(tmp_path):
    """Create a temporary registry for testing."""
    reg = StoryRegistry(db_path=str(tmp_path / "test_registry.db"))
    yield reg
    reg.close()


@pytest.fixture
def settings():
    """Default settings, independent of the environment."""
    return Settings()


@pytest.fixture
def credentials():
    """Single-key credential pool."""
    return CredentialPool("TEST_API_KEY", ["test-key"])


def make_result(text: str) -> GenerationResult:
    return GenerationResult(text=text, usage=None, provider="openai", model="gpt-test")


@pytest.fixture
def scripted_provider():
    """
    Factory for a provider mock answering successive generate() calls.

    Items may be strings (returned as text) or exceptions (raised).
    """
    def _factory(*responses):
        provider = MagicMock()
        provider.provider_name = "openai"
        provider.credential_family = "OPENAI_API_KEY"
        provider.generate.side_effect = [
            r if isinstance(r, BaseException) else make_result(r) for r in responses
        ]
        return provider
    return _factory
