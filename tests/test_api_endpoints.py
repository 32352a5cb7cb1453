"""
Tests for the HTTP API.

Services are replaced through app.dependency_overrides; the client is used
without a context manager so the lifespan (logging, global registry) does
not run.
"""

import base64
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from horror_tales import __version__
from horror_tales.api.dependencies import (
    get_audio_synthesizer,
    get_story_generator,
    get_story_registry,
)
from horror_tales.api.main import app
from horror_tales.errors import NoCredentialsConfigured, UpstreamGenerationError, UpstreamSynthesisError
from horror_tales.registry.story_registry import Story
from horror_tales.story.content_hash import hash_content
from horror_tales.story.themes import THEMES

EXPECTED_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def generator():
    mock = MagicMock()
    app.dependency_overrides[get_story_generator] = lambda: mock
    return mock


@pytest.fixture
def synthesizer():
    mock = MagicMock()
    app.dependency_overrides[get_audio_synthesizer] = lambda: mock
    return mock


@pytest.fixture
def api_registry(registry):
    app.dependency_overrides[get_story_registry] = lambda: registry
    return registry


class TestHealth:
    """Tests for /health."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}


class TestGenerateStory:
    """Tests for POST /generate-story."""

    def test_persisted_story(self, client, generator):
        generator.generate.return_value = Story(
            id="abc",
            title="Quiet",
            content="Hello World",
            theme="urban legend",
            content_hash=hash_content("helloworld"),
            created_at="2026-01-01T00:00:00+00:00",
        )

        response = client.post("/generate-story")

        assert response.status_code == 200
        assert response.json() == {
            "id": "abc",
            "title": "Quiet",
            "content": "Hello World",
            "theme": "urban legend",
            "content_hash": hash_content("helloworld"),
            "created_at": "2026-01-01T00:00:00+00:00",
        }

    def test_ephemeral_story_omits_persistence_fields(self, client, generator):
        generator.generate.return_value = Story(
            id="temp-1700000000000", title="Again", content="Same", theme="a",
        )

        response = client.post("/generate-story")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == "temp-1700000000000"
        assert "created_at" not in body
        assert "content_hash" not in body

    def test_upstream_failure_returns_500(self, client, generator):
        generator.generate.side_effect = UpstreamGenerationError("OpenAI API error: slow down", status_code=429)

        response = client.post("/generate-story")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to generate story: OpenAI API error: slow down (status 429)"
        }

    def test_missing_credentials_returns_500(self, client, generator):
        generator.generate.side_effect = NoCredentialsConfigured("OPENAI_API_KEY")

        response = client.post("/generate-story")

        assert response.status_code == 500
        assert "No OPENAI_API_KEY credentials configured" in response.json()["error"]

    def test_body_is_ignored(self, client, generator):
        generator.generate.return_value = Story(id="x", title="t", content="c", theme="a")
        response = client.post("/generate-story", json={"theme": "ignored"})
        assert response.status_code == 200


class TestGenerateAudio:
    """Tests for POST /generate-audio."""

    def test_returns_base64_mp3(self, client, synthesizer):
        synthesizer.synthesize_base64.return_value = base64.b64encode(b"mp3").decode("ascii")

        response = client.post("/generate-audio", json={"text": "Hello", "voice": "nova"})

        assert response.status_code == 200
        assert response.json() == {"audio": "bXAz", "format": "mp3"}
        synthesizer.synthesize_base64.assert_called_once_with("Hello", "nova")

    def test_default_voice_is_onyx(self, client, synthesizer):
        synthesizer.synthesize_base64.return_value = ""

        client.post("/generate-audio", json={"text": "Hello"})

        synthesizer.synthesize_base64.assert_called_once_with("Hello", "onyx")

    def test_missing_text_returns_500(self, client, synthesizer):
        synthesizer.synthesize_base64.side_effect = ValueError("Text is required")

        response = client.post("/generate-audio", json={})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate audio: Text is required"}

    def test_malformed_json_returns_500(self, client, synthesizer):
        response = client.post(
            "/generate-audio",
            content=b"not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json()["error"].startswith("Failed to generate audio: ")
        synthesizer.synthesize_base64.assert_not_called()

    @pytest.mark.parametrize("payload", [
        {"text": 123},
        {"text": "boo", "voice": 7},
        ["boo"],
    ])
    def test_invalid_fields_return_500(self, client, synthesizer, payload):
        response = client.post("/generate-audio", json=payload)

        assert response.status_code == 500
        assert set(response.json()) == {"error"}
        assert response.json()["error"].startswith("Failed to generate audio: ")
        synthesizer.synthesize_base64.assert_not_called()

    def test_null_voice_uses_default(self, client, synthesizer):
        synthesizer.synthesize_base64.return_value = ""

        response = client.post("/generate-audio", json={"text": "Hello", "voice": None})

        assert response.status_code == 200
        synthesizer.synthesize_base64.assert_called_once_with("Hello", None)

    def test_upstream_failure_returns_500(self, client, synthesizer):
        synthesizer.synthesize_base64.side_effect = UpstreamSynthesisError("OpenAI TTS API error: nope", status_code=401)

        response = client.post("/generate-audio", json={"text": "Hello"})

        assert response.status_code == 500
        assert "status 401" in response.json()["error"]


class TestCors:
    """Tests for pre-flight handling."""

    @pytest.mark.parametrize("path", ["/generate-story", "/generate-audio"])
    def test_plain_options(self, client, path):
        response = client.options(path)

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-headers"] == EXPECTED_ALLOW_HEADERS

    def test_browser_preflight(self, client):
        response = client.options(
            "/generate-story",
            headers={
                "Origin": "https://example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_cross_origin_response_headers(self, client, generator):
        generator.generate.return_value = Story(id="x", title="t", content="c", theme="a")

        response = client.post("/generate-story", headers={"Origin": "https://example.com"})

        assert response.headers["access-control-allow-origin"] == "*"


class TestStoryArchive:
    """Tests for GET /stories, /stories/{id} and /themes."""

    def _seed(self, registry):
        ids = {"a": [], "b": []}
        for i in range(6):
            for theme in ("a", "b"):
                content = f"{theme} story {i}"
                story = registry.insert(
                    title=f"{theme.upper()}{i}",
                    content=content,
                    content_hash=hash_content(content),
                    theme=theme,
                )
                ids[theme].append(story.id)
        return ids

    def test_theme_filter_first_page(self, client, api_registry):
        ids = self._seed(api_registry)

        response = client.get("/stories", params={"theme": "a"})

        assert response.status_code == 200
        body = response.json()
        assert body["total_count"] == 6
        assert body["page"] == 1
        assert body["page_size"] == 5
        assert body["total_pages"] == 2
        assert [s["id"] for s in body["stories"]] == list(reversed(ids["a"]))[:5]

    def test_second_page(self, client, api_registry):
        ids = self._seed(api_registry)

        body = client.get("/stories", params={"theme": "a", "page": 2}).json()

        assert [s["id"] for s in body["stories"]] == [ids["a"][0]]

    @pytest.mark.parametrize("params", [{}, {"theme": "all"}, {"theme": ""}])
    def test_all_themes(self, client, api_registry, params):
        self._seed(api_registry)

        body = client.get("/stories", params=params).json()

        assert body["total_count"] == 12
        assert len(body["stories"]) == 5

    def test_empty_archive(self, client, api_registry):
        body = client.get("/stories").json()
        assert body["stories"] == []
        assert body["total_pages"] == 0

    def test_invalid_page(self, client, api_registry):
        response = client.get("/stories", params={"page": 0})
        assert response.status_code == 422

    def test_story_detail(self, client, api_registry):
        ids = self._seed(api_registry)

        response = client.get(f"/stories/{ids['b'][2]}")

        assert response.status_code == 200
        assert response.json()["title"] == "B2"

    def test_story_not_found(self, client, api_registry):
        response = client.get("/stories/missing")

        assert response.status_code == 404
        assert response.json() == {"error": "Story not found: missing"}

    def test_themes(self, client):
        response = client.get("/themes")
        assert response.json() == {"themes": list(THEMES)}
