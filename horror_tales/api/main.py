"""
FastAPI application entry point.

Serves story generation, narration, and the story archive.
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from horror_tales import __version__
from horror_tales.infra.logging_config import setup_logging
from horror_tales.infra.settings import get_settings
from horror_tales.registry.story_registry import init_registry, close_registry
from .cors import ALLOWED_HEADERS
from .routers import story, audio

load_dotenv()
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Opens the story registry on startup and closes it on shutdown.
    """
    setup_logging(settings.log_level, settings.log_dir)
    init_registry(settings.db_path)

    yield

    close_registry()

# Tag metadata for Swagger UI
tags_metadata = [
    {
        "name": "story",
        "description": "Story generation and archive - blocking generation, theme-filtered listing",
    },
    {
        "name": "audio",
        "description": "Story narration - text-to-speech, base64 MP3",
    },
]

app = FastAPI(
    title="Horror Tales API",
    lifespan=lifespan,
    description="""
## Horror Tales API

Generates short first-person horror stories, narrates them, and keeps an archive.

### Features
- **Generate story**: theme rotation, upstream text generation, title generation,
  content fingerprinting, and persistence with duplicate recovery
- **Generate audio**: text-to-speech narration returned as base64 MP3
- **Archive**: paginated listing filtered by theme

### Usage
```bash
# Start server
uvicorn horror_tales.api.main:app --host 127.0.0.1 --port 8000

# Generate a story
curl -X POST http://localhost:8000/generate-story

# Narrate it
curl -X POST http://localhost:8000/generate-audio \\
  -H "Content-Type: application/json" \\
  -d '{"text": "I heard the door open again.", "voice": "onyx"}'
```
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=tags_metadata,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=ALLOWED_HEADERS,
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


app.include_router(story.router, tags=["story"])
app.include_router(audio.router, tags=["audio"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
