"""
Story Registry - SQLite Persistent Storage

Persisted collection of generated stories.

Design principles:
- content_hash carries a UNIQUE constraint; it is the only guard against
  duplicate persistence when generations race
- Stories are inserted once and never updated
- Configurable DB path via environment variable
- No external dependencies (stdlib sqlite3 only)
"""

import logging
import os
import sqlite3
import threading
import uuid
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from horror_tales.errors import DuplicateKeyError, PersistenceError

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================

DEFAULT_DB_PATH = "./data/story_registry.db"
SCHEMA_VERSION = "1.0.0"

EPHEMERAL_ID_PREFIX = "temp-"

# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class Story:
    """A generated story, persisted or ephemeral."""
    id: str
    title: str
    content: str
    theme: str
    content_hash: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_ephemeral(self) -> bool:
        """True for results returned to the caller without being saved."""
        return self.id.startswith(EPHEMERAL_ID_PREFIX)

    def to_dict(self) -> Dict[str, Any]:
        """Dictionary form, omitting unset optional fields."""
        return {k: v for k, v in asdict(self).items() if v is not None}


# =============================================================================
# Story Registry Class
# =============================================================================

class StoryRegistry:
    """
    Persistent story registry using SQLite.

    Provides:
    - count / find_by_hash for the generation pipeline
    - insert with duplicate detection on content_hash
    - theme-filtered, paginated listing (newest first)

    The connection is shared across threads (FastAPI runs sync endpoints on
    a worker pool) and serialized with a lock.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the story registry.

        Args:
            db_path: Path to SQLite database file. If None, uses env var or default.
        """
        self.db_path = db_path or os.getenv("STORY_REGISTRY_DB_PATH", DEFAULT_DB_PATH)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

        logger.info(f"[Registry] Opening story registry: {self.db_path}")

        self._ensure_directory()
        self._init_db()

    def _ensure_directory(self) -> None:
        """Create parent directory if it doesn't exist."""
        db_dir = Path(self.db_path).parent
        if not db_dir.exists():
            db_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"[Registry] Created directory: {db_dir}")

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_db(self) -> None:
        """Initialize database schema with version tracking."""
        with self._lock:
            conn = self._get_connection()
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS meta (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
            """)

            cursor.execute("SELECT value FROM meta WHERE key = 'schema_version'")
            row = cursor.fetchone()
            current_version = row["value"] if row else None

            if current_version is None:
                self._create_schema(cursor)
                cursor.execute(
                    "INSERT INTO meta (key, value) VALUES ('schema_version', ?)",
                    (SCHEMA_VERSION,)
                )
                logger.info(f"[Registry] Schema created (v{SCHEMA_VERSION})")
            elif current_version != SCHEMA_VERSION:
                logger.warning(
                    f"[Registry] Unknown schema version {current_version}, expected {SCHEMA_VERSION}"
                )
            else:
                logger.debug(f"[Registry] Schema version: v{current_version}")

            conn.commit()

    def _create_schema(self, cursor: sqlite3.Cursor) -> None:
        """Create the database schema."""
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS stories (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                theme TEXT NOT NULL,
                content_hash TEXT NOT NULL UNIQUE,
                created_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_stories_created_at
            ON stories(created_at DESC)
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_stories_theme
            ON stories(theme)
        """)

    @staticmethod
    def _row_to_story(row: sqlite3.Row) -> Story:
        return Story(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            theme=row["theme"],
            content_hash=row["content_hash"],
            created_at=row["created_at"],
        )

    def count(self) -> int:
        """Total number of stored stories."""
        try:
            with self._lock:
                cursor = self._get_connection().execute("SELECT COUNT(*) AS cnt FROM stories")
                return cursor.fetchone()["cnt"]
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to count stories: {e}") from e

    def find_by_hash(self, content_hash: str) -> Optional[Story]:
        """
        Find an existing story by its content fingerprint.

        Args:
            content_hash: Fingerprint from hash_content()

        Returns:
            Story if found, None otherwise
        """
        try:
            with self._lock:
                cursor = self._get_connection().execute("""
                    SELECT id, title, content, theme, content_hash, created_at
                    FROM stories
                    WHERE content_hash = ?
                    LIMIT 1
                """, (content_hash,))
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to look up story by hash: {e}") from e

        return self._row_to_story(row) if row else None

    def get_story(self, story_id: str) -> Optional[Story]:
        """Fetch a single story by id."""
        try:
            with self._lock:
                cursor = self._get_connection().execute("""
                    SELECT id, title, content, theme, content_hash, created_at
                    FROM stories
                    WHERE id = ?
                """, (story_id,))
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load story {story_id}: {e}") from e

        return self._row_to_story(row) if row else None

    def insert(self, title: str, content: str, content_hash: str, theme: str) -> Story:
        """
        Persist a new story.

        The registry assigns id and created_at.

        Raises:
            DuplicateKeyError: content_hash already exists
            PersistenceError: Any other database failure
        """
        story = Story(
            id=str(uuid.uuid4()),
            title=title,
            content=content,
            theme=theme,
            content_hash=content_hash,
            created_at=datetime.now(timezone.utc).isoformat(),
        )

        try:
            with self._lock:
                conn = self._get_connection()
                try:
                    conn.execute("""
                        INSERT INTO stories (id, title, content, theme, content_hash, created_at)
                        VALUES (?, ?, ?, ?, ?, ?)
                    """, (
                        story.id,
                        story.title,
                        story.content,
                        story.theme,
                        story.content_hash,
                        story.created_at,
                    ))
                    conn.commit()
                except sqlite3.Error:
                    conn.rollback()
                    raise
        except sqlite3.IntegrityError as e:
            if "content_hash" in str(e):
                logger.info(f"[Registry] Duplicate content_hash rejected: {content_hash}")
                raise DuplicateKeyError(content_hash) from e
            raise PersistenceError(f"Failed to save story: {e}") from e
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save story: {e}") from e

        logger.info(f"[Registry] Saved story {story.id} (theme={theme}, hash={content_hash})")
        return story

    def list_stories(
        self,
        theme: Optional[str] = None,
        offset: int = 0,
        limit: int = 5,
    ) -> Tuple[List[Story], int]:
        """
        List stories newest first, optionally filtered by exact theme.

        Args:
            theme: Exact theme to match; None for all themes
            offset: Rows to skip
            limit: Maximum rows to return

        Returns:
            (stories, total_count) where total_count counts the filtered set
        """
        if offset < 0 or limit < 0:
            raise ValueError("offset and limit must be non-negative")

        where = ""
        params: List[Any] = []
        if theme is not None:
            where = "WHERE theme = ?"
            params.append(theme)

        try:
            with self._lock:
                conn = self._get_connection()
                total = conn.execute(
                    f"SELECT COUNT(*) AS cnt FROM stories {where}", params
                ).fetchone()["cnt"]

                rows = conn.execute(f"""
                    SELECT id, title, content, theme, content_hash, created_at
                    FROM stories
                    {where}
                    ORDER BY created_at DESC, rowid DESC
                    LIMIT ? OFFSET ?
                """, params + [limit, offset]).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to list stories: {e}") from e

        stories = [self._row_to_story(row) for row in rows]
        logger.debug(f"[Registry] Listed {len(stories)}/{total} stories (theme={theme}, offset={offset})")
        return stories, total

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None
                logger.info("[Registry] Connection closed")


# =============================================================================
# Module-level convenience functions
# =============================================================================

_registry: Optional[StoryRegistry] = None


def init_registry(db_path: Optional[str] = None) -> StoryRegistry:
    """
    Initialize the global story registry.

    Call this at process start to set up persistent storage.
    """
    global _registry
    _registry = StoryRegistry(db_path=db_path)
    return _registry


def get_registry() -> Optional[StoryRegistry]:
    """Get the global story registry instance."""
    return _registry


def close_registry() -> None:
    """Close the global story registry."""
    global _registry
    if _registry:
        _registry.close()
        _registry = None
