"""
Exception taxonomy for story generation, narration, and persistence.

DuplicateKeyError is the one expected failure: the generator recovers from it
by returning an ephemeral (unsaved) story. Everything else propagates to the
request boundary and becomes an error response.
"""

from typing import Optional


class HorrorTalesError(Exception):
    """Base exception for all horror_tales errors."""
    pass


class UpstreamError(HorrorTalesError):
    """An upstream API call returned a non-success status or failed to connect."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        if status_code is not None:
            message = f"{message} (status {status_code})"
        super().__init__(message)


class UpstreamGenerationError(UpstreamError):
    """Text or title generation call failed."""
    pass


class UpstreamSynthesisError(UpstreamError):
    """Speech synthesis call failed."""
    pass


class PersistenceError(HorrorTalesError):
    """A store operation failed for a reason other than a duplicate key."""
    pass


class DuplicateKeyError(PersistenceError):
    """Raised by the registry when content_hash already exists."""

    def __init__(self, content_hash: str):
        self.content_hash = content_hash
        super().__init__(f"Story with content_hash {content_hash} already exists")


class NoCredentialsConfigured(HorrorTalesError):
    """Raised when a credential pool has no keys."""

    def __init__(self, pool_name: str):
        self.pool_name = pool_name
        super().__init__(f"No {pool_name} credentials configured")
