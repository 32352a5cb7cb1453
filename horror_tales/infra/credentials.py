"""
Upstream credential pools.

A pool holds interchangeable API keys for one upstream account family.
Each call to ``next()`` draws one key uniformly at random, spreading
quota usage across accounts. Selection is stateless.
"""

import logging
import os
import random
from typing import List, Optional, Sequence

from horror_tales.errors import NoCredentialsConfigured

logger = logging.getLogger(__name__)

# Numbered slots read in addition to the bare variable (PREFIX_1 .. PREFIX_5)
POOL_SLOTS = 5


class CredentialPool:
    """Random-draw pool of equivalent upstream credentials."""

    def __init__(
        self,
        name: str,
        credentials: Sequence[str],
        rng: Optional[random.Random] = None,
    ):
        self.name = name
        self._credentials: List[str] = [c for c in credentials if c]
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._credentials)

    def next(self) -> str:
        """
        Draw one credential.

        Raises:
            NoCredentialsConfigured: If the pool is empty
        """
        if not self._credentials:
            raise NoCredentialsConfigured(self.name)
        return self._rng.choice(self._credentials)

    @classmethod
    def from_env(
        cls,
        prefix: str,
        slots: int = POOL_SLOTS,
        rng: Optional[random.Random] = None,
    ) -> "CredentialPool":
        """
        Build a pool from PREFIX_1..PREFIX_<slots> plus the bare PREFIX variable.

        Unset or empty variables are skipped.
        """
        names = [f"{prefix}_{i}" for i in range(1, slots + 1)] + [prefix]
        credentials = [os.getenv(name, "") for name in names]
        pool = cls(prefix, credentials, rng=rng)
        logger.debug(f"[Credentials] {prefix} pool size: {len(pool)}")
        return pool


def openai_pool(rng: Optional[random.Random] = None) -> CredentialPool:
    """OpenAI key pool (chat completions and speech)."""
    return CredentialPool.from_env("OPENAI_API_KEY", rng=rng)

