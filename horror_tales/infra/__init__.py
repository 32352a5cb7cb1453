"""
Infrastructure module - configuration, credentials, and logging.
"""

from .settings import Settings, get_settings
from .logging_config import setup_logging
from .credentials import CredentialPool, openai_pool

__all__ = [
    # settings
    "Settings",
    "get_settings",
    # logging
    "setup_logging",
    # credentials
    "CredentialPool",
    "openai_pool",
]
