"""
Horror Tales - AI horror story generation and narration service.
"""

__version__ = "1.0.0"
