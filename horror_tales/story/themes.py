"""
Story themes and rotation.

The theme index is biased by the current corpus size plus a random offset.
This spreads consecutive stories across themes but does not guarantee
non-repetition or uniform coverage.
"""

import random
from typing import Optional, Sequence

THEMES = (
    "haunted house",
    "paranormal encounter",
    "psychological horror",
    "supernatural creature",
    "cursed object",
    "abandoned asylum",
    "demonic possession",
    "urban legend",
    "mysterious stranger",
    "nightmare realm",
    "forest horror",
    "mirror dimension",
    "time loop terror",
    "doppelganger",
    "vengeful spirit",
)


def select_theme(themes: Sequence[str], story_count: int, draw: int) -> str:
    """Return themes[(story_count + draw) % len(themes)]."""
    if not themes:
        raise ValueError("Theme list is empty")
    return themes[(story_count + draw) % len(themes)]


def pick_theme(
    story_count: int,
    themes: Sequence[str] = THEMES,
    rng: Optional[random.Random] = None,
) -> str:
    """Select a theme using a random draw in [0, len(themes))."""
    if not themes:
        raise ValueError("Theme list is empty")
    rng = rng or random.Random()
    return select_theme(themes, story_count, rng.randrange(len(themes)))

