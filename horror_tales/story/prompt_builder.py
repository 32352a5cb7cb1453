"""
Prompt Builder - System and User Prompt Construction

Builds the prompts for the two upstream calls of a generation run:
- story content (first-person narration, length band, theme hint, unique seed)
- title (plain, understated, 2-5 words)
"""

import logging
import random
import string
import time
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase

TITLE_SYSTEM_PROMPT = """Write a title for the horror story the user sends you.

Rules:
- 2 to 5 words
- Plain and understated, like the name of an ordinary place, object, or moment
- Avoid melodramatic words such as "terror", "horror", "nightmare", "doom", "blood", "scream"
- No quotation marks, no punctuation at the end
- Output the title only, nothing else"""


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def make_unique_seed(
    now_ms: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Uniqueness seed embedded in the prompt to discourage verbatim repeats.

    Base-36 epoch milliseconds followed by an 11-character random base-36 suffix.
    """
    rng = rng or random.Random()
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(rng.choice(_BASE36) for _ in range(11))
    return _to_base36(now_ms) + suffix


def build_system_prompt(
    theme: str,
    length_band: Tuple[int, int],
    unique_seed: str,
) -> str:
    """
    Build the story system prompt.

    Args:
        theme: Theme hint for this run
        length_band: (min_chars, max_chars) target for the story body
        unique_seed: Per-run seed string

    Returns:
        str: Complete system prompt

    Example:
        >>> prompt = build_system_prompt("cursed object", (1200, 1500), "lx3k0abc")
    """
    min_chars, max_chars = length_band
    logger.debug(f"[Prompt] System prompt: theme={theme}, band={min_chars}-{max_chars}")

    return f"""You are a master horror storyteller. Generate a terrifying, original horror/thriller story told from a first-person narrator's perspective. The story MUST:

1. Be EXACTLY between {min_chars}-{max_chars} characters (this is crucial for narration timing)
2. Start with a gripping hook that immediately draws the reader in
3. Build suspense throughout with vivid, atmospheric descriptions
4. Include an unexpected twist ending that sends chills down the spine
5. Be completely original - never repeat plots, characters, or settings
6. Use the theme "{theme}" as inspiration but make it unique
7. Write as "I" - the narrator experiencing these events

IMPORTANT:
- Count characters carefully - stay within {min_chars}-{max_chars} characters
- Make every word count - no filler
- The twist must be genuinely surprising
- Create a sense of dread and unease throughout

Unique seed for this story: {unique_seed}"""


def build_user_prompt(theme: str, story_number: int) -> str:
    """Build the story user prompt."""
    return (
        f"Generate a unique horror story. Theme: {theme}. "
        f"Story number: {story_number}. Make it original and terrifying."
    )


_QUOTE_CHARS = "\"\u201c\u201d"


def clean_title(raw_title: str) -> str:
    """Strip surrounding whitespace and double quotes from a generated title.

    Single quotes are kept so possessives and elisions survive.
    """
    return raw_title.strip().strip(_QUOTE_CHARS).strip()
