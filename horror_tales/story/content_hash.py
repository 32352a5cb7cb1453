"""
Story Content Fingerprint

Computes a cheap, deterministic fingerprint of story text used to catch
near-identical regenerations (same words, different case or spacing).

Properties:
- Deterministic: same input always produces same fingerprint
- Case and whitespace insensitive: normalized before hashing
- Not collision resistant: unrelated texts may share a fingerprint

The rolling hash walks UTF-16 code units so fingerprints match those
computed by browser clients (String.prototype.charCodeAt).
"""

import re

# Same set as ECMAScript \s: includes U+FEFF, excludes U+001C..U+001F
_WHITESPACE = re.compile(
    r"[\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]+"
)

_MASK_32 = 0xFFFFFFFF


def normalize_content(text: str) -> str:
    """Lowercase and remove all whitespace (ECMAScript definition)."""
    return _WHITESPACE.sub("", text.lower())


def _utf16_units(text: str):
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def hash_content(text: str) -> str:
    """
    Fingerprint story text.

    h = h * 31 + unit over the normalized text, wrapped to a signed 32-bit
    integer, seeded at 0. The absolute value is returned as lowercase hex.

    Args:
        text: Raw story content (normalized internally)

    Returns:
        Hex string without prefix, e.g. '5e918d2'

    Example:
        >>> hash_content("Hello World") == hash_content("helloworld")
        True
    """
    h = 0
    for unit in _utf16_units(normalize_content(text)):
        h = (h * 31 + unit) & _MASK_32

    if h & 0x80000000:
        h -= 1 << 32

    return format(abs(h), "x")
