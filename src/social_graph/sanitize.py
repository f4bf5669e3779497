"""Cleanup of user-supplied free text before it is persisted."""

import html
import re
from typing import Optional

MAX_TEXT_LENGTH = 10000

_DANGEROUS_BLOCKS = re.compile(
    r"<(script|style|iframe|object|embed)[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)
_TAGS = re.compile(r"<[^>]*>")
_DANGEROUS_SCHEMES = re.compile(r"(?:javascript|vbscript)\s*:|data:text/html", re.IGNORECASE)
# Control characters other than tab and newlines
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def sanitize(text: Optional[str]) -> Optional[str]:
    """
    Strip markup, script-like schemes and control characters from ``text``.

    Never raises: ``None`` passes through, non-strings are stringified, and
    the result is trimmed and capped at ``MAX_TEXT_LENGTH`` characters.
    """
    if text is None:
        return None
    if not isinstance(text, str):
        text = str(text)
    cleaned = _DANGEROUS_BLOCKS.sub("", text)
    cleaned = _TAGS.sub("", cleaned)
    cleaned = html.unescape(cleaned)
    # unescaping may reveal new tags
    cleaned = _TAGS.sub("", cleaned)
    cleaned = _DANGEROUS_SCHEMES.sub("", cleaned)
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    return cleaned.strip()[:MAX_TEXT_LENGTH]
