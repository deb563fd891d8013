"""
Plain-text sanitizer for user-submitted free text.

Security model:
- Elements whose content is executable or invisible (script, style, iframe,
  ...) are removed together with their content.
- Every remaining tag and attribute is stripped by bleach with an empty
  whitelist, so event handlers and inline styles disappear with their tags.
- bleach returns HTML-escaped text; entities are unescaped so plain input
  comes back unchanged. Cleaning repeats until the text is stable, which keeps
  escaped markup (`&lt;b&gt;`) from surviving as real tags and makes the
  function idempotent.

Normalization of text without markup:
- Entities typed by the user are decoded too: "R&amp;D" becomes "R&D".
- The HTML parser turns "\\r\\n" (and a lone "\\r") into "\\n".
"""
from __future__ import annotations

from typing import Optional
import html
import re

import bleach


_DROP_WITH_CONTENT = (
    "script",
    "style",
    "iframe",
    "object",
    "embed",
    "noscript",
    "template",
    "textarea",
    "title",
    "xmp",
)

_DROP_RE = re.compile(
    r"<(%s)\b[^>]*>.*?(?:</\1\s*>|\Z)" % "|".join(_DROP_WITH_CONTENT),
    re.IGNORECASE | re.DOTALL,
)

# Bound on clean passes; each pass that changes the text shortens it.
_MAX_PASSES = 16


def _clean_once(text: str) -> str:
    text = _DROP_RE.sub("", text)
    text = bleach.clean(text, tags=[], attributes={}, strip=True, strip_comments=True)
    return html.unescape(text).strip()


def sanitize(raw: Optional[str]) -> str:
    """Strip all markup from `raw` and trim it.

    Returns "" for None or empty input. Plain text without markup or entities
    is returned trimmed, with line endings normalized to "\\n".
    """
    if not raw:
        return ""
    text = str(raw)
    for _ in range(_MAX_PASSES):
        cleaned = _clean_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned
    # Pathological nesting: drop any delimiter that is still left.
    return text.replace("<", "").replace(">", "").strip()


__all__ = ["sanitize"]
