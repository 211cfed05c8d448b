"""Rich-text sanitizing for content and blog bodies."""

import re

import bleach

ALLOWED_TAGS = [
    "p",
    "br",
    "strong",
    "b",
    "em",
    "i",
    "u",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "blockquote",
    "code",
    "pre",
    "ul",
    "ol",
    "li",
    "a",
    "img",
    "figure",
    "figcaption",
]

ALLOWED_ATTRIBUTES = {
    "a": ["href", "title", "target", "rel"],
    "img": ["src", "alt", "title"],
}

ALLOWED_PROTOCOLS = ["http", "https", "mailto"]

# bleach keeps the text inside stripped tags, so script and style blocks go first.
_EXECUTABLE_BLOCK_RE = re.compile(r"<(script|style)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)


def sanitize_body(body: str | None) -> str | None:
    """Return ``body`` trimmed and stripped of scripts, event handlers and ``javascript:`` URLs.

    Args:
        body: Raw HTML or plain text from the editor.

    Returns:
        Sanitized HTML, or None when the body is empty.
    """
    if body is None:
        return None
    trimmed = body.strip()
    if not trimmed:
        return None
    without_blocks = _EXECUTABLE_BLOCK_RE.sub("", trimmed)
    return bleach.clean(
        without_blocks,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )
