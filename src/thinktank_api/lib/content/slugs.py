"""URL slug generation for blog posts."""

import re

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

_MAX_SLUG_LENGTH = 100


def generate_slug(title: str) -> str:
    """Generate a URL-safe slug from a post title.

    Args:
        title: The display title to slugify.

    Returns:
        Lowercase slug, runs of other characters collapsed to single hyphens,
        at most 100 characters.
    """
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower())
    return slug.strip("-")[:_MAX_SLUG_LENGTH].rstrip("-")


def is_valid_slug(slug: str) -> bool:
    return bool(SLUG_PATTERN.match(slug))
