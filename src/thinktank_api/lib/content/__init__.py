"""Content helpers: body sanitizing and slug generation."""

from thinktank_api.lib.content.sanitize import sanitize_body
from thinktank_api.lib.content.slugs import SLUG_PATTERN, generate_slug, is_valid_slug

__all__ = ["SLUG_PATTERN", "generate_slug", "is_valid_slug", "sanitize_body"]
