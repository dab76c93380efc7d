"""URL slugs for content items."""

from __future__ import annotations

import re
import unicodedata

MAX_SLUG_LENGTH = 100

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(title: str | None) -> str:
    """Convert a title to a URL-friendly slug.

    "Spring Adventures in Banff!" -> "spring-adventures-in-banff"
    """
    if not title:
        return ""
    normalized = unicodedata.normalize("NFKD", title)
    ascii_title = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = _NON_ALNUM.sub("-", ascii_title).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-")


def normalize_slug(slug: str) -> str:
    return slug.strip().strip("/").lower()


def matches_slug(slug: str, *, title: str | None, persisted_slug: str | None = None) -> bool:
    # Either the persisted slug or the current title slug resolves, so links
    # created before a rename keep working.
    wanted = normalize_slug(slug)
    if not wanted:
        return False
    if persisted_slug and persisted_slug.lower() == wanted:
        return True
    return slugify(title) == wanted
