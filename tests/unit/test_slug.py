"""Unit tests for URL slug helpers in app/content/slug.py."""

from __future__ import annotations

import pytest

from app.content.slug import MAX_SLUG_LENGTH, matches_slug, normalize_slug, slugify


class TestSlugify:
    """Test title to slug conversion."""

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Spring Adventures in Banff!", "spring-adventures-in-banff"),
            ("  Edmonton's   Fringe Festival  ", "edmonton-s-fringe-festival"),
            ("Café Culture: Calgary", "cafe-culture-calgary"),
            ("2026 -- Year in Review", "2026-year-in-review"),
        ],
    )
    def test_slugify(self, title: str, expected: str) -> None:
        """Test that titles collapse to lowercase hyphenated ASCII."""
        assert slugify(title) == expected

    def test_slugify_empty_title(self) -> None:
        """Test that a missing title produces an empty slug."""
        assert slugify("") == ""
        assert slugify(None) == ""

    def test_slugify_truncates_without_trailing_hyphen(self) -> None:
        """Test that long titles are cut to the maximum length."""
        title = "word " * 60

        slug = slugify(title)

        assert len(slug) <= MAX_SLUG_LENGTH
        assert not slug.endswith("-")


class TestMatchesSlug:
    """Test slug matching against titles and persisted slugs."""

    def test_matches_title_slug(self) -> None:
        """Test that the slug derived from the current title matches."""
        assert matches_slug("spring-in-banff", title="Spring in Banff")

    def test_matches_persisted_slug_after_rename(self) -> None:
        """Test that the slug stored at creation keeps resolving after a title edit."""
        assert matches_slug("old-title", title="Brand New Title", persisted_slug="old-title")
        assert matches_slug("brand-new-title", title="Brand New Title", persisted_slug="old-title")

    def test_normalizes_requested_slug(self) -> None:
        """Test that surrounding slashes, whitespace and case are ignored."""
        assert normalize_slug(" /Spring-In-Banff/ ") == "spring-in-banff"
        assert matches_slug("/Spring-In-Banff/", title="Spring in Banff")

    def test_empty_slug_never_matches(self) -> None:
        """Test that an empty request does not match an untitled item."""
        assert not matches_slug("", title="")
        assert not matches_slug("  /  ", title=None)

    def test_different_slug_does_not_match(self) -> None:
        """Test that an unrelated slug is rejected."""
        assert not matches_slug("lake-louise", title="Spring in Banff")
