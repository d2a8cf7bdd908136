"""Tests for slug generation."""

import re

from crewhub.utils.slugs import generate_unique_slug, slugify, unique_timestamp


class TestSlugify:
    def test_title_becomes_hyphenated_lowercase(self):
        assert slugify("4 Video Editors for Shortfilm!") == "4-video-editors-for-shortfilm"

    def test_runs_of_punctuation_collapse_to_one_hyphen(self):
        assert slugify("  --Hello__World--  ") == "hello-world"
        assert slugify("  Multiple   Spaces -- Here ") == "multiple-spaces-here"

    def test_non_ascii_letters_are_treated_as_separators(self):
        assert slugify("Café Crème") == "caf-cr-me"

    def test_title_without_alphanumerics_falls_back(self):
        assert slugify("!!!") == "untitled"
        assert slugify("") == "untitled"
        assert slugify(None) == "untitled"


class TestUniqueSlug:
    def test_free_slug_is_used_as_is(self):
        assert generate_unique_slug("Night Shoot", lambda slug: False) == "night-shoot"

    def test_taken_slug_gets_timestamp_suffix(self):
        slug = generate_unique_slug("Night Shoot", lambda slug: slug == "night-shoot")
        assert re.match(r"^night-shoot-\d{13}$", slug)

    def test_repeated_collisions_never_repeat_a_suffix(self):
        taken = {"night-shoot"}
        for _ in range(20):
            slug = generate_unique_slug("Night Shoot", lambda s: s == "night-shoot")
            assert slug not in taken
            taken.add(slug)

    def test_timestamps_strictly_increase(self):
        values = [unique_timestamp() for _ in range(200)]
        assert all(a < b for a, b in zip(values, values[1:]))
