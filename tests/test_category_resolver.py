from __future__ import annotations

import logging

from services.category_resolver import (
    CategoryEntry,
    parse_category_field,
    resolve_categories,
)

DIRECTORY = [
    CategoryEntry(id=1, name="marketing"),
    CategoryEntry(id=2, name="Tech"),
    CategoryEntry(id=3, name="Leadership"),
]


class TestParseCategoryField:
    def test_splits_comma_separated_string(self):
        assert parse_category_field("Marketing, Tech,,") == ["Marketing", "Tech"]

    def test_accepts_sequence(self):
        assert parse_category_field([" Marketing ", "", "Tech"]) == ["Marketing", "Tech"]

    def test_none_is_empty(self):
        assert parse_category_field(None) == []


class TestResolveCategories:
    def test_match_is_case_insensitive(self):
        resolution = resolve_categories(["Marketing"], DIRECTORY)
        assert resolution.resolved == {"Marketing": 1}
        assert resolution.ids == [1]

    def test_unmatched_names_are_recorded_and_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="services.category_resolver"):
            resolution = resolve_categories(["Tech", "Nope"], DIRECTORY)
        assert resolution.ids == [2]
        assert resolution.unmatched == ("Nope",)
        assert "Nope" in caplog.text

    def test_no_partial_matching(self):
        resolution = resolve_categories(["Market", "Leader"], DIRECTORY)
        assert resolution.resolved == {}
        assert resolution.unmatched == ("Market", "Leader")

    def test_duplicate_ids_are_collapsed(self):
        resolution = resolve_categories(["Tech", "tech"], DIRECTORY)
        assert resolution.ids == [2]

    def test_empty_directory(self):
        resolution = resolve_categories(["Tech"], [])
        assert resolution.ids == []
        assert resolution.unmatched == ("Tech",)
