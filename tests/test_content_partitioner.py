"""Tests for splitting article bodies into body and bodyImageText parts."""

from __future__ import annotations

import pytest

from services.content_partitioner import (
    count_words,
    split_by_subheading,
    split_by_word_count,
    valid_subheadings,
)


def _words(count: int) -> list[str]:
    return [f"w{index}" for index in range(count)]


class TestWordCountSplit:
    def test_short_body_is_not_split(self):
        split = split_by_word_count("  one two\n\nthree  ", target_words=250)
        assert split.first_part == "one two\n\nthree"
        assert split.second_part == ""

    def test_body_at_target_is_not_split(self):
        body = " ".join(_words(250))
        split = split_by_word_count(body, target_words=250)
        assert split.first_part == body
        assert split.second_part == ""

    def test_prefers_paragraph_break_in_window(self):
        words = _words(400)
        body = " ".join(words[:240]) + "\n\n" + " ".join(words[240:])
        split = split_by_word_count(body, target_words=250)
        assert split.first_part.split() == words[:240]
        assert split.second_part.split() == words[240:]

    def test_paragraph_break_outside_window_is_ignored(self):
        words = _words(400)
        body = " ".join(words[:100]) + "\n\n" + " ".join(words[100:])
        split = split_by_word_count(body, target_words=250)
        assert count_words(split.first_part) == 250

    def test_falls_back_to_sentence_end(self):
        words = _words(400)
        words[260] = "done."
        split = split_by_word_count(" ".join(words), target_words=250)
        assert count_words(split.first_part) == 261
        assert split.first_part.endswith("done.")

    def test_sentence_end_accepts_question_and_exclamation(self):
        words = _words(400)
        words[230] = "really?"
        split = split_by_word_count(" ".join(words), target_words=250)
        assert split.first_part.endswith("really?")

    def test_falls_back_to_target_mid_sentence(self):
        words = _words(400)
        split = split_by_word_count(" ".join(words), target_words=250)
        assert split.first_part.split() == words[:250]
        assert split.second_part.split() == words[250:]

    def test_split_reconstructs_token_sequence(self):
        body = "\n\n".join(
            " ".join(f"s{p}w{i}" for i in range(40)) + "." for p in range(12)
        )
        split = split_by_word_count(body, target_words=250)
        assert split.second_part
        assert (split.first_part + " " + split.second_part).split() == body.split()
        assert 200 <= count_words(split.first_part) <= 300


class TestSubheadingSplit:
    BODY = (
        "## Intro\n\nText a.\n\n"
        "## Why it matters\n\nText b.\n\n"
        "## How To Start\n\nText c.\n\n"
        "## Wrap up\n\nText d."
    )

    def test_splits_at_third_valid_subheading(self):
        subheadings = ["Intro", "", "Why it matters", "how to start", "Wrap up", None]
        split = split_by_subheading(self.BODY, subheadings)
        start = self.BODY.index("## How To Start")
        assert split.first_part == self.BODY[:start].strip()
        assert split.second_part == self.BODY[start:]
        assert split.first_part.endswith("Text b.")

    def test_matches_deeper_heading_levels(self):
        body = "Lead.\n\n### One\n\nA.\n\n### Two\n\nB.\n\n### Three\n\nC."
        split = split_by_subheading(body, ["One", "Two", "Three", "Four"])
        assert split.second_part == "### Three\n\nC."

    def test_paragraph_mention_is_not_a_heading(self):
        body = "We explain how to start here.\n\n## How to start\n\nSteps."
        split = split_by_subheading(body, ["A", "B", "How to start", "D"])
        assert split.first_part == "We explain how to start here."
        assert split.second_part == "## How to start\n\nSteps."

    def test_missing_heading_splits_at_midpoint(self):
        body = "No headings in this body at all, just one long paragraph of text."
        split = split_by_subheading(body, ["A", "B", "Missing", "D"])
        midpoint = len(body) // 2
        assert split.first_part == body[:midpoint]
        assert split.second_part == body[midpoint:]
        assert split.first_part + split.second_part == body

    def test_requires_three_valid_subheadings(self):
        with pytest.raises(ValueError):
            split_by_subheading(self.BODY, ["Intro", " ", None, "Wrap up"])


class TestHelpers:
    def test_valid_subheadings_filters_blanks(self):
        assert valid_subheadings([" One ", "", None, "  ", "Two"]) == ["One", "Two"]

    def test_count_words_empty(self):
        assert count_words("") == 0

    def test_count_words_markdown(self):
        assert count_words("## Title\n\nTwo words") == 4
