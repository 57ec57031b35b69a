from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

logger = logging.getLogger(__name__)

PARAGRAPH_WINDOW = 50
SENTENCE_WINDOW = 30

_TOKEN_RE = re.compile(r"\S+")
_PARAGRAPH_GAP_RE = re.compile(r"\n[ \t\r]*\n")
_SENTENCE_ENDINGS = (".", "!", "?")
_HEADING_TEMPLATE = r"^[ \t]{0,3}#{1,6}[ \t]+%s[ \t]*#*[ \t]*$"


@dataclass(frozen=True)
class ContentSplit:
    first_part: str
    second_part: str


def count_words(text: str) -> int:
    return len(text.split())


def valid_subheadings(values: Iterable[str | None]) -> list[str]:
    return [value.strip() for value in values if value and value.strip()]


def _paragraph_break(body: str, tokens: Sequence[re.Match[str]], target: int) -> int | None:
    for index in range(max(1, target - PARAGRAPH_WINDOW), min(len(tokens), target + PARAGRAPH_WINDOW)):
        gap = body[tokens[index - 1].end() : tokens[index].start()]
        if _PARAGRAPH_GAP_RE.search(gap):
            return index
    return None


def _sentence_break(words: Sequence[str], target: int) -> int | None:
    for index in range(max(0, target - SENTENCE_WINDOW), min(len(words), target + SENTENCE_WINDOW)):
        if words[index].endswith(_SENTENCE_ENDINGS):
            return index + 1
    return None


def split_by_word_count(body: str, target_words: int = 250) -> ContentSplit:
    """Split ``body`` near ``target_words``, preferring a paragraph, then a sentence boundary."""
    tokens = list(_TOKEN_RE.finditer(body))
    if len(tokens) <= target_words:
        return ContentSplit(first_part=body.strip(), second_part="")

    words = [token.group() for token in tokens]
    break_point = _paragraph_break(body, tokens, target_words)
    if break_point is None:
        break_point = _sentence_break(words, target_words)
    if break_point is None:
        logger.debug("No paragraph or sentence boundary near word %s; splitting mid-sentence", target_words)
        break_point = target_words

    return ContentSplit(
        first_part=" ".join(words[:break_point]).strip(),
        second_part=" ".join(words[break_point:]).strip(),
    )


def split_by_subheading(body: str, subheadings: Sequence[str | None]) -> ContentSplit:
    """Split ``body`` at the heading for the third non-blank subheading.

    Falls back to the character midpoint when the heading is absent. That
    fallback can cut through a word or a markdown block.
    """
    valid = valid_subheadings(subheadings)
    if len(valid) < 3:
        raise ValueError("At least three non-empty subheadings are required to split by subheading.")

    anchor = valid[2]
    pattern = re.compile(_HEADING_TEMPLATE % re.escape(anchor), re.IGNORECASE | re.MULTILINE)
    match = pattern.search(body)
    if match is None:
        logger.warning("Subheading %r not found as a heading; splitting at character midpoint", anchor)
        midpoint = len(body) // 2
        return ContentSplit(first_part=body[:midpoint], second_part=body[midpoint:])

    return ContentSplit(
        first_part=body[: match.start()].strip(),
        second_part=body[match.start() :].strip(),
    )
