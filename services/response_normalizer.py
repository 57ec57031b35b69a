from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from services.errors import MalformedResponseError

logger = logging.getLogger(__name__)

EXCERPT_CHARS = 200

_LEADING_FENCE_RE = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\n?[ \t]*```$")
_BODY_MARKER_RE = re.compile(r'"articleBody"\s*:\s*"')
_SNIPPET_MARKER_RE = re.compile(r'"linkedinSnippet"\s*:\s*"')
_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "\"": "\"",
    "\\": "\\",
    "/": "/",
}
_OBJECT_SHAPE_RE = re.compile(
    r'"articleBody"\s*:\s*"(?P<body>.*)"\s*,\s*'
    r'"linkedinSnippet"\s*:\s*"(?P<snippet>.*?)(?:"\s*\}|"?\s*\Z)',
    re.DOTALL,
)


@dataclass(frozen=True)
class GeneratedContent:
    article_body: str
    linkedin_snippet: str


@dataclass(frozen=True)
class StrategyResult:
    """Outcome of one normalization strategy: either content or the reason it failed."""

    content: GeneratedContent | None = None
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> StrategyResult:
        return cls(error=error)


def strip_code_fences(text: str) -> str:
    stripped = text.strip()
    stripped = _LEADING_FENCE_RE.sub("", stripped, count=1)
    stripped = _TRAILING_FENCE_RE.sub("", stripped, count=1)
    return stripped.strip()


def _from_fields(body: Any, snippet: Any) -> StrategyResult:
    if not isinstance(body, str) or not body.strip():
        return StrategyResult.failed("articleBody missing or empty")
    if not isinstance(snippet, str) or not snippet.strip():
        return StrategyResult.failed("linkedinSnippet missing or empty")
    return StrategyResult(content=GeneratedContent(article_body=body, linkedin_snippet=snippet))


def _parse_strict(text: str) -> StrategyResult:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        return StrategyResult.failed(str(exc))
    if not isinstance(payload, dict):
        return StrategyResult.failed(f"expected a JSON object, got {type(payload).__name__}")
    return _from_fields(payload.get("articleBody"), payload.get("linkedinSnippet"))


def _parse_bounded(text: str) -> StrategyResult:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return StrategyResult.failed("no JSON object boundaries found")
    return _parse_strict(text[start : end + 1])


def _unescape(match: re.Match[str]) -> str:
    token = match.group(1)
    if len(token) == 5 and token[0] == "u":
        return chr(int(token[1:], 16))
    return _SIMPLE_ESCAPES.get(token, token)


def _decode_string_value(raw: str) -> str:
    """Decode escapes in a raw string body while keeping literal newlines.

    Unknown escapes such as ``\\'`` lose their backslash instead of aborting
    the decode of the whole span.
    """
    decoded = _ESCAPE_RE.sub(_unescape, raw)
    return decoded.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


def _extract_fields(text: str) -> StrategyResult:
    body_marker = _BODY_MARKER_RE.search(text)
    if body_marker is None:
        return StrategyResult.failed("articleBody marker not found")
    snippet_marker = _SNIPPET_MARKER_RE.search(text, body_marker.end())
    if snippet_marker is None:
        return StrategyResult.failed("linkedinSnippet marker not found after articleBody")

    body_region = text[body_marker.end() : snippet_marker.start()]
    body_end = body_region.rfind('",')
    if body_end == -1:
        return StrategyResult.failed("articleBody value is not terminated")

    closing_brace = text.rfind("}")
    if closing_brace < snippet_marker.end():
        return StrategyResult.failed("no closing brace after linkedinSnippet")
    snippet_end = text.rfind('"', snippet_marker.end(), closing_brace)
    if snippet_end == -1:
        return StrategyResult.failed("linkedinSnippet value is not terminated")

    return _from_fields(
        _decode_string_value(body_region[:body_end]),
        _decode_string_value(text[snippet_marker.end() : snippet_end]),
    )


def _match_object_shape(text: str) -> StrategyResult:
    match = _OBJECT_SHAPE_RE.search(text)
    if match is None:
        return StrategyResult.failed("response does not match the articleBody/linkedinSnippet shape")
    return _from_fields(
        _decode_string_value(match.group("body")),
        _decode_string_value(match.group("snippet")),
    )


_STRATEGIES: tuple[tuple[str, Callable[[str], StrategyResult]], ...] = (
    ("direct parse", _parse_strict),
    ("bounded parse", _parse_bounded),
    ("field extraction", _extract_fields),
    ("pattern match", _match_object_shape),
)


def normalize_response(raw_text: str) -> GeneratedContent:
    """Recover article body and LinkedIn snippet from a free-text LLM reply.

    Strategies run from strict to lenient and the first success wins. When all
    of them fail a ``MalformedResponseError`` carries excerpts of the reply and
    the reason each strategy gave up.
    """
    raw_text = raw_text or ""
    text = strip_code_fences(raw_text)
    errors: list[str] = []

    for name, strategy in _STRATEGIES:
        result = strategy(text)
        if result.content is not None:
            if errors:
                logger.warning("LLM response recovered by %s after: %s", name, "; ".join(errors))
            return result.content
        logger.debug("Normalization step %s failed: %s", name, result.error)
        errors.append(f"{name}: {result.error}")

    head = raw_text[:EXCERPT_CHARS]
    tail = raw_text[-EXCERPT_CHARS:]
    logger.error(
        "All LLM response parsing attempts failed (length=%s) first=%r last=%r errors=%s",
        len(raw_text),
        head,
        tail,
        errors,
    )
    raise MalformedResponseError(head=head, tail=tail, length=len(raw_text), errors=errors)
