from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Protocol, Sequence

from services.category_resolver import (
    CategoryEntry,
    CategoryId,
    parse_category_field,
    resolve_categories,
)
from services.content_generator import build_prompt
from services.content_partitioner import (
    ContentSplit,
    count_words,
    split_by_subheading,
    split_by_word_count,
    valid_subheadings,
)
from services.errors import GenerationValidationError, NoCategoriesMatchedError
from services.funnel_profiles import FunnelProfile, FunnelType
from services.response_normalizer import normalize_response
from services.strapi_client import ArticleId, StrapiArticle

logger = logging.getLogger(__name__)

MAX_SUBHEADINGS = 6
MIN_GUIDING_SUBHEADINGS = 4


class TextGenerator(Protocol):
    async def complete(self, prompt: str) -> str: ...


class ArticleStore(Protocol):
    async def list_categories(self) -> list[CategoryEntry]: ...

    async def create_article(self, article: StrapiArticle) -> ArticleId: ...


@dataclass(frozen=True)
class GenerationRequest:
    headline: str
    summary: str
    categories: tuple[str, ...]
    funnel_type: FunnelType
    subheadings: tuple[str, ...] = ()
    author: str | None = None

    @classmethod
    def create(
        cls,
        headline: str | None,
        summary: str | None,
        category: str | Sequence[str] | None,
        funnel_type: FunnelType | str | None,
        subheadings: Sequence[str | None] = (),
        author: str | None = None,
        require_author: bool = False,
    ) -> GenerationRequest:
        categories = parse_category_field(category)
        missing = [
            name
            for name, value in (
                ("headline", headline and headline.strip()),
                ("summary", summary and summary.strip()),
                ("category", categories),
                ("funnelType", funnel_type),
                ("author", author and author.strip() if require_author else True),
            )
            if not value
        ]
        if missing:
            raise GenerationValidationError("Missing required fields: " + ", ".join(missing))

        try:
            funnel = FunnelType(funnel_type.strip().upper())
        except ValueError as exc:
            allowed = ", ".join(item.value for item in FunnelType)
            raise GenerationValidationError(
                f"Unknown funnelType {funnel_type!r}; expected one of {allowed}"
            ) from exc

        if len(subheadings) > MAX_SUBHEADINGS:
            raise GenerationValidationError(f"At most {MAX_SUBHEADINGS} subheadings are supported.")
        guides = valid_subheadings(subheadings)
        if guides and len(guides) < MIN_GUIDING_SUBHEADINGS:
            raise GenerationValidationError(
                f"At least {MIN_GUIDING_SUBHEADINGS} non-empty subheadings are required, got {len(guides)}."
            )

        return cls(
            headline=headline.strip(),
            summary=summary.strip(),
            categories=tuple(categories),
            funnel_type=funnel,
            subheadings=tuple(guides),
            author=author.strip() if author and author.strip() else None,
        )

    @property
    def subheading_guided(self) -> bool:
        return bool(self.subheadings)


@dataclass(frozen=True)
class GenerationSummary:
    strapi_id: str
    linkedin_snippet: str
    generated_date: str
    body_word_count: int
    body_image_text_word_count: int
    categories_connected: int | None = None
    subheadings_used: int | None = None


class GenerationOrchestrator:
    """Run one request through prompt, LLM, normalization, split and CMS write."""

    def __init__(
        self,
        generator: TextGenerator,
        store: ArticleStore,
        profiles: Mapping[FunnelType, FunnelProfile],
        default_author: str = "EgoIQ Team",
        split_target_words: int = 250,
    ) -> None:
        self._generator = generator
        self._store = store
        self._profiles = profiles
        self._default_author = default_author
        self._split_target_words = split_target_words

    async def _resolve_category_ids(self, request: GenerationRequest) -> list[CategoryId]:
        directory = await self._store.list_categories()
        resolution = resolve_categories(request.categories, directory)
        if not resolution.resolved:
            raise NoCategoriesMatchedError(list(request.categories))
        logger.info(
            "Resolved %s of %s categories for %r",
            len(resolution.resolved),
            len(request.categories),
            request.headline,
        )
        return resolution.ids

    def _split(self, request: GenerationRequest, body: str) -> ContentSplit:
        if request.subheading_guided:
            return split_by_subheading(body, request.subheadings)
        return split_by_word_count(body, self._split_target_words)

    async def run(self, request: GenerationRequest, *, category_aware: bool = True) -> GenerationSummary:
        logger.info("Processing generation request: %s", request.headline)

        category_ids: list[CategoryId] | None = None
        if category_aware:
            category_ids = await self._resolve_category_ids(request)

        prompt = build_prompt(
            profile=self._profiles[request.funnel_type],
            funnel_type=request.funnel_type,
            headline=request.headline,
            summary=request.summary,
            categories=request.categories,
            author=request.author or self._default_author,
            subheadings=request.subheadings,
        )
        raw_text = await self._generator.complete(prompt)
        content = normalize_response(raw_text)

        split = self._split(request, content.article_body)
        body_words = count_words(split.first_part)
        image_text_words = count_words(split.second_part)
        logger.info(
            "Content split: first part %s words, second part %s words",
            body_words,
            image_text_words,
        )

        now = datetime.now(timezone.utc)
        article_id = await self._store.create_article(
            StrapiArticle(
                title=request.headline,
                headline=request.headline,
                summary=request.summary,
                body=split.first_part,
                body_image_text=split.second_part,
                publish_date=now.isoformat(),
                category_ids=category_ids,
                linkedin_snippet=content.linkedin_snippet if category_aware else None,
            )
        )
        logger.info("Successfully generated article %s for: %s", article_id, request.headline)

        return GenerationSummary(
            strapi_id=str(article_id),
            linkedin_snippet=content.linkedin_snippet,
            generated_date=now.date().isoformat(),
            body_word_count=body_words,
            body_image_text_word_count=image_text_words,
            categories_connected=len(category_ids) if category_ids is not None else None,
            subheadings_used=len(request.subheadings) if request.subheading_guided else None,
        )
