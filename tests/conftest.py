from __future__ import annotations

import json

import pytest

from services.category_resolver import CategoryEntry
from services.funnel_profiles import FUNNEL_PROFILES
from services.generation_orchestrator import GenerationOrchestrator
from services.strapi_client import ArticleId, StrapiArticle


class FakeGenerator:
    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.prompts: list[str] = []

    async def complete(self, prompt: str, max_output_tokens: int | None = None) -> str:
        self.prompts.append(prompt)
        return self.reply


class FakeStore:
    def __init__(self, categories: list[CategoryEntry], article_id: ArticleId = 42) -> None:
        self.categories = categories
        self.article_id = article_id
        self.articles: list[StrapiArticle] = []
        self.list_calls = 0

    async def list_categories(self) -> list[CategoryEntry]:
        self.list_calls += 1
        return list(self.categories)

    async def create_article(self, article: StrapiArticle) -> ArticleId:
        self.articles.append(article)
        return self.article_id


def llm_reply(body: str, snippet: str = "A hook worth reading.") -> str:
    return json.dumps({"articleBody": body, "linkedinSnippet": snippet})


GUIDED_BODY = (
    "## Why Marketing Matters\n\nSmall teams win on focus.\n\n"
    "## Where Tech Helps\n\nAutomation frees time.\n\n"
    "## Building The Playbook\n\nStart with one channel.\n\n"
    "## Measuring Results\n\nTrack what you ship."
)

GUIDED_SUBHEADINGS = [
    "Why Marketing Matters",
    "Where Tech Helps",
    "Building the Playbook",
    "Measuring Results",
]


@pytest.fixture
def directory() -> list[CategoryEntry]:
    return [
        CategoryEntry(id=1, name="Marketing"),
        CategoryEntry(id=2, name="Tech"),
        CategoryEntry(id=3, name="Leadership"),
        CategoryEntry(id=9, name="Test"),
    ]


@pytest.fixture
def make_orchestrator(directory):
    def _make(reply: str, categories: list[CategoryEntry] | None = None):
        generator = FakeGenerator(reply)
        store = FakeStore(directory if categories is None else categories)
        orchestrator = GenerationOrchestrator(
            generator=generator,
            store=store,
            profiles=FUNNEL_PROFILES,
        )
        return orchestrator, generator, store

    return _make
