"""Tests for the Strapi REST client."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from services.category_resolver import CategoryEntry
from services.errors import CategoryDirectoryError, CmsWriteError
from services.strapi_client import StrapiArticle, StrapiClient

API_BASE = "https://cms.example.com/api"


def _client(handler) -> StrapiClient:
    return StrapiClient(
        api_base=API_BASE,
        token="secret-token",
        transport=httpx.MockTransport(handler),
    )


def _article(**overrides) -> StrapiArticle:
    values = {
        "title": "Headline",
        "headline": "Headline",
        "summary": "Summary",
        "body": "First part",
        "body_image_text": "Second part",
        "publish_date": "2026-01-01T00:00:00+00:00",
    }
    values.update(overrides)
    return StrapiArticle(**values)


class TestListCategories:
    def test_reads_flat_records(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"data": [{"id": 1, "name": "Marketing"}, {"id": 2, "name": "Tech"}]},
            )

        entries = asyncio.run(_client(handler).list_categories())

        assert entries == [CategoryEntry(id=1, name="Marketing"), CategoryEntry(id=2, name="Tech")]
        request = seen[0]
        assert request.url.path == "/api/categories"
        assert request.url.params["pagination[pageSize]"] == "100"
        assert request.url.params["pagination[page]"] == "1"
        assert request.headers["Authorization"] == "Bearer secret-token"

    def test_reads_attribute_records(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={"data": [{"id": 7, "attributes": {"name": "Leadership"}}, {"id": 8}]},
            )

        entries = asyncio.run(_client(handler).list_categories())
        assert entries == [CategoryEntry(id=7, name="Leadership")]

    def test_http_error_raises_directory_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        with pytest.raises(CategoryDirectoryError, match="500"):
            asyncio.run(_client(handler).list_categories())

    def test_network_error_raises_directory_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(CategoryDirectoryError):
            asyncio.run(_client(handler).list_categories())


class TestCreateArticle:
    def test_posts_draft_payload(self):
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            assert request.url.path == "/api/articles"
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"data": {"id": 123}})

        article = _article(category_ids=[1, 2], linkedin_snippet="Hook")
        article_id = asyncio.run(_client(handler).create_article(article))

        assert article_id == 123
        data = seen[0]["data"]
        assert data["publishedAt"] is None
        assert data["body"] == "First part"
        assert data["bodyImageText"] == "Second part"
        assert data["categories"] == [1, 2]
        assert data["linkedinSnippet"] == "Hook"

    def test_optional_fields_are_omitted(self):
        data = _article().to_payload()["data"]
        assert "categories" not in data
        assert "linkedinSnippet" not in data
        assert data["publishedAt"] is None

    def test_rejected_write_raises_cms_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": {"message": "Invalid key categories"}})

        with pytest.raises(CmsWriteError) as exc_info:
            asyncio.run(_client(handler).create_article(_article()))
        assert exc_info.value.cms_status == 400
        assert "Invalid key categories" in exc_info.value.response_body

    def test_missing_id_raises_cms_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": None})

        with pytest.raises(CmsWriteError, match="article id"):
            asyncio.run(_client(handler).create_article(_article()))

    def test_string_document_id_is_returned(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"data": {"id": "k3j9w2abc"}})

        article_id = asyncio.run(_client(handler).create_article(_article()))

        assert article_id == "k3j9w2abc"
