from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import httpx

from services.category_resolver import CategoryEntry, CategoryId
from services.errors import CategoryDirectoryError, CmsWriteError

logger = logging.getLogger(__name__)

RESPONSE_EXCERPT_CHARS = 500

ArticleId = int | str


@dataclass(frozen=True)
class StrapiArticle:
    title: str
    headline: str
    summary: str
    body: str
    body_image_text: str
    publish_date: str
    category_ids: Sequence[CategoryId] | None = None
    linkedin_snippet: str | None = None

    def to_payload(self) -> dict[str, object]:
        data: dict[str, object] = {
            "title": self.title,
            "headline": self.headline,
            "summary": self.summary,
            "body": self.body,
            "bodyImageText": self.body_image_text,
            "publishDate": self.publish_date,
            "publishedAt": None,
        }
        if self.category_ids is not None:
            data["categories"] = list(self.category_ids)
        if self.linkedin_snippet is not None:
            data["linkedinSnippet"] = self.linkedin_snippet
        return {"data": data}


def _entry_from_record(record: Any) -> CategoryEntry | None:
    if not isinstance(record, dict):
        return None
    attributes = record.get("attributes")
    source = attributes if isinstance(attributes, dict) else record
    name = source.get("name")
    category_id = record.get("id")
    if not isinstance(name, str) or category_id is None:
        return None
    return CategoryEntry(id=category_id, name=name)


class StrapiClient:
    """Read categories from and write draft articles to the Strapi REST API."""

    def __init__(
        self,
        api_base: str,
        token: str | None = None,
        timeout: float = 30.0,
        category_page_size: int = 100,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._category_page_size = category_page_size
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return httpx.AsyncClient(
            base_url=self._api_base,
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def list_categories(self) -> list[CategoryEntry]:
        params = {
            "pagination[page]": 1,
            "pagination[pageSize]": self._category_page_size,
        }
        try:
            async with self._client() as client:
                response = await client.get("/categories", params=params)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Strapi category listing failed: status=%s body=%s",
                exc.response.status_code,
                exc.response.text[:RESPONSE_EXCERPT_CHARS],
            )
            raise CategoryDirectoryError(
                f"Failed to fetch categories: {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Strapi category listing failed: %s", exc)
            raise CategoryDirectoryError(f"Failed to fetch categories: {exc}") from exc

        try:
            records = response.json().get("data") or []
        except (ValueError, AttributeError) as exc:
            raise CategoryDirectoryError("Strapi returned an invalid category listing.") from exc

        entries = [entry for entry in map(_entry_from_record, records) if entry is not None]
        logger.debug("Fetched %s categories from Strapi", len(entries))
        return entries

    async def create_article(self, article: StrapiArticle) -> ArticleId:
        try:
            async with self._client() as client:
                response = await client.post("/articles", json=article.to_payload())
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            body = exc.response.text[:RESPONSE_EXCERPT_CHARS]
            logger.error(
                "Error creating Strapi article: status=%s body=%s",
                exc.response.status_code,
                body,
            )
            raise CmsWriteError(
                f"Strapi article creation failed: {exc.response.status_code}",
                cms_status=exc.response.status_code,
                response_body=body,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Error creating Strapi article: %s", exc)
            raise CmsWriteError(f"Strapi article creation failed: {exc}") from exc

        try:
            article_id = response.json()["data"]["id"]
        except (ValueError, KeyError, TypeError) as exc:
            body = response.text[:RESPONSE_EXCERPT_CHARS]
            logger.error("Strapi returned an unexpected article payload: %s", body)
            raise CmsWriteError(
                "Strapi response did not include an article id.",
                cms_status=response.status_code,
                response_body=body,
            ) from exc
        return article_id
