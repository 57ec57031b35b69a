from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from routers.generation import get_generator, get_store
from schemas.debug import DebugErrorResponse, DebugLlmResponse, DebugStrapiResponse
from services.content_generator import ContentGeneratorService
from services.errors import CmsWriteError, UpstreamGenerationError
from services.strapi_client import StrapiArticle, StrapiClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["debug"])

DEBUG_PROMPT = 'Hello, respond with JSON: {"test": "success"}'
DEBUG_MAX_OUTPUT_TOKENS = 100


def _debug_article() -> StrapiArticle:
    return StrapiArticle(
        title="Test Article",
        headline="Test Article",
        summary="This is a test article",
        body="## Test Content\n\nThis is the first part of the test content.",
        body_image_text="This is the second part of the test content that goes into bodyImageText.",
        publish_date=datetime.now(timezone.utc).isoformat(),
    )


def _error(body: DebugErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


@router.get(
    "/debug-claude",
    response_model=DebugLlmResponse,
    responses={500: {"model": DebugErrorResponse}},
)
async def debug_llm(
    generator: ContentGeneratorService = Depends(get_generator),
) -> DebugLlmResponse | JSONResponse:
    """Send a minimal prompt to the LLM and echo its raw reply."""
    try:
        text = await generator.complete(DEBUG_PROMPT, max_output_tokens=DEBUG_MAX_OUTPUT_TOKENS)
    except UpstreamGenerationError as exc:
        logger.error("LLM debug call failed: %s", exc)
        cause = exc.__cause__
        return _error(
            DebugErrorResponse(
                error=str(exc),
                details=str(cause) if cause is not None else None,
                status=exc.upstream_status,
            )
        )
    return DebugLlmResponse(claude_response=text)


@router.get(
    "/debug-strapi",
    response_model=DebugStrapiResponse,
    responses={500: {"model": DebugErrorResponse}},
)
async def debug_strapi(
    store: StrapiClient = Depends(get_store),
) -> DebugStrapiResponse | JSONResponse:
    """Write a canned draft article to Strapi and report the id it was given."""
    try:
        article_id = await store.create_article(_debug_article())
    except CmsWriteError as exc:
        logger.error("Strapi debug write failed: %s", exc)
        return _error(
            DebugErrorResponse(
                error=str(exc),
                details=exc.response_body,
                status=exc.cms_status,
            )
        )
    logger.info("Strapi debug article created with id %s", article_id)
    return DebugStrapiResponse(strapi_response={"id": article_id})
