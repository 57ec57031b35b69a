from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from schemas.generation import (
    ErrorResponse,
    GenerationData,
    GenerationResponse,
    WebhookRequest,
    WebhookTestResponse,
)
from services.content_generator import ContentGeneratorService
from services.errors import GenerationPipelineError, ServiceNotConfiguredError
from services.funnel_profiles import FUNNEL_PROFILES
from services.generation_orchestrator import (
    GenerationOrchestrator,
    GenerationRequest,
    GenerationSummary,
)
from services.strapi_client import StrapiClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generation"])

ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}

TEST_WEBHOOK_PAYLOAD = WebhookRequest(
    headline="Test Article - Clean Webhook System",
    summary="Testing the cleaned webhook system for LinkedIn automation",
    category="Test",
    funnelType="TOF",
    author="Test Author",
)


def get_generator() -> ContentGeneratorService:
    settings = get_settings()
    if not settings.llm_api_key:
        raise ServiceNotConfiguredError("LLM API key is not configured.")
    return ContentGeneratorService(
        api_key=settings.llm_api_key,
        model=settings.llm_model,
        base_url=settings.llm_base_url,
        max_output_tokens=settings.llm_max_output_tokens,
        temperature=settings.llm_temperature,
    )


def get_store() -> StrapiClient:
    settings = get_settings()
    if not settings.strapi_api_base:
        raise ServiceNotConfiguredError("Strapi URL is not configured.")
    return StrapiClient(
        api_base=settings.strapi_api_base,
        token=settings.strapi_token,
        timeout=settings.strapi_timeout,
        category_page_size=settings.category_page_size,
    )


def get_orchestrator(
    generator: ContentGeneratorService = Depends(get_generator),
    store: StrapiClient = Depends(get_store),
) -> GenerationOrchestrator:
    settings = get_settings()
    return GenerationOrchestrator(
        generator=generator,
        store=store,
        profiles=FUNNEL_PROFILES,
        default_author=settings.default_author,
        split_target_words=settings.split_target_words,
    )


def _generation_data(summary: GenerationSummary, **extra: str) -> GenerationData:
    return GenerationData(
        strapiId=summary.strapi_id,
        linkedinSnippet=summary.linkedin_snippet,
        generatedDate=summary.generated_date,
        bodyWordCount=summary.body_word_count,
        bodyImageTextWordCount=summary.body_image_text_word_count,
        categoriesConnected=summary.categories_connected,
        subheadingsUsed=summary.subheadings_used,
        **extra,
    )


async def _run_webhook(
    payload: WebhookRequest, orchestrator: GenerationOrchestrator
) -> GenerationResponse | JSONResponse:
    logger.info("Webhook received: %s", payload.model_dump(by_alias=True, exclude_none=True))
    try:
        request = GenerationRequest.create(
            headline=payload.headline,
            summary=payload.summary,
            category=payload.category,
            funnel_type=payload.funnel_type,
            subheadings=payload.subheadings,
            author=payload.author,
        )
        summary = await orchestrator.run(request, category_aware=True)
    except GenerationPipelineError as exc:
        logger.error("Webhook error (%s): %s", type(exc).__name__, exc)
        body = ErrorResponse(
            error=str(exc),
            status="error",
            notes=f"Generation failed: {exc}",
        )
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))

    return GenerationResponse(
        data=_generation_data(
            summary,
            status="generated",
            notes=f"Generated {request.funnel_type.value} content successfully",
        )
    )


@router.post(
    "/webhook",
    response_model=GenerationResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def webhook(
    payload: WebhookRequest,
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
) -> GenerationResponse | JSONResponse:
    return await _run_webhook(payload, orchestrator)


@router.post(
    "/test-webhook",
    response_model=WebhookTestResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def run_test_webhook(
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
) -> WebhookTestResponse | JSONResponse:
    logger.info("Testing webhook with canned data")
    result = await _run_webhook(TEST_WEBHOOK_PAYLOAD, orchestrator)
    if isinstance(result, JSONResponse):
        return result
    return WebhookTestResponse(message="Test webhook executed successfully", result=result)


@router.post(
    "/api/generate",
    response_model=GenerationResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def generate(
    payload: WebhookRequest,
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
) -> GenerationResponse:
    request = GenerationRequest.create(
        headline=payload.headline,
        summary=payload.summary,
        category=payload.category,
        funnel_type=payload.funnel_type,
        author=payload.author,
        require_author=True,
    )
    summary = await orchestrator.run(request, category_aware=False)
    return GenerationResponse(data=_generation_data(summary))
