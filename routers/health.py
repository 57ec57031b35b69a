from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.config import get_settings
from schemas.generation import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/api/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=get_settings().version,
        endpoints={
            "generate": "/api/generate",
            "webhook": "/webhook",
            "testWebhook": "/test-webhook",
            "health": "/api/health",
            "debugClaude": "/api/debug-claude",
            "debugStrapi": "/api/debug-strapi",
        },
    )
