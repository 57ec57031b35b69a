import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware
from starlette.responses import JSONResponse

from app.core.config import get_settings
from app.core.logging_config import configure_logging
from routers import debug, generation, health
from services.errors import GenerationPipelineError

logger = logging.getLogger(__name__)

WEBHOOK_PATHS = frozenset({"/webhook", "/test-webhook"})


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid request: " + "; ".join(parts)


def _error_payload(request: Request, message: str) -> dict[str, object]:
    payload: dict[str, object] = {"success": False, "error": message}
    if request.url.path in WEBHOOK_PATHS:
        payload["status"] = "error"
        payload["notes"] = f"Generation failed: {message}"
    return payload


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)
    docs_url = "/docs" if settings.enable_docs else None
    redoc_url = "/redoc" if settings.enable_docs else None
    openapi_url = "/openapi.json" if settings.enable_docs else None
    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
    )

    if settings.environment == "production":
        app.add_middleware(HTTPSRedirectMiddleware)

    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=settings.allowed_hosts,
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
    app.state.limiter = limiter
    limiter.exempt(generation.webhook)
    limiter.exempt(generation.run_test_webhook)
    app.add_middleware(SlowAPIMiddleware)

    # SlowAPIMiddleware only calls synchronous handlers.
    @app.exception_handler(RateLimitExceeded)
    def rate_limit_handler(_: Request, exc: RateLimitExceeded) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            content={"success": False, "error": f"Too many requests from this IP: {exc.detail}"},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _format_validation_errors(exc)
        logger.warning("Rejected request: %s", message)
        return JSONResponse(status_code=400, content=_error_payload(request, message))

    @app.exception_handler(GenerationPipelineError)
    async def pipeline_error_handler(request: Request, exc: GenerationPipelineError) -> JSONResponse:
        logger.error("Generation error on %s (%s): %s", request.url.path, type(exc).__name__, exc)
        return JSONResponse(status_code=exc.status_code, content=_error_payload(request, str(exc)))

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):  # type: ignore[no-untyped-def]
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["X-XSS-Protection"] = "0"
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        response.headers["Content-Security-Policy"] = "default-src 'self'"
        return response

    app.include_router(health.router)
    app.include_router(generation.router)
    app.include_router(debug.router)
    logger.info("%s ready to receive generation requests", settings.project_name)
    return app
