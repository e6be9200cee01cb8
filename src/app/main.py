# src/app/main.py
from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.app.config import APP_NAME, APP_VERSION, settings
from src.app.deps import close_http_client
from src.app.domain.errors import ConfigurationError, RecipeServiceError
from src.app.routers.recipes import router as recipes_router
from src.app.routers.verification import router as verification_router

# Plain stdout logging (fine for dev and containers)
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

ENDPOINTS = ["/api/generate-recipes", "/api/generate-image", "/api/send-verification-sms"]

app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials="*" not in settings.FRONTEND_CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recipes_router)
app.include_router(verification_router)


class BodySizeLimitMiddleware:
    """
    Rejects bodies over MAX_BODY_BYTES with 413.

    A declared Content-Length is checked up front; chunked bodies are
    counted as they are read.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = settings.MAX_BODY_BYTES
        detail = f"Request body exceeds {limit // (1024 * 1024)}MB"

        length = dict(scope["headers"]).get(b"content-length", b"").decode("latin-1")
        if length.isdigit() and int(length) > limit:
            response = JSONResponse(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, content={"error": detail})
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=detail)
            return message

        await self.app(scope, limited_receive, send)


app.add_middleware(BodySizeLimitMiddleware)


@app.exception_handler(RecipeServiceError)
async def recipe_service_error_handler(request: Request, exc: RecipeServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in errors
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": f"Invalid request: {detail}"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "details": str(exc)},
    )


@app.on_event("startup")
async def startup() -> None:
    errors = settings.configuration_errors()
    if errors:
        for error in errors:
            logger.error("Configuration error: %s", error)
        raise ConfigurationError(errors)

    for name, present in settings.credential_report().items():
        logger.info("  - %s: %s", name, "present" if present else "missing")

    if not settings.openai_api_key:
        logger.error("OPENAI_API_KEY missing: recipe and image endpoints will answer 503")
    if not settings.IMAGE_STORAGE_ENABLED:
        logger.warning("Durable image storage disabled: transient image URLs will be returned")
    if not settings.sms_configured:
        logger.warning("Twilio credentials not found: SMS functionality will be disabled")

    logger.info("%s API %s started (env=%s)", APP_NAME, APP_VERSION, settings.APP_ENV)


@app.on_event("shutdown")
async def shutdown() -> None:
    await close_http_client()


@app.get("/")
def index():
    return {
        "message": f"{APP_NAME} API server running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": ENDPOINTS,
        "features": [
            "Personalized recipe generation from ingredient photos",
            "Recipe image generation",
            "SMS verification" if settings.sms_configured else "SMS verification (disabled)",
        ],
    }


@app.get("/health")
def health():
    return {"ok": True}
