# src/app/deps.py (process-wide client handles, exposed as dependencies)

from __future__ import annotations

import logging
from typing import Optional

import httpx
from fastapi import Depends
from supabase import Client, create_client
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client as TwilioClient

from src.app.config import settings
from src.app.infra.llm.openai_client import OpenAIClient
from src.app.infra.sms.twilio_provider import TwilioSmsProvider
from src.app.infra.storage.supabase_provider import SupabaseImageStorage
from src.app.services.image_generator import ImageGenerator
from src.app.services.image_store import ImageStoreAdapter
from src.app.services.recipe_extractor import RecipeExtractor
from src.app.services.recipe_pipeline import RecipePipeline
from src.app.services.verification_service import VerificationNotifier

logger = logging.getLogger(__name__)

_http_client: httpx.AsyncClient | None = None
_supabase: Client | None = None
_twilio: TwilioClient | None = None


def get_http_client() -> httpx.AsyncClient:
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(timeout=httpx.Timeout(30.0, connect=10.0))
    return _http_client


async def close_http_client() -> None:
    global _http_client
    if _http_client is not None and not _http_client.is_closed:
        await _http_client.aclose()
    _http_client = None


def get_supabase() -> Optional[Client]:
    """Shared storage client, or None when durable image storage is off."""
    global _supabase
    if not settings.IMAGE_STORAGE_ENABLED or not settings.storage_configured:
        return None
    if _supabase is None:
        _supabase = create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_ANON_KEY.get_secret_value(),
        )
    return _supabase


def get_openai_client(http: httpx.AsyncClient = Depends(get_http_client)) -> OpenAIClient:
    return OpenAIClient(
        http=http,
        api_key=settings.openai_api_key,
        organization=settings.OPENAI_ORG_ID,
        base_url=settings.OPENAI_BASE_URL,
        chat_model=settings.OPENAI_CHAT_MODEL,
        image_model=settings.OPENAI_IMAGE_MODEL,
        completion_timeout=settings.COMPLETION_TIMEOUT_SECONDS,
        image_timeout=settings.IMAGE_TIMEOUT_SECONDS,
    )


def get_image_store(
    http: httpx.AsyncClient = Depends(get_http_client),
    supa: Optional[Client] = Depends(get_supabase),
) -> Optional[ImageStoreAdapter]:
    if supa is None:
        return None
    return ImageStoreAdapter(
        http=http,
        storage=SupabaseImageStorage(supa, bucket_name=settings.SUPABASE_BUCKET),
        timeout=settings.STORAGE_TIMEOUT_SECONDS,
        verify_uploads=settings.VERIFY_STORED_IMAGES,
    )


def get_recipe_pipeline(
    client: OpenAIClient = Depends(get_openai_client),
    store: Optional[ImageStoreAdapter] = Depends(get_image_store),
) -> RecipePipeline:
    return RecipePipeline(
        extractor=RecipeExtractor(
            client,
            language=settings.RECIPE_LANGUAGE,
            max_tokens=settings.RECIPE_MAX_TOKENS,
        ),
        generator=ImageGenerator(client),
        store=store,
    )


def get_twilio() -> Optional[TwilioClient]:
    """Shared Twilio client, or None when SMS is not configured (disabled, not fatal)."""
    global _twilio
    if not settings.sms_configured:
        return None
    if _twilio is None:
        _twilio = TwilioClient(
            settings.TWILIO_ACCOUNT_SID,
            settings.TWILIO_AUTH_TOKEN.get_secret_value(),
            http_client=TwilioHttpClient(timeout=settings.SMS_TIMEOUT_SECONDS),
        )
    return _twilio


def get_verification_notifier(
    twilio: Optional[TwilioClient] = Depends(get_twilio),
) -> Optional[VerificationNotifier]:
    if twilio is None:
        return None
    provider = TwilioSmsProvider(twilio, from_number=settings.TWILIO_PHONE_NUMBER)
    return VerificationNotifier(provider)
