from __future__ import annotations

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "NutriScan"
APP_VERSION = "1.0.0"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    APP_ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    MAX_BODY_BYTES: int = 15 * 1024 * 1024
    FRONTEND_CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])

    # OpenAI (completion + image generation)
    OPENAI_API_KEY: Optional[SecretStr] = None
    OPENAI_ORG_ID: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_CHAT_MODEL: str = "gpt-4o-mini"
    OPENAI_IMAGE_MODEL: str = "dall-e-3"
    RECIPE_MAX_TOKENS: int = 1000
    RECIPE_LANGUAGE: str = "French"

    # Supabase storage
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[SecretStr] = None
    SUPABASE_BUCKET: str = "recipe-images"
    IMAGE_STORAGE_ENABLED: bool = True
    VERIFY_STORED_IMAGES: bool = False

    # Twilio
    TWILIO_ACCOUNT_SID: Optional[str] = None
    TWILIO_AUTH_TOKEN: Optional[SecretStr] = None
    TWILIO_PHONE_NUMBER: Optional[str] = None

    # Outbound timeouts (seconds)
    COMPLETION_TIMEOUT_SECONDS: float = 60.0
    IMAGE_TIMEOUT_SECONDS: float = 90.0
    STORAGE_TIMEOUT_SECONDS: float = 30.0
    SMS_TIMEOUT_SECONDS: float = 15.0

    @property
    def openai_api_key(self) -> str | None:
        return self.OPENAI_API_KEY.get_secret_value() if self.OPENAI_API_KEY else None

    @property
    def storage_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)

    @property
    def sms_configured(self) -> bool:
        return bool(self.TWILIO_ACCOUNT_SID and self.TWILIO_AUTH_TOKEN and self.TWILIO_PHONE_NUMBER)

    def configuration_errors(self) -> list[str]:
        """Return blocking configuration errors (empty when the app can start)."""
        errors = []

        if self.IMAGE_STORAGE_ENABLED:
            if not self.SUPABASE_URL:
                errors.append("SUPABASE_URL is required when IMAGE_STORAGE_ENABLED is true")
            if not self.SUPABASE_ANON_KEY:
                errors.append("SUPABASE_ANON_KEY is required when IMAGE_STORAGE_ENABLED is true")

        return errors

    def credential_report(self) -> dict[str, bool]:
        return {
            "OPENAI_API_KEY": self.OPENAI_API_KEY is not None,
            "OPENAI_ORG_ID": bool(self.OPENAI_ORG_ID),
            "SUPABASE_URL": bool(self.SUPABASE_URL),
            "SUPABASE_ANON_KEY": self.SUPABASE_ANON_KEY is not None,
            "TWILIO_ACCOUNT_SID": bool(self.TWILIO_ACCOUNT_SID),
            "TWILIO_AUTH_TOKEN": self.TWILIO_AUTH_TOKEN is not None,
            "TWILIO_PHONE_NUMBER": bool(self.TWILIO_PHONE_NUMBER),
        }


settings = Settings()
