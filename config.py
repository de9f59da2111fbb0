"""
Configuration settings for the Animal Academy lesson generator.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ========================================
    # AI Integration (Gemini + Imagen)
    # ========================================
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
        description="Google Generative AI (Gemini) API key",
    )
    text_model: str = Field(
        default="gemini-2.5-flash",
        description="Model used for the structured lesson text",
    )
    image_model: str = Field(
        default="imagen-4.0-generate-001",
        description="Model used for comic panel illustrations",
    )
    request_timeout_seconds: float | None = Field(
        default=None,
        description="HTTP timeout for model calls (None keeps the SDK default)",
    )

    # ========================================
    # Lesson Content
    # ========================================
    primary_language: str = Field(
        default="English",
        description="Language name used for LessonLanguage.PRIMARY",
    )
    secondary_language: str = Field(
        default="Spanish",
        description="Language name used for LessonLanguage.SECONDARY",
    )
    max_document_chars: int = Field(
        default=12000,
        description="Maximum characters of an uploaded document sent to the model",
    )

    # ========================================
    # Playground (shared lessons)
    # ========================================
    playground_max_lessons: int = Field(
        default=50,
        description="Shared lessons kept in memory before the oldest is evicted",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    def has_ai_configured(self) -> bool:
        """Check if the Gemini credential is available."""
        return bool(self.gemini_api_key and self.gemini_api_key.strip())

    def language_names(self) -> dict[str, str]:
        """Map LessonLanguage values to the language names used in prompts."""
        return {
            "primary": self.primary_language,
            "secondary": self.secondary_language,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
