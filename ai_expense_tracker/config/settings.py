"""
Configuration Management for AI Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The only secret is the Gemini API key. Its absence is NOT validated at
startup - a missing key surfaces as a failed extraction request.
"""

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseSettings):
    """Gemini LLM configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    api_key: str = Field(
        default="",
        description="Gemini API key"
    )
    model_name: str = Field(
        default="gemini-2.0-flash",
        description="Gemini model to use"
    )
    max_tokens: int = Field(
        default=512,
        ge=64,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Model temperature (lower = more deterministic)"
    )


class SpeechSettings(BaseSettings):
    """Speech-to-text configuration for the voice path."""

    model_config = SettingsConfigDict(
        env_prefix="SPEECH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    language: str = Field(
        default="en-US",
        description="Locale tag passed to the recogniser"
    )
    submit_delay_seconds: float = Field(
        default=0.3,
        ge=0.0,
        le=5.0,
        description="Pause between a final transcript and the AI request"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG regardless of log_level (includes raw model replies)"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level for structured logs"
    )
    currency_symbol: str = Field(
        default="$",
        max_length=5,
        description="Symbol shown in front of amounts in the expense list"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug_mode else self.log_level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def gemini(self) -> GeminiSettings:
        return GeminiSettings()

    @property
    def speech(self) -> SpeechSettings:
        return SpeechSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, Any]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid} booleans, plus "<name>_error"
    message strings describing what is wrong. Used by the sidebar status panel.
    """
    results = {}

    settings = get_settings()

    try:
        gemini = settings.gemini
        results["gemini"] = bool(gemini.api_key)
        if not gemini.api_key:
            results["gemini_error"] = "GEMINI_API_KEY is not set"
    except Exception as e:
        results["gemini"] = False
        results["gemini_error"] = str(e)

    try:
        _ = settings.speech
        results["speech"] = True
    except Exception as e:
        results["speech"] = False
        results["speech_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
