"""Configuration package."""

from ai_expense_tracker.config.settings import (
    AppSettings,
    GeminiSettings,
    Settings,
    SpeechSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GeminiSettings",
    "Settings",
    "SpeechSettings",
    "get_settings",
    "validate_all_settings",
]
