"""Speech-to-text services package."""

from ai_expense_tracker.services.speech.interface import (
    RecognitionConfig,
    SpeechCapability,
    SpeechError,
    SpeechUnavailableError,
    TranscriptionError,
)
from ai_expense_tracker.services.speech.google_speech import GoogleSpeechCapability

__all__ = [
    "GoogleSpeechCapability",
    "RecognitionConfig",
    "SpeechCapability",
    "SpeechError",
    "SpeechUnavailableError",
    "TranscriptionError",
]
