"""Services package."""

from ai_expense_tracker.services.llm import (
    GeminiTextGenerator,
    GenerationError,
    TextGenerator,
)
from ai_expense_tracker.services.speech import (
    GoogleSpeechCapability,
    RecognitionConfig,
    SpeechCapability,
    SpeechError,
    SpeechUnavailableError,
    TranscriptionError,
)
from ai_expense_tracker.services.storage import ExpenseStore

__all__ = [
    # LLM services
    "GeminiTextGenerator",
    "GenerationError",
    "TextGenerator",
    # Speech services
    "GoogleSpeechCapability",
    "RecognitionConfig",
    "SpeechCapability",
    "SpeechError",
    "SpeechUnavailableError",
    "TranscriptionError",
    # Storage
    "ExpenseStore",
]
