"""LLM services package."""

from ai_expense_tracker.services.llm.interface import GenerationError, TextGenerator
from ai_expense_tracker.services.llm.gemini_service import GeminiTextGenerator

__all__ = [
    "GeminiTextGenerator",
    "GenerationError",
    "TextGenerator",
]
