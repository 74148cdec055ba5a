"""
Text Generation using Google Gemini

DESIGN DECISION: We talk to Gemini through the google-generativeai SDK
with a low temperature, because the only thing we ask of it is to
re-shape a sentence into a fixed JSON object.

This service handles:
1. Configuring the SDK with the API key from settings
2. One generate_content_async call per request
3. Turning every SDK failure into GenerationError

There is deliberately no retry here. A failed request is reported to the
user, who can simply press the button again.
"""

from typing import Optional

import google.generativeai as genai
import structlog

from ai_expense_tracker.config import get_settings
from ai_expense_tracker.config.settings import GeminiSettings
from ai_expense_tracker.services.llm.interface import GenerationError, TextGenerator


logger = structlog.get_logger(__name__)


class GeminiTextGenerator(TextGenerator):
    """
    TextGenerator backed by Google Gemini.

    Models are created lazily and cached per model id.
    """

    def __init__(self, settings: Optional[GeminiSettings] = None):
        self._settings = settings or get_settings().gemini
        self._configured = False
        self._models: dict[str, genai.GenerativeModel] = {}

    def _configure_genai(self):
        """Configure Google Generative AI."""
        if not self._configured:
            genai.configure(api_key=self._settings.api_key)
            self._configured = True

    def _get_model(self, model_id: str) -> genai.GenerativeModel:
        """Get or create the model client for ``model_id``."""
        self._configure_genai()
        if model_id not in self._models:
            self._models[model_id] = genai.GenerativeModel(
                model_name=model_id,
                generation_config={
                    "temperature": self._settings.temperature,
                    "max_output_tokens": self._settings.max_tokens,
                },
            )
        return self._models[model_id]

    async def generate(self, model_id: str, prompt: str) -> str:
        try:
            model = self._get_model(model_id)
            response = await model.generate_content_async(prompt)
            # .text raises ValueError when the reply was blocked or empty
            text = response.text
        except Exception as e:
            logger.warning("gemini_request_failed", model_id=model_id, error=str(e))
            raise GenerationError(model_id, f"Gemini request failed: {e}") from e

        if not text:
            raise GenerationError(model_id, "Gemini returned an empty reply")
        return text
