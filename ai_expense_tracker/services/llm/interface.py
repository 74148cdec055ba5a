"""
Abstract Text Generation Interface

DESIGN DECISION: The LLM is reached through one narrow interface:

    generate(model_id, prompt) -> text

This allows us to:
1. Unit-test the extraction flow with a fake generator (no network)
2. Swap Gemini for another provider without touching the handlers
3. Keep the untyped text channel at a single, well-defined seam

Each call is stateless: no streaming, no function calling, no
multi-turn context.
"""

from abc import ABC, abstractmethod


class GenerationError(Exception):
    """The generation request failed (network, auth, quota, blocked reply...)."""

    def __init__(self, model_id: str, message: str):
        self.model_id = model_id
        super().__init__(message)


class TextGenerator(ABC):
    """
    Abstract interface for a single-shot text generation call.

    Any provider implementation must implement this method.
    """

    @abstractmethod
    async def generate(self, model_id: str, prompt: str) -> str:
        """
        Send ``prompt`` to ``model_id`` and return the reply text.

        Args:
            model_id: Provider model identifier (e.g. "gemini-2.0-flash")
            prompt: Full prompt string

        Returns:
            The raw text payload of the reply

        Raises:
            GenerationError: If the request fails or yields no text
        """
        pass
