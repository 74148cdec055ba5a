"""
AI Agent for free-text expense extraction

The LLM is a TRANSLATOR, not an ORACLE.
It turns one sentence ("100 rupees for groceries on 5th May") into the
fixed JSON shape below. It never decides whether an expense is saved.

    {"Title": string, "Description": string, "Amount": number, "Date": "YYYY-MM-DD"}

The flow is split in two so the interesting part can be tested without
the network:

1. ExpenseExtractionAgent.extract - builds the prompt and calls the model
2. extract_expense - PURE function: raw reply text -> ExtractionResult

Models routinely wrap JSON in markdown code fences even when told not to,
so the fences are stripped before parsing. Anything that still is not a
JSON object is reported as an ExtractionError; missing or junk fields are
replaced with defaults instead.
"""

import json
import re
from datetime import date
from typing import Optional

import structlog

from ai_expense_tracker.config import get_settings
from ai_expense_tracker.models.expense import (
    ExpenseDraft,
    ExtractionErrorKind,
    ExtractionResult,
)
from ai_expense_tracker.services.llm import TextGenerator


logger = structlog.get_logger(__name__)

_JSON_FENCE = re.compile(r"```json", re.IGNORECASE)
_BARE_FENCE = "```"


def build_extraction_prompt(text: str, today: str) -> str:
    """
    Build the strict-JSON prompt for one piece of user text.

    Args:
        text: The user's raw text, embedded verbatim
        today: ISO date ("YYYY-MM-DD") the model must use when the text
               mentions no date
    """
    return f"""
You are a JSON API.

Return ONLY valid JSON.
Do not include explanation, text, or markdown.

Schema:
{{
  "Title": string,
  "Description": string,
  "Amount": number,
  "Date": "YYYY-MM-DD"
}}

Text: "{text}"

If date is missing, use {today}
"""


def clean_model_output(raw_text: str) -> str:
    """
    Strip markdown code-fence markers and surrounding whitespace.

    Every "```json" (any case) and every bare "```" is removed wherever
    it occurs, not only at the ends.
    """
    cleaned = _JSON_FENCE.sub("", raw_text or "")
    cleaned = cleaned.replace(_BARE_FENCE, "")
    return cleaned.strip()


def extract_expense(raw_text: str, fallback_date: date) -> ExtractionResult:
    """
    Turn a raw model reply into an expense draft.

    Args:
        raw_text: Reply text exactly as the model returned it
        fallback_date: Date used when the reply has no usable Date

    Returns:
        ExtractionResult holding either a draft (defaults applied) or
        an error describing why the reply was unusable.
    """
    cleaned = clean_model_output(raw_text)
    if not cleaned:
        return ExtractionResult.failure(
            ExtractionErrorKind.EMPTY_OUTPUT,
            "Model returned no content",
        )

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        return ExtractionResult.failure(
            ExtractionErrorKind.MALFORMED_JSON,
            f"Model reply is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
            cleaned_text=cleaned,
        )
    except (ValueError, RecursionError) as e:
        # Oversized integer literals and pathologically deep nesting
        return ExtractionResult.failure(
            ExtractionErrorKind.MALFORMED_JSON,
            f"Model reply could not be decoded: {type(e).__name__}",
            cleaned_text=cleaned,
        )

    if not isinstance(payload, dict):
        return ExtractionResult.failure(
            ExtractionErrorKind.NOT_AN_OBJECT,
            f"Expected a JSON object, got {type(payload).__name__}",
            cleaned_text=cleaned,
        )

    return ExtractionResult.success(ExpenseDraft.from_model_payload(payload, fallback_date))


class ExpenseExtractionAgent:
    """
    AI agent for the free-text path.

    RESPONSIBILITIES:
    - Build the prompt
    - Make exactly one generation call
    - Hand the reply to extract_expense

    BOUNDARIES:
    - NEVER appends to the store
    - NEVER retries
    - Lets GenerationError propagate to the caller
    """

    def __init__(
        self,
        generator: TextGenerator,
        model_name: Optional[str] = None,
    ):
        self._generator = generator
        self._model_name = model_name or get_settings().gemini.model_name

    @property
    def model_name(self) -> str:
        return self._model_name

    async def extract(self, text: str, today: date) -> ExtractionResult:
        """
        Ask the model to structure ``text`` and parse the reply.

        Raises:
            GenerationError: If the generation call itself fails
        """
        prompt = build_extraction_prompt(text, today.isoformat())
        raw_text = await self._generator.generate(self._model_name, prompt)
        logger.debug("ai_raw_response", model_name=self._model_name, raw_text=raw_text)
        return extract_expense(raw_text, today)
