"""
Core Data Models for AI Expense Tracker

The expense record is the only entity in the system. It can be created by
two paths:
1. The manual form (four typed-in fields)
2. The free-text / voice path (fields proposed by the LLM)

Both paths go through the same coercion helpers so the record invariants
hold regardless of where the data came from:
- all four fields are always populated
- amount is always a finite number (0 instead of NaN)
- date is always a real calendar date (today instead of "Invalid Date")

DESIGN DECISION: Records are frozen. The store only ever appends;
nothing in the system edits or deletes an expense.
"""

import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# Alias so the `date` field names below do not shadow the type
CalendarDate = date

DEFAULT_TITLE = "No Title"
DEFAULT_DESCRIPTION = "No Description"


# =============================================================================
# ENUMS
# =============================================================================

class EntrySource(str, Enum):
    """Which input path produced an expense."""
    MANUAL = "manual"
    AI = "ai"
    VOICE = "voice"


class EntryOutcome(str, Enum):
    """
    Result of a single user action on one of the entry handlers.

    Handlers never raise to the UI; they report what happened instead.
    """
    ADDED = "added"              # A record was appended to the store
    SKIPPED = "skipped"          # Missing input - silent no-op
    BUSY = "busy"                # An extraction is already in flight
    FAILED = "failed"            # Generation, parsing or recognition failed
    UNAVAILABLE = "unavailable"  # Voice capability missing, user alerted


class ExtractionErrorKind(str, Enum):
    """Why model output could not be turned into an expense draft."""
    EMPTY_OUTPUT = "empty_output"
    MALFORMED_JSON = "malformed_json"
    NOT_AN_OBJECT = "not_an_object"


# =============================================================================
# COERCION HELPERS
# =============================================================================

def coerce_amount(value: Any) -> float:
    """
    Coerce a user- or model-supplied amount to a finite float.

    Numbers pass through, numeric strings are parsed, everything else
    (None, "", "oops", NaN, infinity, lists, ...) becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            amount = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        try:
            amount = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(amount):
        return 0.0
    return amount


def coerce_date(value: Any, fallback: date) -> date:
    """
    Coerce a date-ish value to a calendar date.

    Accepts date/datetime objects and ISO strings ("2024-05-05" or a full
    ISO timestamp). Anything missing or unparsable becomes ``fallback``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return fallback
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return fallback


# =============================================================================
# EXPENSE MODELS
# =============================================================================

class Expense(BaseModel):
    """
    A single expense, as stored and rendered.

    Immutable once created.
    """
    model_config = ConfigDict(frozen=True)

    title: str = Field(
        ...,
        description="Short text label"
    )
    description: str = Field(
        ...,
        description="Free text"
    )
    amount: float = Field(
        ...,
        allow_inf_nan=False,
        description="Numeric amount, always finite"
    )
    date: CalendarDate = Field(
        ...,
        description="Calendar date of the expense"
    )
    source: EntrySource = Field(
        default=EntrySource.MANUAL,
        description="Input path that produced this record"
    )


class ExpenseDraft(BaseModel):
    """
    Expense fields proposed by the LLM, after defaults were applied.

    A draft becomes an Expense once it is appended to the store.
    """

    title: str = DEFAULT_TITLE
    description: str = DEFAULT_DESCRIPTION
    amount: float = Field(default=0.0, allow_inf_nan=False)
    date: CalendarDate

    @classmethod
    def from_model_payload(cls, payload: dict, fallback_date: date) -> "ExpenseDraft":
        """
        Map the model's JSON object onto a draft.

        The model is asked for capitalised keys (Title, Description, Amount,
        Date). Falsy values get placeholders, the amount falls back to 0
        and the date to ``fallback_date``.
        """
        title = payload.get("Title")
        description = payload.get("Description")
        return cls(
            title=str(title) if title else DEFAULT_TITLE,
            description=str(description) if description else DEFAULT_DESCRIPTION,
            amount=coerce_amount(payload.get("Amount")),
            date=coerce_date(payload.get("Date"), fallback_date),
        )

    def to_expense(self, source: EntrySource = EntrySource.AI) -> Expense:
        return Expense(
            title=self.title,
            description=self.description,
            amount=self.amount,
            date=self.date,
            source=source,
        )


class ExtractionError(BaseModel):
    """Why a model reply could not be used."""

    kind: ExtractionErrorKind
    message: str
    cleaned_text: str = ""


class ExtractionResult(BaseModel):
    """
    Outcome of turning raw model text into a draft.

    Exactly one of ``draft`` / ``error`` is set.
    """

    draft: Optional[ExpenseDraft] = None
    error: Optional[ExtractionError] = None

    @model_validator(mode="after")
    def validate_exactly_one(self) -> "ExtractionResult":
        if (self.draft is None) == (self.error is None):
            raise ValueError("ExtractionResult needs exactly one of draft or error")
        return self

    @property
    def ok(self) -> bool:
        return self.draft is not None

    @classmethod
    def success(cls, draft: ExpenseDraft) -> "ExtractionResult":
        return cls(draft=draft)

    @classmethod
    def failure(
        cls,
        kind: ExtractionErrorKind,
        message: str,
        cleaned_text: str = "",
    ) -> "ExtractionResult":
        return cls(error=ExtractionError(kind=kind, message=message, cleaned_text=cleaned_text))
