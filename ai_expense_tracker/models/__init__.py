"""
Data Models Package

This package contains all Pydantic models used in the AI Expense Tracker.
"""

from ai_expense_tracker.models.expense import (
    DEFAULT_DESCRIPTION,
    DEFAULT_TITLE,
    EntryOutcome,
    EntrySource,
    Expense,
    ExpenseDraft,
    ExtractionError,
    ExtractionErrorKind,
    ExtractionResult,
    coerce_amount,
    coerce_date,
)
from ai_expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "DEFAULT_DESCRIPTION",
    "DEFAULT_TITLE",
    "EntryOutcome",
    "EntrySource",
    "Expense",
    "ExpenseDraft",
    "ExtractionError",
    "ExtractionErrorKind",
    "ExtractionResult",
    "coerce_amount",
    "coerce_date",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
