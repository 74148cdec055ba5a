"""
Audit Models for AI Expense Tracker

Every user action on the entry handlers is recorded as an audit event.
This provides:
1. Traceability of what the LLM was asked and what came back
2. Debugging information when an extraction fails
3. A way to tell apart failures the user sees identically
   (request failed vs. model returned garbage)

DESIGN DECISION: Audit events are append-only and logged locally.
There is no persistence layer, so events live only in the log stream.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Manual path
    MANUAL_ENTRY_SKIPPED = "manual_entry_skipped"

    # Free-text path
    EXTRACTION_REQUESTED = "extraction_requested"
    EXTRACTION_REJECTED_BUSY = "extraction_rejected_busy"
    EXTRACTION_SUCCEEDED = "extraction_succeeded"
    EXTRACTION_PARSE_FAILED = "extraction_parse_failed"
    GENERATION_FAILED = "generation_failed"

    # Voice path
    VOICE_UNAVAILABLE = "voice_unavailable"
    VOICE_TRANSCRIBED = "voice_transcribed"
    VOICE_ERROR = "voice_error"

    # Store
    EXPENSE_ADDED = "expense_added"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Correlation - ties together the events of one user action
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., voice capture + extraction)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added("Coffee", 5.0, "ai", correlation_id)
    """

    @staticmethod
    def manual_entry_skipped(missing_fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MANUAL_ENTRY_SKIPPED,
            severity=AuditSeverity.DEBUG,
            description="Manual entry ignored: required fields are empty",
            details={"missing_fields": missing_fields},
            is_user_action=True,
        )

    @staticmethod
    def extraction_requested(
        text: str,
        model_name: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTRACTION_REQUESTED,
            correlation_id=correlation_id,
            description=f"Extraction requested from {model_name}",
            details={
                "input_length": len(text),
                "model_name": model_name,
            },
            is_user_action=True,
        )

    @staticmethod
    def extraction_rejected_busy(correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTRACTION_REJECTED_BUSY,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="Extraction rejected: another request is in flight",
            is_user_action=True,
        )

    @staticmethod
    def extraction_succeeded(
        input_length: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTRACTION_SUCCEEDED,
            correlation_id=correlation_id,
            description="Model reply parsed into an expense draft",
            details={"input_length": input_length},
        )

    @staticmethod
    def extraction_parse_failed(
        kind: str,
        message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTRACTION_PARSE_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Model reply could not be parsed ({kind})",
            details={"kind": kind},
            error_message=message,
        )

    @staticmethod
    def generation_failed(
        model_name: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GENERATION_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Generation call to {model_name} failed",
            details={"model_name": model_name},
            error_message=error_message,
        )

    @staticmethod
    def voice_unavailable() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VOICE_UNAVAILABLE,
            severity=AuditSeverity.WARNING,
            description="Voice capture requested but speech recognition is unavailable",
            is_user_action=True,
        )

    @staticmethod
    def voice_transcribed(
        transcript: str,
        language: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VOICE_TRANSCRIBED,
            correlation_id=correlation_id,
            description="Voice capture produced a final transcript",
            details={
                "transcript_length": len(transcript),
                "language": language,
            },
            is_user_action=True,
        )

    @staticmethod
    def voice_error(
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VOICE_ERROR,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="Voice capture ended with an error",
            error_message=error_message,
        )

    @staticmethod
    def expense_added(
        title: str,
        amount: float,
        source: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            correlation_id=correlation_id,
            description=f"Expense added: {title[:100]}",
            details={
                "amount": amount,
                "source": source,
            },
        )
