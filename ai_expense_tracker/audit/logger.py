"""
Audit Logger

DESIGN DECISION: Every user action on an entry handler is logged.
This provides:
1. Traceability of each LLM round trip
2. Debugging capability when the model misbehaves
3. A record of which failure happened behind the single generic alert

The audit logger:
- Logs locally through structlog (there is no persistence layer)
- Keeps a short in-memory history so the current session can be inspected
- Never raises into the caller
"""

import logging
from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from ai_expense_tracker.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output through the stdlib root logger at ``level``.

    structlog renders the JSON line; the stdlib handler only prints it.
    """
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events to the structured local log and remembers the most
    recent ones for the current session.
    """

    def __init__(self, history_size: int = 200):
        self._logger = structlog.get_logger("ai_expense_tracker.audit")
        self._history: deque[AuditEvent] = deque(maxlen=history_size)

    @property
    def history(self) -> list[AuditEvent]:
        """Most recent events, oldest first."""
        return list(self._history)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        self._history.append(event)
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_manual_entry_skipped(self, missing_fields: list[str]) -> None:
        self.log(AuditEventBuilder.manual_entry_skipped(missing_fields))

    def log_extraction_requested(
        self,
        text: str,
        model_name: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.extraction_requested(
            text=text,
            model_name=model_name,
            correlation_id=correlation_id,
        ))

    def log_extraction_rejected_busy(self, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.extraction_rejected_busy(correlation_id))

    def log_extraction_succeeded(self, input_length: int, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.extraction_succeeded(
            input_length=input_length,
            correlation_id=correlation_id,
        ))

    def log_extraction_parse_failed(
        self,
        kind: str,
        message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a model reply that could not be turned into a draft."""
        self.log(AuditEventBuilder.extraction_parse_failed(
            kind=kind,
            message=message,
            correlation_id=correlation_id,
        ))

    def log_generation_failed(
        self,
        model_name: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a failed request to the LLM provider."""
        self.log(AuditEventBuilder.generation_failed(
            model_name=model_name,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_voice_unavailable(self) -> None:
        self.log(AuditEventBuilder.voice_unavailable())

    def log_voice_transcribed(
        self,
        transcript: str,
        language: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.voice_transcribed(
            transcript=transcript,
            language=language,
            correlation_id=correlation_id,
        ))

    def log_voice_error(self, error_message: str, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.voice_error(
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_expense_added(
        self,
        title: str,
        amount: float,
        source: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_added(
            title=title,
            amount=amount,
            source=source,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a voice capture).
    Pass it through all subsequent operations.
    """
    return uuid4()
