"""
Main Orchestrator for AI Expense Tracker

This module ties the components together and defines the three entry flows:
1. Manual entry (form fields -> expense)
2. Free-text extraction (text -> LLM -> JSON -> expense)
3. Voice capture (audio -> transcript -> free-text extraction)

DESIGN DECISION: One controller owns the AppState and is the only thing
that mutates it. The handlers never raise into the UI: every failure path
ends with the state back in an interactive shape (busy and listening
cleared) and reports an EntryOutcome.

CONCURRENCY: The busy flag is checked AND set before the first await, so
two triggers arriving on the same event loop (typed submit and a voice
transcript) cannot both start a request. The second one is rejected.
"""

import asyncio
from datetime import date
from typing import Callable, Optional
from uuid import UUID

from ai_expense_tracker.agents import ExpenseExtractionAgent
from ai_expense_tracker.audit import AuditLogger, create_correlation_id
from ai_expense_tracker.config import get_settings
from ai_expense_tracker.models.expense import (
    EntryOutcome,
    EntrySource,
    Expense,
    coerce_amount,
    coerce_date,
)
from ai_expense_tracker.services.llm import GeminiTextGenerator, GenerationError
from ai_expense_tracker.services.speech import (
    GoogleSpeechCapability,
    RecognitionConfig,
    SpeechCapability,
    SpeechError,
    SpeechUnavailableError,
)
from ai_expense_tracker.state import AppState


AI_FAILURE_MESSAGE = "AI response could not be parsed. Try again."
VOICE_UNSUPPORTED_MESSAGE = "Speech recognition is not supported on this device."


class ExpenseController:
    """
    Owns the application state and runs the entry flows.

    Collaborators are injected so tests can replace the LLM and the
    speech recogniser with fakes.
    """

    def __init__(
        self,
        agent: ExpenseExtractionAgent,
        speech: SpeechCapability,
        state: Optional[AppState] = None,
        audit_logger: Optional[AuditLogger] = None,
        recognition_config: Optional[RecognitionConfig] = None,
        voice_submit_delay: float = 0.3,
        today_provider: Callable[[], date] = date.today,
    ):
        self.state = state or AppState()
        self._agent = agent
        self._speech = speech
        self._audit_logger = audit_logger or AuditLogger()
        self._recognition_config = recognition_config or RecognitionConfig()
        self._voice_submit_delay = voice_submit_delay
        self._today = today_provider

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    # -------------------------------------------------------------------------
    # Manual entry
    # -------------------------------------------------------------------------

    def add_manual_expense(self) -> EntryOutcome:
        """
        Append an expense from the four manual form fields.

        Any empty field makes this a silent no-op: nothing is appended
        and no field is cleared. Otherwise the amount and date are coerced
        (0 / today when unusable), the record is appended and all four
        fields are reset.
        """
        fields = self.state.manual_fields()
        missing = [name for name, value in fields.items() if not value]
        if missing:
            self._audit_logger.log_manual_entry_skipped(missing)
            return EntryOutcome.SKIPPED

        expense = Expense(
            title=fields["title"],
            description=fields["description"],
            amount=coerce_amount(fields["amount"]),
            date=coerce_date(fields["date"], self._today()),
            source=EntrySource.MANUAL,
        )
        self.state.store.append(expense)
        self.state.clear_manual_fields()

        self._audit_logger.log_expense_added(
            title=expense.title,
            amount=expense.amount,
            source=expense.source.value,
        )
        return EntryOutcome.ADDED

    # -------------------------------------------------------------------------
    # Free-text extraction
    # -------------------------------------------------------------------------

    async def extract_from_text(
        self,
        text: Optional[str] = None,
        source: EntrySource = EntrySource.AI,
        correlation_id: Optional[UUID] = None,
    ) -> EntryOutcome:
        """
        Turn free text into an expense through the LLM.

        Args:
            text: Text to process. Defaults to the shared free-text field;
                  the voice flow passes its transcript directly instead.
            source: Input path recorded on the expense
            correlation_id: Ties the audit events to an outer action

        Both a failed request and an unusable reply produce the same
        generic alert. The free-text field is kept so the user can fix
        the text and try again.
        """
        if text is None:
            text = self.state.ai_input
        if not text:
            return EntryOutcome.SKIPPED

        correlation_id = correlation_id or create_correlation_id()

        # Check-and-set before the first await
        if self.state.busy:
            self._audit_logger.log_extraction_rejected_busy(correlation_id)
            return EntryOutcome.BUSY
        self.state.busy = True

        try:
            today = self._today()
            self._audit_logger.log_extraction_requested(
                text=text,
                model_name=self._agent.model_name,
                correlation_id=correlation_id,
            )

            try:
                result = await self._agent.extract(text, today)
            except GenerationError as e:
                self._audit_logger.log_generation_failed(
                    model_name=e.model_id,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
                self.state.alert(AI_FAILURE_MESSAGE)
                return EntryOutcome.FAILED

            if not result.ok:
                self._audit_logger.log_extraction_parse_failed(
                    kind=result.error.kind.value,
                    message=result.error.message,
                    correlation_id=correlation_id,
                )
                self.state.alert(AI_FAILURE_MESSAGE)
                return EntryOutcome.FAILED

            expense = self.state.store.append(result.draft.to_expense(source))
            self.state.clear_ai_input()

            self._audit_logger.log_extraction_succeeded(
                input_length=len(text),
                correlation_id=correlation_id,
            )
            self._audit_logger.log_expense_added(
                title=expense.title,
                amount=expense.amount,
                source=expense.source.value,
                correlation_id=correlation_id,
            )
            return EntryOutcome.ADDED
        finally:
            self.state.busy = False

    # -------------------------------------------------------------------------
    # Voice capture
    # -------------------------------------------------------------------------

    async def start_voice_capture(self, audio: bytes) -> EntryOutcome:
        """
        Transcribe a recorded clip and feed it to the extraction flow.

        If the capability is missing the user gets exactly one alert and
        nothing else changes. A recognition error just ends the session;
        there is no retry, the user records again.
        """
        if not self._speech.is_available():
            self._audit_logger.log_voice_unavailable()
            self.state.alert(VOICE_UNSUPPORTED_MESSAGE)
            return EntryOutcome.UNAVAILABLE

        correlation_id = create_correlation_id()
        transcripts: list[str] = []
        errors: list[SpeechError] = []

        def on_result(transcript: str) -> None:
            transcripts.append(transcript)
            self.state.set_ai_input(transcript)
            self._audit_logger.log_voice_transcribed(
                transcript=transcript,
                language=self._recognition_config.language,
                correlation_id=correlation_id,
            )

        def on_error(error: SpeechError) -> None:
            errors.append(error)
            self._audit_logger.log_voice_error(str(error), correlation_id)

        def on_end() -> None:
            self.state.listening = False

        self.state.listening = True
        try:
            self._speech.start(
                audio,
                self._recognition_config,
                on_result,
                on_error,
                on_end,
            )
        except SpeechUnavailableError:
            self.state.listening = False
            self._audit_logger.log_voice_unavailable()
            self.state.alert(VOICE_UNSUPPORTED_MESSAGE)
            return EntryOutcome.UNAVAILABLE

        if not transcripts:
            return EntryOutcome.FAILED if errors else EntryOutcome.SKIPPED

        # Use the transcript itself rather than re-reading the shared field
        await asyncio.sleep(self._voice_submit_delay)
        return await self.extract_from_text(
            transcripts[-1],
            source=EntrySource.VOICE,
            correlation_id=correlation_id,
        )

    def stop_voice_capture(self) -> None:
        """Stop an active session; the listening indicator clears on end."""
        self._speech.stop()


def create_app_components(state: Optional[AppState] = None) -> ExpenseController:
    """
    Factory function to create the controller with real services.

    Args:
        state: Existing session state to attach to (a new one if None)

    Returns:
        ExpenseController wired to Gemini and the Google speech recogniser
    """
    settings = get_settings()
    gemini_settings = settings.gemini
    speech_settings = settings.speech

    agent = ExpenseExtractionAgent(
        generator=GeminiTextGenerator(gemini_settings),
        model_name=gemini_settings.model_name,
    )

    return ExpenseController(
        agent=agent,
        speech=GoogleSpeechCapability(),
        state=state,
        audit_logger=AuditLogger(),
        recognition_config=RecognitionConfig(language=speech_settings.language),
        voice_submit_delay=speech_settings.submit_delay_seconds,
    )
