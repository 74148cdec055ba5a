"""
Shared fixtures and fakes.

No real API calls in tests: the LLM and the speech recogniser are
replaced by the fakes below.
"""

import asyncio
from datetime import date
from typing import Callable, Optional

import pytest

from ai_expense_tracker.agents import ExpenseExtractionAgent
from ai_expense_tracker.audit import AuditLogger
from ai_expense_tracker.orchestrator import ExpenseController
from ai_expense_tracker.services.llm import GenerationError, TextGenerator
from ai_expense_tracker.services.speech import (
    RecognitionConfig,
    SpeechCapability,
    SpeechError,
)
from ai_expense_tracker.state import AppState


TODAY = date(2024, 6, 1)
MODEL = "gemini-2.0-flash"

COFFEE_REPLY = (
    '```json\n{"Title":"Coffee","Description":"morning coffee",'
    '"Amount":5,"Date":"2024-05-05"}\n```'
)


class FakeTextGenerator(TextGenerator):
    """Returns a canned reply (or raises) and records every prompt."""

    def __init__(
        self,
        reply: str = COFFEE_REPLY,
        error: Optional[Exception] = None,
        gate: Optional[asyncio.Event] = None,
    ):
        self.reply = reply
        self.error = error
        self.gate = gate
        self.calls: list[tuple[str, str]] = []

    async def generate(self, model_id: str, prompt: str) -> str:
        self.calls.append((model_id, prompt))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.reply


class FakeSpeechCapability(SpeechCapability):
    """Scripted recogniser: yields ``transcript`` or ``error`` per session."""

    def __init__(
        self,
        available: bool = True,
        transcript: Optional[str] = None,
        error: Optional[SpeechError] = None,
    ):
        self.available = available
        self.transcript = transcript
        self.error = error
        self.sessions: list[tuple[bytes, RecognitionConfig]] = []
        self.stopped = False
        self.state: Optional[AppState] = None
        self.listening_during_session: Optional[bool] = None

    def is_available(self) -> bool:
        return self.available

    def start(
        self,
        audio: bytes,
        config: RecognitionConfig,
        on_result: Callable[[str], None],
        on_error: Callable[[SpeechError], None],
        on_end: Callable[[], None],
    ) -> None:
        self.sessions.append((audio, config))
        if self.state is not None:
            self.listening_during_session = self.state.listening
        if self.error is not None:
            on_error(self.error)
        elif self.transcript is not None:
            on_result(self.transcript)
        on_end()

    def stop(self) -> None:
        self.stopped = True


def make_controller(
    generator: Optional[TextGenerator] = None,
    speech: Optional[FakeSpeechCapability] = None,
    recognition_config: Optional[RecognitionConfig] = None,
) -> ExpenseController:
    speech = speech or FakeSpeechCapability()
    controller = ExpenseController(
        agent=ExpenseExtractionAgent(generator or FakeTextGenerator(), model_name=MODEL),
        speech=speech,
        audit_logger=AuditLogger(),
        recognition_config=recognition_config,
        voice_submit_delay=0.0,
        today_provider=lambda: TODAY,
    )
    speech.state = controller.state
    return controller


@pytest.fixture
def generator() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest.fixture
def controller(generator) -> ExpenseController:
    return make_controller(generator)


@pytest.fixture
def failing_generator() -> FakeTextGenerator:
    return FakeTextGenerator(error=GenerationError(MODEL, "quota exceeded"))
