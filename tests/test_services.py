"""
Tests for the service layer: store, Gemini generator and speech recogniser.

The Gemini SDK and the Google speech endpoint are monkeypatched; nothing
leaves the machine.
"""

import asyncio
import wave
from datetime import date
from io import BytesIO

import pytest
import speech_recognition as sr

from ai_expense_tracker.config.settings import GeminiSettings
from ai_expense_tracker.models.expense import Expense
from ai_expense_tracker.services.llm import GenerationError
from ai_expense_tracker.services.llm import gemini_service
from ai_expense_tracker.services.llm.gemini_service import GeminiTextGenerator
from ai_expense_tracker.services.speech import (
    RecognitionConfig,
    TranscriptionError,
)
from ai_expense_tracker.services.speech import google_speech
from ai_expense_tracker.services.speech.google_speech import GoogleSpeechCapability
from ai_expense_tracker.services.storage import ExpenseStore


def silent_wav(seconds: float = 0.2, rate: int = 16000) -> bytes:
    buffer = BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(rate)
        wav.writeframes(b"\x00\x00" * int(rate * seconds))
    return buffer.getvalue()


class TestExpenseStore:
    """Tests for the append-only store."""

    def test_append_keeps_order(self):
        store = ExpenseStore()
        first = Expense(title="a", description="x", amount=1, date=date(2024, 1, 1))
        second = Expense(title="b", description="y", amount=2, date=date(2024, 1, 2))

        store.append(first)
        store.append(second)

        assert store.list_expenses() == [first, second]
        assert len(store) == 2
        assert not store.is_empty

    def test_snapshot_is_independent(self):
        """Test mutating a returned list does not touch the store."""
        store = ExpenseStore()
        store.append(Expense(title="a", description="x", amount=1, date=date(2024, 1, 1)))

        snapshot = store.list_expenses()
        snapshot.clear()

        assert len(store) == 1

    def test_rejects_non_expense(self):
        store = ExpenseStore()
        with pytest.raises(TypeError):
            store.append({"title": "a"})
        assert store.is_empty


class FakeResponse:
    def __init__(self, text):
        self._text = text

    @property
    def text(self):
        if isinstance(self._text, Exception):
            raise self._text
        return self._text


class FakeGenerativeModel:
    instances = []

    def __init__(self, model_name, generation_config=None):
        self.model_name = model_name
        self.generation_config = generation_config
        self.prompts = []
        self.reply = '{"Title": "Coffee"}'
        FakeGenerativeModel.instances.append(self)

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.reply, Exception) and not isinstance(self.reply, ValueError):
            raise self.reply
        return FakeResponse(self.reply)


@pytest.fixture
def fake_genai(monkeypatch):
    configured = {}
    FakeGenerativeModel.instances = []
    monkeypatch.setattr(gemini_service.genai, "configure", lambda **kw: configured.update(kw))
    monkeypatch.setattr(gemini_service.genai, "GenerativeModel", FakeGenerativeModel)
    return configured


class TestGeminiTextGenerator:
    """Tests for the Gemini-backed generator."""

    def make_generator(self):
        return GeminiTextGenerator(
            GeminiSettings(api_key="test-key", temperature=0.2, max_tokens=256)
        )

    def test_generate_returns_reply_text(self, fake_genai):
        generator = self.make_generator()

        reply = asyncio.run(generator.generate("gemini-2.0-flash", "prompt"))

        assert reply == '{"Title": "Coffee"}'
        assert fake_genai == {"api_key": "test-key"}
        model = FakeGenerativeModel.instances[0]
        assert model.model_name == "gemini-2.0-flash"
        assert model.generation_config == {"temperature": 0.2, "max_output_tokens": 256}
        assert model.prompts == ["prompt"]

    def test_model_is_reused(self, fake_genai):
        generator = self.make_generator()

        asyncio.run(generator.generate("gemini-2.0-flash", "one"))
        asyncio.run(generator.generate("gemini-2.0-flash", "two"))

        assert len(FakeGenerativeModel.instances) == 1

    def test_sdk_error_becomes_generation_error(self, fake_genai):
        generator = self.make_generator()
        generator._get_model("gemini-2.0-flash").reply = RuntimeError("quota exceeded")

        with pytest.raises(GenerationError, match="quota exceeded") as exc_info:
            asyncio.run(generator.generate("gemini-2.0-flash", "prompt"))

        assert exc_info.value.model_id == "gemini-2.0-flash"

    def test_blocked_reply_becomes_generation_error(self, fake_genai):
        """Test a response whose .text raises is reported as a failure."""
        generator = self.make_generator()
        generator._get_model("gemini-2.0-flash").reply = ValueError("blocked")

        with pytest.raises(GenerationError, match="blocked"):
            asyncio.run(generator.generate("gemini-2.0-flash", "prompt"))

    def test_empty_reply_becomes_generation_error(self, fake_genai):
        generator = self.make_generator()
        generator._get_model("gemini-2.0-flash").reply = ""

        with pytest.raises(GenerationError, match="empty"):
            asyncio.run(generator.generate("gemini-2.0-flash", "prompt"))


class ScriptedRecognizer(sr.Recognizer):
    """Real audio decoding, scripted recognition result."""

    def __init__(self, result):
        super().__init__()
        self.result = result
        self.languages = []

    def recognize_google(self, audio_data, language="en-US", **kwargs):
        self.languages.append(language)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def run_session(capability, audio, config=None):
    events = {"results": [], "errors": [], "ended": 0}
    capability.start(
        audio,
        config or RecognitionConfig(),
        on_result=events["results"].append,
        on_error=events["errors"].append,
        on_end=lambda: events.__setitem__("ended", events["ended"] + 1),
    )
    return events


class TestGoogleSpeechCapability:
    """Tests for the SpeechRecognition-backed capability."""

    def test_available_when_flac_converter_found(self, monkeypatch):
        monkeypatch.setattr(google_speech, "get_flac_converter", lambda: "/usr/bin/flac")
        assert GoogleSpeechCapability().is_available() is True

    def test_unavailable_without_flac_converter(self, monkeypatch):
        def missing():
            raise OSError("FLAC conversion utility not available")

        monkeypatch.setattr(google_speech, "get_flac_converter", missing)
        assert GoogleSpeechCapability().is_available() is False

    def test_transcript_is_delivered(self):
        recognizer = ScriptedRecognizer("  coffee five dollars ")
        capability = GoogleSpeechCapability(recognizer)

        events = run_session(capability, silent_wav(), RecognitionConfig(language="en-GB"))

        assert events["results"] == ["coffee five dollars"]
        assert events["errors"] == []
        assert events["ended"] == 1
        assert recognizer.languages == ["en-GB"]

    def test_unrecognised_speech_is_an_error(self):
        capability = GoogleSpeechCapability(ScriptedRecognizer(sr.UnknownValueError()))

        events = run_session(capability, silent_wav())

        assert events["results"] == []
        assert len(events["errors"]) == 1
        assert isinstance(events["errors"][0], TranscriptionError)
        assert events["ended"] == 1

    def test_request_failure_is_an_error(self):
        capability = GoogleSpeechCapability(ScriptedRecognizer(sr.RequestError("offline")))

        events = run_session(capability, silent_wav())

        assert "offline" in str(events["errors"][0])
        assert events["ended"] == 1

    def test_blank_transcript_is_an_error(self):
        capability = GoogleSpeechCapability(ScriptedRecognizer("   "))

        events = run_session(capability, silent_wav())

        assert events["results"] == []
        assert len(events["errors"]) == 1

    def test_stop_does_not_suppress_later_sessions(self):
        capability = GoogleSpeechCapability(ScriptedRecognizer("tea"))

        capability.stop()
        events = run_session(capability, silent_wav())

        assert events["results"] == ["tea"]
        assert events["ended"] == 1

    def test_continuous_sessions_are_rejected(self):
        capability = GoogleSpeechCapability(ScriptedRecognizer("x"))

        with pytest.raises(ValueError):
            run_session(capability, silent_wav(), RecognitionConfig(continuous=True))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
