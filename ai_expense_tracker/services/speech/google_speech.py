"""
Speech Recognition using the SpeechRecognition library

The browser records a clip through Streamlit's microphone widget; this
service turns the WAV bytes into a transcript with Google's web speech
recogniser.

Only single, final results are supported: the recogniser returns the
best transcript for the whole clip and nothing in between.
"""

from io import BytesIO
from typing import Callable, Optional

import speech_recognition as sr
import structlog
from speech_recognition.audio import get_flac_converter

from ai_expense_tracker.services.speech.interface import (
    RecognitionConfig,
    SpeechCapability,
    SpeechError,
    TranscriptionError,
)


logger = structlog.get_logger(__name__)


class GoogleSpeechCapability(SpeechCapability):
    """SpeechCapability backed by ``Recognizer.recognize_google``."""

    def __init__(self, recognizer: Optional[sr.Recognizer] = None):
        self._recognizer = recognizer or sr.Recognizer()

    def is_available(self) -> bool:
        """
        Check that a FLAC encoder can be found.

        recognize_google uploads FLAC audio, so without the encoder every
        session would fail.
        """
        try:
            get_flac_converter()
        except OSError as e:
            logger.info("speech_unavailable", reason=str(e))
            return False
        return True

    def start(
        self,
        audio: bytes,
        config: RecognitionConfig,
        on_result: Callable[[str], None],
        on_error: Callable[[SpeechError], None],
        on_end: Callable[[], None],
    ) -> None:
        if config.continuous or config.interim_results:
            raise ValueError("Only non-continuous, final-result sessions are supported")

        try:
            transcript = self._transcribe(audio, config.language)
        except SpeechError as e:
            on_error(e)
        else:
            on_result(transcript)
        finally:
            on_end()

    def stop(self) -> None:
        """
        No-op: a session is one finished clip transcribed inside start(),
        so by the time anyone can call stop() the session has ended.
        """

    def _transcribe(self, audio: bytes, language: str) -> str:
        try:
            with sr.AudioFile(BytesIO(audio)) as source:
                data = self._recognizer.record(source)
            transcript = self._recognizer.recognize_google(data, language=language)
        except sr.UnknownValueError as e:
            raise TranscriptionError("No speech could be recognised in the recording") from e
        except sr.RequestError as e:
            raise TranscriptionError(f"Speech service request failed: {e}") from e
        except ValueError as e:
            # Raised by AudioFile for unsupported or corrupt audio
            raise TranscriptionError(f"Unreadable audio clip: {e}") from e

        transcript = (transcript or "").strip()
        if not transcript:
            raise TranscriptionError("No speech could be recognised in the recording")
        return transcript
