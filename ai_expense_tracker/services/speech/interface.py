"""
Abstract Speech-to-Text Interface

DESIGN DECISION: Speech recognition is an injected capability, not an
ambient global. The voice adapter only sees this interface, so tests can
substitute a fake and the UI can run on machines without a recogniser.

A session is event driven, mirroring a browser recogniser:
- start() begins a session and reports through callbacks
- on_result fires once with the final transcript
- on_error fires if recognition fails
- on_end always fires last, whatever happened
"""

from abc import ABC, abstractmethod
from typing import Callable

from pydantic import BaseModel, Field


class SpeechError(Exception):
    """Base exception for speech recognition errors."""
    pass


class SpeechUnavailableError(SpeechError):
    """No speech recognition capability on this machine."""
    pass


class TranscriptionError(SpeechError):
    """Audio was captured but could not be turned into text."""
    pass


class RecognitionConfig(BaseModel):
    """Session configuration handed to the capability."""

    language: str = Field(
        default="en-US",
        description="Locale tag for recognition"
    )
    continuous: bool = Field(
        default=False,
        description="Keep listening after the first utterance"
    )
    interim_results: bool = Field(
        default=False,
        description="Report partial transcripts while speaking"
    )


class SpeechCapability(ABC):
    """
    Abstract speech-to-text capability.

    Implementations must always call ``on_end`` exactly once per
    started session, after ``on_result`` or ``on_error``.
    """

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if recognition can run on this machine."""
        pass

    @abstractmethod
    def start(
        self,
        audio: bytes,
        config: RecognitionConfig,
        on_result: Callable[[str], None],
        on_error: Callable[[SpeechError], None],
        on_end: Callable[[], None],
    ) -> None:
        """
        Start a recognition session over a captured audio clip.

        Args:
            audio: Recorded clip (WAV bytes from the browser microphone)
            config: Locale and session mode
            on_result: Called with the final transcript
            on_error: Called with the failure
            on_end: Called when the session is over
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop the current session, for implementations that keep one open."""
        pass
