"""
Voice intake exception hierarchy.

All application-specific exceptions inherit from IntakeError,
enabling centralized error handling in the API middleware layer.
"""

from datetime import UTC, datetime


class IntakeError(Exception):
    """Base exception for all voice intake errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "INTAKE_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class DeviceUnavailableError(IntakeError):
    """Raised when no capture device is attached or permission was denied."""

    def __init__(self, detail: str = "Microphone is not available") -> None:
        super().__init__(
            detail=detail,
            code="DEVICE_UNAVAILABLE",
            status_code=503,
        )


class EmptyRecordingError(IntakeError):
    """Raised when a recording cycle captured zero bytes."""

    def __init__(self) -> None:
        super().__init__(
            detail="No audio data recorded",
            code="EMPTY_RECORDING",
            status_code=422,
        )


class RecordingAlreadyActiveError(IntakeError):
    """Raised when trying to start a recording while one is already active."""

    def __init__(self) -> None:
        super().__init__(
            detail="A recording is already active",
            code="RECORDING_ALREADY_ACTIVE",
            status_code=409,
        )


class TranscriptionError(IntakeError):
    """Raised when STT processing fails."""

    def __init__(
        self,
        detail: str = "Transcription failed",
        code: str = "TRANSCRIPTION_ERROR",
        status_code: int = 500,
    ) -> None:
        super().__init__(detail=detail, code=code, status_code=status_code)


class RecognitionFailedError(TranscriptionError):
    """Raised when the speech service returned no usable alternative."""

    def __init__(self, detail: str = "Speech could not be recognized") -> None:
        super().__init__(
            detail=detail,
            code="RECOGNITION_FAILED",
            status_code=422,
        )


class ServiceUnavailableError(TranscriptionError):
    """Raised when the speech service could not be reached or errored."""

    def __init__(self, detail: str = "Speech service is unavailable") -> None:
        super().__init__(
            detail=detail,
            code="SERVICE_UNAVAILABLE",
            status_code=503,
        )


class TranslationFailedError(IntakeError):
    """Raised when a single translation request fails."""

    def __init__(self, detail: str = "Translation failed") -> None:
        super().__init__(detail=detail, code="TRANSLATION_FAILED", status_code=502)


class PersistenceFailedError(IntakeError):
    """Raised when appending answers to the spreadsheet fails."""

    def __init__(self, detail: str = "Failed to update spreadsheet") -> None:
        super().__init__(detail=detail, code="PERSISTENCE_FAILED", status_code=502)


class SpeechSynthesisError(IntakeError):
    """Raised when text-to-speech generation fails."""

    def __init__(self, detail: str = "Failed to generate speech") -> None:
        super().__init__(detail=detail, code="SPEECH_SYNTHESIS_FAILED", status_code=502)


class InvalidTransitionError(IntakeError):
    """Raised when an intent is not valid in the current session phase."""

    def __init__(self, intent: str, phase: str) -> None:
        super().__init__(
            detail=f"Cannot {intent.replace('_', ' ')} while {phase.replace('_', ' ')}",
            code="INVALID_TRANSITION",
            status_code=409,
        )


class UnsupportedLanguageError(IntakeError):
    """Raised when a UI language code is not in the supported catalogue."""

    def __init__(self, language_code: str) -> None:
        super().__init__(
            detail=f"Unsupported language: {language_code}",
            code="UNSUPPORTED_LANGUAGE",
            status_code=422,
        )
