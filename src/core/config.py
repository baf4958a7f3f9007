"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Voice intake settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        stt_provider: Speech-to-text backend ("google" or "whisper").
        translation_provider: Translation backend ("google").
        tts_provider: Text-to-speech backend ("google").
        capture_flush_delay: Seconds to wait for the final audio chunk on stop.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Providers ---
    stt_provider: str = "google"
    translation_provider: str = "google"
    tts_provider: str = "google"

    # --- Google Cloud credentials ---
    # Either a path to a service-account key file or the key JSON inline
    google_service_account_file: str = ""
    google_service_account_json: str = ""

    # --- Speech-to-text ---
    # Browser MediaRecorder produces opus in a webm container at 48 kHz
    stt_encoding: str = "WEBM_OPUS"
    stt_sample_rate_hertz: int = 48000
    stt_model: str = "default"
    whisper_model: str = "base"  # Used when stt_provider="whisper"

    # --- Text-to-speech ---
    tts_voice_name: str = "hi-IN-Wavenet-A"  # Applied only to matching locales

    # --- Audio capture ---
    capture_mime_type: str = "audio/webm"
    capture_flush_delay: float = 0.1  # Bounded wait for the last chunk (seconds)

    # --- Questionnaire ---
    default_language: str = "hi-IN"
    confirmation_required: bool = True
    batch_translate_questions: bool = True
    translate_proper_nouns: bool = True

    # --- Google Sheets ---
    google_sheets_spreadsheet_id: str = ""
    jobseeker_sheet_range: str = "JobSeekers!A:F"
    employer_sheet_range: str = "Employers!A:F"

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = [
        "http://localhost:3000",  # Dev frontend
    ]


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
