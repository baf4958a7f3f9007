"""Google Cloud credential loading shared by all Google-backed adapters."""

import json

import google.auth
from google.oauth2 import service_account

from src.core.config import Settings, get_settings

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def load_credentials(scopes: list[str] | None = None, settings: Settings | None = None):
    """Return service-account credentials, falling back to ADC.

    Inline key JSON wins over a key file; with neither configured the
    application default credentials of the environment are used.
    """
    settings = settings or get_settings()
    scopes = scopes or [CLOUD_PLATFORM_SCOPE]
    if settings.google_service_account_json:
        info = json.loads(settings.google_service_account_json)
        return service_account.Credentials.from_service_account_info(info, scopes=scopes)
    if settings.google_service_account_file:
        return service_account.Credentials.from_service_account_file(
            settings.google_service_account_file, scopes=scopes
        )
    credentials, _project = google.auth.default(scopes=scopes)
    return credentials
