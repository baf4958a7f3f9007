"""Tests for Google credential loading."""

from unittest.mock import MagicMock, patch

from src.core.config import Settings
from src.services.google_auth import CLOUD_PLATFORM_SCOPE, load_credentials

_CREDS = "src.services.google_auth.service_account.Credentials"


@patch(f"{_CREDS}.from_service_account_info")
def test_inline_json_takes_precedence(mock_from_info):
    settings = Settings(
        google_service_account_json='{"type": "service_account"}',
        google_service_account_file="/keys/unused.json",
    )
    load_credentials(scopes=["scope-a"], settings=settings)
    mock_from_info.assert_called_once_with({"type": "service_account"}, scopes=["scope-a"])


@patch(f"{_CREDS}.from_service_account_file")
def test_key_file(mock_from_file):
    settings = Settings(google_service_account_file="/keys/sa.json")
    load_credentials(settings=settings)
    mock_from_file.assert_called_once_with("/keys/sa.json", scopes=[CLOUD_PLATFORM_SCOPE])


@patch("src.services.google_auth.google.auth.default")
def test_falls_back_to_application_default(mock_default):
    creds = MagicMock()
    mock_default.return_value = (creds, "project-id")
    settings = Settings(google_service_account_json="", google_service_account_file="")
    assert load_credentials(settings=settings) is creds
