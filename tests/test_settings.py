"""
Tests for `services/settings.py`.
"""

from __future__ import annotations

import pytest

from services.settings import DEFAULT_FROM_NAME, DEFAULT_SUBJECT, load_settings


def test_defaults_from_empty_environment() -> None:
    """Verify every setting has a safe default; sending is off."""

    settings = load_settings({})

    assert settings.scan_interval_seconds == 15
    assert settings.allow_email_send is False
    assert settings.dry_run is False
    assert settings.email_subject == DEFAULT_SUBJECT
    assert settings.from_name == DEFAULT_FROM_NAME
    assert settings.smtp_port == 587
    assert settings.smtp_configured is False
    assert settings.email_sending_enabled() is False


def test_values_read_from_environment() -> None:
    settings = load_settings(
        {
            "SCAN_INTERVAL_SECONDS": "60",
            "ALLOW_EMAIL_SEND": "TRUE",
            "DRY_RUN": "true",
            "EMAIL_SUBJECT": "Your funding options",
            "SMTP_HOST": "smtp.example.com",
            "SMTP_PORT": "465",
            "SMTP_USER": "bot@example.com",
            "SMTP_PASS": "app-password",
        }
    )

    assert settings.scan_interval_seconds == 60
    assert settings.allow_email_send is True
    assert settings.dry_run is True
    assert settings.email_subject == "Your funding options"
    assert settings.smtp_port == 465
    assert settings.from_email == "bot@example.com"
    assert settings.smtp_configured is True


@pytest.mark.parametrize(
    "env, expected",
    [
        ({"ALLOW_EMAIL_SEND": "true"}, True),
        ({"RUN_CONTEXT": "launchd"}, True),
        ({"RUN_CONTEXT": "LaunchD"}, True),
        ({"ALLOW_EMAIL_SEND": "yes"}, False),
        ({"RUN_CONTEXT": "manual"}, False),
    ],
)
def test_email_sending_enabled(env, expected) -> None:
    """Verify sends need an explicit flag or the LaunchAgent run context."""

    assert load_settings(env).email_sending_enabled() is expected


def test_gmail_settings_fall_back_to_google_names() -> None:
    """Verify GOOGLE_* client settings are used when GMAIL_* are absent."""

    settings = load_settings(
        {
            "GOOGLE_CLIENT_ID": "client-id",
            "GOOGLE_CLIENT_SECRET": "client-secret",
            "GOOGLE_REDIRECT_URI": "http://localhost/callback",
            "GMAIL_REFRESH_TOKEN": "refresh-token",
            "GMAIL_USER_EMAIL": "bot@gmail.com",
        }
    )

    assert settings.gmail_client_id == "client-id"
    assert settings.gmail_client_secret == "client-secret"
    assert settings.gmail_redirect_uri == "http://localhost/callback"
    assert settings.gmail_refresh_token == "refresh-token"
    assert settings.from_email == "bot@gmail.com"
