"""
Tests for `services/gmail_service.py`.

The Gmail API client is replaced with an in-memory fake.

Covers contract rules:
- Gmail is available only with client id, secret, redirect URI and refresh token.
- GOOGLE_* variables stand in for the GMAIL_* client settings.
- Messages are sent as base64url `raw` for the authorized user.
"""

from __future__ import annotations

import base64
from email.mime.text import MIMEText

import pytest

from services.gmail_service import encode_raw_message, gmail_available, send_via_gmail
from services.settings import load_settings

GMAIL_ENV = {
    "GMAIL_CLIENT_ID": "client-id",
    "GMAIL_CLIENT_SECRET": "client-secret",
    "GMAIL_REDIRECT_URI": "http://localhost/callback",
    "GMAIL_REFRESH_TOKEN": "refresh-token",
}


class FakeGmailService:
    """Mimics `service.users().messages().send(...).execute()`."""

    def __init__(self, error=None, message_id="gmail-123"):
        self.error = error
        self.message_id = message_id
        self.sent = []

    def users(self):
        return self

    def messages(self):
        return self

    def send(self, userId, body):
        self.sent.append((userId, body))
        return self

    def execute(self):
        if self.error is not None:
            raise self.error
        return {"id": self.message_id}


@pytest.mark.parametrize(
    "env, expected",
    [
        (GMAIL_ENV, True),
        ({}, False),
        ({k: v for k, v in GMAIL_ENV.items() if k != "GMAIL_REFRESH_TOKEN"}, False),
        ({k: v for k, v in GMAIL_ENV.items() if k != "GMAIL_REDIRECT_URI"}, False),
        (
            {
                "GOOGLE_CLIENT_ID": "client-id",
                "GOOGLE_CLIENT_SECRET": "client-secret",
                "GOOGLE_REDIRECT_URI": "http://localhost/callback",
                "GMAIL_REFRESH_TOKEN": "refresh-token",
            },
            True,
        ),
        (
            {
                "GOOGLE_CLIENT_ID": "client-id",
                "GOOGLE_CLIENT_SECRET": "client-secret",
                "GOOGLE_REDIRECT_URI": "http://localhost/callback",
                "GOOGLE_REFRESH_TOKEN": "refresh-token",
            },
            False,
        ),
    ],
)
def test_gmail_available(env, expected) -> None:
    assert gmail_available(load_settings(env)) is expected


def test_gmail_client_settings_prefer_gmail_names() -> None:
    settings = load_settings(dict(GMAIL_ENV, GOOGLE_CLIENT_ID="other-id"))

    assert settings.gmail_client_id == "client-id"


def test_send_via_gmail_posts_raw_message() -> None:
    """Verify the message is sent as the authorized user and its id returned."""

    service = FakeGmailService()
    message = MIMEText("Hello", "plain", "utf-8")
    message["To"] = "jane@acme.com"

    gmail_id = send_via_gmail(load_settings(GMAIL_ENV), message, service=service)

    assert gmail_id == "gmail-123"
    user_id, body = service.sent[0]
    assert user_id == "me"
    assert base64.urlsafe_b64decode(body["raw"]) == message.as_bytes()


def test_send_via_gmail_requires_credentials() -> None:
    with pytest.raises(RuntimeError):
        send_via_gmail(load_settings({}), MIMEText("Hello"), service=FakeGmailService())


def test_encoded_message_is_url_safe() -> None:
    raw = encode_raw_message(MIMEText("??>>" * 50))

    assert "+" not in raw
    assert "/" not in raw
