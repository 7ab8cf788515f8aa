"""
Gmail API delivery for outreach email.

Sends a fully composed MIME message through `users.messages.send` using an
OAuth refresh token from the environment. The outreach service tries this path
first and falls back to SMTP when it is unavailable or fails.
"""

from __future__ import annotations

import base64
import logging
from email.message import Message
from typing import Any, Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from services.settings import Settings

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/gmail.send"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

# Failures that mean "try SMTP instead".
GMAIL_ERRORS = (HttpError, GoogleAuthError, OSError)


def gmail_available(settings: Settings) -> bool:
    """True when client id, secret, redirect URI and refresh token are all set."""

    return bool(
        settings.gmail_client_id
        and settings.gmail_client_secret
        and settings.gmail_redirect_uri
        and settings.gmail_refresh_token
    )


def build_gmail_service(settings: Settings) -> Any:
    """Refresh an access token and construct a Gmail API client."""

    creds = Credentials(
        token=None,
        refresh_token=settings.gmail_refresh_token,
        client_id=settings.gmail_client_id,
        client_secret=settings.gmail_client_secret,
        token_uri=TOKEN_URI,
        scopes=SCOPES,
    )
    creds.refresh(Request())
    return build("gmail", "v1", credentials=creds, cache_discovery=False)


def encode_raw_message(message: Message) -> str:
    """Base64url form of the message, as the Gmail API expects in `raw`."""

    return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")


def send_via_gmail(settings: Settings, message: Message, service: Optional[Any] = None) -> str:
    """
    Send `message` as the authorized user and return the Gmail message id.

    Raises one of GMAIL_ERRORS on failure, or RuntimeError when the
    credentials are incomplete.
    """

    if not gmail_available(settings):
        raise RuntimeError("Gmail credentials incomplete")
    if service is None:
        service = build_gmail_service(settings)
    response = (
        service.users()
        .messages()
        .send(userId="me", body={"raw": encode_raw_message(message)})
        .execute()
    )
    gmail_id = response.get("id", "")
    logger.debug("Gmail accepted message %s for %s", gmail_id, message.get("To"))
    return gmail_id


__all__ = [
    "GMAIL_ERRORS",
    "build_gmail_service",
    "encode_raw_message",
    "gmail_available",
    "send_via_gmail",
]
