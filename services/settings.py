"""
Runtime settings.

All operational knobs come from the environment; a `.env` file in the project
root is loaded first so local runs behave like the scheduled job.

Environment variables:
- SCAN_INTERVAL_SECONDS: seconds between scheduled scans (default 15)
- ALLOW_EMAIL_SEND: "true" enables real outreach sends
- RUN_CONTEXT: "launchd" also enables sends (set by the LaunchAgent plist)
- DRY_RUN: "true" logs outreach decisions without sending
- EMAIL_SUBJECT, FROM_NAME, FROM_EMAIL: outreach headers
- SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS: SMTP delivery
- GMAIL_CLIENT_ID, GMAIL_CLIENT_SECRET, GMAIL_REDIRECT_URI: Gmail API OAuth client
  (GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, GOOGLE_REDIRECT_URI are accepted too)
- GMAIL_REFRESH_TOKEN: required for Gmail delivery
- GMAIL_USER_EMAIL: From address fallback for Gmail sends
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_SUBJECT = "Funding Application - Next Steps"
DEFAULT_FROM_NAME = "Fundly Bot"


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() == "true"


@dataclass(frozen=True, slots=True)
class Settings:
    scan_interval_seconds: int
    allow_email_send: bool
    run_context: str
    dry_run: bool
    email_subject: str
    from_name: str
    from_email: Optional[str]
    smtp_host: Optional[str]
    smtp_port: int
    smtp_user: Optional[str]
    smtp_pass: Optional[str]
    gmail_client_id: Optional[str] = None
    gmail_client_secret: Optional[str] = None
    gmail_redirect_uri: Optional[str] = None
    gmail_refresh_token: Optional[str] = None
    gmail_user_email: Optional[str] = None

    def email_sending_enabled(self) -> bool:
        """Sends happen only when explicitly enabled or when run by the LaunchAgent."""

        if self.allow_email_send:
            return True
        return self.run_context.lower() == "launchd"

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_pass)


def _env_or_google(env: Mapping[str, str], key: str, fallback_key: str) -> Optional[str]:
    return env.get(key) or env.get(fallback_key) or None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from `environ` (defaults to os.environ)."""

    env = os.environ if environ is None else environ
    smtp_user = env.get("SMTP_USER") or None
    gmail_user_email = env.get("GMAIL_USER_EMAIL") or None
    return Settings(
        scan_interval_seconds=int(env.get("SCAN_INTERVAL_SECONDS") or 15),
        allow_email_send=_flag(env.get("ALLOW_EMAIL_SEND")),
        run_context=env.get("RUN_CONTEXT") or "",
        dry_run=_flag(env.get("DRY_RUN")),
        email_subject=env.get("EMAIL_SUBJECT") or DEFAULT_SUBJECT,
        from_name=env.get("FROM_NAME") or DEFAULT_FROM_NAME,
        from_email=env.get("FROM_EMAIL") or smtp_user or gmail_user_email,
        smtp_host=env.get("SMTP_HOST") or None,
        smtp_port=int(env.get("SMTP_PORT") or 587),
        smtp_user=smtp_user,
        smtp_pass=env.get("SMTP_PASS") or None,
        gmail_client_id=_env_or_google(env, "GMAIL_CLIENT_ID", "GOOGLE_CLIENT_ID"),
        gmail_client_secret=_env_or_google(env, "GMAIL_CLIENT_SECRET", "GOOGLE_CLIENT_SECRET"),
        gmail_redirect_uri=_env_or_google(env, "GMAIL_REDIRECT_URI", "GOOGLE_REDIRECT_URI"),
        gmail_refresh_token=env.get("GMAIL_REFRESH_TOKEN") or None,
        gmail_user_email=gmail_user_email,
    )


__all__ = ["Settings", "load_settings"]
