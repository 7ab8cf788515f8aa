"""
Outreach email service.

Builds the templated outreach email for a lead's primary program and delivers
it through the Gmail API when OAuth credentials are set, otherwise (or when
Gmail fails) over SMTP. Transient SMTP failures (rate limits, timeouts) are
retried with exponential backoff; anything else fails the send immediately.
"""

from __future__ import annotations

import html
import logging
import smtplib
import socket
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Any, Callable, Optional

from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from domain.lead import is_locked
from domain.programs import ProgramKey
from services.gmail_service import GMAIL_ERRORS, gmail_available, send_via_gmail
from services.settings import Settings

logger = logging.getLogger(__name__)

MAX_SEND_ATTEMPTS = 4
RETRY_WAIT = wait_exponential(multiplier=0.5, min=0.5, max=8)

_TRANSIENT_MARKERS = ("429", "too many requests", "rate limit", "timeout", "timed out")

GENERIC_PARAGRAPH = (
    "Thank you for reaching out regarding funding opportunities. Based on what you "
    "shared, we would like to walk you through the options available to your business."
)

PROGRAM_PARAGRAPHS: dict[ProgramKey, str] = {
    ProgramKey.WORKING_CAPITAL: (
        "Based on your revenue and time in business, you look like a strong fit for a "
        "working capital loan to cover day-to-day operating needs."
    ),
    ProgramKey.LINE_OF_CREDIT: (
        "Your business profile fits a revolving line of credit, so you can draw funds "
        "when you need them and only pay for what you use."
    ),
    ProgramKey.BUSINESS_TERM_LOAN: (
        "With your time in business and annual revenue, a business term loan with a "
        "fixed repayment schedule is worth a look."
    ),
    ProgramKey.SBA_LOAN: (
        "Your business may qualify for an SBA loan, which typically offers longer terms "
        "and lower rates than conventional financing."
    ),
    ProgramKey.BANK_LOC: (
        "Your business history and revenue put you in range for a bank line of credit, "
        "our lowest-cost revolving option."
    ),
    ProgramKey.EQUIPMENT_FINANCING: (
        "If you have an equipment quote or invoice, equipment financing lets the "
        "equipment itself secure the loan so you can get it working for you quickly."
    ),
    ProgramKey.FIRST_CAMPAIGN: (
        "Since you need funds soon and have steady monthly revenue, we can move quickly "
        "on a short application to get an offer in front of you."
    ),
}

CLOSING_PARAGRAPH = (
    "Reply to this email with a good time to talk, or send over your last three months "
    "of business bank statements to get started."
)


class TransientSendError(Exception):
    """Raised for SMTP failures worth retrying (rate limits, timeouts)."""


@dataclass(frozen=True, slots=True)
class OutreachEmail:
    subject: str
    body_text: str
    body_html: str


@dataclass(frozen=True, slots=True)
class SendResult:
    """
    Result of an outreach send attempt.

    skipped: True when nothing was attempted (no transport configured).
    provider: "gmail" or "smtp", whichever transport handled the send.
    """

    ok: bool
    message_id: Optional[str] = None
    skipped: bool = False
    error: Optional[str] = None
    provider: Optional[str] = None


def _greeting(contact_name: Optional[str]) -> str:
    name = (contact_name or "").strip()
    if not name or is_locked(name):
        return "Hi there,"
    return f"Hi {name.split()[0]},"


def build_outreach_email(
    program_key: Optional[ProgramKey],
    contact_name: Optional[str],
    subject: str,
) -> OutreachEmail:
    """Render the outreach email; no program key (FAIL_ALL) gets the generic body."""

    paragraphs = [
        _greeting(contact_name),
        PROGRAM_PARAGRAPHS.get(program_key, GENERIC_PARAGRAPH),
        CLOSING_PARAGRAPH,
    ]
    body_text = "\n\n".join(paragraphs)
    body_html = "".join(f"<p>{html.escape(p)}</p>" for p in paragraphs)
    return OutreachEmail(subject=subject, body_text=body_text, body_html=body_html)


def is_transient(error: BaseException) -> bool:
    if isinstance(error, (socket.timeout, TimeoutError)):
        return True
    message = str(error).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


def _compose_message(settings: Settings, to_email: str, email: OutreachEmail) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg.attach(MIMEText(email.body_text, "plain", "utf-8"))
    msg.attach(MIMEText(email.body_html, "html", "utf-8"))

    sender = settings.from_email or settings.smtp_user or ""
    msg["Subject"] = email.subject
    msg["To"] = to_email
    msg["From"] = formataddr((settings.from_name, sender)) if sender else settings.from_name
    msg["Message-ID"] = make_msgid()
    return msg


def _deliver(
    settings: Settings,
    to_email: str,
    msg: MIMEMultipart,
    smtp_factory: Callable[..., smtplib.SMTP],
) -> str:
    sender = settings.from_email or settings.smtp_user or ""
    try:
        with smtp_factory(settings.smtp_host, settings.smtp_port, timeout=30) as smtp:
            smtp.ehlo()
            if settings.smtp_port != 465:
                smtp.starttls()
                smtp.ehlo()
            smtp.login(settings.smtp_user, settings.smtp_pass)
            smtp.sendmail(sender, [to_email], msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        if is_transient(e):
            raise TransientSendError(str(e)) from e
        raise
    return msg["Message-ID"]


def send_lead_email(
    settings: Settings,
    to_email: str,
    program_key: Optional[ProgramKey],
    contact_name: Optional[str] = None,
    smtp_factory: Optional[Callable[..., smtplib.SMTP]] = None,
    gmail_service: Optional[Any] = None,
) -> SendResult:
    """
    Send the outreach email for one lead.

    Gmail is tried first when its credentials are set; any Gmail failure falls
    back to SMTP. Returns a SendResult rather than raising; the caller decides
    whether to record the send.
    """

    program = program_key.value if program_key else None
    email = build_outreach_email(program_key, contact_name, settings.email_subject)
    msg = _compose_message(settings, to_email, email)

    if gmail_available(settings):
        try:
            gmail_id = send_via_gmail(settings, msg, service=gmail_service)
        except GMAIL_ERRORS as e:
            logger.warning("Gmail send to %s failed; falling back to SMTP: %s", to_email, e)
        else:
            logger.info("Email sent to %s via Gmail (program=%s)", to_email, program)
            return SendResult(ok=True, message_id=gmail_id, provider="gmail")

    if not settings.smtp_configured:
        logger.warning("SMTP not configured; skipping email send to %s", to_email)
        return SendResult(ok=False, skipped=True, error="smtp not configured")

    if smtp_factory is None:
        smtp_factory = smtplib.SMTP_SSL if settings.smtp_port == 465 else smtplib.SMTP
    retrying = Retrying(
        stop=stop_after_attempt(MAX_SEND_ATTEMPTS),
        wait=RETRY_WAIT,
        retry=retry_if_exception_type(TransientSendError),
    )
    try:
        message_id = retrying(_deliver, settings, to_email, msg, smtp_factory)
    except RetryError as e:
        logger.warning(
            "Email to %s failed after %d attempts: %s",
            to_email,
            MAX_SEND_ATTEMPTS,
            e.last_attempt.exception(),
        )
        return SendResult(ok=False, error=str(e.last_attempt.exception()), provider="smtp")
    except (smtplib.SMTPException, OSError) as e:
        logger.warning("Email to %s failed: %s", to_email, e)
        return SendResult(ok=False, error=str(e), provider="smtp")

    logger.info("Email sent to %s via SMTP (program=%s)", to_email, program)
    return SendResult(ok=True, message_id=message_id, provider="smtp")


__all__ = [
    "OutreachEmail",
    "SendResult",
    "TransientSendError",
    "build_outreach_email",
    "is_transient",
    "send_lead_email",
]
