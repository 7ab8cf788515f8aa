"""
Domain: Fundly lead entity.

A FundlyLead is the raw, scraped view of a single lead. Every text field is
kept exactly as the scraper saw it; fields the Fundly UI withheld because the
lead is exclusive with another agent carry the LOCKED sentinel.

Contract excerpts implemented here:
- fundly_id identifies the lead in the source system and is required.
- LOCKED means "inaccessible" and must be treated like an absent value by
  every consumer. Nothing here interprets the financial fields.
- The entity is frozen; normalization and evaluation produce new objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .contact import sanitize_email

LOCKED = "LOCKED"

# Scraped text fields that default to LOCKED when the scraper found nothing.
_LOCKABLE_FIELDS = (
    "contact_name",
    "background_info",
    "use_of_funds",
    "location",
    "urgency",
    "time_in_business",
    "bank_account",
    "annual_revenue",
    "industry",
)


def is_locked(value: Optional[str]) -> bool:
    """True when a raw field carries the LOCKED sentinel, in any letter case."""

    return (value or "").strip().upper() == LOCKED


def lead_field(lead: Any, name: str) -> Optional[str]:
    """
    Read a raw text field from a FundlyLead or a row mapping.

    Stored rows and API payloads are plain mappings; the domain functions
    accept either shape so they can run over both.
    """

    if isinstance(lead, Mapping):
        value = lead.get(name)
    else:
        value = getattr(lead, name, None)
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True, slots=True)
class FundlyLead:
    """
    Raw lead fields as scraped from Fundly.

    Notes:
    - `locked` is the exclusivity flag reported by the scraper. Individual
      fields may still be LOCKED when it is False.
    - `email` and `phone` are None when unavailable (never LOCKED) so the
      persistence layer can upsert on email only when one exists.
    """

    fundly_id: str
    contact_name: str = LOCKED
    email: Optional[str] = None
    phone: Optional[str] = None
    background_info: str = LOCKED
    use_of_funds: str = LOCKED
    location: str = LOCKED
    urgency: str = LOCKED
    time_in_business: str = LOCKED
    bank_account: str = LOCKED
    annual_revenue: str = LOCKED
    industry: str = LOCKED
    can_contact: bool = True
    locked: bool = False

    def __post_init__(self) -> None:
        if not (self.fundly_id or "").strip():
            raise ValueError("fundly_id is required")

    @property
    def access_restricted(self) -> bool:
        """True when the lead is exclusive or any scraped field was withheld."""

        if self.locked:
            return True
        return any(is_locked(getattr(self, name)) for name in _LOCKABLE_FIELDS)

    @classmethod
    def from_scrape(cls, payload: Mapping[str, Any]) -> "FundlyLead":
        """
        Build a FundlyLead from a scraper payload (JSON object).

        Accepts `fundly_id` or `id`, and `contact_name` or `name`. Missing or
        blank text fields become LOCKED; the email is sanitized and dropped
        when it is a UI placeholder. Exclusive leads never expose contact data.

        Raises:
        - ValueError if no fundly_id is present.
        """

        fundly_id = str(payload.get("fundly_id") or payload.get("id") or "").strip()
        if not fundly_id:
            raise ValueError("Scraped lead is missing fundly_id")

        locked = bool(payload.get("locked", False))

        def text(key: str, *fallbacks: str) -> str:
            for name in (key, *fallbacks):
                value = payload.get(name)
                if value is not None and str(value).strip():
                    return " ".join(str(value).split())
            return LOCKED

        email = None if locked else sanitize_email(payload.get("email"))
        phone = None if locked else (str(payload.get("phone") or "").strip() or None)

        return cls(
            fundly_id=fundly_id,
            contact_name=text("contact_name", "name"),
            email=email,
            phone=phone,
            background_info=text("background_info"),
            use_of_funds=text("use_of_funds"),
            location=text("location"),
            urgency=text("urgency"),
            time_in_business=text("time_in_business"),
            bank_account=text("bank_account"),
            annual_revenue=text("annual_revenue"),
            industry=text("industry"),
            can_contact=bool(payload.get("can_contact", True)),
            locked=locked,
        )


__all__ = ["LOCKED", "FundlyLead", "is_locked", "lead_field"]
