"""
Domain: contact field sanitizing (pure).

The Fundly UI renders labels and placeholder values right next to the real
contact data, so scraped email text often looks like
"jane@acme.comPhone" or "ExclusivityEmail". These helpers recover the real
address or reject the value.
"""

from __future__ import annotations

import re
from typing import Optional

_UI_NOISE = (
    re.compile(r"\b(?:AM|PM)?\s*Archive\s*Summary\s*Activity\s*Email", re.IGNORECASE),
    re.compile(r"\bExclusivityEmail\b", re.IGNORECASE),
    re.compile(r"\bPhone\b", re.IGNORECASE),
)
_EMAIL_RE = re.compile(r"([A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,})", re.IGNORECASE)
_TRAILING_PHONE_RE = re.compile(r"phone$", re.IGNORECASE)


def extract_first_email(text: Optional[str]) -> Optional[str]:
    """Return the first email-looking token in `text`, or None."""

    if not text:
        return None
    cleaned = str(text)
    for pattern in _UI_NOISE:
        cleaned = pattern.sub(" ", cleaned)

    match = _EMAIL_RE.search(cleaned)
    if not match:
        return None
    first = _TRAILING_PHONE_RE.sub("", match.group(1))
    return first.strip() or None


def is_allowed_email(email: Optional[str]) -> bool:
    """Reject empty values and the placeholder addresses Fundly shows for locked leads."""

    if not email:
        return False
    e = str(email).lower()
    if "exclusivityemail" in e:
        return False
    if "giveyou.upphone" in e:
        return False
    if re.search(r"@.*giveyou\.up\b", e):
        return False
    if e.endswith(".phone") or re.search(r"@.*phone\b", e):
        return False
    return True


def sanitize_email(email_or_text: Optional[str]) -> Optional[str]:
    """Extract, validate and lower-case an email; None when nothing usable remains."""

    extracted = extract_first_email(email_or_text or "")
    if not is_allowed_email(extracted):
        return None
    return extracted.lower() if extracted else None


__all__ = ["extract_first_email", "is_allowed_email", "sanitize_email"]
