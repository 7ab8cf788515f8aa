"""
Outreach decision.

A saved lead gets the outreach email only when every check passes:
- the lead was first seen today (UTC)
- it qualifies for at least one program
- it has a usable email address
- no email was sent to that address before
- the source still allows contacting it

The database lookups (already sent, can contact) are made by the caller and
passed in, so the decision itself is pure.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from domain.time import is_same_utc_day
from services.lead_assembler import LeadRecord


@dataclass(frozen=True, slots=True)
class OutreachDecision:
    should_send: bool
    reasons: Tuple[str, ...]


def has_usable_email(email: Optional[str]) -> bool:
    return bool(email and "@" in email)


def decide_outreach(
    record: LeadRecord,
    *,
    created_at: Optional[datetime],
    already_sent: bool,
    can_contact: bool,
    now: datetime,
) -> OutreachDecision:
    """Return whether to email the lead, with the reasons it was held back."""

    reasons = []
    if created_at is None or not is_same_utc_day(created_at, now):
        reasons.append("Lead was not first seen today")
    if not record.any_qualified:
        reasons.append("Lead does not qualify for any program")
    if not has_usable_email(record.lead.email):
        reasons.append("No usable email address")
    if already_sent:
        reasons.append("Email already sent")
    if not can_contact:
        reasons.append("Contact not allowed")
    return OutreachDecision(should_send=not reasons, reasons=tuple(reasons))


__all__ = ["OutreachDecision", "decide_outreach", "has_usable_email"]
