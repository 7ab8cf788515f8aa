"""
Row mapping for the fundly_leads table (pure).

Kept apart from lead_repository so the merge rules can be exercised without a
database connection.

Merge rules on upsert (mirrors the table's historical ON CONFLICT clause):
- email_sent_at and every normalized column keep the stored value when the
  incoming value is None ("keep old value if new is null").
- created_at is set once and never overwritten.
- Raw scraped columns always take the incoming value.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from domain.time import parse_utc_timestamp, require_utc_timestamp

NORMALIZED_COLUMNS: tuple[str, ...] = (
    "urgency_code",
    "tib_months",
    "annual_revenue_min_usd",
    "annual_revenue_max_usd",
    "annual_revenue_usd_approx",
    "bank_account_bool",
    "use_of_funds_norm",
    "industry_norm",
    "filter_success",
)

_KEEP_EXISTING_WHEN_NULL: tuple[str, ...] = ("email_sent_at",) + NORMALIZED_COLUMNS


@dataclass(frozen=True, slots=True)
class StoredLead:
    """A fundly_leads row as read back from the database."""

    id: Optional[int]
    fundly_id: str
    email: Optional[str]
    created_at: Optional[datetime]
    email_sent_at: Optional[datetime]
    can_contact: bool
    filter_success: Optional[str]
    row: Mapping[str, Any]


def to_iso_utc(dt: datetime, *, name: str) -> str:
    """Serialize a UTC datetime to ISO-8601 (timezone-aware, offset 0)."""

    require_utc_timestamp(name, dt)
    return dt.astimezone(timezone.utc).isoformat()


def conflict_column(row: Mapping[str, Any]) -> str:
    """Leads with an email are keyed on email; the rest on fundly_id."""

    email = row.get("email")
    return "email" if email and str(email).strip() else "fundly_id"


def merge_for_upsert(
    incoming: Mapping[str, Any],
    existing: Optional[Mapping[str, Any]],
    *,
    now: datetime,
) -> dict[str, Any]:
    """
    Build the row to write for `incoming`, given the currently stored row.

    `now` becomes created_at for leads seen for the first time.
    """

    merged = dict(incoming)
    if existing is None:
        merged.setdefault("email_sent_at", None)
        merged["created_at"] = to_iso_utc(now, name="now")
        return merged

    for column in _KEEP_EXISTING_WHEN_NULL:
        if merged.get(column) is None and existing.get(column) is not None:
            merged[column] = existing[column]

    merged["created_at"] = existing.get("created_at") or to_iso_utc(now, name="now")
    return merged


def row_to_stored_lead(row: Mapping[str, Any]) -> StoredLead:
    def optional_timestamp(key: str) -> Optional[datetime]:
        value = row.get(key)
        return parse_utc_timestamp(value) if value else None

    return StoredLead(
        id=row.get("id"),
        fundly_id=str(row["fundly_id"]),
        email=row.get("email") or None,
        created_at=optional_timestamp("created_at"),
        email_sent_at=optional_timestamp("email_sent_at"),
        can_contact=bool(row.get("can_contact")),
        filter_success=row.get("filter_success"),
        row=row,
    )


__all__ = [
    "NORMALIZED_COLUMNS",
    "StoredLead",
    "conflict_column",
    "merge_for_upsert",
    "row_to_stored_lead",
    "to_iso_utc",
]
