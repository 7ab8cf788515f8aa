"""
Fundly lead repository (persistence).

This module provides *only* persistence operations for the fundly_leads table.
No eligibility or outreach rules belong here; the caller passes fully
assembled rows (see services.lead_assembler.LeadRecord.to_row).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from repositories.client import supabase
from repositories.lead_rows import (
    StoredLead,
    conflict_column,
    merge_for_upsert,
    row_to_stored_lead,
    to_iso_utc,
)

# Supabase table name for Fundly lead records.
# Keep this aligned with your database schema.
_LEADS_TABLE: str = "fundly_leads"


def _rows(response: Any, action: str) -> List[Mapping[str, Any]]:
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to {action}: {error}")
    return getattr(response, "data", None) or []


def _fetch_one(column: str, value: Any) -> Optional[Mapping[str, Any]]:
    response = (
        supabase.table(_LEADS_TABLE)
        .select("*")
        .eq(column, value)
        .order("created_at", desc=True)
        .limit(1)
        .execute()
    )
    rows = _rows(response, f"fetch lead by {column}")
    return rows[0] if rows else None


def upsert_lead(row: Mapping[str, Any], *, now: Optional[datetime] = None) -> StoredLead:
    """
    Insert or update a lead row.

    Upserts on email when the row has one, otherwise on fundly_id. Columns
    whose incoming value is None keep the stored value (see lead_rows).

    Raises:
    - RuntimeError if Supabase returns an error response.
    """

    now = now or datetime.now(timezone.utc)
    column = conflict_column(row)
    existing = _fetch_one(column, row[column])
    payload = merge_for_upsert(row, existing, now=now)

    response = (
        supabase.table(_LEADS_TABLE)
        .upsert(payload, on_conflict=column)
        .execute()
    )
    rows = _rows(response, "upsert lead")
    return row_to_stored_lead(rows[0] if rows else payload)


def get_lead_by_email(email: str) -> StoredLead | None:
    row = _fetch_one("email", email)
    return row_to_stored_lead(row) if row else None


def get_lead_by_fundly_id(fundly_id: str) -> StoredLead | None:
    row = _fetch_one("fundly_id", fundly_id)
    return row_to_stored_lead(row) if row else None


def list_leads(limit: Optional[int] = None) -> List[StoredLead]:
    """List leads, newest first."""

    query = supabase.table(_LEADS_TABLE).select("*").order("created_at", desc=True)
    if limit is not None:
        query = query.limit(limit)
    return [row_to_stored_lead(row) for row in _rows(query.execute(), "list leads")]


def update_email_sent_at(email: str, sent_at: datetime) -> None:
    response = (
        supabase.table(_LEADS_TABLE)
        .update({"email_sent_at": to_iso_utc(sent_at, name="sent_at")})
        .eq("email", email)
        .execute()
    )
    _rows(response, "update email_sent_at")


def email_already_sent(email: str) -> bool:
    response = (
        supabase.table(_LEADS_TABLE)
        .select("id")
        .eq("email", email)
        .not_.is_("email_sent_at", "null")
        .limit(1)
        .execute()
    )
    return bool(_rows(response, "check email_sent_at"))


def can_contact_by_email(email: str) -> bool:
    """Latest can_contact flag for the address; False when the address is unknown."""

    row = _fetch_one("email", email)
    return bool(row and row.get("can_contact"))


def update_normalized_columns(lead_id: int, columns: Mapping[str, Any]) -> None:
    """Overwrite normalized columns for one row (used by the backfill)."""

    response = (
        supabase.table(_LEADS_TABLE)
        .update(dict(columns))
        .eq("id", lead_id)
        .execute()
    )
    _rows(response, "update normalized columns")


__all__ = [
    "can_contact_by_email",
    "email_already_sent",
    "get_lead_by_email",
    "get_lead_by_fundly_id",
    "list_leads",
    "update_email_sent_at",
    "update_normalized_columns",
    "upsert_lead",
]
