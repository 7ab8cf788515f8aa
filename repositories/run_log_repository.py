"""
Scan run log repository (persistence).

One row per scan run in browser_bot_run_logs: started when the run begins,
finished with counters and status when it ends.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from domain.time import parse_utc_timestamp
from repositories.client import supabase
from repositories.lead_rows import to_iso_utc

_RUN_LOGS_TABLE: str = "browser_bot_run_logs"


@dataclass(frozen=True, slots=True)
class RunLog:
    id: int
    started_at: datetime
    ended_at: Optional[datetime]
    status: Optional[str]
    discovered_count: int
    saved_count: int
    emailed_count: int
    error_message: Optional[str]
    details: Optional[Mapping[str, Any]]


def _row_to_run_log(row: Mapping[str, Any]) -> RunLog:
    return RunLog(
        id=int(row["id"]),
        started_at=parse_utc_timestamp(row["started_at"]),
        ended_at=parse_utc_timestamp(row["ended_at"]) if row.get("ended_at") else None,
        status=row.get("status"),
        discovered_count=int(row.get("discovered_count") or 0),
        saved_count=int(row.get("saved_count") or 0),
        emailed_count=int(row.get("emailed_count") or 0),
        error_message=row.get("error_message"),
        details=row.get("details"),
    )


def _single_row(response: Any, action: str) -> Mapping[str, Any]:
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to {action}: {error}")
    rows = getattr(response, "data", None) or []
    if not rows:
        raise RuntimeError(f"Failed to {action}: no row returned")
    return rows[0]


def start_run(details: Optional[Mapping[str, Any]] = None) -> RunLog:
    response = (
        supabase.table(_RUN_LOGS_TABLE)
        .insert({"details": dict(details) if details else None})
        .execute()
    )
    return _row_to_run_log(_single_row(response, "start run"))


def finish_run(
    run_id: int,
    *,
    status: Optional[str] = None,
    discovered_count: Optional[int] = None,
    saved_count: Optional[int] = None,
    emailed_count: Optional[int] = None,
    error_message: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
) -> RunLog:
    """
    Close a run. Arguments left as None keep the stored value.
    """

    patch: dict[str, Any] = {"ended_at": to_iso_utc(datetime.now(timezone.utc), name="ended_at")}
    for column, value in (
        ("status", status),
        ("discovered_count", discovered_count),
        ("saved_count", saved_count),
        ("emailed_count", emailed_count),
        ("error_message", error_message),
        ("details", dict(details) if details else None),
    ):
        if value is not None:
            patch[column] = value

    response = (
        supabase.table(_RUN_LOGS_TABLE)
        .update(patch)
        .eq("id", run_id)
        .execute()
    )
    return _row_to_run_log(_single_row(response, "finish run"))


__all__ = ["RunLog", "finish_run", "start_run"]
