"""
Scraped-lead pipeline.

For each lead handed over by the scraper:
1. Build the FundlyLead and assemble the evaluated record
2. Upsert it into fundly_leads
3. Decide whether outreach is due
4. Send the email when sending is enabled, then stamp email_sent_at

A batch is wrapped in a browser_bot_run_logs row with discovered/saved/emailed
counters.

Repository access goes through `repo` / `run_logs` arguments that default to
the Supabase-backed modules, imported on first use so the module can be loaded
without database credentials.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Sequence

from domain.lead import FundlyLead
from services.email_service import send_lead_email
from services.lead_assembler import LeadRecord, assemble_lead_record
from services.outreach_service import OutreachDecision, decide_outreach, has_usable_email
from services.settings import Settings, load_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LeadOutcome:
    record: LeadRecord
    decision: OutreachDecision
    saved: bool
    emailed: bool


@dataclass
class BatchResult:
    discovered: int = 0
    saved: int = 0
    emailed: int = 0
    outcomes: List[LeadOutcome] = field(default_factory=list)
    errors: List[dict] = field(default_factory=list)


def _lead_repository() -> Any:
    from repositories import lead_repository

    return lead_repository


def _run_log_repository() -> Any:
    from repositories import run_log_repository

    return run_log_repository


def process_scraped_lead(
    payload: Mapping[str, Any],
    *,
    settings: Optional[Settings] = None,
    dry_run: bool = False,
    now: Optional[datetime] = None,
    repo: Any = None,
    sender: Any = send_lead_email,
) -> LeadOutcome:
    """
    Run one scraped lead through evaluation, persistence and outreach.

    With dry_run the lead is evaluated and the outreach decision is made, but
    nothing is written and no email is sent.

    Raises:
    - ValueError if the payload has no fundly_id.
    - RuntimeError on persistence failures.
    """

    settings = settings or load_settings()
    now = now or datetime.now(timezone.utc)
    dry_run = dry_run or settings.dry_run

    record = assemble_lead_record(FundlyLead.from_scrape(payload))
    logger.info(
        "Evaluated lead %s: filter_success=%s qualified=%s",
        record.lead.fundly_id,
        record.filter_success,
        [k.value for k in record.qualified_programs],
    )

    if dry_run:
        decision = decide_outreach(
            record, created_at=now, already_sent=False, can_contact=record.lead.can_contact, now=now
        )
        if decision.should_send:
            logger.info("Email suppressed (dry run) for %s", record.lead.email)
        return LeadOutcome(record=record, decision=decision, saved=False, emailed=False)

    repo = repo or _lead_repository()
    stored = repo.upsert_lead(record.to_row(), now=now)
    logger.info("Saved lead %s (id=%s)", stored.fundly_id, stored.id)

    email = record.lead.email
    has_email = has_usable_email(email)
    decision = decide_outreach(
        record,
        created_at=stored.created_at,
        already_sent=repo.email_already_sent(email) if has_email else False,
        can_contact=repo.can_contact_by_email(email) if has_email else False,
        now=now,
    )
    if not decision.should_send:
        return LeadOutcome(record=record, decision=decision, saved=True, emailed=False)

    if not settings.email_sending_enabled():
        logger.info("Email suppressed (sending not enabled) for %s", email)
        return LeadOutcome(record=record, decision=decision, saved=True, emailed=False)

    result = sender(settings, email, record.primary_program, record.lead.contact_name)
    if not result.ok:
        return LeadOutcome(record=record, decision=decision, saved=True, emailed=False)

    repo.update_email_sent_at(email, now)
    return LeadOutcome(record=record, decision=decision, saved=True, emailed=True)


def run_batch(
    payloads: Sequence[Mapping[str, Any]],
    *,
    settings: Optional[Settings] = None,
    dry_run: bool = False,
    repo: Any = None,
    run_logs: Any = None,
    sender: Any = send_lead_email,
) -> BatchResult:
    """
    Process a batch of scraped leads inside a run log.

    A failing lead is recorded in `errors` and does not stop the batch. Any
    other exception ends the batch; the run log is still closed with status
    "error" before the exception propagates.
    """

    settings = settings or load_settings()
    dry_run = dry_run or settings.dry_run
    result = BatchResult(discovered=len(payloads))

    run = None
    if not dry_run:
        run_logs = run_logs or _run_log_repository()
        run = run_logs.start_run({"discovered": len(payloads)})

    aborted: Optional[BaseException] = None
    try:
        for index, payload in enumerate(payloads):
            try:
                outcome = process_scraped_lead(
                    payload, settings=settings, dry_run=dry_run, repo=repo, sender=sender
                )
            except (ValueError, RuntimeError) as e:
                logger.error("Lead %d failed: %s", index, e)
                result.errors.append(
                    {"index": index, "fundly_id": payload.get("fundly_id") or payload.get("id"), "error": str(e)}
                )
                continue
            result.outcomes.append(outcome)
            result.saved += int(outcome.saved)
            result.emailed += int(outcome.emailed)
    except BaseException as e:
        aborted = e
        logger.error("Run aborted: %r", e)
        raise
    finally:
        # Every started run is closed, including one cut short by an error.
        if run is not None:
            messages = [e["error"] for e in result.errors]
            if aborted is not None:
                messages.append(f"run aborted: {aborted!r}")
            run_logs.finish_run(
                run.id,
                status="error" if messages else "ok",
                discovered_count=result.discovered,
                saved_count=result.saved,
                emailed_count=result.emailed,
                error_message="; ".join(messages) or None,
            )

    logger.info(
        "Run finished: discovered=%d saved=%d emailed=%d errors=%d",
        result.discovered,
        result.saved,
        result.emailed,
        len(result.errors),
    )
    return result


__all__ = ["BatchResult", "LeadOutcome", "process_scraped_lead", "run_batch"]
