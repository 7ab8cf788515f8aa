"""
Lead record assembler.

Combines one scraped lead with its normalized facts, program evaluation and
primary-program decision. This is the only shape the persistence and outreach
layers consume; it performs no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from domain.lead import FundlyLead
from domain.normalize import NormalizedFacts, normalize_lead, parse_looking_for
from domain.primary_program import FAIL_ALL, filter_success_for
from domain.programs import EvaluationResult, ProgramKey, evaluate_programs


@dataclass(frozen=True, slots=True)
class LeadRecord:
    """
    A fully evaluated lead ready to be persisted.

    filter_success is a ProgramKey value or FAIL_ALL.
    """

    lead: FundlyLead
    facts: NormalizedFacts
    evaluation: EvaluationResult
    filter_success: str
    looking_for_min: Optional[str]
    looking_for_max: Optional[str]

    @property
    def any_qualified(self) -> bool:
        return self.evaluation.any_qualified

    @property
    def qualified_programs(self) -> List[ProgramKey]:
        return self.evaluation.qualified

    @property
    def primary_program(self) -> Optional[ProgramKey]:
        if self.filter_success == FAIL_ALL:
            return None
        return ProgramKey(self.filter_success)

    def to_row(self) -> dict[str, Any]:
        """Flatten into the fundly_leads column shape (raw + normalized columns)."""

        lead = self.lead
        looking = [v for v in (self.looking_for_min, self.looking_for_max) if v]
        row: dict[str, Any] = {
            "fundly_id": lead.fundly_id,
            "contact_name": lead.contact_name,
            "email": lead.email,
            "phone": lead.phone,
            "background_info": lead.background_info,
            "can_contact": lead.can_contact,
            "locked": lead.locked,
            "use_of_funds": lead.use_of_funds,
            "location": lead.location,
            "urgency": lead.urgency,
            "time_in_business": lead.time_in_business,
            "bank_account": lead.bank_account,
            "annual_revenue": lead.annual_revenue,
            "industry": lead.industry,
            "looking_for": " - ".join(looking) or None,
            "looking_for_min": self.looking_for_min,
            "looking_for_max": self.looking_for_max,
            "filter_success": self.filter_success,
        }
        row.update(self.facts.as_columns())
        return row


def assemble_lead_record(lead: FundlyLead) -> LeadRecord:
    """Normalize, evaluate and pick the primary program for one lead."""

    evaluation = evaluate_programs(lead)
    looking_min, looking_max = parse_looking_for(lead.background_info)
    return LeadRecord(
        lead=lead,
        facts=normalize_lead(lead),
        evaluation=evaluation,
        filter_success=filter_success_for(evaluation, lead),
        looking_for_min=looking_min,
        looking_for_max=looking_max,
    )


def normalized_columns_for_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """
    Recompute normalized columns and filter_success for a stored row.

    Used by the backfill script; stored rows may predate the normalized
    columns or have been evaluated by older rules.
    """

    columns = normalize_lead(row).as_columns()
    columns["filter_success"] = filter_success_for(evaluate_programs(row), row)
    return columns


__all__ = ["LeadRecord", "assemble_lead_record", "normalized_columns_for_row"]
