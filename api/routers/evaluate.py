"""
Evaluation API Endpoints.

Evaluate a raw lead against the funding programs without persisting it.
"""

from fastapi import APIRouter, HTTPException

from api.models import (
    ErrorResponse,
    LeadEvaluationRequest,
    LeadEvaluationResponse,
    NormalizedFactsResponse,
    ProgramResultResponse,
)
from domain.lead import FundlyLead
from services.lead_assembler import assemble_lead_record

router = APIRouter()


@router.post(
    "/evaluate",
    response_model=LeadEvaluationResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Evaluate Lead",
    description="Normalize a lead's raw fields and evaluate every funding program. Nothing is saved."
)
def evaluate_lead(request: LeadEvaluationRequest):
    """
    Evaluate a lead the same way the scan pipeline does.

    **How it works:**
    1. Missing text fields are treated as LOCKED (withheld by Fundly)
    2. Revenue, time in business, urgency, bank account, use of funds and
       industry are normalized
    3. All seven programs are evaluated; reasons list blockers and notes
    4. `filter_success` is the primary program, or `FAIL_ALL`
    """
    try:
        lead = FundlyLead.from_scrape(request.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        record = assemble_lead_record(lead)

        return LeadEvaluationResponse(
            fundly_id=lead.fundly_id,
            any_qualified=record.any_qualified,
            filter_success=record.filter_success,
            access_restricted=lead.access_restricted,
            facts=NormalizedFactsResponse(**record.facts.as_columns()),
            programs=[
                ProgramResultResponse(
                    key=program.key.value,
                    eligible=program.eligible,
                    reasons=list(program.reasons),
                )
                for program in record.evaluation.programs
            ],
            looking_for_min=record.looking_for_min,
            looking_for_max=record.looking_for_max,
        )

    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to evaluate lead: {str(e)}"
        )
