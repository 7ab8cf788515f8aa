"""
Leads API Endpoints.

Read access to stored Fundly leads.
"""

from fastapi import APIRouter, HTTPException

from api.models import ErrorResponse, StoredLeadResponse
from repositories.lead_repository import get_lead_by_fundly_id

router = APIRouter()


@router.get(
    "/leads/{fundly_id}",
    response_model=StoredLeadResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get Lead",
    description="Fetch a stored lead by its Fundly ID, including its primary program (filter_success)."
)
def get_lead(fundly_id: str):
    try:
        stored = get_lead_by_fundly_id(fundly_id)
    except RuntimeError as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch lead: {str(e)}"
        )

    if stored is None:
        raise HTTPException(status_code=404, detail=f"Lead not found: {fundly_id}")

    return StoredLeadResponse(
        id=stored.id,
        fundly_id=stored.fundly_id,
        email=stored.email,
        created_at=stored.created_at,
        email_sent_at=stored.email_sent_at,
        can_contact=stored.can_contact,
        filter_success=stored.filter_success,
    )
