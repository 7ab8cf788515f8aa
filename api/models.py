"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# Evaluation Models
# ============================================================================

class LeadEvaluationRequest(BaseModel):
    """Raw scraped lead fields to evaluate. Omitted text fields are treated as LOCKED."""
    fundly_id: str = Field(..., min_length=1, description="Lead ID in Fundly")
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    background_info: Optional[str] = None
    use_of_funds: Optional[str] = None
    location: Optional[str] = None
    urgency: Optional[str] = None
    time_in_business: Optional[str] = None
    bank_account: Optional[str] = None
    annual_revenue: Optional[str] = None
    industry: Optional[str] = None
    can_contact: bool = True
    locked: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "fundly_id": "lead-8f2c",
                "contact_name": "Jane Doe",
                "email": "jane@acme.com",
                "annual_revenue": "$1,200,000",
                "time_in_business": "3 years",
                "urgency": "This week",
                "bank_account": "Yes",
                "use_of_funds": "Working capital",
                "industry": "Construction",
                "background_info": "How much they are looking for: $50,000 - $100,000"
            }
        }


class ProgramResultResponse(BaseModel):
    """Eligibility for one funding program."""
    key: str
    eligible: bool
    reasons: List[str]


class NormalizedFactsResponse(BaseModel):
    """Typed facts derived from the raw fields. Null means the value could not be derived."""
    urgency_code: str
    tib_months: Optional[int] = None
    annual_revenue_min_usd: Optional[float] = None
    annual_revenue_max_usd: Optional[float] = None
    annual_revenue_usd_approx: Optional[float] = None
    bank_account_bool: Optional[bool] = None
    use_of_funds_norm: str
    industry_norm: str


class LeadEvaluationResponse(BaseModel):
    """Evaluation of a lead: facts, per-program results and the primary program."""
    fundly_id: str
    any_qualified: bool
    filter_success: str
    access_restricted: bool
    facts: NormalizedFactsResponse
    programs: List[ProgramResultResponse]
    looking_for_min: Optional[str] = None
    looking_for_max: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "fundly_id": "lead-8f2c",
                "any_qualified": True,
                "filter_success": "working_capital",
                "access_restricted": False,
                "facts": {
                    "urgency_code": "this_week",
                    "tib_months": 36,
                    "annual_revenue_min_usd": 1200000.0,
                    "annual_revenue_max_usd": 1200000.0,
                    "annual_revenue_usd_approx": 1200000.0,
                    "bank_account_bool": True,
                    "use_of_funds_norm": "other",
                    "industry_norm": "construction"
                },
                "programs": [],
                "looking_for_min": "$50,000",
                "looking_for_max": "$100,000"
            }
        }


# ============================================================================
# Lead Models
# ============================================================================

class StoredLeadResponse(BaseModel):
    """A lead as stored in fundly_leads."""
    id: Optional[int] = None
    fundly_id: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    email_sent_at: Optional[datetime] = None
    can_contact: bool
    filter_success: Optional[str] = None


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Invalid request",
                "detail": "Lead not found",
                "status_code": 404
            }
        }
