"""
Tests for `domain/lead.py` and `domain/contact.py`.

Covers contract rules:
- fundly_id is required.
- Missing or blank scraped text fields become LOCKED.
- Exclusive (locked) leads never expose contact data.
- Scraped email text is cleaned of UI labels and placeholder addresses.
- The entity is immutable.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from domain.contact import extract_first_email, is_allowed_email, sanitize_email
from domain.lead import LOCKED, FundlyLead, is_locked, lead_field


def test_fundly_id_required() -> None:
    """Verify a blank fundly_id is rejected at instantiation."""

    with pytest.raises(ValueError):
        FundlyLead(fundly_id="  ")


def test_from_scrape_requires_an_id() -> None:
    """Verify payloads without fundly_id or id are rejected."""

    with pytest.raises(ValueError):
        FundlyLead.from_scrape({"email": "jane@acme.com"})


def test_from_scrape_accepts_id_and_name_aliases() -> None:
    """Verify `id` and `name` are accepted in place of fundly_id and contact_name."""

    lead = FundlyLead.from_scrape({"id": "lead-7", "name": "Jane Doe"})

    assert lead.fundly_id == "lead-7"
    assert lead.contact_name == "Jane Doe"


def test_from_scrape_missing_fields_become_locked() -> None:
    """Verify missing and blank text fields default to the LOCKED sentinel."""

    lead = FundlyLead.from_scrape({"fundly_id": "lead-1", "urgency": "   "})

    assert lead.urgency == LOCKED
    assert lead.annual_revenue == LOCKED
    assert lead.industry == LOCKED
    assert lead.email is None
    assert lead.phone is None
    assert lead.access_restricted is True


def test_from_scrape_collapses_whitespace() -> None:
    """Verify runs of whitespace in scraped text collapse to single spaces."""

    lead = FundlyLead.from_scrape({"fundly_id": "lead-1", "annual_revenue": "  $80,000 \n -  $120,000 "})

    assert lead.annual_revenue == "$80,000 - $120,000"


def test_from_scrape_locked_lead_hides_contact_data() -> None:
    """Verify an exclusive lead keeps no email or phone."""

    lead = FundlyLead.from_scrape(
        {"fundly_id": "lead-1", "email": "jane@acme.com", "phone": "555-0100", "locked": True}
    )

    assert lead.locked is True
    assert lead.email is None
    assert lead.phone is None
    assert lead.access_restricted is True


def test_from_scrape_sanitizes_email() -> None:
    """Verify a UI-polluted email is recovered and lower-cased."""

    lead = FundlyLead.from_scrape({"fundly_id": "lead-1", "email": "Jane@Acme.comPhone"})

    assert lead.email == "jane@acme.com"


def test_fully_scraped_lead_is_not_access_restricted() -> None:
    """Verify a lead with every field present and no lock flag is unrestricted."""

    payload = {
        "fundly_id": "lead-1",
        "contact_name": "Jane Doe",
        "background_info": "Bakery",
        "use_of_funds": "Payroll",
        "location": "Austin, TX",
        "urgency": "ASAP",
        "time_in_business": "3 years",
        "bank_account": "Yes",
        "annual_revenue": "$500,000",
        "industry": "Food",
    }

    assert FundlyLead.from_scrape(payload).access_restricted is False


def test_lead_is_immutable() -> None:
    """Verify FundlyLead cannot be mutated after creation (frozen entity)."""

    lead = FundlyLead(fundly_id="lead-1")

    with pytest.raises(FrozenInstanceError):
        lead.urgency = "ASAP"  # type: ignore[misc]


def test_is_locked_and_lead_field() -> None:
    """Verify LOCKED detection and field access over objects and mappings."""

    assert is_locked(" LOCKED ") is True
    assert is_locked("locked") is True
    assert is_locked("Locked out of bank") is False
    assert is_locked(None) is False

    assert lead_field({"urgency": "ASAP"}, "urgency") == "ASAP"
    assert lead_field({"tib": 12}, "tib") == "12"
    assert lead_field({}, "urgency") is None
    assert lead_field(FundlyLead(fundly_id="lead-1"), "urgency") == LOCKED


class TestContactSanitizing:
    """Tests for scraped email cleanup."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("jane@acme.com", "jane@acme.com"),
            ("Email: jane@acme.com Phone: 555-0100", "jane@acme.com"),
            ("jane@acme.comPhone", "jane@acme.com"),
            ("no address here", None),
            ("", None),
            (None, None),
        ],
    )
    def test_extract_first_email(self, text, expected):
        assert extract_first_email(text) == expected

    @pytest.mark.parametrize(
        "email",
        [None, "", "ExclusivityEmail", "x@giveyou.upphone", "someone@giveyou.up", "a@b.phone"],
    )
    def test_placeholders_rejected(self, email):
        assert is_allowed_email(email) is False

    def test_real_address_allowed(self):
        assert is_allowed_email("jane@acme.com") is True

    def test_sanitize_lower_cases(self):
        assert sanitize_email("JANE@ACME.COM") == "jane@acme.com"

    def test_sanitize_drops_placeholder(self):
        assert sanitize_email("ExclusivityEmail") is None
