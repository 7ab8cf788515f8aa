"""
Tests for `domain/programs.py`.

Covers contract rules:
- All seven programs are always evaluated, in a fixed order.
- Failed gates add a blocker reason; FICO notes are appended regardless and never gate.
- Empty or LOCKED input qualifies for nothing.
- Evaluation is deterministic.
"""

from __future__ import annotations

import pytest

from domain.lead import LOCKED, FundlyLead
from domain.programs import (
    EvaluationResult,
    ProgramKey,
    evaluate_programs,
    months_from_text,
    passes_requirements,
)

STRONG_LEAD = {
    "annual_revenue": "$1,200,000",
    "time_in_business": "3 years",
    "urgency": "this week",
    "bank_account": "yes",
}


def test_programs_evaluated_in_fixed_order() -> None:
    """Verify every result is present, in evaluation order."""

    result = evaluate_programs(STRONG_LEAD)

    assert [p.key for p in result.programs] == [
        ProgramKey.FIRST_CAMPAIGN,
        ProgramKey.BUSINESS_TERM_LOAN,
        ProgramKey.EQUIPMENT_FINANCING,
        ProgramKey.LINE_OF_CREDIT,
        ProgramKey.SBA_LOAN,
        ProgramKey.BANK_LOC,
        ProgramKey.WORKING_CAPITAL,
    ]


def test_strong_lead_qualifies_for_everything() -> None:
    """Verify $1.2M annual, 36 months, urgent and banked clears every gate."""

    result = evaluate_programs(STRONG_LEAD)

    assert result.any_qualified is True
    assert all(p.eligible for p in result.programs)
    assert result.result_for(ProgramKey.FIRST_CAMPAIGN).reasons == ()
    assert result.result_for(ProgramKey.WORKING_CAPITAL).reasons == ()
    assert result.result_for(ProgramKey.BANK_LOC).reasons == ("FICO 700+ required (not collected)",)


@pytest.mark.parametrize(
    "lead",
    [
        FundlyLead(fundly_id="lead-1"),
        {},
        {"annual_revenue": "", "time_in_business": "", "urgency": "", "bank_account": ""},
        {"annual_revenue": LOCKED, "time_in_business": LOCKED, "urgency": LOCKED, "bank_account": LOCKED},
        {"annual_revenue": "locked", "time_in_business": " Locked ", "urgency": "", "bank_account": None},
    ],
)
def test_empty_or_locked_lead_qualifies_for_nothing(lead) -> None:
    """Verify worst-case input still returns all seven results, none eligible."""

    result = evaluate_programs(lead)

    assert len(result.programs) == 7
    assert result.any_qualified is False
    assert result.qualified == []
    assert passes_requirements(lead) is False
    equipment = result.result_for(ProgramKey.EQUIPMENT_FINANCING)
    assert equipment.reasons == (
        "No financial profile available (fields locked or empty)",
        "FICO 600+ preferred (not collected)",
    )


def test_equipment_financing_has_no_numeric_gate() -> None:
    """Verify any readable financial answer makes equipment financing eligible."""

    result = evaluate_programs({"annual_revenue": "$5,000", "time_in_business": "1 month"})

    assert result.qualified == [ProgramKey.EQUIPMENT_FINANCING]
    assert result.result_for(ProgramKey.EQUIPMENT_FINANCING).reasons == (
        "FICO 600+ preferred (not collected)",
    )


def test_first_campaign_blockers() -> None:
    """Verify every failed first-campaign gate is reported, in gate order."""

    lead = {
        "annual_revenue": "$60,000",
        "time_in_business": "6 months",
        "urgency": "next quarter",
        "bank_account": "maybe",
    }

    first = evaluate_programs(lead).result_for(ProgramKey.FIRST_CAMPAIGN)

    assert first.eligible is False
    assert first.reasons == (
        "Needs >= $10k monthly (has ~$5,000/mo)",
        "Needs >= 12 months in business (has 6m)",
        "Urgency must be within ~1 month",
        "Business bank account not confirmed",
    )


def test_revenue_and_tib_blockers_with_fico_note() -> None:
    """Verify blockers come first and the FICO note is always appended."""

    lead = {"annual_revenue": "$200,000", "time_in_business": "1 year"}

    term_loan = evaluate_programs(lead).result_for(ProgramKey.BUSINESS_TERM_LOAN)

    assert term_loan.eligible is False
    assert term_loan.reasons == (
        "Needs >= 24 months in business (has 12m)",
        "Needs >= $250k annual (has ~$200,000)",
        "FICO 650+ required (not collected)",
    )


def test_fico_note_never_gates() -> None:
    """Verify line of credit is eligible while still carrying its FICO note."""

    lead = {"annual_revenue": "$150,000", "time_in_business": "8 months"}

    loc = evaluate_programs(lead).result_for(ProgramKey.LINE_OF_CREDIT)

    assert loc.eligible is True
    assert loc.reasons == ("FICO 600+ required (not collected)",)


def test_thresholds_are_inclusive() -> None:
    """Verify values exactly at the minimum pass."""

    lead = {"annual_revenue": "$100,000", "time_in_business": "3 months"}

    assert evaluate_programs(lead).result_for(ProgramKey.WORKING_CAPITAL).eligible is True


def test_revenue_uses_first_plain_amount() -> None:
    """Verify the engine reads the first amount of a range and ignores K/M suffixes."""

    ranged = {"annual_revenue": "$80,000 - $500,000", "time_in_business": "2 years"}
    suffixed = {"annual_revenue": "$500k", "time_in_business": "2 years"}

    assert evaluate_programs(ranged).result_for(ProgramKey.WORKING_CAPITAL).eligible is False
    assert evaluate_programs(suffixed).result_for(ProgramKey.WORKING_CAPITAL).eligible is False


def test_unconfirmed_bank_account_fails_first_campaign() -> None:
    """Verify only an explicit affirmative passes the bank gate."""

    for answer in ("No", "Maybe", LOCKED, ""):
        lead = dict(STRONG_LEAD, bank_account=answer)
        assert evaluate_programs(lead).result_for(ProgramKey.FIRST_CAMPAIGN).eligible is False


def test_evaluation_is_deterministic() -> None:
    """Verify identical input gives equal results."""

    first = evaluate_programs(STRONG_LEAD)
    second = evaluate_programs(dict(STRONG_LEAD))

    assert isinstance(first, EvaluationResult)
    assert first == second


class TestMonthsFromText:
    """Tests for the engine's own time-in-business reader."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("1-2 years", 12),
            ("1+ year", 12),
            ("at least 1 year", 12),
            ("2-5 years", 24),
            ("2+ years", 24),
            ("5-10 years", 60),
            ("5+ years", 60),
            ("10+ years", 120),
            ("7 months", 7),
            ("3 years", 36),
            ("1 year 6 months", 12),
        ],
    )
    def test_phrases(self, text, expected):
        assert months_from_text(text) == expected

    @pytest.mark.parametrize("text", [None, "", LOCKED, "a while"])
    def test_unparseable(self, text):
        assert months_from_text(text) is None

    def test_long_digit_run_does_not_raise(self):
        assert months_from_text("9" * 5000 + " months") is None
