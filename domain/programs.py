"""
Domain: funding-program eligibility rules (pure).

Seven programs are evaluated for every lead, always in the same order. Each
program reports whether the lead clears its gates plus a list of reasons:
one blocker per failed gate, followed by informational notes (FICO minimums
are never collected from the source, so they are noted but do not gate).

Inputs are the raw text fields. Revenue and time in business are re-parsed
here with the engine's own helpers (parse_currency, months_from_text) rather
than taken from NormalizedFacts; the persisted facts and the gates are allowed
to differ in phrase coverage. Unparseable revenue or time in business counts
as 0, so every gate that needs them fails.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from .lead import is_locked, lead_field
from .normalize import (
    has_bank_account,
    parse_currency,
    round_half_up,
    urgency_within_one_month,
)


class ProgramKey(str, Enum):
    FIRST_CAMPAIGN = "first_campaign"
    BUSINESS_TERM_LOAN = "business_term_loan"
    EQUIPMENT_FINANCING = "equipment_financing"
    LINE_OF_CREDIT = "line_of_credit"
    SBA_LOAN = "sba_loan"
    BANK_LOC = "bank_loc"
    WORKING_CAPITAL = "working_capital"


@dataclass(frozen=True, slots=True)
class ProgramResult:
    key: ProgramKey
    eligible: bool
    reasons: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """
    Outcome of evaluate_programs.

    programs always holds all seven results in evaluation order.
    """

    any_qualified: bool
    programs: Tuple[ProgramResult, ...]

    @property
    def qualified(self) -> List[ProgramKey]:
        """Keys of eligible programs, in evaluation order."""

        return [p.key for p in self.programs if p.eligible]

    def result_for(self, key: ProgramKey) -> ProgramResult:
        for program in self.programs:
            if program.key == key:
                return program
        raise KeyError(key)


@dataclass(frozen=True, slots=True)
class _LeadProfile:
    annual: float
    monthly: float
    tib_months: int
    urgency_ok: bool
    bank_ok: bool
    has_profile: bool


# Ordered: first match wins. Range phrases resolve to their lower bound.
_MONTHS_FROM_TEXT: Tuple[Tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"\b(?:1\s*[-–]\s*2|1\+?|at\s*least\s*1)\s*year"), 12),
    (re.compile(r"\b2\s*[-–]\s*5\s*years|2\+\s*years"), 24),
    (re.compile(r"\b5\s*[-–]\s*10\s*years|5\+\s*years"), 60),
    (re.compile(r"\b10\+?\s*years?"), 120),
)
_MONTHS_RE = re.compile(r"\b(\d{1,9})\s*months?")
_YEARS_RE = re.compile(r"\b(\d{1,9})\s*years?")


def months_from_text(text: Optional[str]) -> Optional[int]:
    """
    Time in business in months, as the eligibility gates read it.

    Unlike parse_tib_months, "1 year" style phrases are checked before a
    literal month count, so "1 year 6 months" is 12 here.
    """

    if not text:
        return None
    t = text.lower()
    for pattern, months in _MONTHS_FROM_TEXT:
        if pattern.search(t):
            return months
    months_match = _MONTHS_RE.search(t)
    if months_match:
        return int(months_match.group(1))
    years_match = _YEARS_RE.search(t)
    if years_match:
        return int(years_match.group(1)) * 12
    return None


def _dollars(amount: float) -> str:
    return f"{round_half_up(amount):,}"


def _tib_gate(profile: _LeadProfile, minimum: int, reasons: List[str]) -> bool:
    ok = profile.tib_months >= minimum
    if not ok:
        reasons.append(f"Needs >= {minimum} months in business (has {profile.tib_months}m)")
    return ok


def _annual_gate(profile: _LeadProfile, minimum: int, reasons: List[str]) -> bool:
    ok = profile.annual >= minimum
    if not ok:
        reasons.append(
            f"Needs >= ${minimum // 1000}k annual (has ~${_dollars(profile.annual)})"
        )
    return ok


def _first_campaign(profile: _LeadProfile) -> ProgramResult:
    reasons: List[str] = []
    monthly_ok = profile.monthly >= 10_000
    if not monthly_ok:
        reasons.append(f"Needs >= $10k monthly (has ~${_dollars(profile.monthly)}/mo)")
    tib_ok = _tib_gate(profile, 12, reasons)
    if not profile.urgency_ok:
        reasons.append("Urgency must be within ~1 month")
    if not profile.bank_ok:
        reasons.append("Business bank account not confirmed")
    eligible = monthly_ok and tib_ok and profile.urgency_ok and profile.bank_ok
    return ProgramResult(ProgramKey.FIRST_CAMPAIGN, eligible, tuple(reasons))


def _tib_and_revenue(
    key: ProgramKey,
    min_months: int,
    min_annual: int,
    note: Optional[str] = None,
) -> Callable[[_LeadProfile], ProgramResult]:
    def evaluate(profile: _LeadProfile) -> ProgramResult:
        reasons: List[str] = []
        tib_ok = _tib_gate(profile, min_months, reasons)
        rev_ok = _annual_gate(profile, min_annual, reasons)
        if note:
            reasons.append(note)
        return ProgramResult(key, tib_ok and rev_ok, tuple(reasons))

    return evaluate


def _equipment_financing(profile: _LeadProfile) -> ProgramResult:
    # No minimum time in business or revenue; a lead with no readable
    # financial answers at all is still not eligible.
    reasons: List[str] = []
    if not profile.has_profile:
        reasons.append("No financial profile available (fields locked or empty)")
    reasons.append("FICO 600+ preferred (not collected)")
    return ProgramResult(ProgramKey.EQUIPMENT_FINANCING, profile.has_profile, tuple(reasons))


_PROGRAM_RULES: Tuple[Callable[[_LeadProfile], ProgramResult], ...] = (
    _first_campaign,
    _tib_and_revenue(
        ProgramKey.BUSINESS_TERM_LOAN, 24, 250_000, "FICO 650+ required (not collected)"
    ),
    _equipment_financing,
    _tib_and_revenue(
        ProgramKey.LINE_OF_CREDIT, 6, 120_000, "FICO 600+ required (not collected)"
    ),
    _tib_and_revenue(ProgramKey.SBA_LOAN, 24, 120_000, "FICO 675+ required (not collected)"),
    _tib_and_revenue(ProgramKey.BANK_LOC, 36, 350_000, "FICO 700+ required (not collected)"),
    _tib_and_revenue(ProgramKey.WORKING_CAPITAL, 3, 100_000),
)


_PROFILE_FIELDS = ("annual_revenue", "time_in_business", "urgency", "bank_account")


def _is_present(value: Optional[str]) -> bool:
    return bool((value or "").strip()) and not is_locked(value)


def _profile(lead: Any) -> _LeadProfile:
    annual = parse_currency(lead_field(lead, "annual_revenue")) or 0.0
    return _LeadProfile(
        annual=annual,
        monthly=annual / 12 if annual > 0 else 0.0,
        tib_months=months_from_text(lead_field(lead, "time_in_business")) or 0,
        urgency_ok=urgency_within_one_month(lead_field(lead, "urgency")),
        bank_ok=has_bank_account(lead_field(lead, "bank_account")),
        has_profile=any(_is_present(lead_field(lead, name)) for name in _PROFILE_FIELDS),
    )


def evaluate_programs(lead: Any) -> EvaluationResult:
    """
    Evaluate every funding program for a lead.

    `lead` is a FundlyLead or any mapping with the raw text fields
    annual_revenue, time_in_business, urgency and bank_account. Missing,
    empty and LOCKED values simply fail the gates that need them.
    """

    profile = _profile(lead)
    programs = tuple(rule(profile) for rule in _PROGRAM_RULES)
    return EvaluationResult(
        any_qualified=any(p.eligible for p in programs),
        programs=programs,
    )


def passes_requirements(lead: Any) -> bool:
    """True when the lead qualifies for at least one program."""

    return evaluate_programs(lead).any_qualified


__all__ = [
    "EvaluationResult",
    "ProgramKey",
    "ProgramResult",
    "evaluate_programs",
    "months_from_text",
    "passes_requirements",
]
