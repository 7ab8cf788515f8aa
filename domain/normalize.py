"""
Domain: text normalizers for scraped lead fields (pure).

Fundly shows financial-profile answers as loosely formatted text
("$80,000 - $120,000", "2-5 years", "ASAP, like yesterday"). These functions
turn that text into the typed facts persisted next to the raw columns.

Contract:
- Every function is total. None, empty text, LOCKED and arbitrary unicode map
  to a documented value; nothing raises.
- "Could not derive" is always None (or the enum's unknown/other member), never
  a placeholder number, so the persistence merge can keep older values.
- Range phrases map to the lower bound of the range ("2-5 years" -> 24 months)
  because downstream gates are "at least N months" comparisons.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from .lead import is_locked, lead_field


class UrgencyCode(str, Enum):
    ASAP = "asap"
    LIKE_YESTERDAY = "like_yesterday"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    WITHIN_30_DAYS = "within_30_days"
    NOW = "now"
    UNKNOWN = "unknown"


class UseOfFunds(str, Enum):
    EQUIPMENT = "equipment"
    PAYROLL = "payroll"
    EXPANSION = "expansion"
    DEBT_REFI = "debt_refi"
    OTHER = "other"


INDUSTRY_LOCKED = "locked"

# Ordered: first match wins.
_URGENCY_PATTERNS: tuple[tuple[re.Pattern[str], UrgencyCode], ...] = (
    (re.compile(r"\basap\b"), UrgencyCode.ASAP),
    (re.compile(r"like\s*yesterday"), UrgencyCode.LIKE_YESTERDAY),
    (re.compile(r"this\s*week"), UrgencyCode.THIS_WEEK),
    (re.compile(r"this\s*month"), UrgencyCode.THIS_MONTH),
    (re.compile(r"within\s*30\s*days|<\s*1\s*month"), UrgencyCode.WITHIN_30_DAYS),
    (re.compile(r"\bnow\b"), UrgencyCode.NOW),
)

# Union of every phrase the first-campaign gate has accepted over time.
_WITHIN_ONE_MONTH_RE = re.compile(
    r"asap|this\s*week|this\s*month|within\s*30\s*days|<\s*1\s*month|\bnow\b|like\s*yesterday"
)

_TIB_RANGES: tuple[tuple[re.Pattern[str], int], ...] = (
    (re.compile(r"10\s*\+"), 120),
    (re.compile(r"5\s*[-–]\s*10\s*years?"), 60),
    (re.compile(r"2\s*[-–]\s*5\s*years?"), 24),
    (re.compile(r"1\s*[-–]\s*2\s*years?"), 12),
)
_MONTHS_RE = re.compile(r"(\d+)\s*months?")
_YEARS_RE = re.compile(r"(\d+)\s*years?")

_CURRENCY_RE = re.compile(r"\$?(\d+(?:\.\d+)?)")
_REVENUE_TOKEN_RE = re.compile(r"\$?([0-9][0-9,.]*)(\s*[km])?", re.IGNORECASE)
_REVENUE_VALUE_RE = re.compile(r"^\$?([0-9]+(?:\.[0-9]+)?)([km])?$")
_SUFFIX_MULTIPLIERS = {"k": 1_000, "m": 1_000_000}
_MAX_DIGITS = 9

_USE_OF_FUNDS_PATTERNS: tuple[tuple[re.Pattern[str], UseOfFunds], ...] = (
    (re.compile(r"equip"), UseOfFunds.EQUIPMENT),
    (re.compile(r"payroll"), UseOfFunds.PAYROLL),
    (re.compile(r"expan"), UseOfFunds.EXPANSION),
    (re.compile(r"debt|refi|refinanc"), UseOfFunds.DEBT_REFI),
)

_BANK_YES_RE = re.compile(r"\b(?:yes|y)\b")
_BANK_NO_RE = re.compile(r"\b(?:no|n)\b|\bnone\b|no\s*account")
_BANK_IMPLIED_RE = re.compile(r"business|checking")

_LOOKING_FOR_RE = re.compile(
    r"How much they are looking for:\s*\$([0-9,]+)\s*-\s*\$([0-9,]+)", re.IGNORECASE
)


def round_half_up(value: float) -> Union[int, float]:
    """
    Round to the nearest integer with .5 going up (not banker's rounding).

    Infinity and NaN have no integer form and are returned unchanged.
    """

    if not math.isfinite(value):
        return value
    return int(math.floor(value + 0.5))


def _lower(text: Optional[str]) -> str:
    return (text or "").lower()


def _whole_number(digits: str) -> Optional[int]:
    # Guards int() against pathological digit runs in scraped text.
    if len(digits) > _MAX_DIGITS:
        return None
    return int(digits)


def parse_currency(text: Optional[str]) -> Optional[float]:
    """
    Parse the first plain dollar amount in `text`.

    Thousands separators and whitespace are removed first, so "$1,200,000"
    is 1200000.0. K/M suffixes are not understood here (see
    parse_revenue_range). Returns None when no number is present.
    """

    if not text:
        return None
    cleaned = re.sub(r"[,\s]", "", str(text))
    match = _CURRENCY_RE.search(cleaned)
    return float(match.group(1)) if match else None


def _parse_revenue_token(token: str) -> Optional[float]:
    match = _REVENUE_VALUE_RE.match(re.sub(r"[,\s]", "", token.lower()))
    if not match:
        return None
    value = float(match.group(1)) * _SUFFIX_MULTIPLIERS.get(match.group(2) or "", 1)
    return value if math.isfinite(value) else None


@dataclass(frozen=True, slots=True)
class RevenueRange:
    """Annual revenue parsed from free text. All three are None when nothing parsed."""

    min: Optional[float]
    max: Optional[float]
    approx: Optional[float]


def parse_revenue_range(text: Optional[str]) -> RevenueRange:
    """
    Parse every amount in `text` ("$100k - $250k", "$1.2M", "80,000").

    - no amount: all None
    - one amount: min == max == approx
    - two or more: min/max are the extremes and approx is the rounded
      midpoint of those two extremes only
    """

    if not text:
        return RevenueRange(None, None, None)

    values = []
    for match in _REVENUE_TOKEN_RE.finditer(str(text)):
        value = _parse_revenue_token(match.group(1) + (match.group(2) or ""))
        if value is not None:
            values.append(value)

    if not values:
        return RevenueRange(None, None, None)

    low = min(values)
    high = max(values)
    # Halved before adding so two huge finite amounts cannot overflow to inf.
    approx = float(round_half_up(low / 2 + high / 2)) if len(values) > 1 else low
    return RevenueRange(min=low, max=high, approx=approx)


def parse_tib_months(text: Optional[str]) -> Optional[int]:
    """
    Time in business as whole months.

    Checked top to bottom, first match wins: "10+" -> 120, "5-10 years" -> 60,
    "2-5 years" -> 24, "1-2 years" -> 12, "<N> months" -> N,
    "<N> years" -> N * 12. Anything else is None.
    """

    s = _lower(text)
    if not s:
        return None
    for pattern, months in _TIB_RANGES:
        if pattern.search(s):
            return months
    months_match = _MONTHS_RE.search(s)
    if months_match:
        return _whole_number(months_match.group(1))
    years_match = _YEARS_RE.search(s)
    if years_match:
        months = _whole_number(years_match.group(1))
        return months * 12 if months is not None else None
    return None


def normalize_urgency(text: Optional[str]) -> UrgencyCode:
    """Map an urgency answer to a code by keyword; first pattern wins."""

    t = _lower(text).strip()
    if not t:
        return UrgencyCode.UNKNOWN
    # Already-normalized codes pass through unchanged.
    for code in UrgencyCode:
        if t == code.value:
            return code
    for pattern, code in _URGENCY_PATTERNS:
        if pattern.search(t):
            return code
    return UrgencyCode.UNKNOWN


def urgency_within_one_month(text: Optional[str]) -> bool:
    """True when the urgency answer means funding is needed within about a month."""

    t = _lower(text)
    if not t:
        return False
    if t.strip() in {code.value for code in UrgencyCode if code is not UrgencyCode.UNKNOWN}:
        return True
    return bool(_WITHIN_ONE_MONTH_RE.search(t))


def normalize_bank_account(text: Optional[str]) -> Optional[bool]:
    """
    Tri-state business bank account answer.

    None input or text that says neither yes nor no gives None (unknown).
    An explicit no wins over "business"/"checking", so "no business account"
    is False while "business checking" is True.
    """

    if text is None:
        return None
    t = str(text).lower()
    if _BANK_YES_RE.search(t):
        return True
    if _BANK_NO_RE.search(t):
        return False
    if _BANK_IMPLIED_RE.search(t):
        return True
    return None


def has_bank_account(text: Optional[str]) -> bool:
    """Eligibility gate: only an explicit affirmative counts."""

    return normalize_bank_account(text) is True


def normalize_use_of_funds(text: Optional[str]) -> UseOfFunds:
    t = _lower(text)
    for pattern, category in _USE_OF_FUNDS_PATTERNS:
        if pattern.search(t):
            return category
    return UseOfFunds.OTHER


def normalize_industry(text: Optional[str]) -> str:
    """Trimmed lower-case industry; LOCKED or blank becomes "locked"."""

    if is_locked(text):
        return INDUSTRY_LOCKED
    return (text or "").strip().lower() or INDUSTRY_LOCKED


def parse_looking_for(background_info: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """
    Pull the requested amount range out of the background text.

    Fundly writes it as "How much they are looking for: $50,000 - $100,000".
    Returns ("$50,000", "$100,000") or (None, None).
    """

    match = _LOOKING_FOR_RE.search(background_info or "")
    if not match:
        return None, None
    return f"${match.group(1)}", f"${match.group(2)}"


@dataclass(frozen=True, slots=True)
class NormalizedFacts:
    """Typed facts derived from one lead's raw fields."""

    urgency_code: UrgencyCode
    tib_months: Optional[int]
    annual_revenue_min_usd: Optional[float]
    annual_revenue_max_usd: Optional[float]
    annual_revenue_usd_approx: Optional[float]
    bank_account_bool: Optional[bool]
    use_of_funds_norm: UseOfFunds
    industry_norm: str

    def as_columns(self) -> dict[str, Any]:
        """Flatten into persisted column values (enums as their string values)."""

        return {
            "urgency_code": self.urgency_code.value,
            "tib_months": self.tib_months,
            "annual_revenue_min_usd": self.annual_revenue_min_usd,
            "annual_revenue_max_usd": self.annual_revenue_max_usd,
            "annual_revenue_usd_approx": self.annual_revenue_usd_approx,
            "bank_account_bool": self.bank_account_bool,
            "use_of_funds_norm": self.use_of_funds_norm.value,
            "industry_norm": self.industry_norm,
        }


def normalize_lead(lead: Any) -> NormalizedFacts:
    """Derive NormalizedFacts from a FundlyLead or a stored row mapping."""

    revenue = parse_revenue_range(lead_field(lead, "annual_revenue"))
    return NormalizedFacts(
        urgency_code=normalize_urgency(lead_field(lead, "urgency")),
        tib_months=parse_tib_months(lead_field(lead, "time_in_business")),
        annual_revenue_min_usd=revenue.min,
        annual_revenue_max_usd=revenue.max,
        annual_revenue_usd_approx=revenue.approx,
        bank_account_bool=normalize_bank_account(lead_field(lead, "bank_account")),
        use_of_funds_norm=normalize_use_of_funds(lead_field(lead, "use_of_funds")),
        industry_norm=normalize_industry(lead_field(lead, "industry")),
    )


__all__ = [
    "INDUSTRY_LOCKED",
    "NormalizedFacts",
    "RevenueRange",
    "UrgencyCode",
    "UseOfFunds",
    "has_bank_account",
    "normalize_bank_account",
    "normalize_industry",
    "normalize_lead",
    "normalize_urgency",
    "normalize_use_of_funds",
    "parse_currency",
    "parse_looking_for",
    "parse_revenue_range",
    "parse_tib_months",
    "round_half_up",
    "urgency_within_one_month",
]
