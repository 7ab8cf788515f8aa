"""
Domain: primary program selection (pure).

When a lead qualifies for several programs, outreach is written for one of
them. Narrow, higher-friction products are preferred over broad catch-alls,
except that equipment financing wins outright when the lead talks about
equipment, an invoice or a quote.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from .lead import lead_field
from .programs import EvaluationResult, ProgramKey

FAIL_ALL = "FAIL_ALL"

PRIMARY_PRIORITY: tuple[ProgramKey, ...] = (
    ProgramKey.WORKING_CAPITAL,
    ProgramKey.LINE_OF_CREDIT,
    ProgramKey.BUSINESS_TERM_LOAN,
    ProgramKey.SBA_LOAN,
    ProgramKey.BANK_LOC,
    ProgramKey.EQUIPMENT_FINANCING,
    ProgramKey.FIRST_CAMPAIGN,
)

_EQUIPMENT_INTENT_RE = re.compile(r"equipment|invoice|quote")


def choose_primary_program(
    qualified: Iterable[ProgramKey],
    use_of_funds: Optional[str] = None,
    background_info: Optional[str] = None,
) -> Optional[ProgramKey]:
    """
    Pick the program to lead with, or None when nothing qualifies.

    1. equipment_financing, if it qualifies and the use of funds or background
       mentions equipment, an invoice or a quote.
    2. Otherwise the first qualified key in PRIMARY_PRIORITY.
    """

    qualified_keys = [ProgramKey(k) for k in qualified]
    if not qualified_keys:
        return None

    text = f"{(use_of_funds or '').lower()} {(background_info or '').lower()}"
    if ProgramKey.EQUIPMENT_FINANCING in qualified_keys and _EQUIPMENT_INTENT_RE.search(text):
        return ProgramKey.EQUIPMENT_FINANCING

    for key in PRIMARY_PRIORITY:
        if key in qualified_keys:
            return key
    return qualified_keys[0]


def filter_success_for(evaluation: EvaluationResult, lead: Any) -> str:
    """
    Value stored in the filter_success column: the primary program key, or
    FAIL_ALL when the lead qualifies for nothing.
    """

    primary = choose_primary_program(
        evaluation.qualified,
        use_of_funds=lead_field(lead, "use_of_funds"),
        background_info=lead_field(lead, "background_info"),
    )
    return primary.value if primary is not None else FAIL_ALL


__all__ = ["FAIL_ALL", "PRIMARY_PRIORITY", "choose_primary_program", "filter_success_for"]
