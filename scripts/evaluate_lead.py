#!/usr/bin/env python3
"""
Evaluate a scraped lead without touching the database.

Prints the normalized facts, every program's eligibility with its reasons, and
the primary program that outreach would use.

Usage:
    python scripts/evaluate_lead.py data/extracted-lead-data.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.lead import FundlyLead
from services.lead_assembler import LeadRecord, assemble_lead_record


def print_record(record: LeadRecord) -> None:
    print(f"Lead: {record.lead.fundly_id}")
    print()
    print("Normalized facts:")
    for column, value in record.facts.as_columns().items():
        print(f"  {column:<28}{value}")
    print()
    print("Programs:")
    for program in record.evaluation.programs:
        mark = "PASS" if program.eligible else "FAIL"
        print(f"  [{mark}] {program.key.value}")
        for reason in program.reasons:
            print(f"         - {reason}")
    print()
    print(f"Any qualified:  {record.any_qualified}")
    print(f"filter_success: {record.filter_success}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Evaluate a scraped Fundly lead (no database)")
    parser.add_argument("json_path", help="Path to a scraped lead JSON object")
    args = parser.parse_args()

    try:
        with open(args.json_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        record = assemble_lead_record(FundlyLead.from_scrape(payload))
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print_record(record)
    return 0


if __name__ == "__main__":
    sys.exit(main())
