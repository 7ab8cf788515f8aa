#!/usr/bin/env python3
"""
Backfill normalized columns for stored Fundly leads.

Recomputes urgency_code, tib_months, annual revenue min/max/approx,
bank_account_bool, use_of_funds_norm, industry_norm and filter_success from
the raw columns of every row in fundly_leads.

Usage:
    python scripts/backfill_normalized.py
    python scripts/backfill_normalized.py --dry-run
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from repositories.lead_repository import list_leads, update_normalized_columns
from services.lead_assembler import normalized_columns_for_row


def backfill(dry_run: bool = False) -> tuple[int, int]:
    """
    Returns:
        Tuple of (updated_count, skipped_count). Rows without an id are skipped.
    """

    updated = 0
    skipped = 0
    for stored in list_leads():
        if stored.id is None:
            skipped += 1
            continue
        columns = normalized_columns_for_row(stored.row)
        if not dry_run:
            update_normalized_columns(stored.id, columns)
        updated += 1
    return updated, skipped


def main() -> int:
    parser = argparse.ArgumentParser(description="Recompute normalized columns for all stored leads")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute values without writing them back"
    )
    args = parser.parse_args()

    try:
        updated, skipped = backfill(dry_run=args.dry_run)
    except RuntimeError as e:
        print(f"\nFATAL ERROR: {e}", file=sys.stderr)
        return 1

    verb = "Would update" if args.dry_run else "Updated"
    print(f"Backfill complete. {verb} {updated} rows ({skipped} skipped).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
