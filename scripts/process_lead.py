#!/usr/bin/env python3
"""
Scraped Lead Processing Script

Runs scraped Fundly leads (JSON files written by the scraper) through
evaluation, persistence and outreach:
- Normalizes financial-profile fields and evaluates all funding programs
- Upserts the lead into fundly_leads
- Sends the outreach email when the lead qualifies and sending is enabled

Each JSON file holds one lead object or a list of lead objects.

Usage:
    python scripts/process_lead.py data/extracted-lead-data.json
    python scripts/process_lead.py data/*.json --dry-run
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.pipeline_service import BatchResult, run_batch
from services.settings import load_settings


def load_payloads(paths: list[str]) -> list[dict[str, Any]]:
    """Read lead objects from JSON files; a file may hold one object or a list."""

    payloads: list[dict[str, Any]] = []
    for path in paths:
        json_file = Path(path)
        if not json_file.exists():
            raise FileNotFoundError(f"JSON file not found: {path}")
        with open(json_file, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, list):
            payloads.extend(data)
        elif isinstance(data, dict):
            payloads.append(data)
        else:
            raise ValueError(f"{path}: expected a JSON object or list of objects")
    return payloads


def print_summary(result: BatchResult) -> None:
    """Print processing summary."""
    print()
    print("=" * 60)
    print("RUN SUMMARY")
    print("=" * 60)
    print(f"Discovered:       {result.discovered}")
    print(f"Saved:            {result.saved}")
    print(f"Emailed:          {result.emailed}")
    print()

    for outcome in result.outcomes:
        record = outcome.record
        print(f"  {record.lead.fundly_id}: {record.filter_success}")
        for reason in outcome.decision.reasons:
            print(f"      - {reason}")

    if result.errors:
        print()
        print(f"Errors:           {len(result.errors)}")
        for error in result.errors[:5]:
            print(f"  - Lead {error.get('fundly_id') or error['index']}: {error['error']}")
        if len(result.errors) > 5:
            print(f"  ... and {len(result.errors) - 5} more")

    print("=" * 60)


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Evaluate, save and (optionally) email scraped Fundly leads",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process one scraped lead
  python process_lead.py data/extracted-lead-data.json

  # Evaluate only (no database writes, no email)
  python process_lead.py data/extracted-lead-data.json --dry-run
        """
    )

    parser.add_argument(
        "json_paths",
        nargs="+",
        help="Path(s) to scraped lead JSON files"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Evaluate leads without writing to the database or sending email"
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        payloads = load_payloads(args.json_paths)
        settings = load_settings()
        print(f"Leads to process: {len(payloads)}")
        print(f"Dry run: {args.dry_run or settings.dry_run}")
        print(f"Email sending enabled: {settings.email_sending_enabled()}")

        result = run_batch(payloads, settings=settings, dry_run=args.dry_run)
        print_summary(result)

        return 1 if result.errors else 0

    except KeyboardInterrupt:
        print("\n\nProcessing interrupted by user")
        return 130

    except Exception as e:
        print(f"\nFATAL ERROR: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
