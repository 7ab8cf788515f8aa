"""
Supabase client initialization.

This module contains *only* the database connection setup and exposes a single
`supabase` client object for the repository modules to import.

Environment variables required:
- SUPABASE_URL: Supabase project URL hosting the fundly_leads table
- SUPABASE_KEY: Supabase API key (server-side key; this runs on the scan host only)
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from supabase import Client, create_client  # type: ignore[import-not-found]

# .env lives in the project root, next to the scripts/ directory.
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

SUPABASE_URL: str | None = os.getenv("SUPABASE_URL")
SUPABASE_KEY: str | None = os.getenv("SUPABASE_KEY")

if not SUPABASE_URL:
    raise RuntimeError(
        "Missing environment variable: SUPABASE_URL. "
        "Set SUPABASE_URL to your Supabase project URL."
    )

if not SUPABASE_KEY:
    raise RuntimeError(
        "Missing environment variable: SUPABASE_KEY. "
        "Set SUPABASE_KEY to your Supabase API key."
    )

supabase: Client = create_client(SUPABASE_URL, SUPABASE_KEY)

__all__ = ["supabase"]
