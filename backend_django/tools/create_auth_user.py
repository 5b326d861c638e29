#!/usr/bin/env python3
"""
Create a confirmed Supabase Auth user (service role key required).

Usage:
  python tools/create_auth_user.py user@example.com 'S3cret-pass'
"""
import argparse
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]  # backend_django/
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a Supabase Auth user")
    parser.add_argument("email")
    parser.add_argument("password")
    args = parser.parse_args()

    load_dotenv(PROJECT_ROOT / '.env')

    from hair_app.adapters.auth.supabase_auth import SupabaseAuthProvider
    from hair_app.application.results import Conflict, Ok
    from hair_app.application.use_cases.admin_ops import create_auth_user

    result = create_auth_user(SupabaseAuthProvider(), args.email, args.password)
    if isinstance(result, Ok):
        print(f"Created user {result.value.email} (id={result.value.uid})")
        return 0
    if isinstance(result, Conflict):
        print(result.message)
        return 1
    print(f"ERROR: {result.message}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
