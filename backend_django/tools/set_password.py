#!/usr/bin/env python3
"""
Set the password of an existing Supabase Auth user by id.

Usage:
  python tools/set_password.py <supabase_user_id> 'N3w-pass'
"""
import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]  # backend_django/
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv


def main() -> int:
    parser = argparse.ArgumentParser(description="Set a Supabase Auth user's password")
    parser.add_argument("user_id")
    parser.add_argument("password")
    args = parser.parse_args()

    load_dotenv(PROJECT_ROOT / '.env')

    from hair_app.adapters.auth.supabase_auth import SupabaseAuthProvider
    from hair_app.application.results import NotFound, Ok
    from hair_app.application.use_cases.admin_ops import set_user_password

    result = set_user_password(SupabaseAuthProvider(), args.user_id, args.password)
    if isinstance(result, Ok):
        print(f"Password updated for {result.value.email or args.user_id}")
        return 0
    if isinstance(result, NotFound):
        print(result.message)
        return 1
    print(f"ERROR: {result.message}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
