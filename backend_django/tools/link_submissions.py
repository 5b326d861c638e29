#!/usr/bin/env python3
"""
Link submissions imported from the legacy store to a Supabase Auth user.

Every submission whose original_user_id matches gets user_id = <new id>.

Usage:
  python tools/link_submissions.py <original_user_id> <supabase_user_id>
"""
import argparse
import os
import sys
from pathlib import Path

# Ensure project root (the folder containing manage.py) is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]  # backend_django/
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hairalyzer_django.settings')


def main() -> int:
    parser = argparse.ArgumentParser(description="Link legacy submissions to a new auth user")
    parser.add_argument("original_user_id")
    parser.add_argument("new_user_id")
    args = parser.parse_args()

    import django
    django.setup()

    from hair_app.application.results import NotFound, Ok
    from hair_app.application.use_cases.admin_ops import link_submissions
    from hair_app.config.container import get_submission_repo

    result = link_submissions(get_submission_repo(), args.original_user_id, args.new_user_id)
    if isinstance(result, Ok):
        print(f"Linked {result.value} submission(s) to {args.new_user_id}")
        return 0
    if isinstance(result, NotFound):
        print(result.message)
        return 1
    print(f"ERROR: {result.message}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
