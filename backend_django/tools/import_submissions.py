#!/usr/bin/env python3
"""
Import submissions exported from the legacy document store (JSON array).

Rows are inserted without an owner; the legacy user id is kept in
original_user_id and linked on the owner's first sign-in (or with
tools/link_submissions.py). A summary is written next to the export file.

Usage:
  python tools/import_submissions.py exports/submissions.json [--batch-size 10]
"""
import argparse
import json
import os
import sys
from dataclasses import asdict
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]  # backend_django/
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hairalyzer_django.settings')


def main() -> int:
    parser = argparse.ArgumentParser(description="Import exported submissions")
    parser.add_argument("export_file", type=Path)
    parser.add_argument("--batch-size", type=int, default=10)
    args = parser.parse_args()

    if not args.export_file.exists():
        print(f"ERROR: export file not found: {args.export_file}")
        return 1
    with open(args.export_file, encoding='utf-8') as f:
        records = json.load(f)

    import django
    django.setup()

    from hair_app.application.results import Ok
    from hair_app.application.use_cases.admin_ops import import_submissions
    from hair_app.config.container import get_submission_repo

    result = import_submissions(get_submission_repo(), records, batch_size=args.batch_size)
    if not isinstance(result, Ok):
        print(f"ERROR: {result.message}")
        return 2

    summary = result.value
    summary_path = args.export_file.with_name(args.export_file.stem + '-import-summary.json')
    with open(summary_path, 'w', encoding='utf-8') as f:
        json.dump(asdict(summary), f, indent=2)

    print(f"Total: {summary.total}  Imported: {summary.imported}  Failed: {summary.failed}")
    for err in summary.errors:
        print(f"  - {err}")
    print(f"Summary written to {summary_path}")
    return 0 if summary.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
