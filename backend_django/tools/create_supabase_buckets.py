#!/usr/bin/env python3
"""
Create or update the Supabase Storage bucket for Hairalyzer uploads.
- Uploads bucket (default: HAIR_UPLOADS_BUCKET or hair-uploads), holding
  hair-photos/ and product-images/

Photo URLs are stored on submissions and handed to the vision API, so the
bucket must be public.

Uses SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY) from backend_django/.env

Usage:
  python tools/create_supabase_buckets.py
  python tools/create_supabase_buckets.py --list
"""
import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]  # backend_django/
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def coerce_bucket_list(buckets):
    # supabase-py v2 returns list of dict-like objects
    result = []
    for b in (buckets or []):
        name = b.get("name") if isinstance(b, dict) else getattr(b, "name", None)
        public = b.get("public") if isinstance(b, dict) else getattr(b, "public", None)
        result.append({"name": name, "public": public})
    return result


def ensure_bucket(client, name: str, public: bool = True) -> str:
    existing = {b["name"]: b for b in coerce_bucket_list(client.storage.list_buckets())}
    if name in existing:
        current_public = bool(existing[name].get("public"))
        if current_public != public:
            client.storage.update_bucket(name, {"public": public})
            return f"Updated bucket '{name}' public={public} (was {current_public})"
        return f"Bucket '{name}' already exists with public={current_public}"
    client.storage.create_bucket(name, options={"public": public})
    return f"Created bucket '{name}' public={public}"


def main() -> int:
    load_dotenv(PROJECT_ROOT / ".env")

    parser = argparse.ArgumentParser(description="Create/Update the Supabase Storage uploads bucket")
    parser.add_argument("--bucket", default=os.getenv("HAIR_UPLOADS_BUCKET", "hair-uploads"))
    parser.add_argument("--list", action="store_true", help="List buckets and exit")
    args = parser.parse_args()

    from hair_app.adapters.storage.supabase_common import create_supabase_client

    try:
        client = create_supabase_client()
    except RuntimeError as e:
        print(f"ERROR: {e}")
        return 1

    if args.list:
        buckets = coerce_bucket_list(client.storage.list_buckets())
        if not buckets:
            print("No buckets found.")
        for b in buckets:
            print(f"- {b['name']} (public={b['public']})")
        return 0

    print(ensure_bucket(client, args.bucket, public=True))
    base = os.getenv("SUPABASE_URL", "").rstrip('/')
    print(f"\nPublic URLs: {base}/storage/v1/object/public/{args.bucket}/<folder>/<file>")
    return 0


if __name__ == "__main__":
    sys.exit(main())
