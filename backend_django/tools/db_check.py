"""
Check the database configured in DATABASE_URL.

Runs SELECT 1 through the submission repository first; when that fails,
prints the resolved settings, DNS resolution and a raw psycopg2 attempt on
the direct and pooled (6543) Supabase ports.

Usage:
  python tools/db_check.py
"""
import os
import sys
from pprint import pprint
from pathlib import Path

# Ensure project root (the folder containing manage.py) is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]  # backend_django/
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hairalyzer_django.settings')

try:
    import django
    django.setup()
except Exception as e:
    print('Failed to setup Django:', e)
    sys.exit(2)

import socket

import certifi
import psycopg2
from django.conf import settings

from hair_app.config.container import get_submission_repo


def try_connect(cfg, port) -> bool:
    host = cfg.get('HOST')
    sslmode = (cfg.get('OPTIONS') or {}).get('sslmode', 'require')
    print(f"\nTrying psycopg2.connect to {host}:{port} db={cfg.get('NAME')} sslmode={sslmode}")
    try:
        conn = psycopg2.connect(
            host=host,
            dbname=cfg.get('NAME'),
            user=cfg.get('USER'),
            password=cfg.get('PASSWORD'),
            port=port,
            sslmode=sslmode,
            sslrootcert=(cfg.get('OPTIONS') or {}).get('sslrootcert') or certifi.where(),
            connect_timeout=10,
        )
    except psycopg2.Error as pe:
        print(' psycopg2 error:', pe)
        return False
    with conn.cursor() as cur:
        cur.execute('SELECT 1')
        print(' psycopg2 SELECT 1 OK')
    conn.close()
    return True


def main() -> int:
    if get_submission_repo().health_check():
        print('SUCCESS: Database connection OK')
        return 0

    cfg = dict(settings.DATABASES.get('default', {}))
    print('ERROR: health check failed. Resolved DATABASES[default] (password hidden):')
    pprint({k: v for k, v in cfg.items() if k != 'PASSWORD'})

    host = cfg.get('HOST')
    port = cfg.get('PORT') or 5432
    print('\nDNS resolution for host:', host)
    try:
        print(socket.getaddrinfo(host, port))
    except socket.gaierror as de:
        print(' DNS resolution error:', de)

    if not try_connect(cfg, port):
        # Supabase pooled port
        try_connect(cfg, 6543)
    return 1


if __name__ == '__main__':
    sys.exit(main())
