from __future__ import annotations

import os
import re
import time
import uuid
from typing import Optional

from supabase import create_client

_UNSAFE_CHARS = re.compile(r'[^A-Za-z0-9._-]+')


def create_supabase_client():
	"""Create and return a Supabase client using env vars.

	Requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY or SUPABASE_ANON_KEY.
	"""
	url = os.getenv('SUPABASE_URL')
	key = os.getenv('SUPABASE_SERVICE_ROLE_KEY') or os.getenv('SUPABASE_ANON_KEY')
	if not url or not key:
		raise RuntimeError("Missing SUPABASE_URL and/or SUPABASE_SERVICE_ROLE_KEY/ANON_KEY env vars")
	return create_client(url, key)


def object_key(folder: str, filename: str, now_ms: Optional[int] = None, token: Optional[str] = None) -> str:
	"""``<folder>/<epoch ms>-<random token>-<sanitized original name>``

	The token keeps same-named uploads in the same millisecond apart.
	"""
	if now_ms is None:
		now_ms = int(time.time() * 1000)
	if token is None:
		token = uuid.uuid4().hex[:8]
	name = _UNSAFE_CHARS.sub('_', os.path.basename(filename or '').strip()) or 'upload'
	return f"{folder.strip('/')}/{now_ms}-{token}-{name}"


def get_public_url(client, bucket: str, path: str) -> str:
	"""Public URL for an object in a public bucket."""
	pub = client.storage.from_(bucket).get_public_url(path)
	# supabase-py v2 returns a plain string; older releases wrapped it
	if isinstance(pub, str) and pub:
		return pub.rstrip('?')
	if isinstance(pub, dict):
		data = pub.get('data') if isinstance(pub.get('data'), dict) else pub
		url = data.get('publicUrl') or data.get('public_url') or data.get('publicURL')
		if url:
			return str(url)
	base = os.getenv('SUPABASE_URL', '').rstrip('/')
	return f"{base}/storage/v1/object/public/{bucket}/{path}"
