from __future__ import annotations

import logging
import os
from typing import Optional

from .supabase_common import create_supabase_client, get_public_url, object_key
from ...application.errors import StorageError
from ...application.ports.storage import FileStorage

logger = logging.getLogger(__name__)


class SupabaseFileStorage(FileStorage):
	"""Upload photos to a public Supabase Storage bucket.

	Bucket default: HAIR_UPLOADS_BUCKET or 'hair-uploads'
	Path: <folder>/<epoch ms>-<token>-<original name>
	"""

	def __init__(self, bucket: Optional[str] = None, client=None):
		self.bucket = bucket or os.getenv('HAIR_UPLOADS_BUCKET', 'hair-uploads')
		self.client = client  # lazy init

	def _client(self):
		if self.client is None:
			self.client = create_supabase_client()
		return self.client

	def upload(self, data: bytes, filename: str, content_type: str, folder: str) -> str:
		path = object_key(folder, filename)
		try:
			client = self._client()
			# Header values must be strings for storage3/httpx
			client.storage.from_(self.bucket).upload(path, data, {
				'content-type': content_type or 'application/octet-stream',
				'upsert': 'false',
			})
			url = get_public_url(client, self.bucket, path)
		except Exception as e:
			logger.exception("Supabase upload failed for %s/%s", self.bucket, path)
			raise StorageError(f"Upload of {path} failed: {e}") from e
		logger.info("Uploaded %s to bucket %s", path, self.bucket)
		return url
