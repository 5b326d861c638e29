from __future__ import annotations

import logging
import os

from django.conf import settings

from .supabase_common import object_key
from ...application.errors import StorageError
from ...application.ports.storage import FileStorage

logger = logging.getLogger(__name__)


class MediaFileStorage(FileStorage):
	"""Save uploads on local MEDIA_ROOT and return an absolute-ish URL.

	Path: <folder>/<epoch ms>-<token>-<original name>. Meant for development.
	"""

	def upload(self, data: bytes, filename: str, content_type: str, folder: str) -> str:
		media_root = getattr(settings, 'MEDIA_ROOT', None)
		media_url = getattr(settings, 'MEDIA_URL', '/media/')
		if not media_root:
			raise StorageError("MEDIA_ROOT is not configured")
		rel_path = object_key(folder, filename)
		abs_path = os.path.join(media_root, *rel_path.split('/'))
		try:
			os.makedirs(os.path.dirname(abs_path), exist_ok=True)
			with open(abs_path, 'wb') as f:
				f.write(data)
		except OSError as e:
			logger.exception("Could not write %s", abs_path)
			raise StorageError(f"Could not write {rel_path}: {e}") from e

		base = str(media_url or '/media/')
		if not base.endswith('/'):
			base += '/'
		site = str(getattr(settings, 'SITE_URL', '') or '').rstrip('/')
		return f"{site}{base}{rel_path}"
