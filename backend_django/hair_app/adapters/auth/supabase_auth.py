from __future__ import annotations

import logging
from typing import Any, Optional

from ..storage.supabase_common import create_supabase_client
from ...application.errors import AuthUserExists, AuthUserNotFound
from ...application.ports.auth import AuthAdmin, AuthIdentity, AuthProvider

logger = logging.getLogger(__name__)

_EXISTS_CODES = {'email_exists', 'user_already_exists', 'phone_exists'}
_NOT_FOUND_CODES = {'user_not_found'}


def _identity(user: Any) -> AuthIdentity:
	created = getattr(user, 'created_at', None)
	return AuthIdentity(
		uid=str(user.id),
		email=getattr(user, 'email', None),
		created_at=created.isoformat() if hasattr(created, 'isoformat') else created,
	)


class SupabaseAuthProvider(AuthProvider, AuthAdmin):
	"""Supabase Auth (GoTrue) behind the auth ports.

	Token checks go through ``auth.get_user``; user management needs the
	service role key.
	"""

	def __init__(self, client=None):
		self.client = client

	def _client(self):
		if self.client is None:
			self.client = create_supabase_client()
		return self.client

	def verify_token(self, token: str) -> Optional[AuthIdentity]:
		try:
			resp = self._client().auth.get_user(token)
		except Exception as e:
			logger.warning("Token verification failed: %s", e.__class__.__name__)
			return None
		user = getattr(resp, 'user', None)
		if user is None:
			return None
		return _identity(user)

	def create_user(self, email: str, password: str) -> AuthIdentity:
		try:
			resp = self._client().auth.admin.create_user({
				'email': email,
				'password': password,
				'email_confirm': True,
			})
		except Exception as e:
			if getattr(e, 'code', None) in _EXISTS_CODES or getattr(e, 'status', None) == 422:
				raise AuthUserExists(str(e)) from e
			raise
		return _identity(resp.user)

	def set_password(self, user_id: str, password: str) -> AuthIdentity:
		try:
			resp = self._client().auth.admin.update_user_by_id(user_id, {'password': password})
		except Exception as e:
			if getattr(e, 'code', None) in _NOT_FOUND_CODES or getattr(e, 'status', None) == 404:
				raise AuthUserNotFound(str(e)) from e
			raise
		return _identity(resp.user)
