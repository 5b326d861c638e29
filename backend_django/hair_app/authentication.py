from __future__ import annotations

import logging

from rest_framework import authentication, exceptions

from .application.ports.auth import AuthIdentity
from .config import container

logger = logging.getLogger(__name__)


class SupabaseUser:
    """Request user resolved from a Supabase access token. Not stored locally."""

    is_authenticated = True
    is_anonymous = False
    is_active = True
    is_staff = False

    def __init__(self, identity: AuthIdentity):
        self.uid = identity.uid
        self.email = identity.email
        self.created_at = identity.created_at

    @property
    def id(self):
        return self.uid

    @property
    def pk(self):
        return self.uid

    def __str__(self):
        return self.email or self.uid


class SupabaseTokenAuthentication(authentication.BaseAuthentication):
    """``Authorization: Bearer <supabase access token>``

    A request without the header is left unauthenticated so permission
    checks answer 401. A header that is present but unusable fails right away.
    """

    keyword = 'Bearer'

    def authenticate(self, request):
        auth = authentication.get_authorization_header(request).split()
        if not auth:
            return None
        if auth[0].lower() != self.keyword.lower().encode():
            return None
        if len(auth) != 2:
            raise exceptions.AuthenticationFailed('No valid authorization token provided')
        try:
            token = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed('No valid authorization token provided')

        identity = container.get_auth_provider().verify_token(token)
        if identity is None:
            raise exceptions.AuthenticationFailed('Invalid or expired token')
        return (SupabaseUser(identity), token)

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'
