import hmac

from django.conf import settings
from rest_framework import permissions


class HasAdminKey(permissions.BasePermission):
    """``X-Admin-Key`` must match ADMIN_KEY. Nothing passes while ADMIN_KEY is unset."""
    message = 'Admin access required'

    def has_permission(self, request, view):
        expected = getattr(settings, 'ADMIN_KEY', '') or ''
        provided = request.headers.get('X-Admin-Key', '')
        if not expected or not provided:
            return False
        return hmac.compare_digest(provided.encode(), expected.encode())
