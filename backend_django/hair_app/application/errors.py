from __future__ import annotations


class HairAppError(Exception):
    """Base error. ``user_message`` is safe to show to API clients."""

    user_message = 'An internal error occurred.'

    def __init__(self, message: str = '', user_message: str | None = None):
        super().__init__(message or self.user_message)
        if user_message:
            self.user_message = user_message


class IntakeValidationError(HairAppError):
    user_message = 'Invalid submission.'

    def __init__(self, errors: dict):
        super().__init__(str(errors))
        self.errors = errors


class StorageError(HairAppError):
    user_message = 'Failed to upload image.'


class VisionAPIError(HairAppError):
    user_message = 'Failed to analyze image due to an API error.'


class VisionTimeoutError(VisionAPIError):
    pass


class VisionRateLimitError(VisionAPIError):
    pass


class VisionRequestError(VisionAPIError):
    """The provider rejected the request (bad image URL, oversized payload...)."""


class AuthUserExists(HairAppError):
    user_message = 'User already registered.'


class AuthUserNotFound(HairAppError):
    user_message = 'User not found.'
