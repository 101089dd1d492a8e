"""
Error kinds raised by the repository and the API handlers.

Each carries the HTTP status code it is rendered with; app.py registers a
single handler that turns any PortalError into {"success": false, "message"}.
"""


class PortalError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'success': False, 'message': self.message}


class ValidationError(PortalError):
    """Missing or malformed identifier or field."""
    status_code = 400


class AuthError(PortalError):
    status_code = 401

    def __init__(self, message='Invalid credentials'):
        super().__init__(message)


class NotFoundError(PortalError):
    status_code = 404


class ConflictError(PortalError):
    """A row with the same natural key already exists."""
    status_code = 409


class StorageError(PortalError):
    """Unexpected persistence failure. The message sent to clients is generic."""

    def __init__(self, message='Internal server error'):
        super().__init__(message)
