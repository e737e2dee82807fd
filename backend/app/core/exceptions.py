"""
Application error taxonomy.

Every error carries the HTTP status it maps to and a message that is safe
to show to the caller. Handlers in ``app.main`` turn them into the
``{"success": false, "error": ...}`` envelope.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(AppError):
    status_code = 401
    default_message = "Invalid password"


class DeviceLimitExceeded(AppError):
    status_code = 401
    default_message = "Device limit reached"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(AppError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class DuplicateNumber(AppError):
    status_code = 400
    default_message = "Number already in use"


class ValidationError(AppError):
    status_code = 400
    default_message = "Missing required fields"


class StoreError(AppError):
    status_code = 500
    default_message = "Internal server error"


class AssistantError(AppError):
    status_code = 502
    default_message = "Assistant unavailable"
