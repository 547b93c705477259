# finadvisor/errors.py
"""
Error taxonomy.

Services raise these; the handlers in ``main.py`` turn them into JSON
responses. The message is always safe to show to the caller.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or invalid request field."""
    status_code = 400
    default_message = "Invalid request"


class ConflictError(AppError):
    """Unique value already taken (reported as 400 like other bad input)."""
    status_code = 400
    default_message = "Already exists"


class AuthError(AppError):
    """Missing, invalid or expired credential, or bad login."""
    status_code = 401
    default_message = "Not authorized"


class ForbiddenError(AppError):
    # Owner mismatch answers 401, not 403. Clients already depend on it.
    status_code = 401
    default_message = "Not authorized"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ServerError(AppError):
    status_code = 500
