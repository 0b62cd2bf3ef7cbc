"""Exceptions raised by the tournament engine and mapped to HTTP answers."""


class AppError(Exception):
    """Base error. Carries the message shown to the client and an HTTP status."""

    status_code = 400
    default_message = "Request failed."

    def __init__(self, message=None, status_code=None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AppError):
    """Bad room, stage, score or form input."""

    default_message = "Validation failed."


class AuthError(AppError):
    status_code = 401
    default_message = "Admin login required."


class NotFoundError(AppError):
    """Unknown player or wheel mode."""

    status_code = 404
    default_message = "Resource not found."
