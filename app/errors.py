# app/errors.py
# Role: Domain error taxonomy. Services raise these; main.py maps them to
#       HTTP responses of the form {"error": message}.


class FinanceError(Exception):
    """Base class for expected domain failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FinanceError):
    """Malformed or missing input."""

    status_code = 400


class Unauthorized(FinanceError):
    """Missing, invalid or expired credential, or bad login."""

    status_code = 401


class NotFound(FinanceError):
    """Entity missing or owned by someone else (the two are not distinguished)."""

    status_code = 404


class Conflict(FinanceError):
    """Unique constraint or referential conflict."""

    status_code = 409
