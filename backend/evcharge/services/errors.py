"""
Error kinds raised by the charging session engine and its adapters.

The API layer maps each kind to an HTTP status in exception_handlers.py.
"""


class ChargingError(Exception):
    """Base exception for charging session errors"""
    kind = "ChargingError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConflictError(ChargingError):
    """Session uniqueness precondition violated (e.g. a second active session)"""
    kind = "Conflict"


class NotFoundError(ChargingError):
    """Referenced session or active session does not exist for the user"""
    kind = "NotFound"


class ValidationError(ChargingError):
    """Caller-supplied data does not match the station or session"""
    kind = "ValidationError"


class DependencyError(ChargingError):
    """Session store or station directory unreachable or returned malformed data"""
    kind = "DependencyError"
