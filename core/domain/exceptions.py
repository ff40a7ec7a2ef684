"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidInputError(DomainException):
    """Raised when a request carries missing or malformed fields."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, code="INVALID_INPUT")


class NotFoundError(DomainException):
    """Base exception for absent resources."""

    def __init__(self, message: str = "Resource not found", code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class KeyNotFoundError(NotFoundError):
    """Raised when a key string or key id does not exist."""

    def __init__(self, message: str = "Key not found"):
        super().__init__(message, code="KEY_NOT_FOUND")


class StateConflictError(DomainException):
    """Base exception for operations invalid in the key's current state."""

    pass


class KeyNotActiveError(StateConflictError):
    """Raised when a key has been administratively disabled."""

    def __init__(self, message: str = "Key is not active"):
        super().__init__(message, code="KEY_NOT_ACTIVE")


class KeyExpiredError(StateConflictError):
    """Raised when a key is past its expiry time."""

    def __init__(self, message: str = "Key has expired"):
        super().__init__(message, code="KEY_EXPIRED")


class DeviceLimitReachedError(StateConflictError):
    """Raised when every device slot of a key is taken."""

    def __init__(self, message: str = "Key has reached maximum device limit"):
        super().__init__(message, code="DEVICE_LIMIT_REACHED")


class UniqueViolationError(StateConflictError):
    """Raised when the store rejects a row that violates a uniqueness constraint."""

    def __init__(self, message: str = "Record already exists"):
        super().__init__(message, code="ALREADY_EXISTS")


class AuthFailureError(DomainException):
    """Raised when the admin credential is missing or wrong."""

    def __init__(self, message: str = "Invalid admin secret"):
        super().__init__(message, code="UNAUTHORIZED")


class UnavailableError(DomainException):
    """Raised when the backing store cannot be reached."""

    def __init__(self, message: str = "Service unavailable"):
        super().__init__(message, code="UNAVAILABLE")


class GenerationExhaustedError(DomainException):
    """Raised when no unique key string could be produced."""

    def __init__(self, message: str = "Could not generate a unique key, please try again"):
        super().__init__(message, code="GENERATION_EXHAUSTED")
