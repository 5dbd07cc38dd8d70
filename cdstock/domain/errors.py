"""Error taxonomy shared by the use cases and the API layer."""


class CDStockError(Exception):
    """Base class for errors raised by the application core."""


class ValidationError(CDStockError, ValueError):
    """Raised when required input is missing or malformed."""


class AuthorizationError(CDStockError, PermissionError):
    """Raised when the acting user lacks the role required for an action."""


class NotFoundError(CDStockError, LookupError):
    """Raised when a referenced user or row does not exist."""


class BackendError(CDStockError, RuntimeError):
    """Raised when the underlying store rejects or fails a call."""


__all__ = [
    "CDStockError",
    "ValidationError",
    "AuthorizationError",
    "NotFoundError",
    "BackendError",
]
