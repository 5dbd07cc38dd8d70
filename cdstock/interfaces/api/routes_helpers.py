"""Helper utilities shared across API route handlers."""

from fastapi import HTTPException, status

from cdstock.domain.errors import (
    AuthorizationError,
    BackendError,
    CDStockError,
    NotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR: tuple[tuple[type[CDStockError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (BackendError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def to_http_exception(exc: CDStockError) -> HTTPException:
    """Return the ``HTTPException`` matching ``exc``, keeping its message."""

    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
