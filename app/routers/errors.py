# /app/routers/errors.py

from fastapi import HTTPException, status

from ..core.exceptions import InvalidStateError, NotFoundError


def http_error_from(exc: ValueError) -> HTTPException:
    """Translates a service-layer business error into the matching HTTP error."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, InvalidStateError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
