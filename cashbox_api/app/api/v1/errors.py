"""Translation of domain exceptions into HTTP errors.

Endpoints catch ``DomainError`` around each service call and raise the
``HTTPException`` built here.  Validation failures keep their field
list, in the same ``[{"field": ..., "message": ...}]`` shape for every
endpoint.
"""

from fastapi import HTTPException, status

from ...domain.exceptions import DomainError, InvalidStateError, NotFoundError, ValidationError


def http_error(exc: DomainError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.as_dict())
    if isinstance(exc, InvalidStateError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
