"""Mapping from domain errors to HTTP responses.

Sign-in failures get one generic message so responses cannot be used to
find out which emails are registered. Admin mutations report the specific
reason, since the caller is already authenticated.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from domain.model.errors import (
    AccountDisabledError,
    DomainError,
    DuplicateError,
    InvalidCredentialsError,
    NotAllowedError,
    NotFoundError,
    PermissionDeniedError,
    ProviderError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (AccountDisabledError, status.HTTP_403_FORBIDDEN),
    (NotAllowedError, status.HTTP_403_FORBIDDEN),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ProviderError, status.HTTP_503_SERVICE_UNAVAILABLE),
]

GENERIC_SIGN_IN_MESSAGE = "Invalid email or password"
PROVIDER_UNAVAILABLE_MESSAGE = "Authentication service is temporarily unavailable"


def status_for(error: DomainError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def detail_for(error: DomainError) -> str:
    if isinstance(error, InvalidCredentialsError):
        return GENERIC_SIGN_IN_MESSAGE
    if isinstance(error, ProviderError):
        return PROVIDER_UNAVAILABLE_MESSAGE
    return str(error) or "Request failed"


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("Request failed", extra={
            "path": request.url.path, "errorType": type(exc).__name__, "error": str(exc),
        })
    else:
        logger.info("Request rejected", extra={
            "path": request.url.path, "errorType": type(exc).__name__, "status": status_code,
        })
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail_for(exc)},
        headers=headers,
    )
