"""Maps domain errors to HTTP responses.

Each error category keeps its own status so clients can tell a conflict from
a missing resource. Only the error code and the user-safe message are sent.
"""

import structlog
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from events.domain.errors import (
    ConflictError,
    DomainError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    PartialFailureError,
    UnavailableError,
)

logger = structlog.get_logger(__name__)

STATUS_BY_CATEGORY: list[tuple[type[DomainError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (PartialFailureError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (UnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(error: DomainError) -> int:
    for category, status_code in STATUS_BY_CATEGORY:
        if isinstance(error, category):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """DRF exception handler that understands DomainError."""
    if isinstance(exc, DomainError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error("domain_error_response", code=exc.code.value, status=status_code)
        return Response({"code": exc.code.value, "message": exc.message}, status=status_code)
    return exception_handler(exc, context)
