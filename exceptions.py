from typing import Optional
from fastapi import status


class ServiceError(Exception):
    """Request-scoped failure that maps onto an HTTP status and an error message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationFailure(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    """
    Resource id does not resolve.
    Direct lookups answer 404; dependent lookups are raised with status_code=400.
    """

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class QuotaExceededError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class PartialFailureError(ServiceError):
    """A multi-step cascade finished some steps but not all. Completed steps are kept."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InternalError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
