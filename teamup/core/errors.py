"""
Service error taxonomy shared by stores, services and routes.

Stores and services raise these; the HTTP layer maps them to status codes
through the exception handler registered in teamup.main.
"""

from fastapi import status


class ServiceError(Exception):
    """Base class for classified service failures."""

    kind = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class NotFoundError(ServiceError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(ServiceError):
    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class InvalidArgumentError(ServiceError):
    kind = "invalid_argument"
    status_code = status.HTTP_400_BAD_REQUEST


class UnavailableError(ServiceError):
    kind = "unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class InternalError(ServiceError):
    kind = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
