"""Service error taxonomy. Each error maps to one HTTP status and a short message."""

from fastapi import status


class ServiceError(Exception):
    """Base exception for the pizza service."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An error occurred") -> None:
        self.message = message
        super().__init__(message)


class ValidationError(ServiceError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(ServiceError):
    """Missing, invalid, expired or revoked credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "unauthorized") -> None:
        super().__init__(message)


class ForbiddenError(ServiceError):
    """Authenticated, but the caller lacks the required role or scope."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    """Referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class FulfillmentError(ServiceError):
    """The pizza factory did not fulfill an order. The order stays persisted."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, report_url: str | None = None) -> None:
        self.report_url = report_url
        super().__init__(message)
