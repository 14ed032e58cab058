"""
Service-level errors, translated to HTTP responses by the app's exception handler.
"""
from fastapi import status


class ServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConflictError(ServiceError):
    """A uniqueness constraint (user or pharmacy email) would be violated."""
    status_code = status.HTTP_409_CONFLICT


class UnauthorizedError(ServiceError):
    """Credentials or token did not verify."""
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
