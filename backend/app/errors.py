"""Domain errors raised by the service layer.

Each error is an HTTPException carrying a stable ``code`` so routers can let
them propagate untouched and the app-level handler renders a uniform body:
``{"detail": <message>, "code": <code>}``.
"""
from fastapi import HTTPException, status


class DomainError(HTTPException):
    code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(status_code=self.status_code, detail=message)
        self.message = message


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(DomainError):
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN


class InvalidStateError(DomainError):
    """Temporal constraint violated (past start, end before start, RSVP on a past event)."""

    code = "INVALID_STATE"
    status_code = status.HTTP_400_BAD_REQUEST


class AlreadyExistsError(DomainError):
    code = "ALREADY_EXISTS"
    status_code = status.HTTP_409_CONFLICT


class TransientStoreError(DomainError):
    """Conflict or timeout at the storage layer; the whole operation is safe to retry."""

    code = "TRANSIENT_STORE_FAILURE"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
