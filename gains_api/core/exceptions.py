from typing import Any

from fastapi import HTTPException, status


class UnauthorizedError(HTTPException):
    """Raised when a shared secret is missing or does not match."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
        )


class InvalidArgumentError(HTTPException):
    """Raised when request input fails validation."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
        )


class NotFoundError(HTTPException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )


class ConflictError(HTTPException):
    """Raised when attempting to create a duplicate resource."""

    def __init__(self, resource: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{resource} already exists",
        )


class UpstreamError(HTTPException):
    """Raised when an AI gateway answers with a non-success status.

    The upstream status code and decoded body are relayed to the caller as-is.
    """

    def __init__(self, status_code: int, body: Any):
        super().__init__(status_code=status_code, detail=body)
        self.body = body


class DatabaseUnavailableError(HTTPException):
    """Raised when the ledger database is not configured."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database not available",
        )


class InternalError(HTTPException):
    """Raised for unexpected faults such as transport or parsing failures."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
        )
