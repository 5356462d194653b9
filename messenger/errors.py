# messenger/errors.py
from typing import Optional, Dict
from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class for errors the API reports with a single human-readable message."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class UnauthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = "Not authorized"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ValidationFailedError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(detail)


class ThreadWalkError(InternalError):
    """Raised when a chain walk revisits a message or runs past the depth limit."""
