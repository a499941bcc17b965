"""
Exceptions for the timeclock backend.

StorageError is raised by the store layer; the HTTP exceptions carry an
error_code so the kiosk can show a specific message for every failure.
"""
from fastapi import HTTPException, status


class StorageError(Exception):
    """The time entry or employee store could not be read or written."""

    def __init__(self, operation: str, cause: Exception | None = None):
        detail = f"Storage failure during {operation}"
        if cause is not None:
            detail = f"{detail}: {cause}"
        super().__init__(detail)
        self.operation = operation
        self.cause = cause


class TimeclockException(HTTPException):
    """Base HTTP exception for the timeclock API"""
    def __init__(self, status_code: int, detail: str, error_code: str | None = None):
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code


class UnauthorizedException(TimeclockException):
    """401 - Manager session missing, expired or replaced"""
    def __init__(self, detail: str = "Manager authentication required", error_code: str = "NOT_AUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
        )


class NotFoundException(TimeclockException):
    """404 - Resource not found"""
    def __init__(self, detail: str, error_code: str = "NOT_FOUND"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code,
        )


class ValidationException(TimeclockException):
    """400 - Correction input rejected by a business rule"""
    def __init__(self, detail: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
        )


class PunchRejectedException(TimeclockException):
    """400 - Clock-in / clock-out not allowed right now"""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="PUNCH_REJECTED",
        )


class ServiceUnavailableException(TimeclockException):
    """503 - Store failure; safe to retry the whole operation"""
    def __init__(self, detail: str, error_code: str = "PERSISTENCE_FAILED"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            error_code=error_code,
        )
