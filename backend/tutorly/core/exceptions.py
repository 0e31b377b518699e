# backend/tutorly/core/exceptions.py
"""
Domain-specific exceptions for the Tutorly platform.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.

Status mapping follows the public API contract: validation and conflict
failures are both reported as 400 so clients handle one rejection shape.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to an HTTPException carrying the structured detail."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data or state."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedException(DomainException):
    """Raised when user is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def to_http_exception(self) -> HTTPException:
        exc = super().to_http_exception()
        exc.headers = {"WWW-Authenticate": "Bearer"}
        return exc


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action.

    The message is always the generic "Not authorized".
    """

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Not authorized", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": "An error occurred processing your request",
                "code": self.code,
                "details": {},
            },
        )


# Specific business exceptions


class BookingConflictException(ConflictException):
    """Raised when a booking overlaps an existing active booking."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "Time slot is already booked",
            code="BOOKING_CONFLICT",
            details=details or {},
        )


class TeacherUnavailableException(ValidationException):
    """Raised when no availability window covers the requested interval."""

    def __init__(self, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Teacher is not available at the selected time",
            code="TEACHER_UNAVAILABLE",
            details=details or {},
        )


class DuplicateSlotException(ConflictException):
    """Raised when a teacher already has an identical availability window."""

    def __init__(self, day_of_week: int, start_time: str, end_time: str):
        super().__init__(
            message="Time slot already exists",
            code="DUPLICATE_SLOT",
            details={
                "day_of_week": day_of_week,
                "start_time": start_time,
                "end_time": end_time,
            },
        )


class InvalidStatusTransitionException(ConflictException):
    """Raised when a booking status change is not allowed from its current state."""

    def __init__(self, current: str, requested: str):
        super().__init__(
            message=f"Invalid status transition from {current} to {requested}",
            code="INVALID_STATUS_TRANSITION",
            details={"current_status": current, "requested_status": requested},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
