# tutorbook/core/exceptions.py
"""
Domain-specific exceptions for the TutorBook platform.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
Each carries a stable ``code`` so clients can branch on the kind of
failure without parsing the human-readable message.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to an HTTPException carrying the stable code and details."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when input is malformed or missing."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "VALIDATION_ERROR"


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "CONFLICT"


class UnauthorizedException(DomainException):
    """Raised when credentials are missing or wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "AUTH_ERROR"


class ForbiddenException(DomainException):
    """Raised when the actor does not own the record or lacks the role."""

    status_code = status.HTTP_403_FORBIDDEN
    default_code = "FORBIDDEN"


class ServiceException(DomainException):
    """Raised when a service operation fails for reasons outside the caller's control."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "INTERNAL_ERROR"

    def to_http_exception(self) -> HTTPException:
        # Storage details stay in the logs, never in the response body
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": "An error occurred processing your request",
                "code": self.code,
                "details": {},
            },
        )


class InvalidTransitionException(ConflictException):
    """Raised when an event is not allowed from the record's current state."""

    default_code = "INVALID_TRANSITION"

    def __init__(self, current_state: str, event: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"Cannot {event} a booking that is {current_state}",
            details={"current_state": current_state, "event": event},
        )


# Specific business exceptions


class BookingConflictException(ConflictException):
    """Raised when a tutor already holds an open booking in the requested slot."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message
            or "Tutor already has a session at this time. Please choose a different time.",
            code="BOOKING_CONFLICT",
            details=details or {},
        )


class DuplicateEmailException(ConflictException):
    """Raised when registering with an email that is already taken."""

    def __init__(self, email: str):
        super().__init__(
            message="Email already registered",
            code="DUPLICATE_EMAIL",
            details={"email": email},
        )


class AlreadyRatedException(ConflictException):
    """Raised when a rating or tutor feedback has already been recorded."""

    def __init__(self, booking_id: str, what: str = "rating"):
        super().__init__(
            message=f"A {what} has already been submitted for this booking",
            code="ALREADY_RATED",
            details={"booking_id": booking_id, "kind": what},
        )


class NotCompletedException(InvalidTransitionException):
    """Raised when feedback is submitted for a booking that is not completed."""

    default_code = "NOT_COMPLETED"

    def __init__(self, current_state: str, event: str):
        super().__init__(
            current_state,
            event,
            message=f"Feedback can only be given for completed sessions (booking is {current_state})",
        )


class AlreadyAnsweredException(ConflictException):
    """Raised when replying to a doubt that already has a reply."""

    def __init__(self, doubt_id: str):
        super().__init__(
            message="This doubt has already been answered",
            code="ALREADY_ANSWERED",
            details={"doubt_id": doubt_id},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
