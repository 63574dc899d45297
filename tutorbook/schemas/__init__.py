"""Pydantic request and response schemas (camelCase on the wire)."""

from .base_responses import ApiResponse, ErrorResponse, HealthResponse
from .booking import (
    BookingCreate,
    BookingListPayload,
    BookingOut,
    BookingPayload,
    BookingProgressRequest,
    BookingReasonRequest,
    StudentRatingRequest,
    TutorFeedbackOut,
    TutorFeedbackRequest,
)
from .doubt import DoubtCreate, DoubtListPayload, DoubtOut, DoubtPayload, DoubtReplyRequest
from .tutor import TutorListPayload, TutorOut, TutorPayload
from .user import AuthPayload, LoginRequest, RegisterRequest, UserOut, UserPayload

__all__ = [
    "ApiResponse",
    "AuthPayload",
    "BookingCreate",
    "BookingListPayload",
    "BookingOut",
    "BookingPayload",
    "BookingProgressRequest",
    "BookingReasonRequest",
    "DoubtCreate",
    "DoubtListPayload",
    "DoubtOut",
    "DoubtPayload",
    "DoubtReplyRequest",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "StudentRatingRequest",
    "TutorFeedbackOut",
    "TutorFeedbackRequest",
    "TutorListPayload",
    "TutorOut",
    "TutorPayload",
    "UserOut",
    "UserPayload",
]
