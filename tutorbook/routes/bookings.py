# tutorbook/routes/bookings.py
"""
Booking routes

All business logic delegated to BookingService and FeedbackService. The
acting user always comes from the bearer token.

Endpoints:
    GET /bookings                           → Caller's bookings (optional status filter)
    POST /bookings                          → Create a booking
    GET /bookings/{booking_id}              → Booking details
    POST /bookings/{booking_id}/accept      → Tutor accepts a pending request
    POST /bookings/{booking_id}/reject      → Tutor rejects a pending request
    POST /bookings/{booking_id}/cancel      → Either party cancels
    POST /bookings/{booking_id}/complete    → Tutor marks the session held
    POST /bookings/{booking_id}/progress    → Tutor records progress and notes
    POST /bookings/{booking_id}/rating      → Student rates a completed session
    POST /bookings/{booking_id}/tutor-feedback → Tutor reviews the student
"""

import asyncio
from decimal import Decimal
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status

from ..api.dependencies.auth import get_current_actor
from ..api.dependencies.services import get_booking_service, get_feedback_service
from ..core.exceptions import DomainException
from ..errors import handle_domain_exception
from ..principal import Actor
from ..schemas.base_responses import ApiResponse
from ..schemas.booking import (
    BookingCreate,
    BookingListPayload,
    BookingOut,
    BookingPayload,
    BookingProgressRequest,
    BookingReasonRequest,
    StudentRatingRequest,
    TutorFeedbackRequest,
)
from ..services.booking_service import BookingService
from ..services.feedback_service import FeedbackService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _booking_response(booking) -> ApiResponse[BookingPayload]:
    return ApiResponse(data=BookingPayload(booking=BookingOut.from_model(booking)))


# ============================================================================
# SECTION 1: Collection routes
# ============================================================================


@router.get("", response_model=ApiResponse[BookingListPayload])
async def list_bookings(
    status_filter: Optional[str] = Query(None, alias="status"),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> ApiResponse[BookingListPayload]:
    """List the caller's bookings, most recent session first."""
    try:
        bookings = await asyncio.to_thread(booking_service.list_bookings, actor, status_filter)
    except DomainException as e:
        handle_domain_exception(e)

    items = [BookingOut.from_model(b) for b in bookings]
    return ApiResponse(data=BookingListPayload(bookings=items, count=len(items)))


@router.post(
    "",
    response_model=ApiResponse[BookingPayload],
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: BookingCreate,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> ApiResponse[BookingPayload]:
    """
    Create a booking.

    Students get a pending request; tutors get a confirmed session.
    """
    try:
        booking = await asyncio.to_thread(
            booking_service.create_booking,
            actor,
            tutor_id=payload.tutor_id,
            student_id=payload.student_id,
            subject=payload.subject,
            topic=payload.topic,
            session_date=payload.session_date,
            session_time=payload.session_time,
            duration_minutes=payload.duration_minutes,
            hourly_rate=Decimal(str(payload.rate)) if payload.rate is not None else None,
            level=payload.level,
            message=payload.message,
        )
    except DomainException as e:
        handle_domain_exception(e)
    return _booking_response(booking)


# ============================================================================
# SECTION 2: Single booking routes
# ============================================================================


@router.get("/{booking_id}", response_model=ApiResponse[BookingPayload])
async def get_booking(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> ApiResponse[BookingPayload]:
    """Get a booking the caller takes part in."""
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, actor, booking_id)
    except DomainException as e:
        handle_domain_exception(e)
    return _booking_response(booking)


@router.post("/{booking_id}/accept", response_model=ApiResponse[BookingPayload])
async def accept_booking(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> ApiResponse[BookingPayload]:
    """Tutor accepts a pending request."""
    try:
        booking = await asyncio.to_thread(booking_service.accept_booking, actor, booking_id)
    except DomainException as e:
        handle_domain_exception(e)
    return _booking_response(booking)


@router.post("/{booking_id}/reject", response_model=ApiResponse[BookingPayload])
async def reject_booking(
    booking_id: str,
    payload: Optional[BookingReasonRequest] = Body(None),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> ApiResponse[BookingPayload]:
    """Tutor rejects a pending request, optionally with a reason."""
    reason = payload.reason if payload else None
    try:
        booking = await asyncio.to_thread(
            booking_service.reject_booking, actor, booking_id, reason
        )
    except DomainException as e:
        handle_domain_exception(e)
    return _booking_response(booking)


@router.post("/{booking_id}/cancel", response_model=ApiResponse[BookingPayload])
async def cancel_booking(
    booking_id: str,
    payload: Optional[BookingReasonRequest] = Body(None),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> ApiResponse[BookingPayload]:
    """Cancel a booking as its student or tutor."""
    reason = payload.reason if payload else None
    try:
        booking = await asyncio.to_thread(
            booking_service.cancel_booking, actor, booking_id, reason
        )
    except DomainException as e:
        handle_domain_exception(e)
    return _booking_response(booking)


@router.post("/{booking_id}/complete", response_model=ApiResponse[BookingPayload])
async def complete_booking(
    booking_id: str,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> ApiResponse[BookingPayload]:
    """Tutor marks a confirmed session as completed."""
    try:
        booking = await asyncio.to_thread(booking_service.complete_booking, actor, booking_id)
    except DomainException as e:
        handle_domain_exception(e)
    return _booking_response(booking)


@router.post("/{booking_id}/progress", response_model=ApiResponse[BookingPayload])
async def update_progress(
    booking_id: str,
    payload: BookingProgressRequest,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> ApiResponse[BookingPayload]:
    """Tutor records progress (0-100); 100 completes a confirmed booking."""
    try:
        booking = await asyncio.to_thread(
            booking_service.update_progress, actor, booking_id, payload.progress, payload.notes
        )
    except DomainException as e:
        handle_domain_exception(e)
    return _booking_response(booking)


# ============================================================================
# SECTION 3: Feedback routes
# ============================================================================


@router.post("/{booking_id}/rating", response_model=ApiResponse[BookingPayload])
async def submit_rating(
    booking_id: str,
    payload: StudentRatingRequest,
    actor: Actor = Depends(get_current_actor),
    feedback_service: FeedbackService = Depends(get_feedback_service),
) -> ApiResponse[BookingPayload]:
    """Student rates a completed session (once)."""
    try:
        booking = await asyncio.to_thread(
            feedback_service.submit_student_rating,
            actor,
            booking_id,
            payload.rating,
            payload.comment,
        )
    except DomainException as e:
        handle_domain_exception(e)
    return _booking_response(booking)


@router.post("/{booking_id}/tutor-feedback", response_model=ApiResponse[BookingPayload])
async def submit_tutor_feedback(
    booking_id: str,
    payload: TutorFeedbackRequest,
    actor: Actor = Depends(get_current_actor),
    feedback_service: FeedbackService = Depends(get_feedback_service),
) -> ApiResponse[BookingPayload]:
    """Tutor leaves feedback about the student on a completed session (once)."""
    try:
        booking = await asyncio.to_thread(
            feedback_service.submit_tutor_feedback,
            actor,
            booking_id,
            payload.rating,
            payload.notes,
            payload.strengths,
            payload.improvements,
        )
    except DomainException as e:
        handle_domain_exception(e)
    return _booking_response(booking)
