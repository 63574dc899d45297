# tutorbook/routes/tutors.py
"""
Tutor directory routes

Endpoints:
    GET /tutors            → Filtered, sorted tutor listing
    GET /tutors/{tutor_id} → One tutor's public profile
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..api.dependencies.services import get_tutor_directory_service
from ..core.enums import TutorSortKey
from ..core.exceptions import DomainException
from ..errors import handle_domain_exception
from ..schemas.base_responses import ApiResponse
from ..schemas.tutor import TutorListPayload, TutorOut, TutorPayload
from ..services.tutor_directory_service import TutorDirectoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tutors", tags=["tutors"])


@router.get("", response_model=ApiResponse[TutorListPayload])
async def list_tutors(
    subject: Optional[str] = Query(None, description="Exact subject, case-insensitive"),
    min_rating: Optional[float] = Query(None, description="Minimum mean rating (0-5)"),
    min_experience: Optional[int] = Query(None, description="Minimum years of experience"),
    max_rate: Optional[float] = Query(None, description="Maximum hourly rate"),
    available: Optional[bool] = Query(None, description="Availability flag"),
    sort: str = Query(
        TutorSortKey.RATING.value,
        description="Sort key (descending): rating, experience or totalSessions",
    ),
    limit: Optional[int] = Query(None, description="Maximum number of tutors"),
    directory_service: TutorDirectoryService = Depends(get_tutor_directory_service),
) -> ApiResponse[TutorListPayload]:
    """
    List tutors.

    Malformed numeric filters are rejected with 400 rather than ignored.
    """
    try:
        profiles = await asyncio.to_thread(
            directory_service.list_tutors,
            subject=subject,
            min_rating=min_rating,
            min_experience=min_experience,
            max_rate=max_rate,
            available=available,
            sort=sort,
            limit=limit,
        )
    except DomainException as e:
        handle_domain_exception(e)

    tutors = [TutorOut.from_model(profile) for profile in profiles]
    return ApiResponse(data=TutorListPayload(tutors=tutors, count=len(tutors)))


@router.get("/{tutor_id}", response_model=ApiResponse[TutorPayload])
async def get_tutor(
    tutor_id: str,
    directory_service: TutorDirectoryService = Depends(get_tutor_directory_service),
) -> ApiResponse[TutorPayload]:
    """Get a tutor's public profile by user id."""
    try:
        profile = await asyncio.to_thread(directory_service.get_tutor, tutor_id)
    except DomainException as e:
        handle_domain_exception(e)
    return ApiResponse(data=TutorPayload(tutor=TutorOut.from_model(profile)))
