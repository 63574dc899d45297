# tutorbook/routes/doubts.py
"""
Doubt routes

Endpoints:
    GET /doubts                  → Caller's doubts (asked or received)
    POST /doubts                 → Student asks a tutor a question
    POST /doubts/{doubt_id}/reply → Addressed tutor answers
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..api.dependencies.auth import get_current_actor
from ..api.dependencies.services import get_doubt_service
from ..core.exceptions import DomainException
from ..errors import handle_domain_exception
from ..principal import Actor
from ..schemas.base_responses import ApiResponse
from ..schemas.doubt import (
    DoubtCreate,
    DoubtListPayload,
    DoubtOut,
    DoubtPayload,
    DoubtReplyRequest,
)
from ..services.doubt_service import DoubtService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/doubts", tags=["doubts"])


@router.get("", response_model=ApiResponse[DoubtListPayload])
async def list_doubts(
    status_filter: Optional[str] = Query(None, alias="status"),
    actor: Actor = Depends(get_current_actor),
    doubt_service: DoubtService = Depends(get_doubt_service),
) -> ApiResponse[DoubtListPayload]:
    try:
        doubts = await asyncio.to_thread(doubt_service.list_doubts, actor, status_filter)
    except DomainException as e:
        handle_domain_exception(e)
    items = [DoubtOut.from_model(d) for d in doubts]
    return ApiResponse(data=DoubtListPayload(doubts=items, count=len(items)))


@router.post("", response_model=ApiResponse[DoubtPayload], status_code=status.HTTP_201_CREATED)
async def submit_doubt(
    payload: DoubtCreate,
    actor: Actor = Depends(get_current_actor),
    doubt_service: DoubtService = Depends(get_doubt_service),
) -> ApiResponse[DoubtPayload]:
    """Open a doubt addressed to a tutor."""
    try:
        doubt = await asyncio.to_thread(
            doubt_service.submit_doubt,
            actor,
            tutor_id=payload.tutor_id,
            student_id=payload.student_id,
            subject=payload.subject,
            question=payload.question,
            urgency=payload.urgency,
        )
    except DomainException as e:
        handle_domain_exception(e)
    return ApiResponse(data=DoubtPayload(doubt=DoubtOut.from_model(doubt)))


@router.post("/{doubt_id}/reply", response_model=ApiResponse[DoubtPayload])
async def reply_to_doubt(
    doubt_id: str,
    payload: DoubtReplyRequest,
    actor: Actor = Depends(get_current_actor),
    doubt_service: DoubtService = Depends(get_doubt_service),
) -> ApiResponse[DoubtPayload]:
    """Answer a doubt (addressed tutor only, once)."""
    try:
        doubt = await asyncio.to_thread(
            doubt_service.reply_to_doubt, actor, doubt_id, payload.reply
        )
    except DomainException as e:
        handle_domain_exception(e)
    return ApiResponse(data=DoubtPayload(doubt=DoubtOut.from_model(doubt)))
