# tutorbook/routes/auth.py
"""
Authentication routes

Endpoints:
    POST /register → User registration (tutors also get a profile)
    POST /login    → Email/password login, returns a bearer token
    GET /me        → Current user
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, status

from ..api.dependencies.auth import get_current_user
from ..api.dependencies.services import get_auth_service
from ..core.exceptions import DomainException
from ..errors import handle_domain_exception
from ..models.user import User
from ..schemas.base_responses import ApiResponse
from ..schemas.user import AuthPayload, LoginRequest, RegisterRequest, UserOut, UserPayload
from ..services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=ApiResponse[UserPayload],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[UserPayload]:
    """Create a student or tutor account."""
    try:
        user = await asyncio.to_thread(
            auth_service.register_user,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            role=payload.role,
            phone=payload.phone,
            subjects=payload.subjects,
            bio=payload.bio,
            experience=payload.experience,
            hourly_rate=payload.hourly_rate,
        )
    except DomainException as e:
        handle_domain_exception(e)
    return ApiResponse(data=UserPayload(user=UserOut.from_model(user)))


@router.post("/login", response_model=ApiResponse[AuthPayload])
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[AuthPayload]:
    """Exchange email and password for an access token."""
    try:
        user = await asyncio.to_thread(
            auth_service.authenticate_user, payload.email, payload.password
        )
    except DomainException as e:
        handle_domain_exception(e)

    token = auth_service.create_token_for(user)
    return ApiResponse(
        data=AuthPayload(user=UserOut.from_model(user), access_token=token, token_type="bearer")
    )


@router.get("/me", response_model=ApiResponse[UserPayload])
async def read_current_user(
    current_user: User = Depends(get_current_user),
) -> ApiResponse[UserPayload]:
    """Return the signed-in user."""
    return ApiResponse(data=UserPayload(user=UserOut.from_model(current_user)))
