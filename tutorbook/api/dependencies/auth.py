# tutorbook/api/dependencies/auth.py
"""
Authentication dependencies.

The bearer token is decoded once per request and resolved to the stored
user; the actor's role always comes from the database row, not from the
token claim alone.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from sqlalchemy.orm import Session

from ...auth import decode_access_token
from ...core.exceptions import UnauthorizedException
from ...models.user import User
from ...principal import Actor, actor_for
from ...repositories.user_repository import UserRepository
from .database import get_db

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Get the current authenticated and active user.

    Raises:
        UnauthorizedException: Missing, invalid or expired token, or unknown user
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Not authenticated")

    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise UnauthorizedException("Token has expired")
    except jwt.PyJWTError as e:
        logger.warning(f"Rejected access token: {str(e)}")
        raise UnauthorizedException("Could not validate credentials")

    user_id = payload.get("sub")
    user = UserRepository(db).get_by_id(str(user_id)) if user_id else None
    if user is None or not user.is_active:
        raise UnauthorizedException("Could not validate credentials")

    token_role = payload.get("role")
    if token_role and token_role != user.role:
        logger.warning(f"Token role {token_role} does not match stored role for {user.id}")
        raise UnauthorizedException("Could not validate credentials")

    return user


def get_current_actor(current_user: User = Depends(get_current_user)) -> Actor:
    """Resolve the caller to a StudentActor or TutorActor."""
    return actor_for(current_user.id, current_user.email, current_user.role)

