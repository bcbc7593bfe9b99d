"""
JWT bearer authentication for kitchen API endpoints.

Tokens are issued by the surrounding POS service; this module only
verifies them and exposes the acting user and role checks as FastAPI
dependencies.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
import logging

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from .config import settings
from .exceptions import AuthenticationError, PermissionError

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


class TokenData(BaseModel):
    """Token payload data."""

    user_id: Optional[int] = None
    username: Optional[str] = None
    roles: List[str] = []


class User(BaseModel):
    """User model for authentication."""

    id: int
    username: str
    roles: List[str] = []
    is_active: bool = True


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT access token."""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "iat": now, "type": "access"})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Optional[TokenData]:
    """
    Verify and decode a JWT access token.

    Returns:
        TokenData if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None

    if payload.get("type") != "access":
        logger.warning(f"Token type mismatch: got {payload.get('type')}")
        return None

    # sub is a string per the JWT standard
    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        return None

    try:
        return TokenData(
            user_id=user_id,
            username=payload.get("username"),
            roles=payload.get("roles", []),
        )
    except ValidationError as e:
        logger.warning(f"Malformed token claims: {e}")
        return None


def has_any_role(user_roles: List[str], required_roles: List[str]) -> bool:
    """Admin passes every role check."""
    held = set(user_roles or [])
    return "admin" in held or bool(held & set(required_roles))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> User:
    """Resolve the current authenticated user from the bearer token."""
    if credentials is None:
        raise AuthenticationError()

    token_data = verify_token(credentials.credentials)
    if token_data is None or token_data.user_id is None:
        raise AuthenticationError()

    return User(
        id=token_data.user_id,
        username=token_data.username or str(token_data.user_id),
        roles=token_data.roles,
    )


def require_roles(required_roles: List[str]):
    """Enforce that the current user holds at least one of the specified roles."""

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if has_any_role(user.roles, required_roles):
            return user
        raise PermissionError(
            detail=f"Operation requires one of these roles: {required_roles}"
        )

    return dependency
