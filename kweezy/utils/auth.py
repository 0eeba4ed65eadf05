"""
Auth helpers: JWT tokens, password hashing and request identity
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from fastapi import Header

from kweezy.core.config import settings
from kweezy.core.exceptions import AuthError, PermissionDeniedError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class CurrentUser:
    """Identity attached to an authenticated request"""
    user_id: int
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT access token

    Args:
        data: claims to encode; "sub" carries the user ID
        expires_delta: lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        str: encoded token
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Decode a JWT token

    Raises:
        AuthError: the token has expired
        PermissionDeniedError: the token is malformed or its signature is wrong
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise AuthError("Unauthorized: Token expired.")
    except JWTError:
        raise PermissionDeniedError("Forbidden: Invalid token.")


def _extract_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.strip():
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def _user_from_payload(payload: Dict[str, Any]) -> CurrentUser:
    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise PermissionDeniedError("Forbidden: Invalid token.")
    return CurrentUser(user_id=user_id, role=payload.get("role") or "user")


async def get_current_user(authorization: Optional[str] = Header(None)) -> CurrentUser:
    """
    Authenticated identity from the "Authorization: Bearer {token}" header

    Raises:
        AuthError: no token or an expired one
        PermissionDeniedError: invalid token
    """
    token = _extract_token(authorization)
    if token is None:
        raise AuthError("Unauthorized: No token provided.")
    return _user_from_payload(verify_token(token))


async def get_optional_user(authorization: Optional[str] = Header(None)) -> Optional[CurrentUser]:
    """
    Identity when a valid token is present, None otherwise

    Used by read endpoints that serve anonymous viewers too.
    """
    token = _extract_token(authorization)
    if token is None:
        return None
    try:
        return _user_from_payload(verify_token(token))
    except (AuthError, PermissionDeniedError):
        return None


def require_role(required_role: str):
    """Dependency factory checking the caller's role"""

    async def checker(authorization: Optional[str] = Header(None)) -> CurrentUser:
        user = await get_current_user(authorization)
        if user.role != required_role:
            raise PermissionDeniedError(f"Forbidden: Requires {required_role} role.")
        return user

    return checker


require_admin = require_role("admin")
