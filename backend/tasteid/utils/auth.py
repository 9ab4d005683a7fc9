"""JWT helpers for access and refresh tokens"""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from ..config import settings
from ..exceptions import UnauthorizedError

ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
REFRESH_TOKEN_EXPIRE_DAYS = settings.REFRESH_TOKEN_EXPIRE_DAYS


def _create_token(data: Dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    # JWT requires "sub" to be a string
    if "sub" in to_encode:
        to_encode["sub"] = str(to_encode["sub"])
    to_encode.update({
        "exp": datetime.utcnow() + expires_delta,
        "type": token_type,
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a short-lived access token

    Args:
        data: Claims to encode; "sub" carries the user id
        expires_delta: Override for the default lifetime

    Returns:
        Encoded JWT
    """
    return _create_token(
        data, "access", expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )


def create_refresh_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create a long-lived refresh token"""
    return _create_token(
        data, "refresh", expires_delta or timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)
    )


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a token

    Raises:
        UnauthorizedError: If the signature or expiry is invalid
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise UnauthorizedError("Could not validate credentials")


def verify_token_type(payload: Dict[str, Any], expected_type: str) -> None:
    """Reject refresh tokens where access tokens are expected and vice versa"""
    if payload.get("type") != expected_type:
        raise UnauthorizedError("Invalid token type")


def user_id_from_payload(payload: Dict[str, Any]) -> int:
    """Extract the integer user id from the "sub" claim"""
    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise UnauthorizedError("Could not validate credentials")
