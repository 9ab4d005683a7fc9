"""Authentication dependencies for FastAPI"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from .database import get_db
from .auth import decode_token, verify_token_type, user_id_from_payload
from ..exceptions import UnauthorizedError
from ..models import User

# auto_error is off so a missing header surfaces as our 401, not FastAPI's 403
security = HTTPBearer(auto_error=False)


def _load_user(credentials: Optional[HTTPAuthorizationCredentials], db: Session) -> Optional[User]:
    if credentials is None:
        return None

    payload = decode_token(credentials.credentials)
    verify_token_type(payload, "access")
    user_id = user_id_from_payload(payload)

    return db.query(User).filter(User.id == user_id).first()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Get the current authenticated user from the bearer token

    Args:
        credentials: HTTP Bearer token
        db: Database session

    Returns:
        Current user object

    Raises:
        UnauthorizedError: If the token is missing or invalid, or the user is gone
    """
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    user = _load_user(credentials, db)
    if user is None:
        raise UnauthorizedError("User not found")

    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Current user if a valid token was sent, else None"""
    if credentials is None:
        return None
    try:
        return _load_user(credentials, db)
    except UnauthorizedError:
        return None
