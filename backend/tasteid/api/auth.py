"""Authentication API endpoints"""

import hmac

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session
from typing import Optional

from ..config import settings
from ..exceptions import UnauthorizedError
from ..models import User
from ..schemas.auth import ProviderIdentity, TokenResponse, RefreshTokenRequest
from ..schemas.user import CurrentUserResponse
from ..services.users import UserService
from ..utils.database import get_db
from ..utils.auth import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_token_type,
    user_id_from_payload,
)
from ..utils.dependencies import get_current_user
from ..utils.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/session", response_model=TokenResponse)
def create_session(
    identity: ProviderIdentity,
    x_auth_provider_secret: Optional[str] = Header(None),
    db: Session = Depends(get_db)
):
    """
    Exchange a provider-verified identity for API tokens

    Called by the OAuth bridge after GitHub/Google sign-in. First sign-in
    creates the user and assigns a username derived from the email.
    """
    if not x_auth_provider_secret or not hmac.compare_digest(
        x_auth_provider_secret, settings.AUTH_PROVIDER_SECRET
    ):
        logger.warning("Rejected session request with bad provider secret")
        raise UnauthorizedError("Invalid provider credentials")

    user = UserService(db).provision_user(identity.email, identity.name, identity.image)

    return TokenResponse(
        access_token=create_access_token(data={"sub": user.id}),
        refresh_token=create_refresh_token(data={"sub": user.id})
    )


@router.post("/refresh", response_model=TokenResponse)
def refresh_token(refresh_data: RefreshTokenRequest):
    """Issue a new access token from a valid refresh token"""
    payload = decode_token(refresh_data.refresh_token)
    verify_token_type(payload, "refresh")
    user_id = user_id_from_payload(payload)

    return TokenResponse(
        access_token=create_access_token(data={"sub": user_id}),
        refresh_token=refresh_data.refresh_token  # Return same refresh token
    )


@router.get("/me", response_model=CurrentUserResponse)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get the authenticated user's account"""
    return current_user
