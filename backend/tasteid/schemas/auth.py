"""Authentication schemas"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from ..utils.auth import ACCESS_TOKEN_EXPIRE_MINUTES


class ProviderIdentity(BaseModel):
    """Identity verified by the external OAuth provider"""

    email: EmailStr
    name: Optional[str] = Field(None, max_length=200)
    image: Optional[str] = Field(None, max_length=1000)


class TokenResponse(BaseModel):
    """Token response schema"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = ACCESS_TOKEN_EXPIRE_MINUTES * 60


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema"""
    refresh_token: str
