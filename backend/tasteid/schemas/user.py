"""User schemas"""

from enum import Enum
from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import datetime

from .collection import CollectionResponse

USERNAME_PATTERN = r"^[a-z0-9_]{3,20}$"
ACCENT_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class BackgroundTexture(str, Enum):
    """Profile background textures"""

    NONE = "none"
    GRAIN = "grain"
    PAPER = "paper"
    GLASS = "glass"


class UserResponse(BaseModel):
    """Public profile fields"""

    id: int
    username: Optional[str] = None
    name: Optional[str] = None
    image: Optional[str] = None
    accent_color: str
    bg_texture: BackgroundTexture
    bio: Optional[str] = None
    onboarding_completed: bool

    class Config:
        from_attributes = True


class CurrentUserResponse(UserResponse):
    """The authenticated user's own account"""

    email: EmailStr
    created_at: datetime


class ProfileResponse(UserResponse):
    """Profile page: user plus the grid"""

    collections: List[CollectionResponse] = []


class UserUpdate(BaseModel):
    """Schema for updating a profile; only provided fields change"""

    name: Optional[str] = Field(None, max_length=200)
    bio: Optional[str] = Field(None, max_length=500)
    accent_color: Optional[str] = Field(None, pattern=ACCENT_COLOR_PATTERN)
    bg_texture: Optional[BackgroundTexture] = None


class OnboardingRequest(BaseModel):
    """Schema for completing onboarding

    The username pattern is enforced by the service so the caller gets a
    domain ValidationError with a readable message.
    """

    username: str
    bio: Optional[str] = Field(None, max_length=500)
    accent_color: Optional[str] = Field(None, pattern=ACCENT_COLOR_PATTERN)


class UsernameAvailability(BaseModel):
    available: bool
    is_current_user: bool = False
    error: Optional[str] = None
