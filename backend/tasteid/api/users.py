"""User and profile API endpoints"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from ..models import User
from ..schemas.user import (
    OnboardingRequest,
    ProfileResponse,
    UserResponse,
    UserUpdate,
    UsernameAvailability,
)
from ..services.users import UserService
from ..utils.database import get_db
from ..utils.dependencies import get_current_user, get_optional_user

router = APIRouter()


@router.get("/me", response_model=ProfileResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """The signed-in user's profile and grid"""
    return current_user


@router.post("/me/onboarding", response_model=UserResponse)
def complete_onboarding(
    onboarding: OnboardingRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Complete onboarding

    Sets username, bio and accent color; creates Favorites, Watchlist and
    Playing if the user has no collections yet.
    """
    return UserService(db).complete_onboarding(
        current_user.id,
        onboarding.username,
        bio=onboarding.bio,
        accent_color=onboarding.accent_color,
    )


@router.get("/check-username", response_model=UsernameAvailability)
def check_username(
    username: Optional[str] = Query(None),
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Check whether a username is free"""
    return UserService(db).check_username(username, current_user)


@router.get("/{username}", response_model=ProfileResponse)
def get_profile(username: str, db: Session = Depends(get_db)):
    """Public profile"""
    return UserService(db).get_profile(username)


@router.patch("/{username}", response_model=ProfileResponse)
def update_profile(
    username: str,
    user_update: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a profile; only its owner may"""
    changes = user_update.model_dump(exclude_unset=True)
    return UserService(db).update_profile(current_user.id, username, changes)
