"""User provisioning, profiles and onboarding"""

import re
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session, selectinload

from ..config import settings
from ..models import User, Collection
from ..exceptions import NotFoundError, ValidationError
from ..utils.logging import get_logger
from .collections import CollectionService, require_user

logger = get_logger(__name__)

USERNAME_RE = re.compile(r"^[a-z0-9_]{3,20}$")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20

# Created on onboarding when the user has no collections yet
DEFAULT_COLLECTIONS = [
    ("Favorites", "mixed"),
    ("Watchlist", "movie"),
    ("Playing", "game"),
]


def username_base_from_email(email: str) -> str:
    """
    Candidate username from an email's local part

    Lowercased with everything but letters and digits dropped, padded to the
    minimum length and cut to the maximum.
    """
    local_part = email.split("@", 1)[0].lower()
    base = re.sub(r"[^a-z0-9]", "", local_part)
    if len(base) < USERNAME_MIN_LENGTH:
        base = f"user{base}"
    return base[:USERNAME_MAX_LENGTH]


def with_suffix(base: str, counter: int) -> str:
    """``base`` + ``counter``, trimming ``base`` so the result fits 20 chars"""
    suffix = str(counter)
    return f"{base[:USERNAME_MAX_LENGTH - len(suffix)]}{suffix}"


def is_valid_username(username: Optional[str]) -> bool:
    return bool(username) and USERNAME_RE.match(username) is not None


class UserService:
    """Account and profile operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: Optional[int]) -> User:
        user_id = require_user(user_id)
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFoundError("User not found")
        return user

    def username_taken(self, username: str, exclude_user_id: Optional[int] = None) -> bool:
        query = self.db.query(User.id).filter(User.username == username)
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        return query.first() is not None

    def generate_username(self, email: str) -> str:
        """Derive a free username, appending 1, 2, ... on collision"""
        base = username_base_from_email(email)
        username = base
        counter = 1
        while self.username_taken(username):
            username = with_suffix(base, counter)
            counter += 1
        return username

    def provision_user(
        self,
        email: str,
        name: Optional[str] = None,
        image: Optional[str] = None,
    ) -> User:
        """
        Find or create the user behind a verified provider identity

        New users get a username right after creation; default collections
        are created later, during onboarding.

        Args:
            email: Verified email from the identity provider
            name: Display name from the provider
            image: Avatar URL from the provider

        Returns:
            The existing or newly created user
        """
        email = email.strip().lower()
        user = self.db.query(User).filter(User.email == email).first()
        if user is not None:
            return user

        user = User(
            email=email,
            name=name,
            image=image,
            accent_color=settings.DEFAULT_ACCENT_COLOR,
            bg_texture=settings.DEFAULT_BG_TEXTURE,
        )
        self.db.add(user)
        self.db.flush()

        user.username = self.generate_username(email)
        self.db.commit()
        self.db.refresh(user)

        logger.info("User provisioned", user_id=user.id, username=user.username)
        return user

    def get_profile(self, username: str) -> User:
        """User with collections and their items, for the public profile"""
        user = (
            self.db.query(User)
            .options(selectinload(User.collections).selectinload(Collection.items))
            .filter(User.username == username)
            .first()
        )
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(
        self,
        current_user_id: Optional[int],
        username: str,
        changes: Dict[str, Any],
    ) -> User:
        """
        Update name, bio, accent color or texture on the caller's own profile

        A profile the caller does not own is reported as not found, the same
        as a missing one.
        """
        current_user_id = require_user(current_user_id)
        user = self.db.query(User).filter(User.username == username).first()
        if user is None or user.id != current_user_id:
            raise NotFoundError("User not found")

        for field in ("name", "bio"):
            if field in changes:
                setattr(user, field, changes[field])
        # Empty values leave the current styling in place
        if changes.get("accent_color"):
            user.accent_color = changes["accent_color"]
        if changes.get("bg_texture"):
            user.bg_texture = getattr(changes["bg_texture"], "value", changes["bg_texture"])

        self.db.commit()
        logger.info("Profile updated", user_id=user.id, fields=sorted(changes))
        return self.get_profile(user.username)

    def check_username(self, username: Optional[str], current_user: Optional[User] = None) -> Dict[str, Any]:
        """
        Availability of a username for the onboarding form

        Raises:
            ValidationError: No username given
        """
        if not username:
            raise ValidationError("Username is required")

        if not is_valid_username(username):
            return {"available": False, "error": "Invalid username format"}

        if current_user is not None and current_user.username == username:
            return {"available": True, "is_current_user": True}

        return {"available": not self.username_taken(username)}

    def complete_onboarding(
        self,
        user_id: Optional[int],
        username: str,
        bio: Optional[str] = None,
        accent_color: Optional[str] = None,
    ) -> User:
        """
        Set username, bio and accent color and mark onboarding complete

        Creates the default collections if the user has none yet.

        Raises:
            ValidationError: Bad username format, or the name belongs to
                someone else
        """
        user = self.get_user(user_id)

        if not is_valid_username(username):
            raise ValidationError(
                "Invalid username. Use 3-20 lowercase letters, numbers, or underscores."
            )
        if self.username_taken(username, exclude_user_id=user.id):
            raise ValidationError("Username is already taken")

        user.username = username
        user.bio = (bio or "").strip() or None
        user.accent_color = accent_color or settings.DEFAULT_ACCENT_COLOR
        user.onboarding_completed = True
        self.db.flush()

        collections = CollectionService(self.db)
        if collections.count_collections(user.id) == 0:
            for name, collection_type in DEFAULT_COLLECTIONS:
                collections.create_collection(
                    user.id, name, collection_type, origin="onboarding", commit=False
                )

        self.db.commit()
        self.db.refresh(user)

        logger.info("Onboarding completed", user_id=user.id, username=user.username)
        return user
