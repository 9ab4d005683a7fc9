"""Pydantic schemas for request/response validation"""

from .item import MediaType, ItemCreate, ItemResponse
from .collection import CollectionCreate, CollectionResponse
from .saved_item import SavedItemCreate, SavedItemResponse
from .user import (
    BackgroundTexture,
    UserResponse,
    CurrentUserResponse,
    ProfileResponse,
    UserUpdate,
    OnboardingRequest,
    UsernameAvailability,
)
from .search import SearchResult, SearchResponse

__all__ = [
    "MediaType",
    "ItemCreate",
    "ItemResponse",
    "CollectionCreate",
    "CollectionResponse",
    "SavedItemCreate",
    "SavedItemResponse",
    "BackgroundTexture",
    "UserResponse",
    "CurrentUserResponse",
    "ProfileResponse",
    "UserUpdate",
    "OnboardingRequest",
    "UsernameAvailability",
    "SearchResult",
    "SearchResponse",
]
