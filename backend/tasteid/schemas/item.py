"""Item schemas"""

import json
from enum import Enum
from typing import Any, Dict, Optional
from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator


class MediaType(str, Enum):
    """Media types known to the grid and the search providers"""

    MOVIE = "movie"
    TV = "tv"
    MUSIC = "music"
    GAME = "game"
    ANIME = "anime"
    MANGA = "manga"
    BOOK = "book"
    ART = "art"
    MIXED = "mixed"  # Collections only


def parse_metadata(value: Any) -> Optional[Dict[str, Any]]:
    """Accept metadata as a mapping or as a JSON-encoded object string"""
    if value is None or isinstance(value, dict):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"metadata is not valid JSON: {e.msg}")
        if not isinstance(decoded, dict):
            raise ValueError("metadata must be a JSON object")
        return decoded
    raise ValueError("metadata must be an object")


class ItemBase(BaseModel):
    """Fields copied in from a search result or a swipe"""

    external_id: str = Field(..., min_length=1, max_length=100)
    type: MediaType
    title: str = Field(..., min_length=1, max_length=500)
    image: Optional[str] = Field(None, max_length=1000)
    year: Optional[str] = Field(None, max_length=10)
    rating: Optional[float] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("metadata", mode="before")
    @classmethod
    def _parse_metadata(cls, value):
        return parse_metadata(value)

    @field_validator("type")
    @classmethod
    def _reject_mixed(cls, value: MediaType) -> MediaType:
        if value == MediaType.MIXED:
            raise ValueError("items need a concrete media type")
        return value


# ORM rows keep metadata in `item_metadata`; `metadata` is taken by the declarative base
def stored_metadata():
    return Field(None, validation_alias=AliasChoices("item_metadata", "metadata"))


class ItemCreate(ItemBase):
    """Schema for adding an item to a collection"""

    review: Optional[str] = None


class ItemResponse(ItemBase):
    """Schema for item response"""

    id: int
    metadata: Optional[Dict[str, Any]] = stored_metadata()
    review: Optional[str] = None
    position: int
    created_at: datetime

    class Config:
        from_attributes = True
