"""Collection schemas"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from .item import ItemResponse, MediaType


class CollectionCreate(BaseModel):
    """Schema for creating a collection; the grid slot is assigned server-side"""

    name: str = Field(..., max_length=100)
    type: MediaType = MediaType.MIXED


class CollectionResponse(BaseModel):
    """Schema for collection response, items ordered by position"""

    id: int
    name: str
    type: MediaType
    position: int
    cover_image: Optional[str] = None
    items: List[ItemResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True
