"""Saved item schemas"""

from typing import Any, Dict, Optional
from datetime import datetime

from .item import ItemBase, stored_metadata


class SavedItemCreate(ItemBase):
    """Schema for saving an item from the swiper"""

    pass


class SavedItemResponse(ItemBase):
    """Schema for saved item response"""

    id: int
    metadata: Optional[Dict[str, Any]] = stored_metadata()
    saved_at: datetime

    class Config:
        from_attributes = True