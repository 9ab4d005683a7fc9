"""Database models"""

from .user import User
from .collection import Collection
from .item import Item
from .saved_item import SavedItem

__all__ = [
    "User",
    "Collection",
    "Item",
    "SavedItem",
]
