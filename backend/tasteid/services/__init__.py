"""Domain services"""

from .collections import CollectionService, next_free_position, GRID_SIZE
from .saved_items import SavedItemService, LIKES_COLLECTION_NAME
from .users import UserService
from .search_cache import SearchCacheService

__all__ = [
    "CollectionService",
    "next_free_position",
    "GRID_SIZE",
    "SavedItemService",
    "LIKES_COLLECTION_NAME",
    "UserService",
    "SearchCacheService",
]
