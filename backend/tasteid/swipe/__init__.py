"""Swipe sessions over a collection's items"""

from .state import (
    SwipeAction,
    SwipeDirection,
    SwipeState,
    open_collection,
    swipe,
    undo,
    close,
    reset,
    current_item,
    progress,
    is_active,
)
from .session import SwipeSession, save_on_like
from .client import SavedItemsClient

__all__ = [
    "SwipeAction",
    "SwipeDirection",
    "SwipeState",
    "open_collection",
    "swipe",
    "undo",
    "close",
    "reset",
    "current_item",
    "progress",
    "is_active",
    "SwipeSession",
    "save_on_like",
    "SavedItemsClient",
]
