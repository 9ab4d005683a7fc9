"""Saved item API endpoints"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ..models import User
from ..schemas.item import ItemResponse
from ..schemas.saved_item import SavedItemCreate, SavedItemResponse
from ..services.saved_items import SavedItemService
from ..utils.database import get_db
from ..utils.dependencies import get_current_user

router = APIRouter()


@router.get("/", response_model=List[SavedItemResponse])
def list_saved_items(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The current user's saved items, newest first"""
    return SavedItemService(db).list_saved_items(current_user.id)


@router.post("/", response_model=ItemResponse)
def save_item(
    saved_item: SavedItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Save an item from the swiper

    Adds it to "My Likes" (once) and refreshes the saved-items entry.
    """
    return SavedItemService(db).save_item(current_user.id, saved_item.model_dump())


@router.delete("/{saved_item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_saved_item(
    saved_item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove a saved item"""
    SavedItemService(db).delete_saved_item(current_user.id, saved_item_id)
    return None
