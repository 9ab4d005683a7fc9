"""Collection and item API endpoints"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ..models import User
from ..schemas.collection import CollectionCreate, CollectionResponse
from ..schemas.item import ItemCreate, ItemResponse
from ..services.collections import CollectionService
from ..utils.database import get_db
from ..utils.dependencies import get_current_user

router = APIRouter()


@router.get("/", response_model=List[CollectionResponse])
def list_collections(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The current user's collections in grid order"""
    return CollectionService(db).list_collections(current_user.id)


@router.post("/", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
def create_collection(
    collection: CollectionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a collection on the lowest free grid slot"""
    return CollectionService(db).create_collection(
        current_user.id, collection.name, collection.type
    )


@router.get("/{collection_id}", response_model=CollectionResponse)
def get_collection(collection_id: int, db: Session = Depends(get_db)):
    """Get a collection with its items"""
    return CollectionService(db).get_collection(collection_id)


@router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_collection(
    collection_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a collection and its items"""
    CollectionService(db).delete_collection(current_user.id, collection_id)
    return None


@router.post("/{collection_id}/items", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def add_item(
    collection_id: int,
    item: ItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Append an item to a collection"""
    return CollectionService(db).add_item(current_user.id, collection_id, item.model_dump())


@router.delete("/{collection_id}/items/{item_id}", response_model=CollectionResponse)
def remove_item(
    collection_id: int,
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Remove an item; returns the collection with positions and cover updated"""
    return CollectionService(db).remove_item(current_user.id, collection_id, item_id)
