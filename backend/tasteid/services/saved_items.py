"""Save-via-swipe path

A right swipe lands in two places:

1. the user's "My Likes" collection, created on demand and deduplicated on
   (external_id, type)
2. the SavedItem quick-lookup table, upserted on (user_id, external_id, type)
   every time so it always carries the latest title/image/metadata
"""

from typing import Any, Dict, List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import Item, SavedItem
from ..exceptions import NotFoundError
from ..utils.logging import get_logger
from ..utils.metrics import record_saved_item
from .collections import CollectionService, require_user

logger = get_logger(__name__)

LIKES_COLLECTION_NAME = "My Likes"
LIKES_COLLECTION_TYPE = "mixed"


def _dialect_insert(dialect_name: str):
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
        return insert
    if dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
        return insert
    return None


class SavedItemService:
    """Route swipe-right saves into My Likes and the saved-items table"""

    def __init__(self, db: Session):
        self.db = db
        self.collections = CollectionService(db)

    def save_item(self, user_id: Optional[int], item_data: Dict[str, Any]) -> Item:
        """
        Save an item for a user

        Args:
            user_id: Current user
            item_data: external_id, type, title, image and optional
                year, rating, metadata

        Returns:
            The Item in My Likes (the pre-existing one if already liked)

        Raises:
            CapacityError: My Likes does not exist and all grid slots are taken
        """
        user_id = require_user(user_id)
        item_type = getattr(item_data["type"], "value", item_data["type"])
        external_id = item_data["external_id"]

        likes = self.collections.find_by_name(user_id, LIKES_COLLECTION_NAME)
        if likes is None:
            likes = self.collections.create_collection(
                user_id,
                LIKES_COLLECTION_NAME,
                LIKES_COLLECTION_TYPE,
                origin="likes",
                commit=False,
            )

        item = (
            self.db.query(Item)
            .filter(
                Item.collection_id == likes.id,
                Item.external_id == external_id,
                Item.type == item_type,
            )
            .first()
        )
        if item is None:
            item = self.collections.append_item(likes, item_data)
            outcome = "created"
        else:
            outcome = "existing"

        self._upsert_saved_item(user_id, item_data, item_type)

        self.db.commit()
        self.db.refresh(item)

        record_saved_item(outcome)
        logger.info(
            "Item saved",
            user_id=user_id,
            collection_id=likes.id,
            item_id=item.id,
            external_id=external_id,
            type=item_type,
            outcome=outcome,
        )
        return item

    def _upsert_saved_item(self, user_id: int, item_data: Dict[str, Any], item_type: str) -> None:
        values = {
            "user_id": user_id,
            "external_id": item_data["external_id"],
            "type": item_type,
            "title": item_data["title"],
            "image": item_data.get("image"),
            "metadata": item_data.get("metadata"),
        }
        table = SavedItem.__table__

        insert = _dialect_insert(self.db.get_bind().dialect.name)
        if insert is not None:
            stmt = insert(table).values(values)
            stmt = stmt.on_conflict_do_update(
                index_elements=["user_id", "external_id", "type"],
                set_={
                    "title": stmt.excluded["title"],
                    "image": stmt.excluded["image"],
                    "metadata": stmt.excluded["metadata"],
                },
            )
            self.db.execute(stmt)
            return

        # Dialects without ON CONFLICT: read then write
        saved = self.db.execute(
            select(SavedItem).where(
                SavedItem.user_id == user_id,
                SavedItem.external_id == values["external_id"],
                SavedItem.type == item_type,
            )
        ).scalar_one_or_none()
        if saved is None:
            self.db.add(SavedItem(
                user_id=user_id,
                external_id=values["external_id"],
                type=item_type,
                title=values["title"],
                image=values["image"],
                item_metadata=values["metadata"],
            ))
        else:
            saved.title = values["title"]
            saved.image = values["image"]
            saved.item_metadata = values["metadata"]
        self.db.flush()

    def list_saved_items(self, user_id: Optional[int]) -> List[SavedItem]:
        """A user's saved items, newest first"""
        user_id = require_user(user_id)
        return (
            self.db.query(SavedItem)
            .filter(SavedItem.user_id == user_id)
            .order_by(SavedItem.saved_at.desc(), SavedItem.id.desc())
            .all()
        )

    def delete_saved_item(self, user_id: Optional[int], saved_item_id: int) -> None:
        """Remove a saved item; My Likes is left untouched"""
        user_id = require_user(user_id)
        saved = (
            self.db.query(SavedItem)
            .filter(SavedItem.id == saved_item_id, SavedItem.user_id == user_id)
            .first()
        )
        if saved is None:
            raise NotFoundError("Saved item not found")

        self.db.delete(saved)
        self.db.commit()

        logger.info("Saved item deleted", user_id=user_id, saved_item_id=saved_item_id)
