"""Collection ordering engine

Keeps three things consistent for every write to collections and items:

- each user owns at most ``GRID_SIZE`` collections, each on a distinct grid
  slot in ``[0, GRID_SIZE)``; a new collection takes the lowest free slot,
  and deleting one leaves its slot empty until a later create refills it
- item positions inside a collection are always exactly ``0..N-1``
- ``Collection.cover_image`` is the image of the item at position 0

All collection and item writes go through this service.
"""

from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy import update
from sqlalchemy.orm import Session, selectinload

from ..models import Collection, Item
from ..exceptions import CapacityError, NotFoundError, UnauthorizedError, ValidationError
from ..utils.logging import get_logger
from ..utils.metrics import (
    collection_capacity_rejections_total,
    collections_deleted_total,
    item_positions_rewritten_total,
    record_collection_created,
    record_item_write,
)

logger = get_logger(__name__)

GRID_SIZE = 9


def next_free_position(used: Iterable[int], size: int = GRID_SIZE) -> Optional[int]:
    """
    Lowest grid slot not present in ``used``

    Args:
        used: Positions already taken
        size: Number of slots in the grid

    Returns:
        The free slot, or None when every slot is taken
    """
    taken = set(used)
    for position in range(size):
        if position not in taken:
            return position
    return None


def require_user(user_id: Optional[int]) -> int:
    if user_id is None:
        raise UnauthorizedError("Authentication required")
    return user_id


class CollectionService:
    """Create, delete and fill a user's grid of collections"""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_collection(self, collection_id: int) -> Collection:
        """Public read of a collection with its items"""
        collection = (
            self.db.query(Collection)
            .options(selectinload(Collection.items))
            .filter(Collection.id == collection_id)
            .first()
        )
        if collection is None:
            raise NotFoundError("Collection not found")
        return collection

    def list_collections(self, user_id: Optional[int]) -> List[Collection]:
        """All of a user's collections in grid order"""
        user_id = require_user(user_id)
        return (
            self.db.query(Collection)
            .options(selectinload(Collection.items))
            .filter(Collection.user_id == user_id)
            .order_by(Collection.position.asc())
            .all()
        )

    def get_owned_collection(self, user_id: Optional[int], collection_id: int) -> Collection:
        """
        Fetch a collection the user owns

        A collection owned by someone else is reported as missing so the
        caller cannot discover other users' ids.
        """
        user_id = require_user(user_id)
        collection = (
            self.db.query(Collection)
            .filter(Collection.id == collection_id, Collection.user_id == user_id)
            .first()
        )
        if collection is None:
            raise NotFoundError("Collection not found")
        return collection

    def find_by_name(self, user_id: int, name: str) -> Optional[Collection]:
        return (
            self.db.query(Collection)
            .filter(Collection.user_id == user_id, Collection.name == name)
            .order_by(Collection.position.asc())
            .first()
        )

    def count_collections(self, user_id: int) -> int:
        return self.db.query(Collection).filter(Collection.user_id == user_id).count()

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def create_collection(
        self,
        user_id: Optional[int],
        name: str,
        collection_type: str = "mixed",
        origin: str = "user",
        commit: bool = True,
    ) -> Collection:
        """
        Create a collection on the lowest free grid slot

        Args:
            user_id: Owner
            name: Display name, must not be blank
            collection_type: Advisory media type
            origin: Metrics label (user, likes, onboarding)
            commit: Commit immediately; callers composing several writes pass False

        Returns:
            The new collection, empty and without a cover

        Raises:
            ValidationError: Blank name
            CapacityError: All grid slots are taken
        """
        user_id = require_user(user_id)

        name = (name or "").strip()
        if not name:
            raise ValidationError("Collection name is required")

        used = [
            position for (position,) in
            self.db.query(Collection.position).filter(Collection.user_id == user_id).all()
        ]
        position = next_free_position(used)
        if position is None:
            collection_capacity_rejections_total.inc()
            logger.info("Collection limit reached", user_id=user_id, collections=len(used))
            raise CapacityError(f"Collection limit reached ({GRID_SIZE} max)")

        collection = Collection(
            user_id=user_id,
            name=name,
            type=getattr(collection_type, "value", collection_type),
            position=position,
            cover_image=None,
        )
        self.db.add(collection)

        if commit:
            self.db.commit()
            self.db.refresh(collection)
        else:
            self.db.flush()

        record_collection_created(origin)
        logger.info(
            "Collection created",
            user_id=user_id,
            collection_id=collection.id,
            position=position,
            origin=origin,
        )
        return collection

    def delete_collection(self, user_id: Optional[int], collection_id: int) -> None:
        """
        Delete a collection and its items

        Other collections keep their slots; the freed slot is reused by the
        next create.
        """
        collection = self.get_owned_collection(user_id, collection_id)
        position = collection.position

        self.db.delete(collection)
        self.db.commit()

        collections_deleted_total.inc()
        logger.info("Collection deleted", user_id=user_id, collection_id=collection_id, position=position)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def add_item(
        self,
        user_id: Optional[int],
        collection_id: int,
        item_data: Dict[str, Any],
    ) -> Item:
        """Append an item to a collection the user owns"""
        collection = self.get_owned_collection(user_id, collection_id)
        item = self.append_item(collection, item_data)
        self.db.commit()
        self.db.refresh(item)
        return item

    def append_item(self, collection: Collection, item_data: Dict[str, Any]) -> Item:
        """
        Append an item at position N and set the cover for a first item

        Does not commit. Duplicate (external_id, type) pairs are allowed here;
        the swipe save path dedupes before calling in.

        Args:
            collection: Target collection
            item_data: external_id, type, title, image, year, rating,
                metadata and optionally review

        Returns:
            The flushed item
        """
        item_count = self.db.query(Item).filter(Item.collection_id == collection.id).count()

        image = item_data.get("image")
        item = Item(
            collection_id=collection.id,
            external_id=item_data["external_id"],
            type=getattr(item_data["type"], "value", item_data["type"]),
            title=item_data["title"],
            image=image,
            year=item_data.get("year"),
            rating=item_data.get("rating"),
            review=item_data.get("review"),
            item_metadata=item_data.get("metadata"),
            position=item_count,
        )
        self.db.add(item)

        # First item becomes the cover
        if item_count == 0 and image:
            collection.cover_image = image

        self.db.flush()

        record_item_write("add")
        logger.info(
            "Item added",
            collection_id=collection.id,
            item_id=item.id,
            position=item_count,
        )
        return item

    def remove_item(self, user_id: Optional[int], collection_id: int, item_id: int) -> Collection:
        """
        Remove an item, close the gap it leaves, then resync the cover

        The reindex is written before the new first item is read, so the cover
        always reflects the post-delete ordering.

        Returns:
            The refreshed collection

        Raises:
            NotFoundError: The collection is not the user's, or the item is
                not in it
        """
        collection = self.get_owned_collection(user_id, collection_id)

        item = (
            self.db.query(Item)
            .filter(Item.id == item_id, Item.collection_id == collection.id)
            .first()
        )
        if item is None:
            raise NotFoundError("Item not found in collection")

        self.db.delete(item)
        self.db.flush()

        rewritten = self._reindex(collection.id)
        self._sync_cover(collection)

        self.db.commit()
        self.db.refresh(collection)

        record_item_write("remove")
        logger.info(
            "Item removed",
            collection_id=collection.id,
            item_id=item_id,
            positions_rewritten=rewritten,
            cover_image=collection.cover_image,
        )
        return collection

    def _reindex(self, collection_id: int) -> int:
        """
        Rewrite positions to 0..N-1, touching only rows that moved

        Each rewrite is a plain UPDATE by id. A row deleted by a concurrent
        removal since the read simply matches nothing.
        """
        remaining = (
            self.db.query(Item.id, Item.position)
            .filter(Item.collection_id == collection_id)
            .order_by(Item.position.asc(), Item.id.asc())
            .all()
        )

        rewritten = 0
        for index, (item_id, position) in enumerate(remaining):
            if position != index:
                self.db.execute(
                    update(Item)
                    .where(Item.id == item_id)
                    .values(position=index)
                    .execution_options(synchronize_session=False)
                )
                rewritten += 1

        if rewritten:
            item_positions_rewritten_total.inc(rewritten)

        return rewritten

    def _sync_cover(self, collection: Collection) -> None:
        first = (
            self.db.query(Item.image)
            .filter(Item.collection_id == collection.id)
            .order_by(Item.position.asc(), Item.id.asc())
            .first()
        )
        cover = first.image if first is not None else None
        if collection.cover_image != cover:
            self.db.execute(
                update(Collection)
                .where(Collection.id == collection.id)
                .values(cover_image=cover)
                .execution_options(synchronize_session=False)
            )
