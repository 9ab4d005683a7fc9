"""Stateful holder around the swipe state machine"""

from typing import Any, Callable, Optional, Tuple, Union

from ..schemas.collection import CollectionResponse
from ..schemas.item import ItemResponse
from ..utils.logging import get_logger
from . import state as machine
from .state import SwipeAction, SwipeDirection, SwipeState

logger = get_logger(__name__)

SwipeCallback = Callable[[ItemResponse, SwipeDirection], Any]


def save_on_like(saver: Callable[[ItemResponse], Any]) -> SwipeCallback:
    """
    Build a swipe callback that saves items swiped right

    Args:
        saver: Called with the item, e.g. ``SavedItemsClient.save``
    """
    def callback(item: ItemResponse, direction: SwipeDirection) -> Any:
        if direction == SwipeDirection.RIGHT:
            return saver(item)
        return None

    return callback


class SwipeSession:
    """
    One viewer swiping through one collection

    Holds the current ``SwipeState`` and calls ``on_swipe(item, direction)``
    once per recorded swipe. The cursor advances before the callback runs and
    a failing callback is only logged; it never rewinds the session.
    """

    def __init__(self, on_swipe: Optional[SwipeCallback] = None):
        self.state = SwipeState()
        self.on_swipe = on_swipe

    @property
    def is_active(self) -> bool:
        return machine.is_active(self.state)

    @property
    def current_item(self) -> Optional[ItemResponse]:
        return machine.current_item(self.state)

    @property
    def progress(self) -> Tuple[int, int]:
        return machine.progress(self.state)

    @property
    def history(self) -> Tuple[SwipeAction, ...]:
        return self.state.history

    def open(self, collection: CollectionResponse) -> bool:
        """Open a collection; returns False when it has no items"""
        previous = self.state
        self.state = machine.open_collection(previous, collection)
        opened = self.state is not previous
        logger.debug("Swipe session opened", collection_id=collection.id, opened=opened)
        return opened

    def swipe(self, direction: Union[SwipeDirection, str]) -> Optional[SwipeAction]:
        self.state, action = machine.swipe(self.state, direction)
        if action is None:
            logger.debug("Swipe ignored", direction=str(direction), active=self.is_active)
            return None

        if self.on_swipe is not None:
            self._notify(action)

        if not self.is_active:
            logger.debug("Swipe session exhausted", swipes=len(self.state.history))
        return action

    def undo(self) -> None:
        self.state = machine.undo(self.state)

    def close(self) -> None:
        self.state = machine.close(self.state)

    def reset(self) -> None:
        self.state = machine.reset(self.state)

    def _notify(self, action: SwipeAction) -> None:
        try:
            self.on_swipe(action.item, action.direction)
        except Exception:
            # Fire-and-forget: the swipe already happened
            logger.warning(
                "Swipe callback failed",
                item_id=action.item.id,
                external_id=action.item.external_id,
                direction=action.direction.value,
                exc_info=True,
            )
