"""Swipe session state machine

Pure transitions over an immutable ``SwipeState``. A state is either Idle
(no collection) or Active (a collection with a cursor strictly inside its
item list). The swipe that consumes the last item moves straight to Idle, so
an Active state never rests with ``index == len(items)``.

Nothing here raises on misuse: swiping while Idle, undoing with no history
or opening an empty collection leave the state unchanged.
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Optional, Tuple, Union

from pydantic import BaseModel, Field

from ..schemas.collection import CollectionResponse
from ..schemas.item import ItemResponse


class SwipeDirection(str, Enum):
    """Swipe gestures; their meaning belongs to the swipe callback"""

    LEFT = "left"    # Ignore
    RIGHT = "right"  # Like and save
    DOWN = "down"    # Skip


class SwipeAction(BaseModel):
    """One entry in the swipe history"""

    direction: SwipeDirection
    item: ItemResponse
    timestamp: datetime

    class Config:
        frozen = True


class SwipeState(BaseModel):
    """Cursor and history over one collection's items"""

    collection: Optional[CollectionResponse] = None
    items: Tuple[ItemResponse, ...] = ()
    index: int = 0
    history: Tuple[SwipeAction, ...] = Field(default_factory=tuple)

    class Config:
        frozen = True


def is_active(state: SwipeState) -> bool:
    return state.collection is not None


def open_collection(state: SwipeState, collection: CollectionResponse) -> SwipeState:
    """Start at the first item with a fresh history; empty collections are ignored"""
    if not collection.items:
        return state

    items = tuple(sorted(collection.items, key=lambda item: item.position))
    return SwipeState(collection=collection, items=items, index=0, history=())


def current_item(state: SwipeState) -> Optional[ItemResponse]:
    if not is_active(state) or state.index >= len(state.items):
        return None
    return state.items[state.index]


def progress(state: SwipeState) -> Tuple[int, int]:
    """(position, total), 1-based for display; (0, 0) while Idle"""
    if not is_active(state):
        return (0, 0)
    return (state.index + 1, len(state.items))


def swipe(
    state: SwipeState,
    direction: Union[SwipeDirection, str],
    now: Optional[datetime] = None,
) -> Tuple[SwipeState, Optional[SwipeAction]]:
    """
    Record a swipe on the current item and advance

    Args:
        state: Current state
        direction: A SwipeDirection or its string value
        now: Timestamp for the history entry (defaults to the current UTC time)

    Returns:
        The next state and the recorded action, or the unchanged state and
        None when there is nothing to swipe or the direction is unknown
    """
    item = current_item(state)
    if item is None:
        return state, None

    try:
        direction = SwipeDirection(direction)
    except ValueError:
        return state, None

    action = SwipeAction(
        direction=direction,
        item=item,
        timestamp=now or datetime.now(timezone.utc),
    )
    history = state.history + (action,)

    next_index = state.index + 1
    if next_index < len(state.items):
        return state.model_copy(update={"index": next_index, "history": history}), action

    # Last item consumed: close in the same step
    return SwipeState(history=history), action


def undo(state: SwipeState) -> SwipeState:
    """
    Drop the last swipe and step the cursor back

    Only the cursor and history rewind; whatever the swipe callback already
    did (such as saving the item) stays done.
    """
    if not state.history:
        return state

    return state.model_copy(update={
        "history": state.history[:-1],
        "index": max(0, state.index - 1),
    })


def close(state: SwipeState) -> SwipeState:
    """Back to Idle, keeping the history"""
    return SwipeState(history=state.history)


def reset(state: SwipeState) -> SwipeState:
    """Back to Idle with an empty history"""
    return SwipeState()
