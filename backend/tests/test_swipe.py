"""Tests for swipe sessions"""

import json
from datetime import datetime

import httpx
import pytest
from structlog.testing import capture_logs

from tasteid.schemas.collection import CollectionResponse
from tasteid.schemas.item import ItemResponse
from tasteid.swipe import (
    SavedItemsClient,
    SwipeDirection,
    SwipeSession,
    SwipeState,
    close,
    current_item,
    is_active,
    open_collection,
    progress,
    reset,
    save_on_like,
    swipe,
    undo,
)

NOW = datetime(2024, 1, 1, 12, 0, 0)


def make_item(n, position=None):
    return ItemResponse(
        id=n,
        external_id=f"ext-{n}",
        type="movie",
        title=f"Movie {n}",
        image=f"https://img.example.com/{n}.jpg",
        year="2001",
        rating=7.0,
        metadata={"n": n},
        position=n - 1 if position is None else position,
        created_at=NOW,
    )


def make_collection(count=3, collection_id=10):
    return CollectionResponse(
        id=collection_id,
        name="Movies",
        type="movie",
        position=0,
        cover_image="https://img.example.com/1.jpg" if count else None,
        items=[make_item(n) for n in range(1, count + 1)],
        created_at=NOW,
    )


@pytest.fixture
def collection():
    return make_collection()


def test_open_collection_starts_at_first_item(collection):
    """Test opening a collection activates the first item"""

    state = open_collection(SwipeState(), collection)

    assert is_active(state)
    assert current_item(state).id == 1
    assert progress(state) == (1, 3)
    assert state.history == ()


def test_open_collection_sorts_by_position():
    """Test items are presented in position order"""

    collection = make_collection()
    collection = collection.model_copy(update={"items": list(reversed(collection.items))})

    state = open_collection(SwipeState(), collection)

    assert [item.id for item in state.items] == [1, 2, 3]


def test_open_empty_collection_stays_idle():
    """Test an empty collection cannot be opened"""

    state = open_collection(SwipeState(), make_collection(count=0))

    assert not is_active(state)
    assert current_item(state) is None
    assert progress(state) == (0, 0)


def test_swipe_through_collection(collection):
    """Test three swipes record history and end Idle"""

    state = open_collection(SwipeState(), collection)

    state, action = swipe(state, SwipeDirection.LEFT, now=NOW)
    assert action.item.id == 1
    assert progress(state) == (2, 3)

    state, _ = swipe(state, "right", now=NOW)
    assert progress(state) == (3, 3)
    assert current_item(state).id == 3

    state, action = swipe(state, SwipeDirection.DOWN, now=NOW)
    assert action.item.id == 3

    assert not is_active(state)
    assert current_item(state) is None
    assert [a.direction for a in state.history] == [
        SwipeDirection.LEFT,
        SwipeDirection.RIGHT,
        SwipeDirection.DOWN,
    ]
    assert all(a.timestamp == NOW for a in state.history)


def test_swipe_when_idle_is_ignored():
    """Test swiping with nothing open changes nothing"""

    state = SwipeState()

    next_state, action = swipe(state, SwipeDirection.RIGHT)

    assert action is None
    assert next_state == state


def test_swipe_unknown_direction_is_ignored(collection):
    """Test unknown directions leave the cursor alone"""

    state = open_collection(SwipeState(), collection)

    next_state, action = swipe(state, "up")

    assert action is None
    assert next_state.index == 0
    assert next_state.history == ()


def test_undo(collection):
    """Test undo rewinds the cursor and drops the last action"""

    state = open_collection(SwipeState(), collection)
    state, _ = swipe(state, SwipeDirection.LEFT)
    state, _ = swipe(state, SwipeDirection.RIGHT)

    state = undo(state)

    assert current_item(state).id == 2
    assert [a.direction for a in state.history] == [SwipeDirection.LEFT]


def test_undo_on_fresh_state_is_noop(collection):
    """Test undo with no history changes nothing"""

    state = open_collection(SwipeState(), collection)

    assert undo(state) == state
    assert undo(SwipeState()) == SwipeState()


def test_close_keeps_history_and_reset_clears_it(collection):
    """Test close and reset both return to Idle"""

    state = open_collection(SwipeState(), collection)
    state, _ = swipe(state, SwipeDirection.LEFT)

    closed = close(state)
    assert not is_active(closed)
    assert len(closed.history) == 1

    cleared = reset(state)
    assert not is_active(cleared)
    assert cleared.history == ()


def test_reopen_clears_history(collection):
    """Test opening a collection starts a fresh history"""

    state = open_collection(SwipeState(), collection)
    state, _ = swipe(state, SwipeDirection.LEFT)

    state = open_collection(state, collection)

    assert state.history == ()
    assert state.index == 0


def test_session_saves_right_swipes_only(collection):
    """Test save_on_like only forwards liked items"""

    saved = []
    session = SwipeSession(on_swipe=save_on_like(saved.append))

    assert session.open(collection) is True
    session.swipe(SwipeDirection.LEFT)
    session.swipe(SwipeDirection.RIGHT)
    session.swipe(SwipeDirection.DOWN)

    assert [item.id for item in saved] == [2]
    assert not session.is_active
    assert len(session.history) == 3


def test_session_accepts_string_directions(collection):
    """Test string directions are coerced and unknown ones are ignored"""

    saved = []
    session = SwipeSession(on_swipe=save_on_like(saved.append))
    session.open(collection)

    action = session.swipe("right")
    assert action.direction == SwipeDirection.RIGHT
    assert session.swipe("sideways") is None

    assert [item.id for item in saved] == [1]
    assert session.current_item.id == 2


def test_session_open_empty_collection():
    """Test the session reports an empty collection as not opened"""

    session = SwipeSession()

    assert session.open(make_collection(count=0)) is False
    assert not session.is_active


def test_session_reopen_same_collection_now_empty():
    """Test reopening an active collection that has since been emptied is not an open"""

    session = SwipeSession()
    assert session.open(make_collection(collection_id=5)) is True

    assert session.open(make_collection(count=0, collection_id=5)) is False
    assert session.current_item.id == 1
    assert session.state.collection.id == 5


def test_session_callback_failure_is_logged(collection):
    """Test a failing save is logged and the cursor still advances"""

    def failing_saver(item):
        raise RuntimeError("backend down")

    session = SwipeSession(on_swipe=save_on_like(failing_saver))
    session.open(collection)

    with capture_logs() as logs:
        action = session.swipe(SwipeDirection.RIGHT)

    assert action is not None
    assert session.current_item.id == 2
    assert session.progress == (2, 3)
    assert any(
        log["event"] == "Swipe callback failed" and log["log_level"] == "warning"
        for log in logs
    )


def test_session_undo_does_not_unsave(collection):
    """Test undo only rewinds the cursor"""

    saved = []
    session = SwipeSession(on_swipe=save_on_like(saved.append))
    session.open(collection)

    session.swipe(SwipeDirection.RIGHT)
    session.undo()

    assert session.current_item.id == 1
    assert len(saved) == 1


def test_saved_items_client_posts_item():
    """Test the client posts the item as the signed-in user"""

    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"id": 99, "position": 0})

    client = SavedItemsClient(
        "http://api.example.com/",
        "token-123",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )

    result = client.save(make_item(1))

    assert result == {"id": 99, "position": 0}
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://api.example.com/api/v1/saved-items/"
    assert request.headers["Authorization"] == "Bearer token-123"
    body = json.loads(request.content)
    assert body["external_id"] == "ext-1"
    assert body["type"] == "movie"
    assert body["metadata"] == {"n": 1}


def test_saved_items_client_raises_on_error():
    """Test non-2xx responses propagate"""

    client = SavedItemsClient(
        "http://api.example.com",
        "token-123",
        client=httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(409))),
    )

    with pytest.raises(httpx.HTTPStatusError):
        client.save(make_item(1))
