"""Tests for the collection ordering engine"""

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from tasteid.utils.database import build_engine, init_db
from tasteid.models import User, Collection, Item
from tasteid.exceptions import CapacityError, NotFoundError, UnauthorizedError, ValidationError
from tasteid.services.collections import CollectionService, next_free_position, GRID_SIZE


@pytest.fixture
def db_session():
    """Create a test database session"""

    engine = build_engine("sqlite:///:memory:")
    init_db(engine)

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False)
    session = TestingSessionLocal()

    yield session

    session.close()


@pytest.fixture
def users(db_session):
    """Two users"""

    alice = User(id=1, email="alice@example.com", username="alice")
    bob = User(id=2, email="bob@example.com", username="bob")
    db_session.add_all([alice, bob])
    db_session.commit()

    return alice, bob


@pytest.fixture
def service(db_session):
    return CollectionService(db_session)


def make_item(n, image=True):
    return {
        "external_id": f"ext-{n}",
        "type": "movie",
        "title": f"Movie {n}",
        "image": f"https://img.example.com/{n}.jpg" if image else None,
        "year": "2001",
        "rating": 7.5,
        "metadata": {"n": n},
    }


def positions(db_session, collection_id):
    return [
        position for (position,) in
        db_session.query(Item.position)
        .filter(Item.collection_id == collection_id)
        .order_by(Item.position)
        .all()
    ]


def test_next_free_position():
    """Test lowest free slot selection"""

    assert next_free_position([]) == 0
    assert next_free_position([0, 1, 3]) == 2
    assert next_free_position([1, 2]) == 0
    assert next_free_position(range(GRID_SIZE)) is None


def test_create_collection_takes_sequential_slots(service, users):
    """Test new collections fill slots 0, 1, 2 in order"""

    alice, _ = users

    created = [service.create_collection(alice.id, f"C{i}") for i in range(3)]

    assert [c.position for c in created] == [0, 1, 2]
    assert all(c.cover_image is None for c in created)
    assert created[0].type == "mixed"


def test_create_collection_rejects_blank_name(service, users, db_session):
    """Test blank names are rejected before any row is written"""

    alice, _ = users

    with pytest.raises(ValidationError):
        service.create_collection(alice.id, "   ")

    assert db_session.query(Collection).count() == 0


def test_create_collection_requires_user(service):
    """Test anonymous callers are rejected"""

    with pytest.raises(UnauthorizedError):
        service.create_collection(None, "Favorites")


def test_tenth_collection_is_rejected(service, users, db_session):
    """Test the grid holds at most nine collections"""

    alice, _ = users

    for i in range(GRID_SIZE):
        service.create_collection(alice.id, f"C{i}")

    with pytest.raises(CapacityError):
        service.create_collection(alice.id, "One too many")

    assert service.count_collections(alice.id) == GRID_SIZE
    assert db_session.query(Collection).filter(Collection.name == "One too many").count() == 0


def test_deleted_slot_is_refilled(service, users):
    """Test a freed slot is reused by the next create while others keep theirs"""

    alice, _ = users

    created = [service.create_collection(alice.id, f"C{i}") for i in range(4)]
    service.delete_collection(alice.id, created[1].id)

    remaining = service.list_collections(alice.id)
    assert [c.position for c in remaining] == [0, 2, 3]

    refill = service.create_collection(alice.id, "Refill")
    assert refill.position == 1

    nxt = service.create_collection(alice.id, "Next")
    assert nxt.position == 4


def test_capacity_is_per_user(service, users):
    """Test one user's full grid does not affect another"""

    alice, bob = users

    for i in range(GRID_SIZE):
        service.create_collection(alice.id, f"C{i}")

    collection = service.create_collection(bob.id, "Bob's first")
    assert collection.position == 0


def test_delete_collection_removes_items(service, users, db_session):
    """Test items go with their collection"""

    alice, _ = users

    collection = service.create_collection(alice.id, "Movies", "movie")
    service.add_item(alice.id, collection.id, make_item(1))
    service.add_item(alice.id, collection.id, make_item(2))

    service.delete_collection(alice.id, collection.id)

    assert db_session.query(Item).count() == 0


def test_other_users_collection_is_not_found(service, users):
    """Test ownership failures look like missing collections"""

    alice, bob = users
    collection = service.create_collection(alice.id, "Private")

    with pytest.raises(NotFoundError):
        service.delete_collection(bob.id, collection.id)

    with pytest.raises(NotFoundError):
        service.add_item(bob.id, collection.id, make_item(1))

    # Public read still works
    assert service.get_collection(collection.id).name == "Private"


def test_add_item_appends_and_sets_cover_once(service, users):
    """Test items append at N and only the first one sets the cover"""

    alice, _ = users
    collection = service.create_collection(alice.id, "Movies", "movie")

    first = service.add_item(alice.id, collection.id, make_item(1))
    second = service.add_item(alice.id, collection.id, make_item(2))

    assert first.position == 0
    assert second.position == 1
    assert first.item_metadata == {"n": 1}

    refreshed = service.get_collection(collection.id)
    assert refreshed.cover_image == "https://img.example.com/1.jpg"


def test_first_item_without_image_leaves_cover_empty(service, users):
    """Test a first item without an image does not set a cover"""

    alice, _ = users
    collection = service.create_collection(alice.id, "Art", "art")

    service.add_item(alice.id, collection.id, make_item(1, image=False))
    service.add_item(alice.id, collection.id, make_item(2))

    assert service.get_collection(collection.id).cover_image is None


def test_remove_item_closes_gap(service, users, db_session):
    """Test removing position 1 of [0,1,2,3] leaves [0,1,2] in the same order"""

    alice, _ = users
    collection = service.create_collection(alice.id, "Movies", "movie")
    items = [service.add_item(alice.id, collection.id, make_item(i)) for i in range(4)]

    service.remove_item(alice.id, collection.id, items[1].id)

    assert positions(db_session, collection.id) == [0, 1, 2]
    remaining = service.get_collection(collection.id).items
    assert [item.external_id for item in remaining] == ["ext-0", "ext-2", "ext-3"]


def test_remove_first_item_moves_cover(service, users):
    """Test the cover follows the new first item"""

    alice, _ = users
    collection = service.create_collection(alice.id, "Movies", "movie")
    first = service.add_item(alice.id, collection.id, make_item(1))
    service.add_item(alice.id, collection.id, make_item(2))

    updated = service.remove_item(alice.id, collection.id, first.id)

    assert updated.cover_image == "https://img.example.com/2.jpg"
    assert [item.position for item in updated.items] == [0]


def test_remove_sole_item_clears_cover(service, users):
    """Test an emptied collection has no cover"""

    alice, _ = users
    collection = service.create_collection(alice.id, "Movies", "movie")
    only = service.add_item(alice.id, collection.id, make_item(1))

    updated = service.remove_item(alice.id, collection.id, only.id)

    assert updated.cover_image is None
    assert updated.items == []


def test_remove_item_from_wrong_collection(service, users):
    """Test an item id from another collection is not found"""

    alice, _ = users
    movies = service.create_collection(alice.id, "Movies", "movie")
    books = service.create_collection(alice.id, "Books", "book")
    item = service.add_item(alice.id, movies.id, make_item(1))

    with pytest.raises(NotFoundError):
        service.remove_item(alice.id, books.id, item.id)


def test_add_after_remove_keeps_positions_dense(service, users, db_session):
    """Test appends after a removal continue from the compacted end"""

    alice, _ = users
    collection = service.create_collection(alice.id, "Movies", "movie")
    items = [service.add_item(alice.id, collection.id, make_item(i)) for i in range(3)]

    service.remove_item(alice.id, collection.id, items[0].id)
    added = service.add_item(alice.id, collection.id, make_item(9))

    assert added.position == 2
    assert positions(db_session, collection.id) == [0, 1, 2]


def test_interleaved_removals_do_not_crash(tmp_path):
    """Test a removal whose reindex races another removal still completes"""

    engine = create_engine(
        f"sqlite:///{tmp_path / 'grid.db'}",
        isolation_level="AUTOCOMMIT",
        connect_args={"check_same_thread": False},
    )
    init_db(engine)
    Sessions = sessionmaker(bind=engine, autoflush=False)

    setup = Sessions()
    setup.add(User(id=1, email="alice@example.com", username="alice"))
    setup.commit()
    collection = CollectionService(setup).create_collection(1, "Movies")
    ids = [CollectionService(setup).add_item(1, collection.id, make_item(i)).id for i in range(4)]
    setup.close()

    session_a = Sessions()
    session_b = Sessions()
    fired = []

    @event.listens_for(session_b, "do_orm_execute")
    def remove_concurrently(orm_execute_state):
        # B has read the remaining rows and is about to rewrite them
        if orm_execute_state.is_update and not fired:
            fired.append(True)
            CollectionService(session_a).remove_item(1, collection.id, ids[2])

    CollectionService(session_b).remove_item(1, collection.id, ids[1])

    assert fired

    check = Sessions()
    rows = check.query(Item).filter(Item.collection_id == collection.id).all()
    assert sorted(item.id for item in rows) == [ids[0], ids[3]]
    assert len({item.position for item in rows}) == 2
    assert all(0 <= item.position < 4 for item in rows)

    stored = check.query(Collection).filter(Collection.id == collection.id).one()
    assert stored.cover_image == "https://img.example.com/0.jpg"

    for session in (session_a, session_b, check):
        session.close()
    engine.dispose()
