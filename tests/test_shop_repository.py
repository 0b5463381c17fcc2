import sqlite3

import pytest

from deliverykit.database import Database, DatabaseError, NotFoundError
from deliverykit.models import Shop, ShopAddress, ShopContact, ShopImage, ShopTiming
from deliverykit.queries import ListShopFilters
from deliverykit.shop_repository import ShopRepository

SCHEMA = """
CREATE TABLE shop (
    id TEXT PRIMARY KEY, name TEXT NOT NULL, shop_type TEXT NOT NULL,
    shop_status TEXT NOT NULL, owner_auth_id TEXT NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP, updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
    deleted_at TEXT
);
CREATE TABLE shop_address (
    id TEXT PRIMARY KEY, address1 TEXT, address2 TEXT, longitude REAL, latitude REAL,
    nearby_landmark TEXT, city TEXT, state TEXT, pincode TEXT, country TEXT,
    shop_id TEXT, created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE shop_contact (
    id TEXT PRIMARY KEY, name TEXT, phone_number TEXT, email TEXT, shop_id TEXT
);
CREATE TABLE shop_timing (
    id TEXT PRIMARY KEY, day TEXT, opens_at TEXT, closes_at TEXT, shop_id TEXT
);
CREATE TABLE shop_image (
    id TEXT PRIMARY KEY, image_url TEXT, description TEXT, shop_id TEXT
);
"""


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    conn.executescript(SCHEMA)
    yield conn
    conn.close()


@pytest.fixture
def repo(connection):
    return ShopRepository(Database(connection, "qmark"))


def make_shop(shop_id, shop_type="restaurant", owner="owner-1", timings=None):
    return Shop(
        id=shop_id,
        name=f"Shop {shop_id}",
        shop_type=shop_type,
        shop_status="open",
        owner_auth_id=owner,
        address=ShopAddress(
            id=f"{shop_id}-addr",
            address1="Main road",
            address2="Block B",
            longitude=77.5,
            latitude=12.25,
            nearby_landmark="Park",
            city="Town",
            state="State",
            pincode="PIN-1",
            country="Country",
            shop_id=shop_id,
        ),
        contact=ShopContact(
            id=f"{shop_id}-contact",
            name="Manager",
            phone_number="contact-phone",
            email="manager@example.com",
            shop_id=shop_id,
        ),
        timing=timings
        if timings is not None
        else [
            ShopTiming(id=f"{shop_id}-t1", day="monday", opens_at="09:00", closes_at="18:00", shop_id=shop_id),
            ShopTiming(id=f"{shop_id}-t2", day="tuesday", opens_at="10:00", closes_at="17:00", shop_id=shop_id),
        ],
        image=[
            ShopImage(id=f"{shop_id}-img", image_url="https://example.com/a.png", description="front", shop_id=shop_id)
        ],
    )


def test_insert_and_get_shop_info(repo):
    shop = make_shop("s1")
    repo.insert_shop(shop)
    info = repo.get_shop_info("s1")
    assert (info.id, info.name, info.shop_type, info.shop_status, info.owner_auth_id) == (
        shop.id,
        shop.name,
        shop.shop_type,
        shop.shop_status,
        shop.owner_auth_id,
    )
    assert info.created_at is not None and info.deleted_at is None


def test_get_shop_info_by_owner(repo):
    repo.insert_shop(make_shop("s1", owner="owner-9"))
    info = repo.get_shop_info_by_owner_auth_id("owner-9")
    assert info.id == "s1"


def test_address_round_trip(repo):
    shop = make_shop("s1")
    repo.insert_shop(shop)
    by_shop = repo.get_shop_address_by_shop_id("s1")
    by_id = repo.get_shop_address("s1-addr")
    assert by_shop == by_id
    assert by_shop.address1 == shop.address.address1
    assert by_shop.longitude == shop.address.longitude
    assert by_shop.latitude == shop.address.latitude
    assert by_shop.shop_id == "s1"


def test_contact_round_trip(repo):
    shop = make_shop("s1")
    repo.insert_shop(shop)
    assert repo.get_shop_contact_by_shop_id("s1") == shop.contact
    assert repo.get_shop_contact("s1-contact") == shop.contact


def test_timings_and_images_round_trip(repo):
    shop = make_shop("s1")
    repo.insert_shop(shop)
    assert sorted(repo.get_shop_timings("s1"), key=lambda t: t.id) == shop.timing
    assert repo.get_shop_timing("s1-t2") == shop.timing[1]
    assert repo.get_shop_images("s1") == shop.image
    assert repo.get_shop_image("s1-img") == shop.image[0]


def test_empty_lists_for_unknown_shop(repo):
    assert repo.get_shop_timings("missing") == []
    assert repo.get_shop_images("missing") == []


def test_missing_shop_raises_not_found(repo):
    with pytest.raises(NotFoundError, match="^Failed to get shop info"):
        repo.get_shop_info("missing")


def test_missing_contact_raises_not_found(repo):
    with pytest.raises(NotFoundError, match="Failed to get shop contact by shop_id"):
        repo.get_shop_contact_by_shop_id("missing")


def test_failed_insert_rolls_back_everything(repo):
    timings = [
        ShopTiming(id="dup", day="monday", opens_at="09:00", closes_at="18:00", shop_id="s1"),
        ShopTiming(id="dup", day="tuesday", opens_at="09:00", closes_at="18:00", shop_id="s1"),
    ]
    with pytest.raises(DatabaseError, match="Failed to insert timing"):
        repo.insert_shop(make_shop("s1", timings=timings))
    with pytest.raises(NotFoundError):
        repo.get_shop_info("s1")
    with pytest.raises(NotFoundError):
        repo.get_shop_address_by_shop_id("s1")


def test_insert_requires_address(repo):
    shop = make_shop("s1")
    shop.address = None
    with pytest.raises(ValueError):
        repo.insert_shop(shop)


def test_get_all_shops_assembles_parts(repo):
    shop = make_shop("s1")
    repo.insert_shop(shop)
    [listed] = repo.get_all_shops(ListShopFilters())
    assert listed.id == "s1"
    assert listed.contact == shop.contact
    assert listed.image == shop.image
    assert sorted(listed.timing, key=lambda t: t.id) == shop.timing
    assert listed.address.id == shop.address.id


def test_get_all_shops_filters_by_type(repo):
    repo.insert_shop(make_shop("s1", shop_type="restaurant"))
    repo.insert_shop(make_shop("s2", shop_type="grocery"))
    shops = repo.get_all_shops(ListShopFilters(shop_type="grocery"))
    assert [s.id for s in shops] == ["s2"]


def _set_created(connection, shop_id, stamp):
    connection.execute("UPDATE shop SET created_at = ? WHERE id = ?", (stamp, shop_id))
    connection.commit()


def test_get_all_shops_ordering(repo, connection):
    repo.insert_shop(make_shop("old"))
    repo.insert_shop(make_shop("new"))
    _set_created(connection, "old", "2024-01-01 00:00:00")
    _set_created(connection, "new", "2024-06-01 00:00:00")
    assert [s.id for s in repo.get_all_shops(None)] == ["new", "old"]
    assert [s.id for s in repo.get_all_shops(ListShopFilters(order_by="ASC"))] == ["old", "new"]
    assert [s.id for s in repo.get_all_shops(ListShopFilters(order_by="sideways"))] == ["old", "new"]


def test_get_all_shops_limit_and_offset(repo, connection):
    for index, shop_id in enumerate(["a", "b", "c"]):
        repo.insert_shop(make_shop(shop_id))
        _set_created(connection, shop_id, f"2024-01-0{index + 1}00:00:00")
    shops = repo.get_all_shops(ListShopFilters(order_by="ASC", limit=1, offset=1))
    assert [s.id for s in shops] == ["b"]


def test_get_all_shops_without_contact_fails(repo, connection):
    repo.insert_shop(make_shop("s1"))
    connection.execute("DELETE FROM shop_contact")
    connection.commit()
    with pytest.raises(NotFoundError, match="^Failed to get shop contact"):
        repo.get_all_shops()


class _ZeroRowCursor:
    description = None
    rowcount = 0

    def execute(self, sql, args):
        self.sql = sql

    def fetchall(self):
        return []

    def close(self):
        pass


class _ZeroRowConnection:
    def __init__(self):
        self.rolled_back = False
        self.closed = False

    def cursor(self):
        return _ZeroRowCursor()

    def commit(self):
        pass

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


def test_zero_rows_affected_is_an_error():
    connection = _ZeroRowConnection()
    repo = ShopRepository(Database(connection, "qmark"))
    with pytest.raises(DatabaseError, match="Failed to insert shop, 0 rows affected"):
        repo.insert_shop(make_shop("s1"))
    assert connection.rolled_back is True


def test_close_closes_connection():
    connection = _ZeroRowConnection()
    with ShopRepository(Database(connection, "qmark")):
        pass
    assert connection.closed is True