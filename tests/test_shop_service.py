import dataclasses
import sqlite3

import pytest

from deliverykit.database import Database, NotFoundError
from deliverykit.models import (
    CreateShop,
    CreateShopAddress,
    CreateShopContact,
    CreateShopImage,
    CreateShopTiming,
)
from deliverykit.queries import ListShopFilters
from deliverykit.shop_repository import ShopRepository
from deliverykit.shop_service import ShopService

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
def service():
    conn = sqlite3.connect(":memory:")
    conn.executescript(SCHEMA)
    yield ShopService(ShopRepository(Database(conn, "qmark")))
    conn.close()


def make_request(owner="owner-1", shop_type="restaurant"):
    return CreateShop(
        name="Corner Cafe",
        shop_type=shop_type,
        shop_status="open",
        owner_auth_id=owner,
        address=CreateShopAddress(
            address1="Main road",
            address2="Block B",
            longitude=77.5,
            latitude=12.25,
            nearby_landmark="Park",
            city="Town",
            state="State",
            pincode="PIN-1",
            country="Country",
        ),
        contact=CreateShopContact(
            name="Manager", phone_number="contact-phone", email="manager@example.com"
        ),
        timing=[
            CreateShopTiming(day="monday", opens_at="09:00", closes_at="18:00"),
            CreateShopTiming(day="tuesday", opens_at="10:00", closes_at="17:00"),
        ],
        image=[CreateShopImage(image_url="https://example.com/a.png", description="front")],
    )


def test_insert_shop_assigns_ids_and_links_parts(service):
    request = make_request()
    shop = service.insert_shop(request)
    children = [shop.address, shop.contact, *shop.timing, *shop.image]
    assert all(child.shop_id == shop.id for child in children)
    ids = [shop.id] + [child.id for child in children]
    assert len(set(ids)) == len(ids)
    assert [t.day for t in shop.timing] == [t.day for t in request.timing]
    assert shop.contact.email == request.contact.email
    assert shop.address.city == request.address.city


def test_get_shop_round_trip(service):
    created = service.insert_shop(make_request())
    fetched = service.get_shop(created.id)
    assert fetched.name == created.name
    assert fetched.owner_auth_id == created.owner_auth_id
    assert fetched.contact == created.contact
    assert fetched.image == created.image
    assert sorted(fetched.timing, key=lambda t: t.id) == sorted(created.timing, key=lambda t: t.id)
    assert fetched.address == dataclasses.replace(created.address, created_at=fetched.address.created_at)


def test_get_shop_by_owner(service):
    created = service.insert_shop(make_request(owner="owner-7"))
    fetched = service.get_shop_by_owner_auth_id("owner-7")
    assert fetched.id == created.id
    assert fetched.contact == created.contact


def test_get_shop_info_pass_through(service):
    created = service.insert_shop(make_request(owner="owner-3"))
    assert service.get_shop_info(created.id).name == created.name
    assert service.get_shop_info_by_owner_auth_id("owner-3").id == created.id


def test_missing_shop_raises(service):
    with pytest.raises(NotFoundError):
        service.get_shop("missing")
    with pytest.raises(NotFoundError):
        service.get_shop_by_owner_auth_id("nobody")


def test_get_all_shops(service):
    first = service.insert_shop(make_request(shop_type="restaurant"))
    second = service.insert_shop(make_request(owner="owner-2", shop_type="grocery"))
    assert {s.id for s in service.get_all_shops()} == {first.id, second.id}
    assert [s.id for s in service.get_all_shops(ListShopFilters(shop_type="grocery"))] == [second.id]