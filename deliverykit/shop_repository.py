"""Storage of shops together with their address, contact, opening hours and images."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, fields
from typing import Any

from . import queries
from .database import Database, DatabaseError
from .models import (
    Shop,
    ShopAddress,
    ShopContact,
    ShopImage,
    ShopInfo,
    ShopTiming,
    from_document,
)
from .queries import ListShopFilters

__all__ = ["ShopRepository"]


@contextmanager
def _failure(message: str) -> Iterator[None]:
    """Prefix any database error raised in the block with ``message``."""
    try:
        yield
    except DatabaseError as exc:
        raise type(exc)(f"{message}: {exc}") from exc


def _columns(model: Any) -> dict[str, Any]:
    """The stored columns of a record, leaving out fields filled from related tables."""
    return {
        f.name: getattr(model, f.name)
        for f in fields(model)
        if "joined" not in f.metadata
    }


class ShopRepository:
    """Reads and writes shops through a relational database."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def __enter__(self) -> ShopRepository:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        self._db.close()

    def _insert(self, query: str, model: Any, what: str) -> None:
        with _failure(f"Failed to insert {what}"):
            count = self._db.execute(query, _columns(model))
        if count == 0:
            raise DatabaseError(f"Failed to insert {what}, 0 rows affected")

    def insert_shop(self, shop: Shop) -> None:
        """Store a shop and all its parts in one transaction."""
        if shop.address is None:
            raise ValueError("shop address is required")
        if shop.contact is None:
            raise ValueError("shop contact is required")

        with self._db.transaction():
            self._insert(queries.CREATE_SHOP, shop, "shop")
            self._insert(queries.CREATE_SHOP_ADDRESS, shop.address, "address")
            self._insert(queries.CREATE_SHOP_CONTACT, shop.contact, "contact")
            for timing in shop.timing:
                self._insert(queries.CREATE_SHOP_TIMING, timing, "timing")
            for image in shop.image:
                self._insert(queries.CREATE_SHOP_IMAGE, image, "image")

    def get_shop_info(self, shop_id: str) -> ShopInfo:
        with _failure("Failed to get shop info"):
            row = self._db.fetch_one(queries.GET_SHOP, (shop_id,))
        return from_document(ShopInfo, row)

    def get_shop_info_by_owner_auth_id(self, owner_auth_id: str) -> ShopInfo:
        with _failure("Failed to get shop info by owner_id"):
            row = self._db.fetch_one(queries.GET_SHOP_BY_OWNER_ID, (owner_auth_id,))
        return from_document(ShopInfo, row)

    def get_all_shops(self, filters: ListShopFilters | None = None) -> list[Shop]:
        """List shops matching ``filters``, each with its address, contact, timings and images."""
        query, args = queries.list_shop_query(filters or ListShopFilters())
        with _failure("Failed to get all shops"):
            rows = self._db.fetch_all(query, args)

        shops: list[Shop] = []
        for row in rows:
            info = from_document(ShopInfo, row)
            with _failure("Failed to get shop contact"):
                contact = self.get_shop_contact_by_shop_id(info.id)
            with _failure("Failed to get shop address"):
                address = self.get_shop_address_by_shop_id(info.id)
            with _failure("Failed to get shop timings"):
                timing = self.get_shop_timings(info.id)
            with _failure("Failed to get shop images"):
                image = self.get_shop_images(info.id)
            shops.append(
                Shop(
                    **asdict(info),
                    contact=contact,
                    address=address,
                    timing=timing,
                    image=image,
                )
            )
        return shops

    def get_shop_address(self, address_id: str) -> ShopAddress:
        with _failure("Failed to get shop address"):
            row = self._db.fetch_one(queries.GET_SHOP_ADDRESS, (address_id,))
        return from_document(ShopAddress, row)

    def get_shop_address_by_shop_id(self, shop_id: str) -> ShopAddress:
        with _failure("Failed to get shop address by shop_id"):
            row = self._db.fetch_one(queries.GET_SHOP_ADDRESS_BY_SHOP_ID, (shop_id,))
        return from_document(ShopAddress, row)

    def get_shop_contact(self, contact_id: str) -> ShopContact:
        with _failure("Failed to get shop contact"):
            row = self._db.fetch_one(queries.GET_SHOP_CONTACT, (contact_id,))
        return from_document(ShopContact, row)

    def get_shop_contact_by_shop_id(self, shop_id: str) -> ShopContact:
        with _failure("Failed to get shop contact by shop_id"):
            row = self._db.fetch_one(queries.GET_SHOP_CONTACT_BY_SHOP_ID, (shop_id,))
        return from_document(ShopContact, row)

    def get_shop_timing(self, timing_id: str) -> ShopTiming:
        with _failure("Failed to get shop timing"):
            row = self._db.fetch_one(queries.GET_SHOP_TIMING, (timing_id,))
        return from_document(ShopTiming, row)

    def get_shop_timings(self, shop_id: str) -> list[ShopTiming]:
        with _failure("Failed to get shop timings"):
            rows = self._db.fetch_all(queries.GET_SHOP_TIMINGS, (shop_id,))
        return [from_document(ShopTiming, row) for row in rows]

    def get_shop_image(self, image_id: str) -> ShopImage:
        with _failure("Failed to get shop image"):
            row = self._db.fetch_one(queries.GET_SHOP_IMAGE, (image_id,))
        return from_document(ShopImage, row)

    def get_shop_images(self, shop_id: str) -> list[ShopImage]:
        with _failure("Failed to get shop images"):
            rows = self._db.fetch_all(queries.GET_SHOP_IMAGES, (shop_id,))
        return [from_document(ShopImage, row) for row in rows]