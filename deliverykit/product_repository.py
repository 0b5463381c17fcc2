"""Document storage for menus, retail and medicine catalogues, and item options."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from .database import DatabaseError, NotFoundError
from .models import (
    ItemAddon,
    ItemVariant,
    MedicineCategory,
    MedicineItem,
    MenuItem,
    RestaurantMenu,
    RetailCategory,
    RetailItem,
    from_document,
    hex_to_object_id,
    to_document,
)

__all__ = ["ProductRepository"]

M = TypeVar("M")


def _lookup_pipeline(
    match: Mapping[str, Any],
    source: str,
    foreign_field: str,
    target: str,
    name_field: str,
) -> list[dict[str, Any]]:
    """Match owners, join their children from ``source`` and keep the model's fields."""
    return [
        {"$match": dict(match)},
        {
            "$lookup": {
                "from": source,
                "localField": "_id",
                "foreignField": foreign_field,
                "as": target,
            }
        },
        {
            "$project": {
                "_id": 1,
                name_field: 1,
                "shop_id": 1,
                "created_at": 1,
                "updated_at": 1,
                "deleted_at": 1,
                target: 1,
            }
        },
    ]


def _decode(model_type: type[M], documents: Iterable[Mapping[str, Any]], what: str) -> list[M]:
    try:
        return [from_document(model_type, document) for document in documents]
    except ValueError as exc:
        raise DatabaseError(f"failed to decode {what}: {exc}") from exc


class ProductRepository:
    """Reads and writes product records in a document database.

    Identifiers passed as strings must be 24-character hex object ids; anything
    else raises ValueError.
    """

    def __init__(self, database: Any, client: Any = None) -> None:
        self._db = database
        self._client = client
        self._item_variant = database["item_variant"]
        self._item_addon = database["item_addon"]
        self._restaurant_menu = database["restaurant_menu"]
        self._menu_item = database["menu_item"]
        self._retail_category = database["retail_category"]
        self._retail_item = database["retail_item"]
        self._medicine_category = database["medicine_category"]
        self._medicine_item = database["medicine_item"]

    @classmethod
    def connect(cls, url: str, name: str) -> ProductRepository:
        """Open a client for ``url`` and use the database called ``name``."""
        try:
            client: MongoClient[Any] = MongoClient(url)
        except PyMongoError as exc:
            raise DatabaseError(f"failed to connect: {exc}") from exc
        return cls(client[name], client)

    @property
    def database(self) -> Any:
        return self._db

    def __enter__(self) -> ProductRepository:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Disconnect the client, if this repository owns one."""
        if self._client is not None:
            self._client.close()

    def ping(self) -> None:
        """Check that the server answers; raise DatabaseError if it does not."""
        try:
            self._db.command("ping")
        except PyMongoError as exc:
            raise DatabaseError(f"ping failed: {exc}") from exc

    # Inserts

    def _insert(self, collection: Any, model: Any, what: str) -> None:
        try:
            collection.insert_one(to_document(model))
        except PyMongoError as exc:
            raise DatabaseError(f"failed to insert {what}: {exc}") from exc

    def insert_item_variant(self, variant: ItemVariant) -> None:
        self._insert(self._item_variant, variant, "item variant")

    def insert_item_addon(self, addon: ItemAddon) -> None:
        self._insert(self._item_addon, addon, "item addon")

    def insert_restaurant_menu(self, menu: RestaurantMenu) -> None:
        self._insert(self._restaurant_menu, menu, "restaurant menu")

    def insert_menu_item(self, item: MenuItem) -> None:
        self._insert(self._menu_item, item, "menu item")

    def insert_retail_category(self, category: RetailCategory) -> None:
        self._insert(self._retail_category, category, "retail category")

    def insert_retail_item(self, item: RetailItem) -> None:
        self._insert(self._retail_item, item, "retail item")

    def insert_medicine_category(self, category: MedicineCategory) -> None:
        self._insert(self._medicine_category, category, "medicine category")

    def insert_medicine_item(self, item: MedicineItem) -> None:
        self._insert(self._medicine_item, item, "medicine item")

    # Item options

    def _find_one(self, collection: Any, model_type: type[M], record_id: str, what: str) -> M:
        query = {"_id": hex_to_object_id(record_id)}
        try:
            document = collection.find_one(query)
        except PyMongoError as exc:
            raise DatabaseError(f"failed to fetch {what}: {exc}") from exc
        if document is None:
            raise NotFoundError(f"{what} not found")
        return _decode(model_type, [document], what)[0]

    def _find_by_item(self, collection: Any, model_type: type[M], item_id: str, what: str) -> list[M]:
        query = {"item_id": hex_to_object_id(item_id)}
        try:
            documents = list(collection.find(query))
        except PyMongoError as exc:
            raise DatabaseError(f"failed to fetch {what}: {exc}") from exc
        return _decode(model_type, documents, what)

    def get_item_variant(self, variant_id: str) -> ItemVariant:
        return self._find_one(self._item_variant, ItemVariant, variant_id, "item variant")

    def get_item_addon(self, addon_id: str) -> ItemAddon:
        return self._find_one(self._item_addon, ItemAddon, addon_id, "item addon")

    def get_item_variants(self, item_id: str) -> list[ItemVariant]:
        return self._find_by_item(self._item_variant, ItemVariant, item_id, "item variants")

    def get_item_addons(self, item_id: str) -> list[ItemAddon]:
        return self._find_by_item(self._item_addon, ItemAddon, item_id, "item addons")

    # Catalogues with their joined items

    def _aggregate(
        self, collection: Any, pipeline: list[dict[str, Any]], model_type: type[M]
    ) -> list[M]:
        try:
            documents = list(collection.aggregate(pipeline))
        except PyMongoError as exc:
            raise DatabaseError(f"failed to execute aggregation: {exc}") from exc
        return _decode(model_type, documents, "result")

    def _get_joined(
        self,
        collection: Any,
        model_type: type[M],
        record_id: str,
        join: tuple[str, str, str, str],
        what: str,
    ) -> M:
        pipeline = _lookup_pipeline({"_id": hex_to_object_id(record_id)}, *join)
        found = self._aggregate(collection, pipeline, model_type)
        if not found:
            raise NotFoundError(f"{what} not found")
        return found[0]

    def _list_joined(
        self,
        collection: Any,
        model_type: type[M],
        shop_id: str,
        join: tuple[str, str, str, str],
        what: str,
    ) -> list[M]:
        pipeline = _lookup_pipeline({"shop_id": shop_id}, *join)
        found = self._aggregate(collection, pipeline, model_type)
        if not found:
            raise NotFoundError(f"{what} not found")
        return found

    _MENU_JOIN = ("menu_item", "menu_id", "menu_items", "menu_name")
    _RETAIL_JOIN = ("retail_item", "category_id", "retail_items", "category_name")
    _MEDICINE_JOIN = ("medicine_item", "category_id", "medicine_items", "category_name")

    def get_restaurant_menu(self, menu_id: str) -> RestaurantMenu:
        return self._get_joined(
            self._restaurant_menu, RestaurantMenu, menu_id, self._MENU_JOIN, "restaurant menu"
        )

    def list_restaurant_menu(self, shop_id: str) -> list[RestaurantMenu]:
        return self._list_joined(
            self._restaurant_menu, RestaurantMenu, shop_id, self._MENU_JOIN, "restaurant menu"
        )

    def get_retail_category(self, category_id: str) -> RetailCategory:
        return self._get_joined(
            self._retail_category, RetailCategory, category_id, self._RETAIL_JOIN, "retail category"
        )

    def list_retail_category(self, shop_id: str) -> list[RetailCategory]:
        return self._list_joined(
            self._retail_category, RetailCategory, shop_id, self._RETAIL_JOIN, "retail category"
        )

    def get_medicine_category(self, category_id: str) -> MedicineCategory:
        return self._get_joined(
            self._medicine_category,
            MedicineCategory,
            category_id,
            self._MEDICINE_JOIN,
            "medicine category",
        )

    def list_medicine_category(self, shop_id: str) -> list[MedicineCategory]:
        return self._list_joined(
            self._medicine_category,
            MedicineCategory,
            shop_id,
            self._MEDICINE_JOIN,
            "medicine category",
        )