"""Business rules for menus, catalogues and the options attached to items."""

from __future__ import annotations

from datetime import datetime, timezone

from bson import ObjectId

from .models import (
    CreateItemAddon,
    CreateItemVariant,
    CreateMenuItem,
    CreateRestaurantMenu,
    ItemAddon,
    ItemVariant,
    MedicineCategory,
    MenuItem,
    RestaurantMenu,
    RetailCategory,
)
from .product_repository import ProductRepository

__all__ = ["ProductService"]


class ProductService:
    """Creates product records with fresh object ids and looks them up."""

    def __init__(self, repository: ProductRepository) -> None:
        self._repository = repository

    def insert_item_variant(self, request: CreateItemVariant) -> ItemVariant:
        """Store a new variant of an item and return it."""
        variant = ItemVariant(
            id=ObjectId(),
            variant_name=request.variant_name,
            relative_price=request.relative_price,
            relative_pricing=request.relative_pricing,
            price=request.price,
            description=request.description,
            item_id=request.item_id,
        )
        self._repository.insert_item_variant(variant)
        return variant

    def insert_item_addon(self, request: CreateItemAddon) -> ItemAddon:
        """Store a new add-on of an item and return it."""
        addon = ItemAddon(
            id=ObjectId(),
            addon_name=request.addon_name,
            addon_price=request.addon_price,
            description=request.description,
            item_id=request.item_id,
        )
        self._repository.insert_item_addon(addon)
        return addon

    def insert_restaurant_menu(self, request: CreateRestaurantMenu) -> RestaurantMenu:
        """Store a new, empty restaurant menu and return it."""
        now = datetime.now(timezone.utc)
        menu = RestaurantMenu(
            id=ObjectId(),
            menu_name=request.menu_name,
            shop_id=request.shop_id,
            created_at=now,
            updated_at=now,
            deleted_at=None,
        )
        self._repository.insert_restaurant_menu(menu)
        return menu

    def insert_menu_item(self, request: CreateMenuItem) -> MenuItem:
        """Store a new item on a restaurant menu and return it."""
        now = datetime.now(timezone.utc)
        item = MenuItem(
            id=ObjectId(),
            name=request.name,
            description=request.description,
            price=request.price,
            created_at=now,
            updated_at=now,
            deleted_at=None,
            menu_id=request.menu_id,
        )
        self._repository.insert_menu_item(item)
        return item

    def get_item_variant(self, variant_id: str) -> ItemVariant:
        return self._repository.get_item_variant(variant_id)

    def get_item_addon(self, addon_id: str) -> ItemAddon:
        return self._repository.get_item_addon(addon_id)

    def get_item_variants(self, item_id: str) -> list[ItemVariant]:
        return self._repository.get_item_variants(item_id)

    def get_item_addons(self, item_id: str) -> list[ItemAddon]:
        return self._repository.get_item_addons(item_id)

    def get_restaurant_menu(self, menu_id: str) -> RestaurantMenu:
        return self._repository.get_restaurant_menu(menu_id)

    def list_restaurant_menu(self, shop_id: str) -> list[RestaurantMenu]:
        return self._repository.list_restaurant_menu(shop_id)

    def get_retail_category(self, category_id: str) -> RetailCategory:
        return self._repository.get_retail_category(category_id)

    def list_retail_category(self, shop_id: str) -> list[RetailCategory]:
        return self._repository.list_retail_category(shop_id)

    def get_medicine_category(self, category_id: str) -> MedicineCategory:
        return self._repository.get_medicine_category(category_id)

    def list_medicine_category(self, shop_id: str) -> list[MedicineCategory]:
        return self._repository.list_medicine_category(shop_id)