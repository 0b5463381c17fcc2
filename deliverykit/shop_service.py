"""Business rules for registering and looking up shops."""

from __future__ import annotations

from dataclasses import asdict

from .models import (
    CreateShop,
    Shop,
    ShopAddress,
    ShopContact,
    ShopImage,
    ShopInfo,
    ShopTiming,
    generate_id,
)
from .queries import ListShopFilters
from .shop_repository import ShopRepository

__all__ = ["ShopService"]


class ShopService:
    """Creates shops with fresh identifiers and assembles them from their stored parts."""

    def __init__(self, repository: ShopRepository) -> None:
        self._repository = repository

    def insert_shop(self, request: CreateShop) -> Shop:
        """Register a shop with its address, contact, timings and images."""
        shop_id = generate_id()
        shop = Shop(
            id=shop_id,
            name=request.name,
            shop_type=request.shop_type,
            shop_status=request.shop_status,
            owner_auth_id=request.owner_auth_id,
            address=ShopAddress(id=generate_id(), shop_id=shop_id, **asdict(request.address)),
            contact=ShopContact(id=generate_id(), shop_id=shop_id, **asdict(request.contact)),
            timing=[
                ShopTiming(
                    id=generate_id(),
                    day=timing.day,
                    opens_at=timing.opens_at,
                    closes_at=timing.closes_at,
                    shop_id=shop_id,
                )
                for timing in request.timing
            ],
            image=[
                ShopImage(
                    id=generate_id(),
                    image_url=image.image_url,
                    description=image.description,
                    shop_id=shop_id,
                )
                for image in request.image
            ],
        )
        self._repository.insert_shop(shop)
        return shop

    def get_shop_info(self, shop_id: str) -> ShopInfo:
        return self._repository.get_shop_info(shop_id)

    def get_shop_info_by_owner_auth_id(self, owner_auth_id: str) -> ShopInfo:
        return self._repository.get_shop_info_by_owner_auth_id(owner_auth_id)

    def _assemble(self, info: ShopInfo) -> Shop:
        return Shop(
            **asdict(info),
            address=self._repository.get_shop_address_by_shop_id(info.id),
            contact=self._repository.get_shop_contact_by_shop_id(info.id),
            timing=self._repository.get_shop_timings(info.id),
            image=self._repository.get_shop_images(info.id),
        )

    def get_shop(self, shop_id: str) -> Shop:
        """Return a shop with all its parts."""
        return self._assemble(self._repository.get_shop_info(shop_id))

    def get_shop_by_owner_auth_id(self, owner_auth_id: str) -> Shop:
        """Return the shop owned by an account, with all its parts."""
        return self._assemble(self._repository.get_shop_info_by_owner_auth_id(owner_auth_id))

    def get_all_shops(self, filters: ListShopFilters | None = None) -> list[Shop]:
        return self._repository.get_all_shops(filters)