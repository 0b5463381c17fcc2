"""Domain records shared by the delivery services, plus id and document helpers."""

from __future__ import annotations

import hashlib
import itertools
import os
import secrets
import string
import time
from collections.abc import Mapping
from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from datetime import datetime
from typing import Any, TypeVar

from bson import ObjectId

__all__ = [
    "Auth",
    "CreateAuth",
    "EmailVerification",
    "PhoneVerification",
    "Session",
    "ItemStock",
    "VariantStock",
    "AddonStock",
    "CreateItemStock",
    "CreateVariantStock",
    "CreateAddonStock",
    "Profile",
    "CreateProfile",
    "ShopInfo",
    "ShopAddress",
    "ShopContact",
    "ShopTiming",
    "ShopImage",
    "Shop",
    "CreateShopAddress",
    "CreateShopContact",
    "CreateShopTiming",
    "CreateShopImage",
    "CreateShop",
    "ItemVariant",
    "ItemAddon",
    "MenuItem",
    "RestaurantMenu",
    "RetailItem",
    "RetailCategory",
    "MedicineItem",
    "MedicineCategory",
    "CreateItemVariant",
    "CreateItemAddon",
    "CreateRestaurantMenu",
    "CreateMenuItem",
    "generate_id",
    "hex_to_object_id",
    "to_document",
    "from_document",
]

ID_LENGTH = 24
_ALPHABET = string.digits + string.ascii_lowercase
_counter = itertools.count(secrets.randbelow(476_782_367))
_FINGERPRINT = f"{secrets.token_hex(16)}{os.getpid()}"

M = TypeVar("M")


def generate_id() -> str:
    """Return a collision-resistant, lower-case identifier that starts with a letter."""
    seed = f"{time.time_ns()}{secrets.token_hex(16)}{next(_counter)}{_FINGERPRINT}"
    digest = int.from_bytes(hashlib.sha3_512(seed.encode()).digest(), "big")
    chars = [secrets.choice(string.ascii_lowercase)]
    while len(chars) < ID_LENGTH:
        digest, remainder = divmod(digest, len(_ALPHABET))
        chars.append(_ALPHABET[remainder])
    return "".join(chars)


def hex_to_object_id(value: str | ObjectId) -> ObjectId:
    """Parse a 24-character hex string into an ObjectId."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise ValueError(f"invalid object id: {value!r}")
    return ObjectId(value)


def _joined(item_type: type, *, many: bool = True) -> Any:
    """A field filled from related records rather than stored with its owner."""
    if many:
        return field(default_factory=list, metadata={"joined": item_type})
    return field(default=None, metadata={"joined": item_type})


def to_document(model: Any) -> dict[str, Any]:
    """Turn a record into a stored document; ``id`` becomes ``_id``, joined fields are left out."""
    if not is_dataclass(model) or isinstance(model, type):
        raise TypeError(f"expected a model instance, got {type(model).__name__}")
    return {
        ("_id" if f.name == "id" else f.name): getattr(model, f.name)
        for f in fields(model)
        if "joined" not in f.metadata
    }


def _coerce(item_type: type, value: Any) -> Any:
    if isinstance(value, item_type):
        return value
    if isinstance(value, Mapping):
        return from_document(item_type, value)
    raise ValueError(f"cannot build {item_type.__name__} from {type(value).__name__}")


def from_document(model_type: type[M], document: Mapping[str, Any]) -> M:
    """Build a record from a stored document or row; unknown keys are ignored."""
    values: dict[str, Any] = {}
    for f in fields(model_type):
        key = f.name
        if key == "id" and "_id" in document:
            key = "_id"
        if key not in document:
            continue
        value = document[key]
        item_type = f.metadata.get("joined")
        if item_type is not None and value is not None:
            if isinstance(value, (list, tuple)):
                value = [_coerce(item_type, item) for item in value]
            else:
                value = _coerce(item_type, value)
        elif f.type is bool and value is not None:
            value = bool(value)
        values[f.name] = value

    missing = [
        f.name
        for f in fields(model_type)
        if f.name not in values and f.default is MISSING and f.default_factory is MISSING
    ]
    if missing:
        raise ValueError(f"{model_type.__name__} is missing fields: {', '.join(missing)}")
    return model_type(**values)


# Authentication


@dataclass(kw_only=True)
class Auth:
    id: str
    auth_role: str
    email: str | None = None
    email_verified: bool = False
    phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass(kw_only=True)
class CreateAuth:
    auth_role: str
    email: str | None = None
    email_verified: bool = False
    phone: str | None = None


@dataclass(kw_only=True)
class EmailVerification:
    token: str
    email: str
    expires_at: datetime


@dataclass(kw_only=True)
class PhoneVerification:
    token: str
    phone: str
    expires_at: datetime


@dataclass(kw_only=True)
class Session:
    id: str
    auth_id: str
    refresh_token: str
    expires_at: datetime
    is_revoked: bool = False
    created_at: datetime | None = None


# Inventory


@dataclass(kw_only=True)
class ItemStock:
    id: str
    item_id: str
    quantity: int
    updated_at: datetime | None = None


@dataclass(kw_only=True)
class VariantStock:
    id: str
    variant_id: str
    quantity: int
    updated_at: datetime | None = None


@dataclass(kw_only=True)
class AddonStock:
    id: str
    addon_id: str
    quantity: int
    updated_at: datetime | None = None


@dataclass(kw_only=True)
class CreateItemStock:
    item_id: str
    quantity: int


@dataclass(kw_only=True)
class CreateVariantStock:
    variant_id: str
    quantity: int


@dataclass(kw_only=True)
class CreateAddonStock:
    addon_id: str
    quantity: int


# User


@dataclass(kw_only=True)
class Profile:
    id: str
    name: str
    auth_id: str
    image_url: str | None = None
    dob: datetime | None = None
    anniversary: datetime | None = None
    gender: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(kw_only=True)
class CreateProfile:
    name: str
    auth_id: str
    image_url: str | None = None
    dob: datetime | None = None
    anniversary: datetime | None = None
    gender: str | None = None


# Shop


@dataclass(kw_only=True)
class ShopInfo:
    id: str
    name: str
    shop_type: str
    shop_status: str
    owner_auth_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass(kw_only=True)
class ShopAddress:
    id: str
    address1: str
    address2: str
    longitude: float
    latitude: float
    nearby_landmark: str
    city: str
    state: str
    pincode: str
    country: str
    shop_id: str
    created_at: datetime | None = None


@dataclass(kw_only=True)
class ShopContact:
    id: str
    name: str
    phone_number: str
    email: str
    shop_id: str


@dataclass(kw_only=True)
class ShopTiming:
    id: str
    day: str
    opens_at: str
    closes_at: str
    shop_id: str


@dataclass(kw_only=True)
class ShopImage:
    id: str
    image_url: str
    description: str
    shop_id: str


@dataclass(kw_only=True)
class Shop:
    id: str
    name: str
    shop_type: str
    shop_status: str
    owner_auth_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    address: ShopAddress | None = _joined(ShopAddress, many=False)
    contact: ShopContact | None = _joined(ShopContact, many=False)
    timing: list[ShopTiming] = _joined(ShopTiming)
    image: list[ShopImage] = _joined(ShopImage)


@dataclass(kw_only=True)
class CreateShopAddress:
    address1: str
    address2: str
    longitude: float
    latitude: float
    nearby_landmark: str
    city: str
    state: str
    pincode: str
    country: str


@dataclass(kw_only=True)
class CreateShopContact:
    name: str
    phone_number: str
    email: str


@dataclass(kw_only=True)
class CreateShopTiming:
    day: str
    opens_at: str
    closes_at: str


@dataclass(kw_only=True)
class CreateShopImage:
    image_url: str
    description: str


@dataclass(kw_only=True)
class CreateShop:
    name: str
    shop_type: str
    shop_status: str
    owner_auth_id: str
    address: CreateShopAddress
    contact: CreateShopContact
    timing: list[CreateShopTiming] = field(default_factory=list)
    image: list[CreateShopImage] = field(default_factory=list)


# Product


@dataclass(kw_only=True)
class ItemVariant:
    id: ObjectId
    variant_name: str
    relative_price: float
    relative_pricing: bool
    price: float
    item_id: ObjectId
    description: str | None = None


@dataclass(kw_only=True)
class ItemAddon:
    id: ObjectId
    addon_name: str
    addon_price: float
    item_id: ObjectId
    description: str | None = None


@dataclass(kw_only=True)
class MenuItem:
    id: ObjectId
    name: str
    price: float
    menu_id: ObjectId
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass(kw_only=True)
class RestaurantMenu:
    id: ObjectId
    menu_name: str
    shop_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    menu_items: list[MenuItem] = _joined(MenuItem)


@dataclass(kw_only=True)
class RetailItem:
    id: ObjectId
    name: str
    price: float
    category_id: ObjectId
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass(kw_only=True)
class RetailCategory:
    id: ObjectId
    category_name: str
    shop_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    retail_items: list[RetailItem] = _joined(RetailItem)


@dataclass(kw_only=True)
class MedicineItem:
    id: ObjectId
    name: str
    price: float
    category_id: ObjectId
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass(kw_only=True)
class MedicineCategory:
    id: ObjectId
    category_name: str
    shop_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    medicine_items: list[MedicineItem] = _joined(MedicineItem)


@dataclass(kw_only=True)
class CreateItemVariant:
    variant_name: str
    relative_price: float
    relative_pricing: bool
    price: float
    item_id: ObjectId
    description: str | None = None


@dataclass(kw_only=True)
class CreateItemAddon:
    addon_name: str
    addon_price: float
    item_id: ObjectId
    description: str | None = None


@dataclass(kw_only=True)
class CreateRestaurantMenu:
    menu_name: str
    shop_id: str


@dataclass(kw_only=True)
class CreateMenuItem:
    name: str
    price: float
    menu_id: ObjectId
    description: str | None = None