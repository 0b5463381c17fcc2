"""SQL statements used by the relational repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["ListShopFilters", "list_shop_query"]


def _insert(table: str, *columns: str) -> str:
    """An INSERT binding every column to a named parameter of the same name."""
    names = ", ".join(columns)
    markers = ", ".join(f":{column}" for column in columns)
    return f"INSERT INTO {table} ({names}) VALUES ({markers})"


def _select(table: str, key: str, marker: str = "?", columns: str = "*") -> str:
    return f"SELECT {columns} FROM {table} WHERE {key} = {marker}"


def _delete(table: str, key: str, marker: str = "?") -> str:
    return f"DELETE FROM {table} WHERE {key} = {marker}"


def _update_one(table: str, column: str, key: str) -> str:
    """An UPDATE of one column with positional parameters: value, then key."""
    return f"UPDATE {table} SET {column} = ? WHERE {key} = ?"


def _update_named(table: str, key: str, *columns: str) -> str:
    assignments = ", ".join(f"{column} = :{column}" for column in columns)
    return f"UPDATE {table} SET {assignments} WHERE {key} = :{key}"


# Authentication

CREATE_AUTH = _insert("auth", "id", "email", "email_verified", "phone", "auth_role")
GET_AUTH_BY_ID = _select("auth", "id")
GET_AUTH_BY_EMAIL = _select("auth", "email")
GET_AUTH_BY_PHONE = _select("auth", "phone")
DELETE_AUTH = _delete("auth", "id")
UPDATE_EMAIL = _update_one("auth", "email", "id")
UPDATE_PHONE = _update_one("auth", "phone", "id")
CREATE_EMAIL_VERIFICATION = _insert("email_verification", "token", "email", "expires_at")
CREATE_PHONE_VERIFICATION = _insert("phone_verification", "token", "phone", "expires_at")
GET_EMAIL_VERIFICATION = _select("email_verification", "email")
GET_PHONE_VERIFICATION = _select("phone_verification", "phone")
DELETE_EMAIL_VERIFICATION = _delete("email_verification", "email")
DELETE_PHONE_VERIFICATION = _delete("phone_verification", "phone")

CREATE_SESSION = _insert(
    "session", "id", "auth_id", "refresh_token", "is_revoked", "expires_at"
)
GET_SESSION = _select("session", "id")
REVOKE_SESSION = "UPDATE session SET is_revoked = 1 WHERE id = ?"
DELETE_SESSION = _delete("session", "id")

# Inventory

INSERT_ITEM_STOCK = _insert("item_stock", "id", "item_id", "quantity")
INSERT_VARIANT_STOCK = _insert("variant_stock", "id", "variant_id", "quantity")
INSERT_ADDON_STOCK = _insert("addon_stock", "id", "addon_id", "quantity")

# Shop

_ADDRESS_FIELDS = (
    "id",
    "address1",
    "address2",
    "longitude",
    "latitude",
    "nearby_landmark",
    "city",
    "state",
    "pincode",
    "country",
    "shop_id",
)
_SHOP_ADDRESS_COLUMNS = ", ".join((*_ADDRESS_FIELDS, "created_at"))

CREATE_SHOP = _insert("shop", "id", "name", "shop_type", "shop_status", "owner_auth_id")
CREATE_SHOP_ADDRESS = _insert("shop_address", *_ADDRESS_FIELDS)
CREATE_SHOP_CONTACT = _insert("shop_contact", "id", "name", "phone_number", "email", "shop_id")
CREATE_SHOP_IMAGE = _insert("shop_image", "id", "image_url", "description", "shop_id")
CREATE_SHOP_TIMING = _insert("shop_timing", "id", "day", "opens_at", "closes_at", "shop_id")
GET_SHOP = _select("shop", "id", "$1")
GET_SHOP_BY_OWNER_ID = _select("shop", "owner_auth_id", "$1")
GET_SHOP_ADDRESS = _select("shop_address", "id", "$1", _SHOP_ADDRESS_COLUMNS)
GET_SHOP_ADDRESS_BY_SHOP_ID = _select("shop_address", "shop_id", "$1", _SHOP_ADDRESS_COLUMNS)
GET_SHOP_CONTACT = _select("shop_contact", "id", "$1")
GET_SHOP_CONTACT_BY_SHOP_ID = _select("shop_contact", "shop_id", "$1")
GET_SHOP_TIMINGS = _select("shop_timing", "shop_id", "$1")
GET_SHOP_IMAGES = _select("shop_image", "shop_id", "$1")
GET_SHOP_TIMING = _select("shop_timing", "id", "$1")
GET_SHOP_IMAGE = _select("shop_image", "id", "$1")

# User

CREATE_PROFILE = _insert(
    "profile", "id", "name", "image_url", "dob", "anniversary", "gender", "auth_id"
)
GET_PROFILE_BY_ID = _select("profile", "id")
GET_PROFILE_BY_AUTH_ID = _select("profile", "auth_id")
UPDATE_PROFILE = _update_named(
    "profile", "id", "name", "image_url", "dob", "anniversary", "gender"
)
DELETE_PROFILE = _delete("profile", "id")


@dataclass(kw_only=True)
class ListShopFilters:
    """Optional criteria for listing shops."""

    name: str | None = None
    shop_type: str | None = None
    shop_status: str | None = None
    order_by: str | None = None
    limit: int | None = None
    offset: int | None = None


def list_shop_query(filters: ListShopFilters) -> tuple[str, list[Any]]:
    """Build the shop listing statement and its positional arguments."""
    clauses = ["SELECT * FROM shop WHERE 1=1"]
    args: list[Any] = []

    def bind(value: Any) -> str:
        args.append(value)
        return f"${len(args)}"

    if filters.name:
        clauses.append(f" AND name ILIKE {bind('%' + filters.name + '%')}")
    if filters.shop_type is not None:
        clauses.append(f" AND shop_type = {bind(filters.shop_type)}")
    if filters.shop_status is not None:
        clauses.append(f" AND shop_status = {bind(filters.shop_status)}")

    if filters.order_by is not None:
        direction = filters.order_by if filters.order_by in ("ASC", "DESC") else "ASC"
    else:
        direction = "DESC"
    clauses.append(f" ORDER BY created_at {direction}")

    if filters.limit is not None:
        clauses.append(f" LIMIT {bind(filters.limit)}")
    if filters.offset is not None:
        clauses.append(f" OFFSET {bind(filters.offset)}")

    return "".join(clauses), args