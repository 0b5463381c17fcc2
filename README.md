# deliverykit

Building blocks for the back end of a delivery platform. The package has
dataclass models, SQL statements, repositories and services for accounts and
one-time passcodes, shops, product catalogues and user profiles.

## Installation

```
pip install deliverykit
```

To run the tests as well:

```
pip install "deliverykit[test]"
pytest
```

## Overview

| Module | What it holds |
| --- | --- |
| `deliverykit.models` | Dataclasses such as `Auth`, `Session`, `Shop`, `Profile`, `ItemVariant` and `RestaurantMenu`, with `generate_id`, `hex_to_object_id`, `to_document` and `from_document` |
| `deliverykit.database` | `Database`, a small wrapper over any DB-API connection, with `DatabaseError` and `NotFoundError` |
| `deliverykit.queries` | The SQL statements, and `list_shop_query` for filtering shops with `ListShopFilters` |
| `deliverykit.otp` | Six-digit passcodes: `generate_token`, `token_expires_at`, `is_token_expired`, `is_token_valid` |
| `deliverykit.auth_repository`, `deliverykit.auth_service` | `AuthRepository` and `AuthenticationService` |
| `deliverykit.shop_repository`, `deliverykit.shop_service` | `ShopRepository` and `ShopService` |
| `deliverykit.user` | `UserRepository` and `UserService` |
| `deliverykit.product_repository`, `deliverykit.product_service` | `ProductRepository`, which is backed by MongoDB, and `ProductService` |

## Relational storage

`Database` takes a DB-API connection and the driver's paramstyle (`qmark`,
`numeric`, `named`, `format` or `pyformat`). Statements may be written with
`?`, `$1` or `:name` placeholders; they are rewritten for the driver. Each
statement is committed on its own unless it runs inside
`with db.transaction():`, which commits at the end of the block and rolls back
if it raises.

```python
import sqlite3

from deliverykit.auth_repository import AuthRepository
from deliverykit.auth_service import AuthenticationService
from deliverykit.database import Database
from deliverykit.models import CreateAuth

db = Database(sqlite3.connect("auth.db"), "qmark")
service = AuthenticationService(AuthRepository(db))

auth = service.create_auth(CreateAuth(auth_role="customer", email="someone@example.com"))
same = service.get_auth(email="someone@example.com")
```

`create_auth` needs an e-mail address, a phone number or both. `get_auth`
needs exactly one of them. Both raise `ValidationError` otherwise.

Each repository raises `DatabaseError` when a write changes no rows, and
`NotFoundError` when a lookup of a single record finds nothing.

`ShopService.insert_shop` gives the shop and each of its parts a fresh
identifier, and `ShopRepository.insert_shop` stores them all in one
transaction. Shops can be listed with filters:

```python
from deliverykit.queries import ListShopFilters, list_shop_query

query, args = list_shop_query(ListShopFilters(name="cafe", limit=10))
# "SELECT * FROM shop WHERE 1=1 AND name ILIKE $1 ORDER BY created_at DESC LIMIT $2"
# ["%cafe%", 10]
```

## Passcodes

`generate_token` returns a random six-digit string. `token_expires_at` gives
the moment five minutes from now, and `is_token_expired` tells whether that
moment has passed. `is_token_valid` compares a submitted passcode with the
stored one; `None` never matches.

## Products

```python
from deliverykit.models import CreateRestaurantMenu
from deliverykit.product_repository import ProductRepository
from deliverykit.product_service import ProductService

repository = ProductRepository.connect("mongodb://localhost:27017", "products")
service = ProductService(repository)
menu = service.insert_restaurant_menu(CreateRestaurantMenu(menu_name="Lunch", shop_id="shop-1"))
menus = service.list_restaurant_menu("shop-1")
```

Menus and categories come back with their items joined in. Identifiers given
as strings must be 24-character hex object ids; anything else raises
`ValueError`. The `list_*` methods raise `NotFoundError` when a shop has no
records.

## What the package does not do

- It has no storage or service for item, variant or add-on stock, although
  the models `ItemStock`, `VariantStock`, `AddonStock` and their `Create*`
  requests and the `INSERT_*_STOCK` statements are defined.
- It runs no network server and installs no command; it is a library to be
  called from an application.
- It does not create or migrate database tables; the tables its statements
  use must already exist.