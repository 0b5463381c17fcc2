"""Models, SQL statements, repositories and services for a delivery platform."""

__version__ = "0.1.0"

__all__ = [
    "models",
    "database",
    "queries",
    "otp",
    "auth_repository",
    "auth_service",
    "shop_repository",
    "shop_service",
    "user",
    "product_repository",
    "product_service",
]