"""
Reference storefront: the HTTP surface the harness exercises in-process.

This module provides:
- SQLAlchemy models for users, brands, categories and products
- Password hashing and signed bearer tokens
- ``POST /api/auth/login``, ``GET /api/product/list`` and ``GET /api/health``
- build_app(), which assembles the FastAPI application on a connection
"""

from .app import StoreBuilder, build_app
from .models import Base, Brand, Category, Product, Provider, Role, User, slugify
from .routes import REQUEST_FAILED, page_window, parse_sort_order
from .security import (
    TokenError,
    decode_token,
    hash_password,
    issue_token,
    verify_password,
)

__all__ = [
    "Base",
    "Brand",
    "Category",
    "Product",
    "Provider",
    "REQUEST_FAILED",
    "Role",
    "StoreBuilder",
    "TokenError",
    "User",
    "build_app",
    "decode_token",
    "hash_password",
    "issue_token",
    "page_window",
    "parse_sort_order",
    "slugify",
    "verify_password",
]
