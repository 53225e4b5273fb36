"""
HTTP routes of the reference storefront.

Only the surface consumed by the harness is implemented:

- ``POST /api/auth/login``
- ``GET /api/product/list``
- ``GET /api/health``

Handlers are synchronous; FastAPI runs them in its worker thread pool.
"""

from __future__ import annotations

import json
import math
import time
from typing import Any

import sqlalchemy
import sqlalchemy.exc
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..exceptions import DatabaseError
from .models import Brand, Category, Product, Provider, User
from .security import issue_token, verify_password

REQUEST_FAILED = "Your request could not be processed. Please try again."

# Sort keys accepted in ``sortOrder``; anything else is ignored
SORT_COLUMNS = {
    "created": Product.created,
    "price": Product.price,
    "name": Product.name,
    "rating": Product.rating,
    "quantity": Product.quantity,
}


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


def _error(message: str, status: int = 400, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status, content={**extra, "error": message})


def page_window(count: int, page: int, limit: int) -> tuple[int, int, int]:
    """
    Compute ``(offset, current_page, total_pages)`` for a listing.

    Pages are only honoured when there is more than one page of results;
    otherwise the listing starts at the first row and reports page 1.

    Examples:
        >>> page_window(25, 2, 10)
        (10, 2, 3)
        >>> page_window(5, 3, 10)
        (0, 1, 1)
    """
    paged = count > limit
    offset = (page - 1) * limit if paged else 0
    current_page = page if paged else 1
    total_pages = math.ceil(count / limit)
    return offset, current_page, total_pages


def _direction(key: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid sort direction for {key}: {value!r}") from e
    # json.loads accepts Infinity and NaN
    if not math.isfinite(number):
        raise ValueError(f"invalid sort direction for {key}: {value!r}")
    return number


def parse_sort_order(raw: str | None) -> list[Any]:
    """
    Translate a JSON sort spec such as ``{"price": 1, "created": -1}`` into
    ORDER BY clauses. Defaults to newest first.

    Raises:
        ValueError: If raw is not a JSON object or a direction is not a finite
            number
    """
    spec = json.loads(raw) if raw else {"created": -1}
    if not isinstance(spec, dict):
        raise ValueError("sortOrder must be a JSON object")

    clauses = []
    for key, direction in spec.items():
        column = SORT_COLUMNS.get(key)
        if column is None:
            continue
        ascending = _direction(key, direction) >= 0
        clauses.append(column.asc() if ascending else column.desc())
    return clauses or [Product.created.desc()]


def _listing_filters(
    min_price: float | None,
    max_price: float | None,
    rating: int | None,
    category: str | None,
    brand: str | None,
) -> list[Any]:
    filters: list[Any] = [
        Product.is_active.is_(True),
        sqlalchemy.or_(Product.brand_id.is_(None), Brand.is_active.is_(True)),
    ]
    if min_price is not None:
        filters.append(Product.price >= min_price)
    if max_price is not None:
        filters.append(Product.price <= max_price)
    if rating is not None:
        filters.append(Product.rating >= rating)
    if category:
        filters.append(Category.slug == category)
    if brand:
        filters.append(Brand.slug == brand)
    return filters


auth_router = APIRouter()
product_router = APIRouter()
health_router = APIRouter()


@auth_router.post("/login")
def login(body: LoginRequest, request: Request) -> Any:
    """Exchange email and password for a bearer token."""
    state = request.app.state
    lg = state.lg

    if not body.email:
        return _error("You must enter an email address.")
    if not body.password:
        return _error("You must enter a password.")

    try:
        with state.connection.session() as session:
            user = session.scalars(
                sqlalchemy.select(User).where(User.email == body.email)
            ).first()
    except (DatabaseError, sqlalchemy.exc.SQLAlchemyError) as e:
        lg.warning("login failed", extra={"exception": e})
        return _error(REQUEST_FAILED)

    if user is None:
        return _error("No user found for this email address.")
    if user.provider != Provider.EMAIL:
        return _error(
            "That email address is already in use using "
            f"{user.provider.value} provider."
        )
    if not verify_password(body.password, user.password):
        lg.debug("password mismatch", extra={"email": body.email})
        return _error("Password Incorrect", success=False)

    token = issue_token(user.id, state.store.secret, state.store.token_life)
    lg.debug("logged in", extra={"user": user.id})
    return {"success": True, "token": f"Bearer {token}", "user": user.to_dict()}


@product_router.get("/list")
def list_products(
    request: Request,
    sort_order: str | None = Query(None, alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    min_price: float | None = Query(None, alias="min"),
    max_price: float | None = Query(None, alias="max"),
    rating: int | None = None,
    category: str | None = None,
    brand: str | None = None,
) -> Any:
    """List active products with pagination metadata."""
    state = request.app.state
    lg = state.lg
    start = time.monotonic()

    try:
        order = parse_sort_order(sort_order)
    except (ValueError, TypeError) as e:
        lg.debug("bad sort order", extra={"sortOrder": sort_order, "exception": e})
        return _error(REQUEST_FAILED)

    filters = _listing_filters(min_price, max_price, rating, category, brand)

    def _query(*columns: Any) -> Any:
        return (
            sqlalchemy.select(*columns)
            .outerjoin(Brand, Product.brand_id == Brand.id)
            .outerjoin(Category, Product.category_id == Category.id)
            .where(*filters)
        )

    try:
        with state.connection.session() as session:
            count = session.scalar(_query(sqlalchemy.func.count(Product.id))) or 0
            offset, current_page, total_pages = page_window(count, page, limit)
            products = session.scalars(
                _query(Product).order_by(*order).offset(offset).limit(limit)
            ).unique()
            items = [p.to_dict() for p in products]
    except (DatabaseError, sqlalchemy.exc.SQLAlchemyError) as e:
        lg.warning("product listing failed", extra={"exception": e})
        return _error(REQUEST_FAILED)

    lg.debug(
        "listed products",
        extra={"count": count, "page": current_page, "after": time.monotonic() - start},
    )
    return {
        "products": items,
        "totalPages": total_pages,
        "currentPage": current_page,
        "count": count,
    }


@health_router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
