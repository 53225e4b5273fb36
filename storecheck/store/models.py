"""
Storefront schema: users, brands, categories and products.
"""

from __future__ import annotations

import enum
import re
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import sqlalchemy
from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, relationship

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def _now() -> datetime:
    return datetime.now(UTC)


def slugify(name: str) -> str:
    """
    Lower-case a name and collapse every run of non-alphanumerics to ``-``.

    Examples:
        >>> slugify("RMIT Tee (Blue)")
        'rmit-tee-blue'
    """
    return _SLUG_RE.sub("-", name.lower()).strip("-") or "item"


def unique_slug(session: Session, model: type[Base], name: str) -> str:
    """Slug for name that is not yet used in the model's table (``-2``, ``-3``...)."""
    base = slugify(name)
    taken = set(
        session.scalars(
            sqlalchemy.select(model.slug).where(  # type: ignore[attr-defined]
                sqlalchemy.or_(
                    model.slug == base,  # type: ignore[attr-defined]
                    model.slug.like(f"{base}-%"),  # type: ignore[attr-defined]
                )
            )
        )
    )
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


class Role(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"


class Provider(str, enum.Enum):
    EMAIL = "email"
    OAUTH = "oauth"


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True)
    # Salted hash; empty for accounts created through an OAuth provider
    password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    provider: Mapped[Provider] = mapped_column(
        sqlalchemy.Enum(Provider, native_enum=False), default=Provider.EMAIL
    )
    role: Mapped[Role] = mapped_column(
        sqlalchemy.Enum(Role, native_enum=False), default=Role.USER
    )
    first_name: Mapped[str] = mapped_column(String(100), default="")
    last_name: Mapped[str] = mapped_column(String(100), default="")
    created: Mapped[datetime] = mapped_column(default=_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "role": self.role.value,
        }


class Brand(Base):
    __tablename__ = "brands"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(220), unique=True)
    description: Mapped[str] = mapped_column(Text, default="")
    is_active: Mapped[bool] = mapped_column(default=True)
    created: Mapped[datetime] = mapped_column(default=_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "isActive": self.is_active,
        }


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(220), unique=True)
    description: Mapped[str] = mapped_column(Text, default="")
    is_active: Mapped[bool] = mapped_column(default=True)
    created: Mapped[datetime] = mapped_column(default=_now)

    products: Mapped[list[Product]] = relationship(
        back_populates="category", lazy="selectin"
    )

    @property
    def product_ids(self) -> list[int]:
        return [p.id for p in self.products]


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (CheckConstraint("quantity >= 0", name="quantity_non_negative"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    sku: Mapped[str] = mapped_column(String(100), unique=True)
    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(220), unique=True)
    description: Mapped[str] = mapped_column(Text, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    quantity: Mapped[int] = mapped_column(default=0)
    is_active: Mapped[bool] = mapped_column(default=True)
    image_url: Mapped[str] = mapped_column(String(500), default="")
    rating: Mapped[int] = mapped_column(default=0)
    brand_id: Mapped[int | None] = mapped_column(ForeignKey("brands.id"))
    category_id: Mapped[int | None] = mapped_column(ForeignKey("categories.id"))
    created: Mapped[datetime] = mapped_column(default=_now)

    brand: Mapped[Brand | None] = relationship(lazy="joined")
    category: Mapped[Category | None] = relationship(back_populates="products")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "price": float(self.price),
            "quantity": self.quantity,
            "isActive": self.is_active,
            "imageUrl": self.image_url,
            "rating": self.rating,
            "created": self.created.isoformat(),
            "brand": self.brand.to_dict() if self.brand is not None else None,
        }
