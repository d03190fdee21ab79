"""Catalog ORM models referenced by product integrations.

Only the columns the sync loop and admin views read or write are
mapped here; the storefront owns the rest of the catalog schema.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - SQLAlchemy needs runtime access
from decimal import Decimal  # noqa: TC003 - SQLAlchemy needs runtime access

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront_sync.db.models.base import Base


class CategoryRecord(Base):
    """A product category."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(255))
    slug: Mapped[str] = mapped_column(String(255), unique=True)


class SupplierRecord(Base):
    """An upstream supplier.

    ``provider_type`` selects the supplier adapter (``manual``, ``api``);
    ``provider_config`` carries its connection settings.
    """

    __tablename__ = "suppliers"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(255))
    code: Mapped[str] = mapped_column(String(50), unique=True)
    provider_type: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )
    provider_config: Mapped[dict | None] = mapped_column(  # type: ignore[type-arg]
        JSON,
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


class ProductRecord(Base):
    """A storefront product."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(255))
    sku: Mapped[str] = mapped_column(String(100), unique=True)
    description: Mapped[str] = mapped_column(Text, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    stock_status: Mapped[str] = mapped_column(
        String(20),
        default="IN_STOCK",
    )
    image_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )
    category_id: Mapped[int | None] = mapped_column(
        ForeignKey("categories.id"),
        nullable=True,
    )
    supplier_id: Mapped[int | None] = mapped_column(
        ForeignKey("suppliers.id"),
        nullable=True,
    )
    supplier_sku: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )
    supplier_price: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 2),
        nullable=True,
    )
    last_synced_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        onupdate=func.now(),
    )

    category: Mapped[CategoryRecord | None] = relationship()
    supplier: Mapped[SupplierRecord | None] = relationship()
