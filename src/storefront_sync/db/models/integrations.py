"""Product integration ORM model."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - SQLAlchemy needs runtime access
from decimal import Decimal  # noqa: TC003 - SQLAlchemy needs runtime access
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront_sync.db.models.base import Base

if TYPE_CHECKING:
    from storefront_sync.db.models.catalog import ProductRecord


class ProductIntegrationRecord(Base):
    """Links one product to a supplier (inbound) or marketplace (outbound).

    ``integration_id`` points at ``suppliers.id`` for supplier rows and at
    the marketplace index for marketplace rows, so it carries no foreign key.
    """

    __tablename__ = "product_integrations"
    __table_args__ = (UniqueConstraint("product_id", "integration_type", "integration_id"),)

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        index=True,
    )
    integration_type: Mapped[str] = mapped_column(String(20))
    integration_id: Mapped[int] = mapped_column(Integer)
    integration_name: Mapped[str] = mapped_column(String(100))

    is_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False)

    # Pricing rules
    price_override: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    margin_percentage: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    min_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    max_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    # Quantity rules
    quantity_override: Mapped[int | None] = mapped_column(Integer, nullable=True)
    min_quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_quantity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reserve_quantity: Mapped[int] = mapped_column(Integer, default=0)
    lead_time_days: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Scheduling
    sync_schedule: Mapped[str | None] = mapped_column(String(20), nullable=True)
    auto_sync: Mapped[bool] = mapped_column(Boolean, default=True)
    sync_on_price_change: Mapped[bool] = mapped_column(Boolean, default=True)
    sync_on_stock_change: Mapped[bool] = mapped_column(Boolean, default=True)
    custom_config: Mapped[dict | None] = mapped_column(  # type: ignore[type-arg]
        JSON,
        nullable=True,
    )

    # Bookkeeping
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_synced_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    next_sync_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
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

    product: Mapped[ProductRecord] = relationship()
