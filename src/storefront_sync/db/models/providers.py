"""Provider configuration ORM model."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - SQLAlchemy needs runtime access

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from storefront_sync.db.models.base import Base


class ProviderConfigRecord(Base):
    """Stored configuration for one (provider_type, provider_name) pair.

    Credentials are stored as JSON encrypted via SecretManager.
    ``config_data`` holds non-sensitive settings.
    """

    __tablename__ = "provider_configs"
    __table_args__ = (UniqueConstraint("provider_type", "provider_name"),)

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    provider_type: Mapped[str] = mapped_column(String(30), index=True)
    provider_name: Mapped[str] = mapped_column(String(100))
    is_enabled: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
    )
    config_data: Mapped[dict] = mapped_column(  # type: ignore[type-arg]
        JSON,
        default=dict,
    )
    credentials: Mapped[str] = mapped_column(
        Text,
        default="",
    )
    feature_flags: Mapped[dict | None] = mapped_column(  # type: ignore[type-arg]
        JSON,
        nullable=True,
    )
    last_synced_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    error_message: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
