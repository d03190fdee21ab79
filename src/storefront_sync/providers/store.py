"""Persistence for provider configuration rows.

:class:`ProviderConfigStore` is the only code that reads or writes the
``provider_configs`` table. Credentials are sealed with
:class:`~storefront_sync.config.crypto.SecretManager` on the way in and
opened on the way out; they never leave this module in encrypted form.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Final

from sqlalchemy import select

from storefront_sync.db.engine import as_utc
from storefront_sync.db.models import ProviderConfigRecord
from storefront_sync.exceptions import NotFoundError
from storefront_sync.providers.catalog import check_provider_type

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from storefront_sync.config.crypto import SecretManager

logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final[Any] = _Unset()
"""Marks an :meth:`ProviderConfigStore.upsert` argument that should not be touched."""


@dataclass
class ProviderConfig:
    """Decrypted snapshot of one provider configuration row."""

    id: int
    provider_type: str
    provider_name: str
    is_enabled: bool = False
    is_active: bool = False
    config_data: dict[str, Any] = field(default_factory=dict)
    credentials: dict[str, Any] = field(default_factory=dict, repr=False)
    feature_flags: dict[str, bool] | None = None
    last_synced_at: datetime | None = None
    error_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.credentials)

    def to_public(self) -> dict[str, Any]:
        """Wire representation; credentials are never included."""
        return {
            "id": self.id,
            "providerType": self.provider_type,
            "providerName": self.provider_name,
            "isEnabled": self.is_enabled,
            "isActive": self.is_active,
            "configData": self.config_data,
            "featureFlags": self.feature_flags,
            "lastSyncedAt": self.last_synced_at,
            "errorMessage": self.error_message,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


class ProviderConfigStore:
    """CRUD over ``provider_configs`` keyed by ``(provider_type, provider_name)``.

    Parameters
    ----------
    session:
        Session used for every query. Writes are committed immediately.
    secret_manager:
        Seals and opens the credentials column.
    """

    def __init__(self, session: AsyncSession, secret_manager: SecretManager) -> None:
        self._session = session
        self._secrets = secret_manager

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, provider_type: str, provider_name: str) -> ProviderConfig | None:
        record = await self._find(provider_type, provider_name)
        return self._snapshot(record) if record is not None else None

    async def list_by_type(self, provider_type: str) -> list[ProviderConfig]:
        """All configs of one type, most recently updated first."""
        check_provider_type(provider_type)
        stmt = (
            select(ProviderConfigRecord)
            .where(ProviderConfigRecord.provider_type == provider_type)
            .order_by(ProviderConfigRecord.updated_at.desc(), ProviderConfigRecord.id.desc())
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [self._snapshot(r) for r in rows]

    async def list_all(self) -> list[ProviderConfig]:
        stmt = select(ProviderConfigRecord).order_by(
            ProviderConfigRecord.provider_type,
            ProviderConfigRecord.provider_name,
        )
        rows = (await self._session.execute(stmt)).scalars().all()
        return [self._snapshot(r) for r in rows]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def upsert(
        self,
        provider_type: str,
        provider_name: str,
        *,
        config_data: dict[str, Any] = UNSET,
        credentials: dict[str, Any] = UNSET,
        feature_flags: dict[str, bool] | None = UNSET,
        is_enabled: bool = UNSET,
        is_active: bool = UNSET,
        error_message: str | None = UNSET,
    ) -> ProviderConfig:
        """Create or update a configuration.

        Arguments left as :data:`UNSET` keep their stored value (or the
        column default on create). Passing ``error_message=None`` clears
        the error. A config that ends up disabled is always stored inactive.
        """
        check_provider_type(provider_type)
        now = datetime.now(UTC)
        record = await self._find(provider_type, provider_name)

        if record is None:
            record = ProviderConfigRecord(
                provider_type=provider_type,
                provider_name=provider_name,
                is_enabled=False,
                is_active=False,
                config_data={},
                credentials="",
                created_at=now,
            )
            self._session.add(record)
            logger.info("Creating provider config %s/%s", provider_type, provider_name)

        if config_data is not UNSET:
            record.config_data = dict(config_data)
        if credentials is not UNSET:
            record.credentials = self._secrets.seal(credentials)
        if feature_flags is not UNSET:
            record.feature_flags = dict(feature_flags) if feature_flags is not None else None
        if is_enabled is not UNSET:
            record.is_enabled = is_enabled
        if is_active is not UNSET:
            record.is_active = is_active
        if error_message is not UNSET:
            record.error_message = error_message

        if not record.is_enabled:
            record.is_active = False
        record.updated_at = now

        await self._session.commit()
        await self._session.refresh(record)
        return self._snapshot(record)

    async def delete(self, provider_type: str, provider_name: str) -> None:
        record = await self._find(provider_type, provider_name)
        if record is None:
            msg = f"Provider configuration {provider_type}/{provider_name} not found"
            raise NotFoundError(msg)
        await self._session.delete(record)
        await self._session.commit()
        logger.info("Deleted provider config %s/%s", provider_type, provider_name)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    async def _find(self, provider_type: str, provider_name: str) -> ProviderConfigRecord | None:
        stmt = select(ProviderConfigRecord).where(
            ProviderConfigRecord.provider_type == provider_type,
            ProviderConfigRecord.provider_name == provider_name,
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    def _snapshot(self, record: ProviderConfigRecord) -> ProviderConfig:
        return ProviderConfig(
            id=record.id,
            provider_type=record.provider_type,
            provider_name=record.provider_name,
            is_enabled=record.is_enabled,
            is_active=record.is_active,
            config_data=dict(record.config_data or {}),
            credentials=self._secrets.open(record.credentials),
            feature_flags=record.feature_flags,
            last_synced_at=as_utc(record.last_synced_at),
            error_message=record.error_message,
            created_at=as_utc(record.created_at),
            updated_at=as_utc(record.updated_at),
        )
