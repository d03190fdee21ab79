"""SQLAlchemy 2.0 ORM models for Storefront Sync.

Import from this package:

    from storefront_sync.db.models import Base, ProductIntegrationRecord, ...
"""

from __future__ import annotations

from storefront_sync.db.models.base import Base
from storefront_sync.db.models.catalog import (
    CategoryRecord,
    ProductRecord,
    SupplierRecord,
)
from storefront_sync.db.models.integrations import ProductIntegrationRecord
from storefront_sync.db.models.providers import ProviderConfigRecord

__all__ = [
    "Base",
    "CategoryRecord",
    "ProductIntegrationRecord",
    "ProductRecord",
    "ProviderConfigRecord",
    "SupplierRecord",
]
