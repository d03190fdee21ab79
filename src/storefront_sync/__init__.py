"""Storefront Sync: provider configuration and product integration sync."""

from __future__ import annotations

__version__ = "0.3.0"

from storefront_sync.app import create_app
from storefront_sync.settings import SyncSettings

__all__ = [
    "SyncSettings",
    "__version__",
    "create_app",
]
