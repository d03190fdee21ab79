"""``storefront-sync`` command line."""

from __future__ import annotations

from storefront_sync.cli.main import cli

__all__ = ["cli"]
