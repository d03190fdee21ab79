"""Declarative base for all Storefront Sync ORM models."""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all Storefront Sync models."""
