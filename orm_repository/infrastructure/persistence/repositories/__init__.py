"""Concrete SQLAlchemy repository implementations."""

from __future__ import annotations

from .multi_tenant import SqlMultiTenantRepository
from .sql import SqlRepository

__all__ = [
    "SqlRepository",
    "SqlMultiTenantRepository",
]
