"""Tenant context interface.

A tenant context tells multi-tenant repositories which tenant the current
unit of work belongs to.  The concrete implementation lives in
orm_repository/infrastructure/tenancy.py.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class MultiTenantContext(ABC):
    @abstractmethod
    def has_tenant(self) -> bool:
        """Return True when a tenant is set for the current context."""

    @abstractmethod
    def get_tenant_key(self) -> str:
        """Return the application key of the tenant column (e.g. "tenantId")."""

    @abstractmethod
    def get_tenant_id(self) -> Any:
        """Return the current tenant identifier, or None."""
