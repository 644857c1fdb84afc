"""Tenant-scoped SQLAlchemy repository.

Every statement is restricted to the tenant of the injected context, and new
rows are stamped with it.  With no tenant set, the repository behaves exactly
like SqlRepository.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from orm_repository.domain.tenancy import MultiTenantContext
from orm_repository.infrastructure.persistence.repositories.sql import SqlRepository
from orm_repository.infrastructure.tenancy import get_tenant_context


class SqlMultiTenantRepository(SqlRepository):
    def __init__(
        self,
        session: AsyncSession,
        tenant_context: MultiTenantContext | None = None,
        row: Any = None,
    ) -> None:
        super().__init__(session, row=row)
        self._tenant = tenant_context if tenant_context is not None else get_tenant_context()

    @property
    def tenant_context(self) -> MultiTenantContext:
        return self._tenant

    async def create(self, data: Mapping[str, Any] | None = None) -> SqlRepository:
        values = self._fill(data or {})
        if self._tenant.has_tenant():
            # Stamped after _fill so a guarded tenant column is still written.
            column = self._attribute(self._tenant.get_tenant_key())
            if values.get(column) is None:
                values[column] = self._tenant.get_tenant_id()
        return await self._insert(values)

    def _scope(self) -> list[Any]:
        if not self._tenant.has_tenant():
            return []
        column = self._column(self._tenant.get_tenant_key())
        return [column == self._tenant.get_tenant_id()]

    def _bind(self, row: Any, session: AsyncSession | None = None) -> SqlMultiTenantRepository:
        return type(self)(self._session if session is None else session, self._tenant, row=row)
