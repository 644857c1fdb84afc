"""ContextVar-backed tenant context.

Each asyncio task (one request, one job) sees its own tenant: setting the
tenant inside a request never leaks into a concurrently running one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from orm_repository.domain.tenancy import MultiTenantContext
from orm_repository.infrastructure.database import settings

logger = logging.getLogger(__name__)


class TenantContext(MultiTenantContext):
    def __init__(self, default_key: str | None = None) -> None:
        self._default_key = default_key or settings.tenant_key
        # (tenant_key, tenant_id); per-instance so two contexts never share state.
        self._current: ContextVar[tuple[str, Any] | None] = ContextVar(
            f"tenant_{id(self)}", default=None
        )

    def has_tenant(self) -> bool:
        current = self._current.get()
        return current is not None and current[1] is not None

    def get_tenant_key(self) -> str:
        current = self._current.get()
        return current[0] if current is not None else self._default_key

    def get_tenant_id(self) -> Any:
        current = self._current.get()
        return current[1] if current is not None else None

    def set_tenant(self, tenant_id: Any, key: str | None = None) -> None:
        self._current.set((key or self._default_key, tenant_id))
        logger.debug("tenant set to %r", tenant_id)

    def clear(self) -> None:
        self._current.set(None)

    @contextmanager
    def scope(self, tenant_id: Any, key: str | None = None) -> Iterator[TenantContext]:
        """Set the tenant for the duration of a with-block, then restore the previous one."""
        token = self._current.set((key or self._default_key, tenant_id))
        try:
            yield self
        finally:
            self._current.reset(token)


_shared_context: TenantContext | None = None


def get_tenant_context() -> TenantContext:
    """Return the process-wide tenant context, creating it on first use."""
    global _shared_context
    if _shared_context is None:
        _shared_context = TenantContext()
    return _shared_context
