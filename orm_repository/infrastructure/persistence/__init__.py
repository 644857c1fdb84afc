"""Persistence package: repository implementations and observer binding."""

from orm_repository.infrastructure.persistence.observers import Listener, bind_observer
from orm_repository.infrastructure.persistence.repositories import (
    SqlMultiTenantRepository,
    SqlRepository,
)

__all__ = [
    "Listener",
    "bind_observer",
    "SqlRepository",
    "SqlMultiTenantRepository",
]
