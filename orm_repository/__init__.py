"""Repository layer over SQLAlchemy with key translation and tenant scoping.

Import from this package rather than individual modules:

    from orm_repository import SqlRepository, SqlMultiTenantRepository
"""

from orm_repository.domain.exceptions import (
    AccessorError,
    EntityNotBoundError,
    MassAssignmentError,
    OperationCancelled,
    RepositoryError,
    UnknownColumnError,
)
from orm_repository.domain.keys import KeyMatcher, camel_case, snake_case
from orm_repository.domain.models import ModelEvent, Page
from orm_repository.domain.repositories import Repository
from orm_repository.domain.tenancy import MultiTenantContext
from orm_repository.infrastructure.persistence import SqlMultiTenantRepository, SqlRepository
from orm_repository.infrastructure.tenancy import TenantContext, get_tenant_context

__all__ = [
    "AccessorError",
    "EntityNotBoundError",
    "MassAssignmentError",
    "OperationCancelled",
    "RepositoryError",
    "UnknownColumnError",
    "KeyMatcher",
    "camel_case",
    "snake_case",
    "ModelEvent",
    "Page",
    "Repository",
    "MultiTenantContext",
    "SqlRepository",
    "SqlMultiTenantRepository",
    "TenantContext",
    "get_tenant_context",
]
