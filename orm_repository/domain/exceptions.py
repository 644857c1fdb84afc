"""Repository-layer exceptions.

Raised by repository implementations when a caller asks for something the
mapped model cannot satisfy.  All of them derive from RepositoryError so the
application boundary can translate them in one place.
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Root of every error raised by this package."""


class UnknownColumnError(RepositoryError, KeyError):
    """A key does not resolve to a mapped attribute of the model."""

    def __init__(self, model: str, key: str) -> None:
        super().__init__(f"{model} has no mapped attribute {key!r}")
        self.model = model
        self.key = key

    def __str__(self) -> str:
        return self.args[0]


class AccessorError(RepositoryError, TypeError):
    """A generated getter/setter was called with the wrong number of arguments."""


class EntityNotBoundError(RepositoryError):
    """An entity-level operation was called on a repository wrapping no row."""


class MassAssignmentError(RepositoryError):
    """Every attribute is guarded and no fillable allow-list was declared."""


class OperationCancelled(RepositoryError):
    """An observer's "before" hook returned False."""

    def __init__(self, event: str, entity: object) -> None:
        super().__init__(f"{event} cancelled by observer")
        self.event = event
        self.entity = entity
