"""Generic repository base interface.

Repository is the root abstraction every data-access class in this package
implements.  An instance plays two roles:

  - unbound (wrapping no row): a query object.  create(), get_*() and
    delete_*_by() build statements against the mapped model.
  - bound (wrapping one row): an active-record entity.  save(), update(),
    delete(), get_id() and to_dict() act on that row.

Design notes:
  - Methods that touch the database are async to accommodate async drivers.
  - Keys passed in are application keys (camel-case); implementations
    translate them to column names.
  - wrap() is the only way rows leave a repository: callers never see ORM
    instances directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any

from ..models.page import Page


class Repository(ABC):
    """Abstract CRUD-plus-pagination interface over one mapped model."""

    # --- helpers ---

    @abstractmethod
    def get_table(self) -> str:
        """Return the name of the underlying table."""

    @abstractmethod
    def get_model(self) -> Any:
        """Return the wrapped row, or the model class when unbound."""

    @abstractmethod
    def make(self, with_: Iterable[str] = ()) -> Any:
        """Return a query on the model, eager-loading the named relationships."""

    @abstractmethod
    def match(self, data: Any) -> Any:
        """Translate an application key (or every key of a mapping) to its column."""

    @abstractmethod
    def reverse_match(self, data: Any) -> Any:
        """Translate a column name (or every key of a mapping) to its application key."""

    @abstractmethod
    def wrap(self, data: Any) -> Any:
        """Wrap one row, or every row of a collection, into bound repositories."""

    @abstractmethod
    def set_observer(self, observer: object) -> Repository:
        """Forward the model's lifecycle events to the hooks observer defines."""

    @abstractmethod
    def remove_observers(self) -> None:
        """Stop forwarding events to every observer set on this instance."""

    # --- entity operations ---

    @abstractmethod
    async def save(self) -> Repository:
        """Persist the wrapped row."""

    @abstractmethod
    async def update(self, data: Mapping[str, Any] | None = None) -> Repository:
        """Assign data onto the wrapped row and persist it."""

    @abstractmethod
    async def delete(self) -> None:
        """Delete the wrapped row."""

    @abstractmethod
    def get_id(self) -> Any:
        """Return the primary key of the wrapped row."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return the wrapped row's column values under application keys."""

    # --- query operations ---

    @abstractmethod
    async def create(self, data: Mapping[str, Any] | None = None) -> Repository:
        """Insert a new row built from data and return it wrapped."""

    @abstractmethod
    async def get_all(self, with_: Iterable[str] = ()) -> list[Repository]:
        """Return every entity."""

    @abstractmethod
    async def get_by_id(self, id: Any, with_: Iterable[str] = ()) -> Repository | None:
        """Return the entity with the given primary key, or None."""

    @abstractmethod
    async def get_by_page(
        self, page: int = 1, limit: int | None = None, with_: Iterable[str] = ()
    ) -> Page:
        """Return one page of entities with the total item count."""

    @abstractmethod
    async def delete_by_id(self, id: Any) -> int:
        """Delete the entity with the given primary key; return rows deleted."""

    @abstractmethod
    async def get_first_by(
        self, key: str, value: Any, with_: Iterable[str] = ()
    ) -> Repository | None:
        """Return the first entity whose key equals value, or None."""

    @abstractmethod
    async def get_many_by(
        self, key: str, value: Any, with_: Iterable[str] = ()
    ) -> list[Repository]:
        """Return every entity whose key equals value."""

    @abstractmethod
    async def delete_first_by(self, key: str, value: Any) -> int:
        """Delete at most one entity whose key equals value; return rows deleted."""

    @abstractmethod
    async def delete_many_by(self, key: str, value: Any) -> int:
        """Delete every entity whose key equals value; return rows deleted."""
