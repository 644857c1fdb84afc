"""SQLAlchemy implementation of Repository.

Subclasses name the mapped model and, optionally, the keys that do not follow
the camel-case / snake-case convention:

    class ProjectRepository(SqlRepository):
        model = Project
        matching = {"ownerRef": "owner_reference"}

    repo = ProjectRepository(session)
    project = await repo.create({"name": "Apollo", "ownerRef": "u-1"})
    project.getName()                     # "Apollo"
    await project.setName("Artemis").save()

Writes are flushed, never committed: the caller owns the transaction
(see get_session() in orm_repository/infrastructure/database.py).
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

from sqlalchemy import JSON, Select, delete, func, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapper, selectinload

from orm_repository.domain.exceptions import (
    AccessorError,
    EntityNotBoundError,
    MassAssignmentError,
    UnknownColumnError,
)
from orm_repository.domain.keys import KeyMatcher
from orm_repository.domain.models.page import Page
from orm_repository.domain.repositories.base import Repository
from orm_repository.infrastructure.database import settings
from orm_repository.infrastructure.persistence.observers import Listener, bind_observer

logger = logging.getLogger(__name__)

# getProjectId / get_project_id, setProjectId / set_project_id
_ACCESSOR = re.compile(r"^(get|set)(?:_([A-Za-z]\w*)|([A-Z]\w*))$")


class SqlRepository(Repository):
    model: ClassVar[type]
    matching: ClassVar[dict[str, str]] = {}
    primary_key: ClassVar[str] = "id"
    guarded: ClassVar[tuple[str, ...]] = ()
    fillable: ClassVar[tuple[str, ...] | None] = None

    def __init__(self, session: AsyncSession, row: Any = None) -> None:
        self._session = session
        self._row = row
        self._keys = KeyMatcher(self.matching)
        self._listeners: list[Listener] = []

    def __repr__(self) -> str:
        if self._row is None:
            return f"<{type(self).__name__} unbound>"
        return f"<{type(self).__name__} {self.primary_key}={self.get_id()!r}>"

    # --- helpers ---

    def get_table(self) -> str:
        return self.model.__table__.name

    def get_model(self) -> Any:
        return self.model if self._row is None else self._row

    def match(self, data: Any) -> Any:
        return self._keys.match(data)

    def reverse_match(self, data: Any) -> Any:
        return self._keys.reverse_match(data)

    def make(self, with_: Iterable[str] = ()) -> Select:
        """Start a query on the model, eager-loading the named relationships."""
        stmt = select(self.model)
        criteria = self._scope()
        if criteria:
            stmt = stmt.where(*criteria)
        if isinstance(with_, str):
            with_ = (with_,)
        for path in with_:
            stmt = stmt.options(self._eager(path))
        return stmt

    def to_dict(self) -> dict[str, Any]:
        row = self._bound()
        return self.reverse_match(
            {attr.key: getattr(row, attr.key) for attr in self._mapper().column_attrs}
        )

    def wrap(self, data: Any) -> Any:
        if data is None:
            return None
        if isinstance(data, Mapping):
            return {key: self.wrap(value) for key, value in data.items()}
        if isinstance(data, self.model):
            return self._bind(data)
        if isinstance(data, Iterable) and not isinstance(data, (str, bytes)):
            return [self.wrap(item) for item in data]
        return self._bind(data)

    def set_observer(self, observer: object) -> SqlRepository:
        self._listeners.extend(bind_observer(observer, self.model, self._session, self._bind))
        return self

    def remove_observers(self) -> None:
        """Unregister every listener set_observer() registered on this instance."""
        for listener in self._listeners:
            listener.remove()
        self._listeners.clear()

    # --- entity operations ---

    async def save(self) -> SqlRepository:
        row = self._bound()
        self._session.add(row)
        await self._session.flush()
        await self._reload_expired(row)
        return self

    async def delete(self) -> None:
        row = self._bound()
        await self._session.delete(row)
        await self._session.flush()
        logger.debug("deleted %s %r", self.model.__name__, self.get_id())

    async def update(self, data: Mapping[str, Any] | None = None) -> SqlRepository:
        row = self._bound()
        for column, value in self._fill(data or {}).items():
            setattr(row, column, value)
        await self._session.flush()
        await self._reload_expired(row)
        return self

    def get_id(self) -> Any:
        return getattr(self._bound(), self.match(self.primary_key))

    def __getattr__(self, name: str) -> Any:
        found = None if name.startswith("_") else _ACCESSOR.match(name)
        if found is None:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        verb, snake, camel = found.groups()
        key = snake or camel[:1].lower() + camel[1:]
        qualified = f"{type(self).__name__}.{name}"

        if verb == "get":

            def getter(*args: Any) -> Any:
                if args:
                    raise AccessorError(f"getter {qualified}() takes no arguments")
                return self._get(key)

            return getter

        def setter(*args: Any) -> SqlRepository:
            if len(args) > 1:
                raise AccessorError(f"setter {qualified}() takes at most 1 argument")
            return self._set(key, args[0] if args else None)

        return setter

    # --- query operations ---

    async def create(self, data: Mapping[str, Any] | None = None) -> SqlRepository:
        return await self._insert(self._fill(data or {}))

    async def get_all(self, with_: Iterable[str] = ()) -> list[SqlRepository]:
        result = await self._session.execute(self.make(with_))
        return self.wrap(result.scalars().all())

    async def get_by_id(self, id: Any, with_: Iterable[str] = ()) -> SqlRepository | None:
        return await self.get_first_by(self.primary_key, id, with_)

    async def get_by_page(
        self, page: int = 1, limit: int | None = None, with_: Iterable[str] = ()
    ) -> Page:
        limit = settings.page_limit if limit is None else limit
        if page < 1 or limit < 1:
            raise ValueError(f"page and limit must be >= 1, got page={page} limit={limit}")

        total = await self._session.scalar(
            select(func.count()).select_from(self.make().subquery())
        )
        stmt = (
            self.make(with_)
            .order_by(self._column(self.primary_key))
            .offset(limit * (page - 1))
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return Page(
            page=page,
            limit=limit,
            total_items=total or 0,
            items=self.wrap(result.scalars().all()),
        )

    async def delete_by_id(self, id: Any) -> int:
        return await self.delete_first_by(self.primary_key, id)

    async def get_first_by(
        self, key: str, value: Any, with_: Iterable[str] = ()
    ) -> SqlRepository | None:
        stmt = self.make(with_).where(self._column(key) == value).limit(1)
        result = await self._session.execute(stmt)
        return self.wrap(result.scalars().first())

    async def get_many_by(
        self, key: str, value: Any, with_: Iterable[str] = ()
    ) -> list[SqlRepository]:
        stmt = self.make(with_).where(self._column(key) == value)
        result = await self._session.execute(stmt)
        return self.wrap(result.scalars().all())

    async def delete_first_by(self, key: str, value: Any) -> int:
        pk = self._column(self.primary_key)
        stmt = self.make().with_only_columns(pk).where(self._column(key) == value).limit(1)
        result = await self._session.execute(stmt)
        ident = result.scalar_one_or_none()
        if ident is None:
            return 0
        return await self._bulk_delete(pk == ident)

    async def delete_many_by(self, key: str, value: Any) -> int:
        return await self._bulk_delete(self._column(key) == value)

    # --- internals ---

    def _mapper(self) -> Mapper:
        return sa_inspect(self.model)

    def _scope(self) -> list[Any]:
        """Criteria every statement of this repository is restricted by."""
        return []

    def _bind(self, row: Any, session: AsyncSession | None = None) -> SqlRepository:
        return type(self)(self._session if session is None else session, row=row)

    def _bound(self) -> Any:
        if self._row is None:
            raise EntityNotBoundError(f"{type(self).__name__} does not wrap a row")
        return self._row

    def _attribute(self, key: str) -> str:
        name = self.match(key)
        if name not in self._mapper().attrs:
            raise UnknownColumnError(self.model.__name__, name)
        return name

    def _column(self, key: str) -> Any:
        name = self.match(key)
        if name not in self._mapper().column_attrs:
            raise UnknownColumnError(self.model.__name__, name)
        return getattr(self.model, name)

    def _eager(self, path: str) -> Any:
        option = None
        current = self._mapper()
        for part in path.split("."):
            name = self.match(part)
            if name not in current.relationships:
                raise UnknownColumnError(current.class_.__name__, name)
            attribute = getattr(current.class_, name)
            option = selectinload(attribute) if option is None else option.selectinload(attribute)
            current = current.relationships[name].mapper
        return option

    def _encode(self, name: str, value: Any) -> Any:
        """JSON-encode lists and dicts bound for a column that is not JSON-typed."""
        if not isinstance(value, (list, dict)):
            return value
        column_attrs = self._mapper().column_attrs
        if name in column_attrs and not isinstance(column_attrs[name].columns[0].type, JSON):
            return json.dumps(value)
        return value

    def _get(self, key: str) -> Any:
        row = self._bound()
        return getattr(row, self._attribute(key))

    def _set(self, key: str, value: Any) -> SqlRepository:
        row = self._bound()
        name = self._attribute(key)
        setattr(row, name, self._encode(name, value))
        return self

    def _fill(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Translate data to column values, dropping keys mass assignment may not touch."""
        if self.fillable is None and "*" in self.guarded:
            raise MassAssignmentError(
                f"{type(self).__name__} guards every attribute and declares no fillable keys"
            )
        values = {self._attribute(key): value for key, value in data.items()}
        guarded = {self.match(key) for key in self.guarded if key != "*"}
        fillable = None if self.fillable is None else {self.match(key) for key in self.fillable}

        allowed = {
            name: self._encode(name, value)
            for name, value in values.items()
            if name not in guarded and (fillable is None or name in fillable)
        }
        dropped = sorted(values.keys() - allowed.keys())
        if dropped:
            logger.warning("%s: mass assignment dropped %s", type(self).__name__, dropped)
        return allowed

    async def _insert(self, values: dict[str, Any]) -> SqlRepository:
        row = self.model(**values)
        self._session.add(row)
        await self._session.flush()
        # Load server-side values now; lazy loads are not possible under asyncio.
        await self._session.refresh(row)
        entity = self.wrap(row)
        logger.debug("created %s %r", self.model.__name__, entity.get_id())
        return entity

    async def _reload_expired(self, row: Any) -> None:
        # onupdate and server-side values are expired by the flush; lazy loads
        # are not possible under asyncio.
        expired = sa_inspect(row).expired_attributes
        if expired:
            await self._session.refresh(row, attribute_names=sorted(expired))

    async def _bulk_delete(self, *criteria: Any) -> int:
        stmt = delete(self.model).where(*self._scope(), *criteria)
        result = await self._session.execute(stmt)
        logger.debug("deleted %d %s row(s)", result.rowcount, self.model.__name__)
        return result.rowcount
