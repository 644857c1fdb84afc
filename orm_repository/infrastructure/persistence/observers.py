"""Forwarding of SQLAlchemy lifecycle events to repository observers.

An observer is any object; each hook it defines (creating, saved, ...) is
bound to the matching mapper event of the repository's model.  Hooks receive
the row wrapped in the repository class, never the raw ORM instance.

restoring has no mapper counterpart: it is bound to the registering session's
deleted_to_persistent event, which fires when a rollback brings a deleted
row back into the session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import event as sa_event
from sqlalchemy.ext.asyncio import AsyncSession, async_object_session

from orm_repository.domain.exceptions import OperationCancelled
from orm_repository.domain.models.events import ModelEvent

logger = logging.getLogger(__name__)

MAPPER_EVENTS: dict[ModelEvent, tuple[str, ...]] = {
    ModelEvent.SAVING: ("before_insert", "before_update"),
    ModelEvent.CREATING: ("before_insert",),
    ModelEvent.UPDATING: ("before_update",),
    ModelEvent.CREATED: ("after_insert",),
    ModelEvent.UPDATED: ("after_update",),
    ModelEvent.SAVED: ("after_insert", "after_update"),
    ModelEvent.DELETING: ("before_delete",),
    ModelEvent.DELETED: ("after_delete",),
}

SESSION_EVENTS: dict[ModelEvent, str] = {
    ModelEvent.RESTORING: "deleted_to_persistent",
}


@dataclass(frozen=True)
class Listener:
    """One registered event listener, kept so it can be removed later."""

    target: Any
    identifier: str
    fn: Callable[..., None]

    def remove(self) -> None:
        if sa_event.contains(self.target, self.identifier, self.fn):
            sa_event.remove(self.target, self.identifier, self.fn)


def _dispatch(hook: Callable[[Any], Any], model_event: ModelEvent, entity: Any) -> None:
    if hook(entity) is False and model_event.is_before:
        raise OperationCancelled(model_event.value, entity)


def bind_observer(
    observer: object,
    model: type,
    session: AsyncSession,
    bind: Callable[[Any, AsyncSession], Any],
) -> list[Listener]:
    """Register every hook observer defines; return the listeners created.

    Mapper hooks fire for flushes in any session; the entity handed to the
    hook is bound to the session that wrote the row, falling back to the
    registering session when the row has no async session.
    """
    listeners: list[Listener] = []
    for model_event in ModelEvent:
        hook = getattr(observer, model_event.value, None)
        if not callable(hook):
            continue

        if model_event in SESSION_EVENTS:

            def on_session_event(_session, instance, hook=hook, model_event=model_event):
                if isinstance(instance, model):
                    _dispatch(hook, model_event, bind(instance, session))

            target = session.sync_session
            identifier = SESSION_EVENTS[model_event]
            sa_event.listen(target, identifier, on_session_event)
            listeners.append(Listener(target, identifier, on_session_event))
            continue

        for identifier in MAPPER_EVENTS[model_event]:

            def on_mapper_event(_mapper, _connection, target, hook=hook, model_event=model_event):
                own = async_object_session(target)
                _dispatch(hook, model_event, bind(target, session if own is None else own))

            sa_event.listen(model, identifier, on_mapper_event)
            listeners.append(Listener(model, identifier, on_mapper_event))

        logger.debug(
            "bound %s.%s to %s", type(observer).__name__, model_event.value, model.__name__
        )
    return listeners
