"""Entity lifecycle events an observer can subscribe to.

Str mixin keeps members comparable to the plain hook names an observer
defines (``observer.creating``, ``observer.saved``, ...).
"""

from enum import Enum


class ModelEvent(str, Enum):
    # Declaration order is registration order: listeners sharing one ORM
    # event fire in the order they were registered.
    SAVING = "saving"
    CREATING = "creating"
    UPDATING = "updating"
    CREATED = "created"
    UPDATED = "updated"
    SAVED = "saved"
    DELETING = "deleting"
    DELETED = "deleted"
    RESTORING = "restoring"

    @property
    def is_before(self) -> bool:
        """True for hooks that run before the write and may cancel it.

        restoring is excluded: it fires while a rollback is already under way.
        """
        return self in _BEFORE_EVENTS


_BEFORE_EVENTS = frozenset(
    {
        ModelEvent.SAVING,
        ModelEvent.CREATING,
        ModelEvent.UPDATING,
        ModelEvent.DELETING,
    }
)
