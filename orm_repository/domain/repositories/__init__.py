"""Domain repository interfaces.

Concrete implementations live in orm_repository/infrastructure/persistence/.
"""

from .base import Repository

__all__ = [
    "Repository",
]
