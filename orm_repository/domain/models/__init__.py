"""Domain value objects shared by every repository."""

from .events import ModelEvent
from .page import Page

__all__ = [
    "ModelEvent",
    "Page",
]
