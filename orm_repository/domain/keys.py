"""Translation between application keys and database column names.

Application code speaks camel-case (``projectId``); tables use snake-case
(``project_id``).  A repository may declare an explicit table for keys that
do not follow the convention; everything else falls back to case conversion.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_WHITESPACE = re.compile(r"\s+")
_BEFORE_UPPER = re.compile(r"(.)(?=[A-Z])")
_SEPARATORS = re.compile(r"[-_\s]+")


def snake_case(value: str, delimiter: str = "_") -> str:
    """``projectId`` -> ``project_id``; lowercase input is returned unchanged."""
    if value.islower() and value.isalpha():
        return value
    # Title-case each whitespace separated word so "project id" collapses to "ProjectId".
    value = "".join(w[:1].upper() + w[1:] for w in _WHITESPACE.split(value))
    return _BEFORE_UPPER.sub(rf"\1{delimiter}", value).lower()


def camel_case(value: str) -> str:
    """``project_id`` -> ``projectId``."""
    studly = "".join(w[:1].upper() + w[1:] for w in _SEPARATORS.split(value) if w)
    return studly[:1].lower() + studly[1:]


class KeyMatcher:
    """Bidirectional key translation backed by an explicit matching table."""

    def __init__(self, matching: Mapping[str, str] | None = None) -> None:
        self._matching = dict(matching or {})
        self._reverse = {column: key for key, column in self._matching.items()}

    @property
    def matching(self) -> dict[str, str]:
        return dict(self._matching)

    def match(self, data: Any) -> Any:
        """Map an application key (or every key of a mapping) to its column."""
        if isinstance(data, Mapping):
            return {self.match(key): value for key, value in data.items()}
        if data in self._matching:
            return self._matching[data]
        return snake_case(data)

    def reverse_match(self, data: Any) -> Any:
        """Map a column name (or every key of a mapping) back to its application key."""
        if isinstance(data, Mapping):
            return {self.reverse_match(key): value for key, value in data.items()}
        if data in self._reverse:
            return self._reverse[data]
        return camel_case(data)
