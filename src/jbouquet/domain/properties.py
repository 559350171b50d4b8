"""Domain value object for decoded properties files.

Purpose
-------
Carry the result of :meth:`jbouquet.core.ConfigurationFinder.as_properties`
as an immutable, ordered ``str -> str`` mapping. The module performs no I/O.

Contents
--------
* :class:`Properties` – ``Mapping`` implementation with
  :meth:`Properties.get_property`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping


@dataclass(frozen=True, slots=True)
class Properties(MappingABC[str, str]):
    """Immutable key/value set decoded from a properties document.

    Why
    ----
    Each decode call must hand back a freshly constructed value that shares
    nothing with parser state and that callers cannot mutate by accident.

    Examples
    --------
    >>> props = Properties({"db.host": "localhost", "db.port": "5432"})
    >>> props["db.port"]
    '5432'
    >>> props.get_property("db.user", "admin")
    'admin'
    >>> list(props)
    ['db.host', 'db.port']
    """

    _data: Mapping[str, str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "_data", MappingProxyType(dict(self._data)))

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get_property(self, key: str, default: str | None = None) -> str | None:
        """Return the value stored under *key* or *default* when absent."""

        return self._data.get(key, default)

    def as_dict(self) -> dict[str, str]:
        """Return a mutable copy preserving document order."""

        return dict(self._data)

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise the properties to JSON.

        >>> Properties({"a": "1"}).to_json()
        '{"a":"1"}'
        """

        return json.dumps(self.as_dict(), indent=indent, separators=(",", ":"), ensure_ascii=False)
