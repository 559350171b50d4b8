"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts the configuration finder relies on so it can
orchestrate lookups without depending on concrete adapters.

Contents
--------
* :class:`ResourceLocator` – resolves one location (or a template list) to text.
* :class:`ProcessOptions` – reads process-level options such as ``eds.config``.
* :class:`TextDecoder` – turns resolved text into a mapping.

System Role
-----------
:class:`jbouquet.core.ConfigurationFinder` accepts any object satisfying these
protocols, which is how the tests substitute in-memory locators and option
sources.
"""

from __future__ import annotations

from typing import Mapping, Protocol, Sequence, runtime_checkable


@runtime_checkable
class ResourceLocator(Protocol):
    """Load named locations (URL, classpath, filesystem) as text."""

    def get_as_text(self, location: str) -> str | None:
        """Return the content of *location* or ``None`` when it cannot be read."""

    def find_as_text(self, arg: str | None, templates: Sequence[str]) -> str | None:
        """Return the content of the first template that resolves after ``%s`` substitution."""


@runtime_checkable
class ProcessOptions(Protocol):
    """Expose process-level options (command-line, environment, explicit setter)."""

    def get(self, name: str) -> str | None:
        """Return the raw option value or ``None`` when unset."""

    def get_list(self, name: str) -> list[str]:
        """Return the option split on commas, blanks removed."""


@runtime_checkable
class TextDecoder(Protocol):
    """Decode configuration text into a ``str -> str`` mapping."""

    def decode(self, text: str, *, source: str | None = None) -> Mapping[str, str]:
        """Decode *text* or raise :class:`jbouquet.domain.errors.ParseError`."""
