"""Domain-level exception hierarchy.

Purpose
-------
Expose the error taxonomy shared by the resource locator, the configuration
finder, the decoders, the file wrapper, and the email client.

Contents
--------
* :class:`JbouquetError` – umbrella base class for every library failure.
* :class:`NotFound` – a filename could not be resolved in any location.
* :class:`ParseError` – YAML, properties, or binding failures.
* :class:`FileError` – a :class:`jbouquet.file.File` operation failed.
* :class:`SendError` – SMTP dispatch failed.

System Role
-----------
Adapters raise these exceptions and chain the underlying cause with
``raise ... from``. Callers catch :class:`JbouquetError` to handle all library
failures uniformly.
"""

from __future__ import annotations

from typing import Sequence


class JbouquetError(Exception):
    """Base type for all exceptions emitted by ``jbouquet``."""


class NotFound(JbouquetError, LookupError):
    """Raised when a configuration file is absent from every search location.

    The message names the requested file and lists each attempted location
    template so operators can see where the finder looked.

    Examples
    --------
    >>> error = NotFound("app.yaml", ["./%s"])
    >>> str(error)
    "Could not find the app.yaml file in any location. Locations checked: ['./%s']"
    >>> error.locations
    ('./%s',)
    """

    def __init__(self, filename: str, locations: Sequence[str] = (), message: str | None = None) -> None:
        self.filename = filename
        self.locations = tuple(locations)
        if message is None:
            message = (
                f"Could not find the {filename} file in any location. "
                f"Locations checked: {list(self.locations)}"
            )
        super().__init__(message)


class ParseError(JbouquetError):
    """Raised when YAML or properties text cannot be decoded or bound.

    Typical Sources
    ---------------
    :mod:`yaml` scanner/parser errors, malformed ``\\uXXXX`` escapes in
    properties files, and keys that do not match the target type's fields.
    """


class FileError(JbouquetError):
    """Raised when a file wrapper operation fails; wraps the ``OSError``."""


class SendError(JbouquetError):
    """Raised when an email could not be transmitted to the SMTP relay."""
