"""Immutable filesystem path handle with bulk file operations.

Purpose
-------
Wrap a path in a value object and expose the everyday operations callers
reach for: hide/unhide, rename, move, touch, whole-file reads and writes,
copying, and directory creation or removal.

Contents
--------
* :class:`File` – frozen handle; every operation that changes the on-disk
  name returns a new handle and leaves the receiver pointing at the old,
  now missing path.
* :func:`copy` – stream-to-stream copy helper.

Every failure except :meth:`File.delete_quietly` raises
:class:`jbouquet.domain.errors.FileError` chained to the ``OSError``.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union

from .domain.errors import FileError
from .observability import log_debug, log_error

PathLike = Union[str, "os.PathLike[str]"]


def copy(source: BinaryIO, target: BinaryIO, *, close_input: bool = False) -> None:
    """Copy *source* into *target*, optionally closing *source* afterwards."""

    try:
        shutil.copyfileobj(source, target)
    except OSError as exc:
        raise FileError(f"Stream copy failed: {exc}") from exc
    finally:
        if close_input:
            source.close()


@dataclass(frozen=True)
class File:
    """Immutable handle to a filesystem path.

    Examples
    --------
    >>> File("/tmp/report.txt").name
    'report.txt'
    >>> File("/tmp/report.txt").parent
    File(path='/tmp')
    """

    path: str

    def __init__(self, path: PathLike) -> None:
        object.__setattr__(self, "path", os.path.abspath(os.fspath(path)))

    def __fspath__(self) -> str:
        return self.path

    def __str__(self) -> str:
        return self.path

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def parent(self) -> File:
        return File(os.path.dirname(self.path))

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def hide(self) -> File:
        """Rename to ``.<name>`` in the same directory and return the new handle."""

        return self.rename(f".{self.name}")

    def unhide(self) -> File:
        """Strip one leading dot from the name; a visible file keeps its name."""

        name = self.name
        if not name.startswith("."):
            return self
        return self.rename(name[1:])

    def rename(self, new_name: str) -> File:
        """Rename within the current directory and return the new handle."""

        target = File(os.path.join(os.path.dirname(self.path), new_name))
        if target.path == self.path:
            return target
        try:
            os.rename(self.path, target.path)
        except OSError as exc:
            raise self._failure("rename", exc) from exc
        log_debug("file_renamed", path=self.path, target=target.path)
        return target

    def move(self, directory: PathLike, create_parents: bool = False, overwrite: bool = True) -> File:
        """Move into *directory* keeping the name and return the new handle.

        With *overwrite* an existing target is deleted first. With
        *create_parents* missing directories are created; otherwise a missing
        destination raises :class:`FileError`. Moving into the current
        directory leaves the file untouched.
        """

        destination = Path(os.fspath(directory))
        target = File(destination / self.name)
        if os.path.normcase(target.path) == os.path.normcase(self.path):
            return self
        try:
            if not destination.is_dir():
                if not create_parents:
                    raise FileNotFoundError(f"Destination directory {destination} does not exist")
                destination.mkdir(parents=True, exist_ok=True)
            if os.path.lexists(target.path):
                if not overwrite:
                    raise FileExistsError(f"Destination {target.path} already exists")
                if os.path.isdir(target.path) and not os.path.islink(target.path):
                    shutil.rmtree(target.path)
                else:
                    os.remove(target.path)
            shutil.move(self.path, target.path)
        except OSError as exc:
            raise self._failure("move", exc) from exc
        log_debug("file_moved", path=self.path, target=target.path)
        return target

    def touch(self) -> None:
        """Create the file if absent, otherwise set its modification time to now."""

        try:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            Path(self.path).touch(exist_ok=True)
            os.utime(self.path, None)
        except OSError as exc:
            raise self._failure("touch", exc) from exc

    def write_text(self, text: str, encoding: str = "utf-8") -> None:
        self.write_bytes(text.encode(encoding))

    def write_bytes(self, data: bytes) -> None:
        try:
            self._ensure_parent()
            Path(self.path).write_bytes(data)
        except OSError as exc:
            raise self._failure("write", exc) from exc

    def write(self, stream: BinaryIO) -> None:
        """Replace the contents with *stream*; the stream is always closed."""

        try:
            self._ensure_parent()
            with open(self.path, "wb") as handle:
                copy(stream, handle)
        except OSError as exc:
            raise self._failure("write", exc) from exc
        finally:
            stream.close()

    def read_text(self, encoding: str = "utf-8") -> str:
        try:
            return Path(self.path).read_text(encoding=encoding)
        except OSError as exc:
            raise self._failure("read", exc) from exc

    def read_bytes(self) -> bytes:
        try:
            return Path(self.path).read_bytes()
        except OSError as exc:
            raise self._failure("read", exc) from exc

    def read_to(self, stream: BinaryIO) -> None:
        """Copy the whole file into *stream*, which stays open."""

        try:
            with open(self.path, "rb") as handle:
                copy(handle, stream)
        except OSError as exc:
            raise self._failure("read", exc) from exc

    def copy_to_directory(self, directory: PathLike) -> File:
        """Copy into *directory* (created if needed) keeping the name and metadata."""

        destination = Path(os.fspath(directory))
        try:
            if destination.exists() and not destination.is_dir():
                raise NotADirectoryError(f"Destination {destination} is not a directory")
            destination.mkdir(parents=True, exist_ok=True)
            copied = shutil.copy2(self.path, destination / self.name)
        except OSError as exc:
            raise self._failure("copy", exc) from exc
        return File(copied)

    def create_directory(self) -> None:
        """Create this path as a directory, including missing ancestors."""

        try:
            Path(self.path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise self._failure("create directory", exc) from exc

    def delete_directory(self) -> None:
        """Recursively delete this directory."""

        try:
            shutil.rmtree(self.path)
        except OSError as exc:
            raise self._failure("delete directory", exc) from exc

    def delete_quietly(self) -> bool:
        """Delete the file or directory, reporting success instead of raising."""

        try:
            if os.path.isdir(self.path) and not os.path.islink(self.path):
                shutil.rmtree(self.path)
            else:
                os.remove(self.path)
        except OSError as exc:
            log_debug("file_delete_ignored", path=self.path, error=str(exc))
            return False
        return True

    def _ensure_parent(self) -> None:
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)

    def _failure(self, operation: str, exc: OSError) -> FileError:
        log_error("file_operation_failed", operation=operation, path=self.path, error=str(exc))
        return FileError(f"Could not {operation} {self.path}: {exc}")
