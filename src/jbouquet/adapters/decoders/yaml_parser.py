"""YAML binding facade.

Purpose
-------
Parse YAML text into typed values, lists of typed values, or untyped
``str -> str`` mappings. PyYAML's ``safe_load_all`` does the parsing; this
module owns field binding, text coercion, and error translation.

Contents
--------
* :func:`parse_one` / :func:`parse_all` – bind the first / every document.
* :func:`parse_map` – first document as an ordered ``dict[str, str]``.
* :func:`parse_file` / :func:`parse_file_all` / :func:`parse_resource_all` –
  the same binding fed from a path or a resource location.
* :class:`YamlMapDecoder` – :class:`jbouquet.application.ports.TextDecoder`
  implementation used by the configuration finder.

Binding rules
-------------
Mapping keys bind to fields by name, ``-`` mapping to ``_`` (``smtp-host``
binds ``smtp_host``). Dataclass targets bind nested dataclasses,
``list[...]`` and ``dict[str, ...]`` fields recursively from their resolved
type hints. Other callables receive the mapping as keyword arguments. Keys
without a matching field raise :class:`ParseError`. Targets must be
resolvable at module level; classes defined inside functions cannot have
their string annotations resolved.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from pathlib import Path
from typing import Any, Callable, Mapping, TypeVar, Union

import yaml

from ...application.ports import ResourceLocator
from ...domain.errors import NotFound, ParseError
from ...observability import log_debug, log_error
from ..resources.default import DefaultResourceLocator

T = TypeVar("T")

#: Target accepted by the binding helpers: a dataclass, any callable taking
#: keyword arguments, or ``None`` / ``dict`` for untyped documents.
Target = Union[Callable[..., T], type, None]


def parse_one(target: Target, text: str) -> Any:
    """Bind the first YAML document in *text* to *target*.

    Returns ``None`` when *text* holds no document (empty or comments only).

    Examples
    --------
    >>> parse_one(dict, "name: demo\\nport: 8080")
    {'name': 'demo', 'port': 8080}
    >>> parse_one(dict, "# nothing here") is None
    True
    """

    results = parse_all(target, text, limit=1)
    return results[0] if results else None


def parse_all(target: Target, text: str, *, limit: int | None = None) -> list[Any]:
    """Bind every ``---`` delimited document in *text* to *target*, in order.

    Empty documents inside a stream bind to ``None``. ``limit`` stops after
    that many documents so later malformed documents are not parsed.
    """

    results: list[Any] = []
    try:
        for document in yaml.safe_load_all(text):
            results.append(bind(target, document))
            if limit is not None and len(results) >= limit:
                break
    except yaml.YAMLError as exc:
        log_error("yaml_invalid", reason="syntax", error=str(exc))
        raise ParseError(f"Invalid YAML: {exc}") from exc
    log_debug("yaml_parsed", documents=len(results), target=_target_name(target))
    return results


def parse_map(text: str) -> dict[str, str]:
    """Return the first document's top-level mapping with every key and value as text.

    Booleans render as ``true``/``false``, ``null`` as an empty string, and
    nested collections in YAML flow style. An empty document yields ``{}``.

    Examples
    --------
    >>> parse_map("a: 1\\nb: true\\nc: hello")
    {'a': '1', 'b': 'true', 'c': 'hello'}
    """

    document = parse_one(None, text)
    if document is None:
        return {}
    if not isinstance(document, Mapping):
        log_error("yaml_invalid", reason="not_a_mapping", kind=type(document).__name__)
        raise ParseError(f"Expected a YAML mapping at the document root, got {type(document).__name__}")
    return {to_text(key): to_text(value) for key, value in document.items()}


def parse_file_all(target: Target, path: str | Path) -> list[Any]:
    """Read *path* as UTF-8 and bind every document to *target*."""

    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotFound(str(path), [str(path)]) from exc
    except OSError as exc:
        raise ParseError(f"Could not read YAML file {path}: {exc}") from exc
    return parse_all(target, text)


def parse_file(target: Target, path: str | Path) -> Any:
    """Read *path* and bind its first document to *target*."""

    results = parse_file_all(target, path)
    return results[0] if results else None


def parse_resource_all(target: Target, location: str, locator: ResourceLocator | None = None) -> list[Any]:
    """Resolve *location* through the resource locator and bind every document.

    Raises :class:`NotFound` when the location does not resolve.
    """

    if locator is None:
        locator = DefaultResourceLocator()
    text = locator.get_as_text(location)
    if text is None:
        raise NotFound(location, [location], message=f"The specified resource path {location} does not exist")
    return parse_all(target, text)


def to_text(value: Any) -> str:
    """Return the canonical text form of a YAML scalar or collection.

    Examples
    --------
    >>> to_text(True), to_text(None), to_text(2.5), to_text([1, 2])
    ('true', '', '2.5', '[1, 2]')
    """

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple, dict)):
        return yaml.safe_dump(value, default_flow_style=True, sort_keys=False).strip()
    return str(value)


def bind(target: Target, document: Any) -> Any:
    """Bind one decoded *document* to *target*.

    Examples
    --------
    >>> bind(dict, {"smtp-host": "mx"})
    {'smtp-host': 'mx'}
    """

    if target is None or target is dict or document is None:
        return document
    if dataclasses.is_dataclass(target) and isinstance(target, type):
        return _bind_dataclass(target, document)
    if not isinstance(document, Mapping):
        raise ParseError(f"Cannot bind {type(document).__name__} to {_target_name(target)}; expected a mapping")
    kwargs = {_field_name(key): value for key, value in document.items()}
    try:
        return target(**kwargs)
    except TypeError as exc:
        log_error("yaml_bind_failed", target=_target_name(target), error=str(exc))
        raise ParseError(f"Cannot bind YAML document to {_target_name(target)}: {exc}") from exc


class YamlMapDecoder:
    """Decode YAML text into the flat ``str -> str`` mapping used by ``as_map``."""

    def decode(self, text: str, *, source: str | None = None) -> dict[str, str]:
        try:
            return parse_map(text)
        except ParseError as exc:
            raise ParseError(f"Invalid YAML in {source or '<text>'}: {exc}") from exc


def _bind_dataclass(cls: type, document: Any) -> Any:
    if not isinstance(document, Mapping):
        raise ParseError(f"Cannot bind {type(document).__name__} to {cls.__name__}; expected a mapping")
    try:
        hints = typing.get_type_hints(cls)
    except NameError as exc:
        raise ParseError(f"Cannot resolve field types of {cls.__name__}: {exc}") from exc
    fields = {field.name: field for field in dataclasses.fields(cls) if field.init}
    kwargs: dict[str, Any] = {}
    for key, value in document.items():
        name = _field_name(key)
        if name not in fields:
            log_error("yaml_bind_failed", target=cls.__name__, key=str(key))
            raise ParseError(f"Unknown field {key!r} for {cls.__name__}")
        kwargs[name] = _convert(hints.get(name, Any), value)
    try:
        return cls(**kwargs)
    except TypeError as exc:
        log_error("yaml_bind_failed", target=cls.__name__, error=str(exc))
        raise ParseError(f"Cannot bind YAML document to {cls.__name__}: {exc}") from exc


def _convert(hint: Any, value: Any) -> Any:
    if value is None:
        return None
    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin is Union or origin is types.UnionType:
        candidates = [arg for arg in args if arg is not type(None)]
        if len(candidates) == 1:
            return _convert(candidates[0], value)
        return value
    if dataclasses.is_dataclass(hint) and isinstance(hint, type):
        return _bind_dataclass(hint, value)
    if origin is list and args and isinstance(value, list):
        return [_convert(args[0], item) for item in value]
    if origin is dict and len(args) == 2 and isinstance(value, Mapping):
        return {key: _convert(args[1], item) for key, item in value.items()}
    return value


def _field_name(key: Any) -> str:
    return str(key).replace("-", "_")


def _target_name(target: Target) -> str:
    if target is None:
        return "untyped"
    return getattr(target, "__name__", repr(target))
