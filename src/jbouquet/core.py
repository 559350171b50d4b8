"""Composition root for ``jbouquet`` configuration lookups.

Purpose
-------
Own the ordered search list and expose filename-based lookups over it. The
finder asks the resource locator for each template in turn, stops at the
first hit, and hands the text to the YAML facade or the properties codec.

Contents
--------
* :data:`APP_NAME` / :data:`DEFAULT_LOCATIONS` – built-in search templates.
* :func:`compose_search_list` – ``eds.config`` + caller paths + defaults.
* :class:`ConfigurationFinder` – ``raw``, ``as_map``, ``as_struct``,
  ``as_struct_all``, ``as_properties``, and ``locate``.

System Role
-----------
This module wires the adapters together. :class:`jbouquet.mail.EmailClient`
and the CLI are its consumers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final, Iterable, Sequence

from .adapters.decoders.properties import PropertiesDecoder
from .adapters.decoders.yaml_parser import Target, YamlMapDecoder, parse_all, parse_one
from .adapters.process.default import CONFIG_OPTION, DefaultProcessOptions
from .adapters.resources.default import CLASSPATH_PREFIX, DefaultResourceLocator, parse_url, substitute
from .application.ports import ProcessOptions, ResourceLocator, TextDecoder
from .domain.errors import NotFound
from .domain.properties import Properties
from .observability import log_debug, log_error, log_info

APP_NAME: Final[str] = "jbouquet"

DEFAULT_LOCATIONS: Final[tuple[str, ...]] = (
    "/configs/%s",
    f"/etc/{APP_NAME}/configs/%s",
    f"/etc/{APP_NAME}/configuration/%s",
    "../etc/%s",
    "./%s",
)
"""Built-in templates appended to every search list, in lookup order."""


def compose_search_list(
    additional_paths: Iterable[str | None] | None = None,
    *,
    options: ProcessOptions | None = None,
) -> tuple[str, ...]:
    """Return the effective search list.

    Order: templates named by the ``eds.config`` process option, then
    *additional_paths* (``None`` entries dropped), then
    :data:`DEFAULT_LOCATIONS`. Duplicates are kept.

    Examples
    --------
    >>> opts = DefaultProcessOptions(environ={"EDS_CONFIG": "A,B"}, argv=[])
    >>> compose_search_list(["C"], options=opts)[:4]
    ('A', 'B', 'C', '/configs/%s')
    """

    options = options or DefaultProcessOptions()
    paths: list[str] = list(options.get_list(CONFIG_OPTION))
    if additional_paths is not None:
        paths.extend(path for path in additional_paths if path is not None)
    paths.extend(DEFAULT_LOCATIONS)
    return tuple(paths)


class ConfigurationFinder:
    """Locate configuration files across an ordered list of location templates.

    Why
    ----
    Applications ship configuration in different places depending on the
    deployment (container mounts, ``/etc``, the working directory, packaged
    resources). The finder checks them in a fixed order so the first match
    always wins.

    Parameters
    ----------
    *paths:
        Extra templates searched after ``eds.config`` and before the defaults.
    additional_paths:
        Same as ``*paths`` for callers holding a list; appended after them.
    locator:
        Resource locator; defaults to :class:`DefaultResourceLocator`.
    options:
        Process option source used to read ``eds.config``.
    map_decoder:
        :class:`TextDecoder` behind :meth:`as_map`; defaults to
        :class:`YamlMapDecoder`.
    properties_decoder:
        :class:`TextDecoder` behind :meth:`as_properties`; defaults to
        :class:`PropertiesDecoder`.

    The finder is immutable and keeps no content between calls, so one
    instance may be shared by concurrent callers.

    Examples
    --------
    >>> finder = ConfigurationFinder(options=DefaultProcessOptions(environ={}, argv=[]))
    >>> finder.search_paths[-1]
    './%s'
    """

    def __init__(
        self,
        *paths: str | None,
        additional_paths: Sequence[str | None] | None = None,
        locator: ResourceLocator | None = None,
        options: ProcessOptions | None = None,
        map_decoder: TextDecoder | None = None,
        properties_decoder: TextDecoder | None = None,
    ) -> None:
        extras = [*paths, *(additional_paths or ())]
        self._paths = compose_search_list(extras, options=options)
        self._locator = locator or DefaultResourceLocator()
        self._map_decoder = map_decoder or YamlMapDecoder()
        self._properties_decoder = properties_decoder or PropertiesDecoder()
        log_debug("search_list_composed", count=len(self._paths), paths=list(self._paths))

    @property
    def search_paths(self) -> tuple[str, ...]:
        """The ordered location templates consulted by every lookup."""

        return self._paths

    def raw(self, filename: str) -> str:
        """Return the text of the first location that resolves *filename*.

        Raises
        ------
        NotFound
            When no template resolves; the message lists every template.
        """

        content = self._locator.find_as_text(filename, self._paths)
        if content is None:
            log_error("configuration_not_found", filename=filename, paths=list(self._paths))
            raise NotFound(filename, self._paths)
        log_info("configuration_resolved", filename=filename, size=len(content))
        return content

    def as_map(self, filename: str) -> dict[str, str]:
        """Return *filename*'s top-level YAML mapping with keys and values as text."""

        return dict(self._map_decoder.decode(self.raw(filename), source=filename))

    def as_struct(self, target: Target, filename: str) -> Any:
        """Bind the first YAML document of *filename* to *target*.

        *target* is a dataclass or any callable taking keyword arguments. An
        empty document returns ``None``.
        """

        return parse_one(target, self.raw(filename))

    def as_struct_all(self, target: Target, filename: str) -> list[Any]:
        """Bind every YAML document of *filename* to *target*, in order."""

        return parse_all(target, self.raw(filename))

    def as_properties(self, filename: str) -> Properties:
        """Decode *filename* as a classical properties file."""

        decoded = self._properties_decoder.decode(self.raw(filename), source=filename)
        return decoded if isinstance(decoded, Properties) else Properties(decoded)

    def locate(self, filename: str) -> str | None:
        """Return the absolute path of the first filesystem template holding *filename*.

        URL and ``classpath:`` templates are skipped. This is diagnostic
        only: reads should go through :meth:`raw` so every template kind is
        honoured.
        """

        for template in self._paths:
            if template.startswith(CLASSPATH_PREFIX) or parse_url(template) is not None:
                continue
            candidate = Path(substitute(template, filename))
            try:
                if candidate.exists():
                    return str(candidate.absolute())
            except (OSError, ValueError):
                continue
        return None

    def __repr__(self) -> str:
        return f"ConfigurationFinder(search_paths={list(self._paths)!r})"


__all__ = [
    "APP_NAME",
    "DEFAULT_LOCATIONS",
    "ConfigurationFinder",
    "compose_search_list",
]
