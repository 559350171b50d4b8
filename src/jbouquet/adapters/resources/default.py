"""Resource location adapter.

Purpose
-------
Implement the :class:`jbouquet.application.ports.ResourceLocator` protocol:
load one location string (URL, ``classpath:`` path, filesystem path, or bare
embedded-resource path) as text, and walk an ordered template list until the
first location resolves.

Contents
--------
* :class:`DefaultResourceLocator` – scheme dispatch, embedded namespace, and
  ordered template search.
* :func:`substitute` – ``%s`` placeholder replacement.
* :func:`get_as_text` / :func:`find_as_text` – module-level conveniences using
  a default locator.

Lookup order
------------
1. URL with scheme ``http``, ``https``, ``file`` or ``ftp``.
2. ``classpath:`` prefix, loaded from the embedded namespace.
3. Existing regular file on the filesystem.
4. Embedded namespace without prefix.

The embedded namespace is the Python rendition of a JVM classpath: anchor
packages read through :mod:`importlib.resources`, then plain directory roots
(``sys.path`` by default).

Read failures other than "absent" are logged as ``resource_read_failed``
warnings and then reported as not found.
"""

from __future__ import annotations

import sys
import urllib.error
import urllib.request
from importlib import resources
from pathlib import Path
from typing import Iterable, Sequence
from urllib.parse import SplitResult, urlsplit

import httpx

from ...observability import log_debug, log_info, log_warning, make_event

#: Prefix that forces a lookup in the embedded resource namespace.
CLASSPATH_PREFIX = "classpath:"

#: Placeholder replaced by the requested filename.
PLACEHOLDER = "%s"

DEFAULT_ENCODING = "utf-8"
DEFAULT_TIMEOUT = 30.0

_URL_SCHEMES = frozenset({"http", "https", "file", "ftp"})


def substitute(template: str, arg: str | None) -> str:
    """Replace the ``%s`` placeholder in *template* with *arg*.

    Templates without a placeholder, and calls without *arg*, return the
    template unchanged.

    Examples
    --------
    >>> substitute('/etc/demo/%s', 'app.yaml')
    '/etc/demo/app.yaml'
    >>> substitute('/etc/demo/fixed.yaml', 'app.yaml')
    '/etc/demo/fixed.yaml'
    """

    if arg is None or PLACEHOLDER not in template:
        return template
    return template.replace(PLACEHOLDER, arg)


class DefaultResourceLocator:
    """Resolve locations across URLs, the filesystem, and embedded resources."""

    def __init__(
        self,
        *,
        anchors: Sequence[str] = (),
        roots: Sequence[str | Path] | None = None,
        encoding: str = DEFAULT_ENCODING,
        timeout: float | None = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Store the embedded namespace and network settings.

        Parameters
        ----------
        anchors:
            Importable package names whose data files form the first part of
            the embedded namespace.
        roots:
            Directories forming the second part of the embedded namespace.
            ``None`` means the directories on :data:`sys.path` at lookup time.
        encoding:
            Charset used to decode resolved bytes. Undecodable bytes are
            replaced rather than rejected.
        timeout:
            Connect/read deadline in seconds for URL fetches.
        transport:
            Optional ``httpx`` transport, mainly for tests.
        """

        self.anchors = tuple(anchors)
        self.roots = None if roots is None else tuple(Path(root) for root in roots)
        self.encoding = encoding
        self.timeout = timeout
        self._transport = transport

    def get_as_text(self, location: str) -> str | None:
        """Return the content of *location* decoded as text, or ``None``."""

        data = self.get_resource(location)
        if data is None:
            return None
        return data.decode(self.encoding, errors="replace")

    def get_resource(self, location: str) -> bytes | None:
        """Return the raw bytes of *location*, or ``None`` when it does not resolve."""

        if not location:
            return None
        url = parse_url(location)
        if url is not None:
            return self._fetch_url(location, url)
        if location.startswith(CLASSPATH_PREFIX):
            return self._read_embedded(location[len(CLASSPATH_PREFIX):])
        path = Path(location)
        if _is_file(path):
            return self._read_file(path, location)
        return self._read_embedded(location)

    def find_as_text(self, arg: str | None, templates: Iterable[str]) -> str | None:
        """Return the content of the first template that resolves after substitution.

        Every attempt is logged at info level as ``resource_checked`` with a
        ``PASS`` or ``FAILED`` outcome.
        """

        for template in templates:
            location = substitute(template, arg)
            content = self.get_as_text(location)
            outcome = "PASS" if content is not None else "FAILED"
            log_info("resource_checked", **make_event(location, outcome, {"template": template, "filename": arg}))
            if content is not None:
                return content
        return None

    def _fetch_url(self, location: str, url: SplitResult) -> bytes | None:
        scheme = url.scheme.lower()
        if scheme == "file":
            path = Path(urllib.request.url2pathname(url.path))
            if not _is_file(path):
                return None
            return self._read_file(path, location)
        if scheme in ("http", "https"):
            try:
                with httpx.Client(timeout=self.timeout, transport=self._transport, follow_redirects=True) as client:
                    response = client.get(location)
                    response.raise_for_status()
                    payload = response.content
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                log_warning("resource_read_failed", location=location, source="url", error=str(exc))
                return None
            log_debug("resource_read", location=location, source="url", size=len(payload))
            return payload
        try:
            with urllib.request.urlopen(location, timeout=self.timeout) as response:
                payload = response.read()
        except (urllib.error.URLError, OSError, ValueError) as exc:
            log_warning("resource_read_failed", location=location, source="url", error=str(exc))
            return None
        log_debug("resource_read", location=location, source="url", size=len(payload))
        return payload

    def _read_file(self, path: Path, location: str) -> bytes | None:
        try:
            payload = path.read_bytes()
        except OSError as exc:
            log_warning("resource_read_failed", location=location, source="filesystem", error=str(exc))
            return None
        log_debug("resource_read", location=location, source="filesystem", size=len(payload))
        return payload

    def _read_embedded(self, location: str) -> bytes | None:
        parts = _embedded_parts(location)
        if not parts:
            return None
        for anchor in self.anchors:
            try:
                candidate = resources.files(anchor)
            except ModuleNotFoundError:
                log_debug("resource_anchor_missing", anchor=anchor)
                continue
            for part in parts:
                candidate = candidate / part
            if candidate.is_file():
                try:
                    payload = candidate.read_bytes()
                except OSError as exc:
                    log_warning("resource_read_failed", location=location, source="classpath", error=str(exc))
                    return None
                log_debug("resource_read", location=location, source="classpath", anchor=anchor, size=len(payload))
                return payload
        for root in self._iter_roots():
            path = root.joinpath(*parts)
            if _is_file(path):
                return self._read_file(path, location)
        return None

    def _iter_roots(self) -> Iterable[Path]:
        if self.roots is not None:
            return self.roots
        return [Path(entry) for entry in sys.path if entry and Path(entry).is_dir()]


def parse_url(location: str) -> SplitResult | None:
    """Return the split URL when *location* uses a supported URL scheme.

    Single-letter schemes are Windows drive letters, not URLs. Malformed
    ``http``/``https`` locations are not URLs either; they fall through to
    the classpath, filesystem and embedded lookups.

    Examples
    --------
    >>> parse_url('https://example.com/app.yaml').netloc
    'example.com'
    >>> parse_url('classpath:app.yaml') is None
    True
    >>> parse_url('C:/configs/app.yaml') is None
    True
    >>> parse_url('http://cfg:${PORT}/app.yaml') is None
    True
    """

    try:
        parts = urlsplit(location)
    except ValueError:
        return None
    scheme = parts.scheme.lower()
    if len(scheme) < 2 or scheme not in _URL_SCHEMES:
        return None
    if scheme in ("http", "https"):
        try:
            httpx.URL(location)
        except httpx.InvalidURL as exc:
            log_debug("resource_url_invalid", location=location, error=str(exc))
            return None
    return parts


def _embedded_parts(location: str) -> list[str]:
    """Split *location* into embedded-namespace segments.

    Returns an empty list for empty paths and for paths that climb with
    ``..`` so lookups never leave a root.

    Examples
    --------
    >>> _embedded_parts('/configs/./app.yaml')
    ['configs', 'app.yaml']
    >>> _embedded_parts('../etc/app.yaml')
    []
    """

    parts = [part for part in location.replace("\\", "/").split("/") if part not in ("", ".")]
    if ".." in parts:
        return []
    return parts


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except (OSError, ValueError):
        return False


_DEFAULT_LOCATOR = DefaultResourceLocator()


def get_as_text(location: str) -> str | None:
    """Resolve *location* with the default locator."""

    return _DEFAULT_LOCATOR.get_as_text(location)


def find_as_text(arg: str | None, templates: Iterable[str]) -> str | None:
    """Search *templates* with the default locator."""

    return _DEFAULT_LOCATOR.find_as_text(arg, templates)
