"""Shared sandbox helpers for configuration lookup tests.

The sandbox lays out a throwaway directory tree that mirrors how a service
sees its configuration: a working directory (``./%s``), a sibling ``etc``
directory (``../etc/%s``), an override directory for ``eds.config``, and a
directory root acting as the embedded resource namespace. Finders built by
the sandbox never read the host environment or ``sys.path``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from jbouquet.adapters.process.default import DefaultProcessOptions
from jbouquet.adapters.resources.default import DefaultResourceLocator
from jbouquet.core import ConfigurationFinder


@dataclass
class SearchSandbox:
    """Directory layout plus factories for isolated locators and finders."""

    root: Path
    environ: dict[str, str] = field(default_factory=dict)

    @property
    def workdir(self) -> Path:
        return self.root / "app" / "bin"

    @property
    def etc(self) -> Path:
        return self.root / "app" / "etc"

    @property
    def override(self) -> Path:
        return self.root / "override"

    @property
    def classpath(self) -> Path:
        return self.root / "classpath"

    def write(self, area: str, relative: str, content: str) -> Path:
        """Write *content* under one sandbox area (``workdir``, ``etc``, ``override``, ``classpath``)."""

        path = getattr(self, area) / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def locator(self) -> DefaultResourceLocator:
        return DefaultResourceLocator(roots=[self.classpath])

    def options(self) -> DefaultProcessOptions:
        return DefaultProcessOptions(environ=self.environ, argv=[])

    def finder(self, *paths: str) -> ConfigurationFinder:
        return ConfigurationFinder(*paths, locator=self.locator(), options=self.options())


def create_search_sandbox(tmp_path: Path) -> SearchSandbox:
    """Create the sandbox directories under *tmp_path*."""

    sandbox = SearchSandbox(root=tmp_path)
    for directory in (sandbox.workdir, sandbox.etc, sandbox.override, sandbox.classpath):
        directory.mkdir(parents=True, exist_ok=True)
    return sandbox


__all__ = ["SearchSandbox", "create_search_sandbox"]
