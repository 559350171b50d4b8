"""Process option adapter.

Purpose
-------
Read process-level options such as ``eds.config`` from the places a Python
process can be configured. This is the Python counterpart of a JVM ``-D``
system property and keeps the option name and its comma separated grammar.

Key behaviours
--------------
* Explicit values registered with :func:`set_process_option` win.
* Then process arguments ``-D<name>=<value>`` or ``--<name>=<value>``.
* Then the environment, first under the literal name and then under
  :func:`env_var_name` (``eds.config`` -> ``EDS_CONFIG``).
* :meth:`DefaultProcessOptions.get_list` splits on commas and drops blanks.
"""

from __future__ import annotations

import os
import sys
from typing import Mapping, Sequence

from ...observability import log_debug

#: Name of the option that prepends locations to every configuration finder.
CONFIG_OPTION = "eds.config"

_EXPLICIT: dict[str, str] = {}


def env_var_name(name: str) -> str:
    """Return the environment variable spelling of option *name*.

    Examples
    --------
    >>> env_var_name('eds.config')
    'EDS_CONFIG'
    """

    return name.replace(".", "_").replace("-", "_").upper()


def set_process_option(name: str, value: str | None) -> None:
    """Register *value* for option *name*; ``None`` removes the registration.

    Examples
    --------
    >>> set_process_option('demo.option', 'a,b')
    >>> DefaultProcessOptions(environ={}, argv=[]).get('demo.option')
    'a,b'
    >>> set_process_option('demo.option', None)
    >>> DefaultProcessOptions(environ={}, argv=[]).get('demo.option') is None
    True
    """

    if value is None:
        _EXPLICIT.pop(name, None)
    else:
        _EXPLICIT[name] = value


class DefaultProcessOptions:
    """Resolve named options from the explicit registry, argv, and environment."""

    def __init__(
        self,
        *,
        environ: Mapping[str, str] | None = None,
        argv: Sequence[str] | None = None,
    ) -> None:
        """Capture the sources to read from.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        argv:
            Process arguments to scan. Defaults to ``sys.argv[1:]``.
        """

        self._environ = os.environ if environ is None else environ
        self._argv = list(sys.argv[1:] if argv is None else argv)

    def get(self, name: str) -> str | None:
        """Return the raw value of option *name* or ``None`` when unset."""

        if name in _EXPLICIT:
            log_debug("process_option", option=name, source="explicit")
            return _EXPLICIT[name]
        from_argv = self._from_argv(name)
        if from_argv is not None:
            log_debug("process_option", option=name, source="argv")
            return from_argv
        for key in (name, env_var_name(name)):
            if key in self._environ:
                log_debug("process_option", option=name, source="environment", variable=key)
                return self._environ[key]
        return None

    def get_list(self, name: str) -> list[str]:
        """Return option *name* split on commas with blank entries removed.

        Examples
        --------
        >>> DefaultProcessOptions(environ={'EDS_CONFIG': 'a/%s, ,b/%s'}, argv=[]).get_list('eds.config')
        ['a/%s', 'b/%s']
        """

        raw = self.get(name)
        if raw is None:
            return []
        return [item.strip() for item in raw.split(",") if item.strip()]

    def _from_argv(self, name: str) -> str | None:
        value = None
        for prefix in (f"-D{name}=", f"--{name}="):
            for arg in self._argv:
                if arg.startswith(prefix):
                    value = arg[len(prefix):]
            if value is not None:
                return value
        return None
