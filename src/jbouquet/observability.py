"""Structured logging for lookups, file operations and mail dispatch.

Purpose
    Give every component one way to emit an event: a snake_case event name
    as the log message and a ``context`` dict carrying the event fields plus
    the current trace id. Host applications choose handlers and formatters.

Contents
    - ``TRACE_ID``: context variable holding the caller's trace id.
    - ``get_logger``: the ``jbouquet`` logger, silent until configured.
    - ``bind_trace_id``: set or clear ``TRACE_ID``.
    - ``log_debug`` / ``log_info`` / ``log_warning`` / ``log_error``: event
      emitters, one per level.
    - ``make_event``: payload for one resource check (``location`` and
      ``outcome``).

System Integration
    The resource locator logs each template it checks, the finder logs hits
    and misses, decoders log parse failures, and the file wrapper and email
    client log failed operations.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Final, Mapping

TRACE_ID: ContextVar[str | None] = ContextVar("jbouquet_trace_id", default=None)
"""Trace id copied into the ``context`` of every record emitted in this context."""

_LOGGER: Final[logging.Logger] = logging.getLogger("jbouquet")
_LOGGER.addHandler(logging.NullHandler())


def get_logger() -> logging.Logger:
    """Return the ``jbouquet`` logger.

    Nothing is printed until the application attaches a handler or
    configures logging globally.
    """

    return _LOGGER


def bind_trace_id(trace_id: str | None) -> None:
    """Set the trace id for subsequent events; ``None`` clears it.

    Examples
    --------
    >>> bind_trace_id('req-42')
    >>> TRACE_ID.get()
    'req-42'
    >>> bind_trace_id(None)
    >>> TRACE_ID.get() is None
    True
    """

    TRACE_ID.set(trace_id)


def log_debug(event: str, **fields: Any) -> None:
    _log(logging.DEBUG, event, fields)


def log_info(event: str, **fields: Any) -> None:
    _log(logging.INFO, event, fields)


def log_warning(event: str, **fields: Any) -> None:
    _log(logging.WARNING, event, fields)


def log_error(event: str, **fields: Any) -> None:
    _log(logging.ERROR, event, fields)


def make_event(
    location: str,
    outcome: str,
    payload: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Describe one resource check.

    Inputs
        location: the location tried, after ``%s`` substitution.
        outcome: ``"PASS"`` when it resolved, ``"FAILED"`` otherwise.
        payload: extra fields such as the template and filename.

    Examples
    --------
    >>> make_event('./app.yaml', 'PASS', {'source': 'filesystem'})
    {'location': './app.yaml', 'outcome': 'PASS', 'source': 'filesystem'}
    """

    event: dict[str, Any] = {"location": location, "outcome": outcome}
    if payload:
        event |= dict(payload)
    return event


def _log(level: int, event: str, fields: Mapping[str, Any]) -> None:
    if _LOGGER.isEnabledFor(level):
        _LOGGER.log(level, event, extra={"context": {"trace_id": TRACE_ID.get(), **fields}})
