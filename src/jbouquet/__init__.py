"""Public package surface for ``jbouquet``.

Configuration lookup across URL, filesystem, and embedded locations, a
multipart SMTP client, an immutable file handle, and a string helper.
"""

from __future__ import annotations

from .adapters.decoders.yaml_parser import parse_all, parse_map, parse_one
from .adapters.process.default import CONFIG_OPTION, set_process_option
from .adapters.resources.default import DefaultResourceLocator, find_as_text, get_as_text
from .core import APP_NAME, DEFAULT_LOCATIONS, ConfigurationFinder, compose_search_list
from .domain.errors import FileError, JbouquetError, NotFound, ParseError, SendError
from .domain.properties import Properties
from .file import File
from .mail import Attachment, Email, EmailClient
from .observability import bind_trace_id, get_logger
from .text import is_empty

__all__ = [
    "APP_NAME",
    "CONFIG_OPTION",
    "DEFAULT_LOCATIONS",
    "Attachment",
    "ConfigurationFinder",
    "DefaultResourceLocator",
    "Email",
    "EmailClient",
    "File",
    "FileError",
    "JbouquetError",
    "NotFound",
    "ParseError",
    "Properties",
    "SendError",
    "bind_trace_id",
    "compose_search_list",
    "find_as_text",
    "get_as_text",
    "get_logger",
    "is_empty",
    "parse_all",
    "parse_map",
    "parse_one",
    "set_process_option",
]
