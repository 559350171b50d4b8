"""Classical properties format codec.

Purpose
-------
Decode (and encode) the line-oriented ``key=value`` format: ``=``/``:``/
whitespace separators, ``#`` and ``!`` comment lines, backslash line
continuation, and ``\\uXXXX`` escapes.

Contents
--------
* :func:`loads` – text to an ordered ``dict[str, str]``.
* :func:`load_properties` – text to a :class:`jbouquet.domain.properties.Properties`.
* :func:`dumps` – mapping to text that :func:`loads` reads back unchanged.
* :class:`PropertiesDecoder` – :class:`jbouquet.application.ports.TextDecoder`
  implementation used by the configuration finder.

Rules
-----
* Natural lines end at ``\\n``, ``\\r`` or ``\\r\\n``; leading spaces, tabs
  and form feeds are skipped.
* A line ending in an odd number of backslashes continues on the next
  line, whose leading whitespace is dropped. Comment lines never continue.
* The key ends at the first unescaped ``=``, ``:`` or whitespace; one
  separator plus surrounding whitespace is consumed.
* Later duplicates replace earlier values.
* A malformed ``\\u`` escape raises :class:`ParseError`.
"""

from __future__ import annotations

import re
from string import hexdigits
from typing import Iterator, Mapping

from ...domain.errors import ParseError
from ...domain.properties import Properties
from ...observability import log_debug, log_error

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_REVERSE_ESCAPES = {"\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}


def loads(text: str, *, source: str | None = None) -> dict[str, str]:
    """Decode properties *text* into an ordered dictionary.

    Examples
    --------
    >>> loads("# comment\\nhost = mx\\nport:25\\nmotd=hello \\\\\\n    world")
    {'host': 'mx', 'port': '25', 'motd': 'hello world'}
    """

    result: dict[str, str] = {}
    for line_number, line in _logical_lines(text):
        raw_key, raw_value = _split_key_value(line)
        key = _unescape(raw_key, line_number, source)
        result[key] = _unescape(raw_value, line_number, source)
    log_debug("properties_parsed", source=source, keys=len(result))
    return result


def load_properties(text: str, *, source: str | None = None) -> Properties:
    """Decode *text* into an immutable :class:`Properties` value."""

    return Properties(loads(text, source=source))


def dumps(mapping: Mapping[str, str], *, comment: str | None = None) -> str:
    """Encode *mapping* so that :func:`loads` returns it unchanged.

    Examples
    --------
    >>> dumps({"port": "25"})
    'port=25\\n'
    >>> loads(dumps({"key with space": "a=b"}))
    {'key with space': 'a=b'}
    """

    lines: list[str] = []
    if comment:
        lines.extend(f"#{entry}" for entry in comment.splitlines())
    for key, value in mapping.items():
        lines.append(f"{_escape(key, escape_space=True)}={_escape(value, escape_space=False)}")
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


class PropertiesDecoder:
    """Decode properties text into a :class:`Properties` value."""

    def decode(self, text: str, *, source: str | None = None) -> Properties:
        return load_properties(text, source=source)


def _logical_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(first_line_number, logical_line)`` pairs, skipping blanks and comments."""

    buffer: str | None = None
    start = 0
    for number, natural in enumerate(_LINE_BREAK.split(text), start=1):
        stripped = natural.lstrip(_WHITESPACE)
        if buffer is None:
            if not stripped or stripped[0] in "#!":
                continue
            start = number
            buffer = ""
        if _continues(stripped):
            buffer += stripped[:-1]
            continue
        yield start, buffer + stripped
        buffer = None
    if buffer is not None:
        yield start, buffer


def _continues(line: str) -> bool:
    count = len(line) - len(line.rstrip("\\"))
    return count % 2 == 1


def _split_key_value(line: str) -> tuple[str, str]:
    length = len(line)
    key_end = length
    value_start = length
    has_separator = False
    index = 0
    while index < length:
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS:
            key_end, value_start, has_separator = index, index + 1, True
            break
        if char in _WHITESPACE:
            key_end, value_start = index, index + 1
            break
        index += 1
    while value_start < length and line[value_start] in _WHITESPACE:
        value_start += 1
    if not has_separator and value_start < length and line[value_start] in _SEPARATORS:
        value_start += 1
        while value_start < length and line[value_start] in _WHITESPACE:
            value_start += 1
    return line[:key_end], line[value_start:]


def _unescape(raw: str, line_number: int, source: str | None) -> str:
    if "\\" not in raw:
        return raw
    chars: list[str] = []
    index = 0
    length = len(raw)
    while index < length:
        char = raw[index]
        index += 1
        if char != "\\":
            chars.append(char)
            continue
        if index >= length:
            break
        char = raw[index]
        index += 1
        if char == "u":
            digits = raw[index:index + 4]
            if len(digits) != 4 or any(digit not in hexdigits for digit in digits):
                log_error("properties_invalid", source=source, line=line_number)
                raise ParseError(f"Malformed \\uxxxx encoding on line {line_number} of {source or '<text>'}")
            chars.append(chr(int(digits, 16)))
            index += 4
            continue
        chars.append(_ESCAPES.get(char, char))
    return _join_surrogates("".join(chars))


def _join_surrogates(text: str) -> str:
    """Combine UTF-16 surrogate pairs produced by consecutive ``\\u`` escapes."""

    if not any("\ud800" <= char <= "\udfff" for char in text):
        return text
    try:
        return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le")
    except UnicodeDecodeError:
        return text


def _escape(text: str, *, escape_space: bool) -> str:
    out: list[str] = []
    for index, char in enumerate(text):
        if char == " ":
            out.append("\\ " if escape_space or index == 0 else " ")
        elif char in _REVERSE_ESCAPES:
            out.append(_REVERSE_ESCAPES[char])
        elif char in "=:#!\\":
            out.append("\\" + char)
        elif " " < char <= "~":
            out.append(char)
        else:
            out.extend(f"\\u{unit:04X}" for unit in _utf16_units(char))
    return "".join(out)


def _utf16_units(char: str) -> list[int]:
    code = ord(char)
    if code <= 0xFFFF:
        return [code]
    code -= 0x10000
    return [0xD800 + (code >> 10), 0xDC00 + (code & 0x3FF)]
