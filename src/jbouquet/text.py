"""String helpers."""

from __future__ import annotations


def is_empty(text: str | None) -> bool:
    """Return ``True`` when *text* is ``None`` or has zero length.

    Whitespace-only strings are not empty.

    Examples
    --------
    >>> is_empty(None), is_empty(""), is_empty(" ")
    (True, True, False)
    """

    return text is None or len(text) == 0
