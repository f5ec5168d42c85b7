# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Bounded printf-style rendering into a fixed-size destination."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def render(fmt: str | bytes, args: tuple[Any, ...]) -> bytes:
    """Apply ``%``-formatting and return the result as bytes.

    ``str`` formats are rendered as text and encoded as UTF-8; ``bytes`` formats
    use bytes interpolation directly. A single mapping argument feeds
    ``%(name)s`` style keys.
    """
    values: Any = args
    if len(args) == 1 and isinstance(args[0], Mapping):
        values = args[0]
    if isinstance(fmt, str):
        return (fmt % values).encode("utf-8")
    if isinstance(fmt, (bytes, bytearray)):
        return bytes(fmt) % values
    raise TypeError(f"format must be str or bytes, not {type(fmt).__name__}")


def bounded_format(dest: memoryview, fmt: str | bytes, args: tuple[Any, ...]) -> int:
    """Render into ``dest`` and report the full length, like ``vsnprintf``.

    At most ``len(dest) - 1`` bytes of output are written, always followed by
    a NUL terminator when ``dest`` is non-empty. The return value is the number
    of bytes the complete output needs (terminator excluded), so a result
    ``>= len(dest)`` means the output was cut short. Returns -1 when the format
    cannot be applied to ``args``.
    """
    try:
        out = render(fmt, args)
    except (TypeError, ValueError, OverflowError, UnicodeError):
        return -1

    room = len(dest)
    if room:
        written = min(len(out), room - 1)
        dest[:written] = out[:written]
        dest[written] = 0
    return len(out)
