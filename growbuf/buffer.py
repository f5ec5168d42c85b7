# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Growable byte buffer for accumulating rendered output.

Model:
  - A buffer owns one contiguous storage block of ``capacity`` bytes, of which
    the first ``size`` bytes are content.
  - Storage only grows, in whole multiples of the growth ``unit``. Growing
    swaps in new storage, so a ``view()`` taken earlier keeps showing the old
    bytes and must be fetched again after any mutating call.
  - Allocation failure surfaces as a ``False`` result from the mutator that
    needed the room, with size and content left exactly as they were.

Defined here:
  - Buffer: record owned by this module; ``free()`` retires it.
  - EmbeddedBuffer: record owned by the caller; ``free()`` only drops storage.
  - buf_new / buf_free: function-style construction and destruction.
"""

from __future__ import annotations

import logging
from typing import Any, BinaryIO

from .allocator import DEFAULT_ALLOCATOR, AllocationError, Allocator, GrowBufError
from .config import BufferConfig
from .fmt import bounded_format

logger = logging.getLogger(__name__)

BytesLike = bytes | bytearray | memoryview


class BufferReleasedError(GrowBufError):
    """Raised when a freed Buffer is used again."""


def _c_string(text: str | BytesLike) -> bytes:
    """Return ``text`` as bytes, cut at the first NUL like ``strlen``."""
    if isinstance(text, str):
        raw = text.encode("utf-8")
    elif isinstance(text, (bytes, bytearray, memoryview)):
        raw = bytes(text)
    else:
        raise TypeError(f"expected str or bytes-like text, not {type(text).__name__}")
    end = raw.find(b"\0")
    return raw if end == -1 else raw[:end]


def _byte_value(value: int | str | BytesLike) -> int:
    if isinstance(value, int):
        if not 0 <= value <= 255:
            raise ValueError("byte value must be between 0 and 255")
        return value
    raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)
    if len(raw) != 1:
        raise ValueError("putc expects exactly one byte")
    return raw[0]


class Buffer:
    """Growable byte buffer whose record is owned by this module."""

    owns_record = True

    def __init__(self, unit: int, allocator: Allocator | None = None) -> None:
        if unit < 0:
            raise ValueError("growth unit must not be negative")
        self._allocator = allocator or DEFAULT_ALLOCATOR
        self._released = False
        self._reset(unit)

    @classmethod
    def new(cls, unit: int) -> Buffer:
        """Create an empty buffer growing by ``unit`` bytes."""
        return cls(unit)

    @classmethod
    def from_config(cls, config: BufferConfig) -> Buffer:
        """Create an empty buffer using the configured unit and ceiling."""
        return cls(config.unit, allocator=Allocator(max_capacity=config.max_capacity))

    def _reset(self, unit: int) -> None:
        self._data: bytearray | None = None
        self._size = 0
        self.unit = unit

    @property
    def size(self) -> int:
        """Number of content bytes."""
        return self._size

    @property
    def capacity(self) -> int:
        """Number of allocated bytes."""
        return len(self._data) if self._data is not None else 0

    def _check_live(self) -> None:
        if self._released:
            raise BufferReleasedError("buffer has been freed")

    def _require_unit(self) -> None:
        self._check_live()
        if not self.unit:
            raise ValueError("buffer has no growth unit")

    def view(self) -> memoryview:
        """Read-only view of the content, valid until the next mutating call."""
        self._check_live()
        if self._data is None:
            return memoryview(b"")
        return memoryview(self._data)[: self._size].toreadonly()

    def getvalue(self) -> bytes:
        """Return a copy of the content."""
        return bytes(self.view())

    def grow(self, target: int) -> bool:
        """Make room for at least ``target`` bytes.

        The new capacity is the old one plus the fewest whole units that reach
        ``target``. Returns False, leaving the buffer untouched, when the
        allocator cannot provide the storage.
        """
        self._check_live()
        if target < 0:
            raise ValueError("target capacity must not be negative")
        capacity = self.capacity
        if capacity >= target:
            return True
        if not self.unit:
            raise ValueError("buffer has no growth unit")

        steps = -(-(target - capacity) // self.unit)
        new_capacity = capacity + steps * self.unit
        try:
            self._data = self._allocator.realloc(self._data, new_capacity, keep=self._size)
        except AllocationError as error:
            logger.warning("cannot grow buffer from %d to %d bytes: %s", capacity, new_capacity, error)
            return False
        logger.debug("buffer grew from %d to %d bytes", capacity, new_capacity)
        return True

    def put(self, data: BytesLike | None) -> bool:
        """Append raw bytes. Empty or None input is a successful no-op."""
        self._require_unit()
        if data is None:
            return True
        chunk = memoryview(data).cast("B")
        length = chunk.nbytes
        if not length:
            return True
        if not self.grow(self._size + length):
            return False
        self._data[self._size : self._size + length] = chunk
        self._size += length
        return True

    def putb(self, other: Buffer) -> bool:
        """Append the content of another buffer."""
        if not isinstance(other, Buffer):
            raise TypeError("putb expects a Buffer")
        return self.put(other.view())

    def puts(self, text: str | BytesLike) -> bool:
        """Append a string up to its first NUL; ``str`` is UTF-8 encoded."""
        return self.put(_c_string(text))

    def putc(self, value: int | str | BytesLike) -> bool:
        """Append a single byte."""
        self._require_unit()
        byte = _byte_value(value)
        if not self.grow(self._size + 1):
            return False
        self._data[self._size] = byte
        self._size += 1
        return True

    def putf(self, stream: BinaryIO) -> bool:
        """Append everything readable from a binary ``stream``.

        Reads up to ``unit`` bytes at a time until end of input. Returns False
        on a read error or when growing fails; bytes read before that stay in
        the buffer.
        """
        self._require_unit()
        readinto = getattr(stream, "readinto", None)
        while True:
            if not self.grow(self._size + self.unit):
                return False
            start = self._size
            try:
                if readinto is not None:
                    count = readinto(memoryview(self._data)[start : start + self.unit])
                else:
                    chunk = stream.read(self.unit)
                    if isinstance(chunk, str):
                        raise TypeError("stream must be opened in binary mode")
                    count = None if chunk is None else len(chunk)
                    if count and count > self.unit:
                        raise ValueError("stream returned more bytes than requested")
                    if count:
                        self._data[start : start + count] = chunk
            except OSError as error:
                logger.warning("stream read failed after %d bytes: %s", self._size, error)
                return False
            if count is None:
                logger.warning("stream has no data available without blocking")
                return False
            if not count:
                return True
            self._size += count

    def _spare(self) -> memoryview:
        return memoryview(self._data)[self._size :]

    def printf(self, fmt: str | bytes, *args: Any) -> bool:
        """Append ``fmt % args``.

        The output is first rendered into the spare capacity; when it does not
        fit, the buffer grows to hold it plus a terminator and renders again.
        A format that cannot be applied to ``args`` appends nothing and
        returns False.
        """
        self._require_unit()
        if self._size >= self.capacity and not self.grow(self._size + 1):
            return False

        written = bounded_format(self._spare(), fmt, args)
        if written < 0:
            logger.debug("format %r rejected its arguments", fmt)
            return False

        if written >= self.capacity - self._size:
            if not self.grow(self._size + written + 1):
                return False
            written = bounded_format(self._spare(), fmt, args)
            if written < 0 or written >= self.capacity - self._size:
                return False

        self._size += written
        return True

    def truncate(self) -> None:
        """Drop the content, keeping the allocated storage."""
        self._check_live()
        self._size = 0

    def eq(self, other: Buffer) -> bool:
        """True if both buffers hold the same bytes."""
        if not isinstance(other, Buffer):
            raise TypeError("eq expects a Buffer")
        return self.size == other.size and self.view() == other.view()

    def streq(self, text: str | BytesLike) -> bool:
        """True if the content is exactly ``text``."""
        expected = _c_string(text)
        return self.size == len(expected) and self.view() == expected

    def strprefix(self, text: str | BytesLike) -> bool:
        """True if the content starts with ``text``."""
        expected = _c_string(text)
        return self.size >= len(expected) and self.view()[: len(expected)] == expected

    def clone(self) -> Buffer:
        """Deep copy of the content into storage sized to fit it exactly.

        Raises:
            AllocationError: If the copy cannot be allocated.
        """
        self._check_live()
        twin = type(self)(self.unit, allocator=self._allocator)
        if self._size:
            twin._data = self._allocator.realloc(self._data, self._size, keep=self._size)
            twin._size = self._size
        return twin

    def free(self) -> None:
        """Release the storage and retire the buffer."""
        self._check_live()
        self._data = None
        self._size = 0
        self._released = True

    def __enter__(self) -> Buffer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self._released:
            self.free()

    def __len__(self) -> int:
        return self._size

    def __bytes__(self) -> bytes:
        return self.getvalue()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Buffer):
            return NotImplemented
        return self.eq(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "freed" if self._released else f"size={self._size} capacity={self.capacity}"
        return f"<{type(self).__name__} {state} unit={self.unit}>"


class EmbeddedBuffer(Buffer):
    """Buffer whose record belongs to the caller.

    ``free()`` drops the storage but leaves the record usable, as if freshly
    initialised with the same unit.
    """

    owns_record = False

    def init(self, unit: int) -> None:
        """Re-initialise the record in place, dropping any storage."""
        if unit < 0:
            raise ValueError("growth unit must not be negative")
        self._reset(unit)

    def free(self) -> None:
        self._reset(self.unit)


def buf_new(unit: int) -> Buffer:
    """Create an empty, module-owned buffer."""
    return Buffer.new(unit)


def buf_free(buf: Buffer | None) -> None:
    """Free ``buf``; passing None does nothing."""
    if buf is None:
        return
    buf.free()
