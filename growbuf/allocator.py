# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Storage allocation primitive used by buffers when they grow.

The allocator is the only place where memory is requested. It never resizes
storage in place: every call hands back a fresh ``bytearray`` so views taken
on the previous storage keep pointing at the old bytes instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass


class GrowBufError(RuntimeError):
    """Base exception for buffer failures."""


class AllocationError(GrowBufError):
    """Raised when storage of the requested size cannot be provided."""


@dataclass
class Allocator:
    """Hands out byte storage, optionally capped at ``max_capacity`` bytes."""

    max_capacity: int | None = None

    def realloc(self, data: bytearray | None, size: int, keep: int = 0) -> bytearray:
        """Return new storage of exactly ``size`` bytes.

        The first ``keep`` bytes of ``data`` are copied over; the rest is zeroed.

        Raises:
            AllocationError: If ``size`` exceeds the ceiling or the interpreter
                runs out of memory.
        """
        if size < 0:
            raise ValueError("allocation size must not be negative")
        if self.max_capacity is not None and size > self.max_capacity:
            raise AllocationError(
                f"requested {size} bytes, ceiling is {self.max_capacity}"
            )
        try:
            storage = bytearray(size)
        except MemoryError as error:
            raise AllocationError(f"out of memory allocating {size} bytes") from error
        if data is not None and keep:
            storage[:keep] = data[:keep]
        return storage


DEFAULT_ALLOCATOR = Allocator()
