# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial

"""Growable byte buffers for incremental document output."""

from .allocator import AllocationError, Allocator, GrowBufError
from .buffer import Buffer, BufferReleasedError, EmbeddedBuffer, buf_free, buf_new
from .config import BufferConfig, load_config
from .fmt import bounded_format

__all__ = [
    "AllocationError",
    "Allocator",
    "Buffer",
    "BufferConfig",
    "BufferReleasedError",
    "EmbeddedBuffer",
    "GrowBufError",
    "bounded_format",
    "buf_free",
    "buf_new",
    "load_config",
]
