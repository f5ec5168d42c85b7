# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Buffer defaults, overridable through ``GROWBUF_*`` environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_UNIT = 64


@dataclass
class BufferConfig:
    """Settings applied to buffers built through ``Buffer.from_config``."""

    unit: int = DEFAULT_UNIT
    max_capacity: int | None = None  # None: no ceiling
    log_level: str = "WARNING"


def _get_env_int(key: str, default: int | None) -> int | None:
    value = os.environ.get(key)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            pass
    return default


def load_config() -> BufferConfig:
    """Build a BufferConfig from defaults and the environment."""
    config = BufferConfig()
    unit = _get_env_int("GROWBUF_UNIT", config.unit)
    if unit is not None and unit > 0:
        config.unit = unit
    ceiling = _get_env_int("GROWBUF_MAX_CAPACITY", config.max_capacity)
    if ceiling is not None and ceiling >= 0:
        config.max_capacity = ceiling
    level = os.environ.get("GROWBUF_LOG_LEVEL", config.log_level).upper()
    if isinstance(logging.getLevelName(level), int):
        config.log_level = level
    return config
