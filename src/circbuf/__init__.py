"""Fixed-capacity ring buffer with double-ended access and structural edits."""

from __future__ import annotations

from .core import (
    BufferOverflowError,
    BufferUnderflowError,
    InvalidArgumentError,
    OutOfRangeError,
    RingBuffer,
    RingBufferError,
)
from .config import BufferSettings, load_settings, settings_from_mapping

__version__ = "0.1.0"

__all__ = [
    "RingBuffer",
    "RingBufferError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "BufferOverflowError",
    "BufferUnderflowError",
    "BufferSettings",
    "load_settings",
    "settings_from_mapping",
]
