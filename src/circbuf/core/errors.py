"""Exceptions raised by :class:`~circbuf.core.ringbuffer.RingBuffer`.

Every error is raised before the buffer is mutated, so a failed call leaves
the container exactly as it was.
"""

from __future__ import annotations


class RingBufferError(Exception):
    """Base class for all ring buffer errors."""


class InvalidArgumentError(RingBufferError, ValueError):
    """A capacity or setting value is not acceptable (e.g. ``capacity <= 0``)."""


class OutOfRangeError(RingBufferError, IndexError):
    """An index, position, range or rotation target is outside its domain."""


class BufferOverflowError(RingBufferError):
    """A push or insert was attempted on a full buffer."""


class BufferUnderflowError(RingBufferError):
    """A pop (or front/back read) was attempted on an empty buffer."""


__all__ = [
    "RingBufferError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "BufferOverflowError",
    "BufferUnderflowError",
]
