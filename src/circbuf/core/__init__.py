"""Core container: the fixed-capacity ring buffer and its error types.

:class:`RingBuffer` is a bounded double-ended sequence over a NumPy backing
store. It never grows on its own; pushes on a full buffer and pops on an
empty one raise instead of silently overwriting or returning ``None``.
"""

from .errors import (
    BufferOverflowError,
    BufferUnderflowError,
    InvalidArgumentError,
    OutOfRangeError,
    RingBufferError,
)
from .policy import SHRINK_ERROR, SHRINK_POLICIES, SHRINK_TRUNCATE, normalize_shrink_policy
from .ringbuffer import EMPTY_INDEX, RingBuffer

__all__ = [
    "EMPTY_INDEX",
    "RingBuffer",
    "RingBufferError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "BufferOverflowError",
    "BufferUnderflowError",
    "SHRINK_ERROR",
    "SHRINK_POLICIES",
    "SHRINK_TRUNCATE",
    "normalize_shrink_policy",
]
