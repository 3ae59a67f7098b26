from __future__ import annotations

import logging
import operator
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import numpy as np

from .errors import (
    BufferOverflowError,
    BufferUnderflowError,
    InvalidArgumentError,
    OutOfRangeError,
)
from .policy import SHRINK_ERROR, SHRINK_TRUNCATE, normalize_shrink_policy

if TYPE_CHECKING:
    from ..config.runtime import BufferSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")

EMPTY_INDEX = -1
_NO_FILL: Any = object()


def _items_equal(left: Any, right: Any) -> bool:
    if isinstance(left, np.ndarray) or isinstance(right, np.ndarray):
        return bool(np.array_equal(left, right))
    return bool(left == right)


def _positive_capacity(capacity: int) -> int:
    value = operator.index(capacity)
    if value <= 0:
        raise InvalidArgumentError(f"capacity must be greater than 0, got {value}")
    return value


class RingBuffer(Generic[T]):
    """
    Fixed-capacity double-ended ring buffer.

    Elements live in a NumPy array of length ``capacity``; logical index ``i``
    maps to physical slot ``(start + i) % capacity``. Pushing onto a full
    buffer raises :class:`BufferOverflowError` instead of overwriting.

    The default ``dtype=object`` stores arbitrary Python values. A numeric
    dtype keeps the storage compact when every element is a number.

    Not thread-safe: wrap the buffer in a lock when sharing it across threads.
    """

    __slots__ = ("_data", "_dtype", "_capacity", "_size", "_start", "_end", "_shrink_policy")

    def __init__(
        self,
        capacity: int | None = None,
        fill: Any = _NO_FILL,
        *,
        dtype: Any = object,
        shrink_policy: str = SHRINK_TRUNCATE,
    ) -> None:
        self._shrink_policy = normalize_shrink_policy(shrink_policy)
        self._dtype = np.dtype(dtype)
        self._size = 0
        self._start = EMPTY_INDEX
        self._end = EMPTY_INDEX

        if capacity is None:
            if fill is not _NO_FILL:
                raise InvalidArgumentError("a fill value requires a capacity")
            self._capacity = 0
            self._data: np.ndarray | None = None
            return

        self._capacity = _positive_capacity(capacity)
        self._data = np.empty(self._capacity, dtype=self._dtype)

        if fill is not _NO_FILL:
            for slot in range(self._capacity):
                self._data[slot] = fill
            self._size = self._capacity
            self._start = 0
            self._end = self._capacity - 1

    @classmethod
    def from_settings(cls, settings: BufferSettings, fill: Any = _NO_FILL) -> RingBuffer[Any]:
        """Create a buffer described by ``settings`` (validated first)."""
        cfg = settings.sanitized()
        return cls(cfg.capacity, fill, dtype=cfg.dtype, shrink_policy=cfg.shrink_policy)

    # ------------------------------------------------------------ copy/assign
    def copy(self) -> RingBuffer[T]:
        """Return an independent buffer with the same layout and elements."""
        clone = type(self).__new__(type(self))
        clone._shrink_policy = self._shrink_policy
        clone._copy_state_from(self)
        return clone

    __copy__ = copy

    def assign(self, other: RingBuffer[T]) -> RingBuffer[T]:
        """Replace this buffer's contents with a copy of ``other``."""
        if other is self:
            return self
        self._copy_state_from(other)
        return self

    def swap(self, other: RingBuffer[T]) -> None:
        """Exchange storage and all bookkeeping with ``other``."""
        self._data, other._data = other._data, self._data
        self._dtype, other._dtype = other._dtype, self._dtype
        self._capacity, other._capacity = other._capacity, self._capacity
        self._size, other._size = other._size, self._size
        self._start, other._start = other._start, self._start
        self._end, other._end = other._end, self._end

    def _copy_state_from(self, other: RingBuffer[T]) -> None:
        # Physical layout is kept, so only the window slots need copying.
        self._dtype = other._dtype
        self._capacity = other._capacity
        self._size = other._size
        self._start = other._start
        self._end = other._end
        if other._data is None:
            self._data = None
            return
        self._data = np.empty(other._capacity, dtype=other._dtype)
        slots = other._physical_slots()
        self._data[slots] = other._data[slots]

    # ----------------------------------------------------------------- access
    def __getitem__(self, index: int) -> T:
        """Unchecked access by logical index; see :meth:`at` for the checked form."""
        return self._data[(self._start + index) % self._capacity]

    def __setitem__(self, index: int, item: T) -> None:
        self._data[(self._start + index) % self._capacity] = item

    def at(self, index: int) -> T:
        """Return the element at logical ``index`` or raise :class:`OutOfRangeError`."""
        index = operator.index(index)
        if index < 0 or index >= self._size:
            raise OutOfRangeError(f"index {index} out of range for size {self._size}")
        return self._data[(self._start + index) % self._capacity]

    def front(self) -> T:
        if self._size == 0:
            raise BufferUnderflowError("front() on an empty buffer")
        return self._data[self._start]

    def back(self) -> T:
        if self._size == 0:
            raise BufferUnderflowError("back() on an empty buffer")
        return self._data[self._end]

    # ---------------------------------------------------------------- queries
    def get_size(self) -> int:
        return self._size

    def get_capacity(self) -> int:
        return self._capacity

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def shrink_policy(self) -> str:
        return self._shrink_policy

    def empty(self) -> bool:
        return self._size == 0

    def full(self) -> bool:
        return self._size == self._capacity

    def reserve(self) -> int:
        """Number of free slots."""
        return self._capacity - self._size

    def __len__(self) -> int:
        return self._size

    # ------------------------------------------------------------- ends
    def push_back(self, item: T) -> None:
        if self.full():
            raise BufferOverflowError(f"buffer is full (capacity {self._capacity})")
        value = self._coerce(item)
        slot = 0 if self._size == 0 else (self._end + 1) % self._capacity
        self._data[slot] = value
        if self._size == 0:
            self._start = slot
        self._end = slot
        self._size += 1

    def push_front(self, item: T) -> None:
        if self.full():
            raise BufferOverflowError(f"buffer is full (capacity {self._capacity})")
        value = self._coerce(item)
        slot = 0 if self._size == 0 else (self._start - 1) % self._capacity
        self._data[slot] = value
        if self._size == 0:
            self._end = slot
        self._start = slot
        self._size += 1

    def pop_back(self) -> T:
        """Remove and return the last element."""
        if self._size == 0:
            raise BufferUnderflowError("pop_back() on an empty buffer")
        slot = self._end
        item = self._data[slot]
        self._vacate(slot)
        self._size -= 1
        if self._size == 0:
            self._start = self._end = EMPTY_INDEX
        else:
            self._end = (self._end - 1) % self._capacity
        return item

    def pop_front(self) -> T:
        """Remove and return the first element."""
        if self._size == 0:
            raise BufferUnderflowError("pop_front() on an empty buffer")
        slot = self._start
        item = self._data[slot]
        self._vacate(slot)
        self._size -= 1
        if self._size == 0:
            self._start = self._end = EMPTY_INDEX
        else:
            self._start = (self._start + 1) % self._capacity
        return item

    # ------------------------------------------------------ structural
    def linearize(self) -> np.ndarray:
        """
        Move the window to slots ``[0, size)`` and return a view over it.

        The returned array shares memory with the buffer and is only valid
        until the next mutating call.
        """
        if self._data is None:
            return np.empty(0, dtype=self._dtype)
        if self._size == 0:
            self._start = self._end = EMPTY_INDEX
            return self._data[:0]
        if not self.is_linearized():
            logger.debug("linearize: moving %d items from slot %d", self._size, self._start)
            self._data[: self._size] = self._data[self._physical_slots()]
            self._start = 0
            self._end = self._size - 1
            self._vacate_tail()
        return self._data[: self._size]

    def is_linearized(self) -> bool:
        if self._size == 0:
            return True
        return self._start == 0 and self._end == self._size - 1

    def rotate(self, new_begin: int) -> None:
        """Make the element at logical ``new_begin`` the first one."""
        new_begin = operator.index(new_begin)
        if new_begin < 0 or new_begin >= self._size:
            raise OutOfRangeError(f"rotation target {new_begin} out of range for size {self._size}")
        if new_begin == 0:
            return
        order = np.roll(self._physical_slots(), -new_begin)
        self._data[: self._size] = self._data[order]
        self._start = 0
        self._end = self._size - 1
        self._vacate_tail()

    # ------------------------------------------------ positional edits
    def insert(self, pos: int, item: T) -> None:
        """Insert ``item`` so that it ends up at logical index ``pos``."""
        pos = operator.index(pos)
        if pos < 0 or pos > self._size:
            raise OutOfRangeError(f"insert position {pos} out of range for size {self._size}")
        if self.full():
            raise BufferOverflowError(f"buffer is full (capacity {self._capacity})")
        value = self._coerce(item)
        if self._size == 0:
            self.push_back(value)
            return

        cap = self._capacity
        for i in range(self._size - 1, pos - 1, -1):
            self._data[(self._start + i + 1) % cap] = self._data[(self._start + i) % cap]
        self._data[(self._start + pos) % cap] = value
        self._size += 1
        self._end = (self._start + self._size - 1) % cap

    def erase(self, first: int, last: int) -> None:
        """Remove the elements at logical indices ``first`` through ``last`` inclusive."""
        first = operator.index(first)
        last = operator.index(last)
        if first < 0 or last >= self._size or first > last:
            raise OutOfRangeError(f"invalid erase range [{first}, {last}] for size {self._size}")

        cap = self._capacity
        removed = last - first + 1
        for i in range(last + 1, self._size):
            self._data[(self._start + i - removed) % cap] = self._data[(self._start + i) % cap]
        for i in range(self._size - removed, self._size):
            self._vacate((self._start + i) % cap)

        self._size -= removed
        if self._size == 0:
            self._start = self._end = EMPTY_INDEX
        else:
            self._end = (self._start + self._size - 1) % cap

    def resize(self, new_size: int, fill: T | None = None) -> None:
        """Grow with ``fill`` at the back or shrink from the back to ``new_size``."""
        new_size = operator.index(new_size)
        if new_size < 0 or new_size > self._capacity:
            raise OutOfRangeError(f"new size {new_size} out of range for capacity {self._capacity}")
        if new_size > self._size:
            fill = self._coerce(fill)
        while self._size < new_size:
            self.push_back(fill)
        while self._size > new_size:
            self.pop_back()

    def set_capacity(self, new_capacity: int) -> None:
        """
        Reallocate storage with ``new_capacity`` slots.

        The window is copied linearized into the new storage. When the new
        capacity is smaller than the current size, the ``truncate`` policy
        keeps the leading elements and drops the rest; the ``error`` policy
        raises :class:`InvalidArgumentError` and leaves the buffer untouched.
        """
        new_capacity = _positive_capacity(new_capacity)
        if new_capacity < self._size and self._shrink_policy == SHRINK_ERROR:
            raise InvalidArgumentError(
                f"new capacity {new_capacity} is smaller than size {self._size}"
            )

        kept = min(self._size, new_capacity)
        if kept < self._size:
            logger.warning(
                "set_capacity(%d): dropping %d trailing items", new_capacity, self._size - kept
            )

        data = np.empty(new_capacity, dtype=self._dtype)
        if kept:
            data[:kept] = self._data[self._physical_slots()[:kept]]

        logger.debug("set_capacity: %d -> %d slots, %d items kept", self._capacity, new_capacity, kept)
        self._data = data
        self._capacity = new_capacity
        self._size = kept
        if kept:
            self._start = 0
            self._end = kept - 1
        else:
            self._start = self._end = EMPTY_INDEX

    def clear(self) -> None:
        if self._data is not None and self._dtype == object:
            self._data[:] = None
        self._size = 0
        self._start = self._end = EMPTY_INDEX

    # -------------------------------------------------------- comparison
    def __eq__(self, other: object) -> bool:
        """Element-wise comparison in logical order; arrays held as items compare by value."""
        if not isinstance(other, RingBuffer):
            return NotImplemented
        if self._size != other._size:
            return False
        for i in range(self._size):
            if not _items_equal(self[i], other[i]):
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    # ---------------------------------------------------------- snapshots
    def __iter__(self) -> Iterator[T]:
        for i in range(self._size):
            yield self._data[(self._start + i) % self._capacity]

    def to_list(self) -> list[T]:
        """Return the logical contents as a plain list."""
        if self._size == 0:
            return []
        return self._data[self._physical_slots()].tolist()

    def __repr__(self) -> str:
        return f"RingBuffer(capacity={self._capacity}, size={self._size}, items={self.to_list()!r})"

    # ------------------------------------------------------------ helpers
    def _physical_slots(self) -> np.ndarray:
        """Physical slot of every logical index, in logical order."""
        if self._size == 0:
            return np.empty(0, dtype=np.intp)
        return (self._start + np.arange(self._size, dtype=np.intp)) % self._capacity

    def _coerce(self, item: Any) -> Any:
        """Convert ``item`` to the storage dtype without touching the buffer."""
        if self._dtype == object:
            return item
        value = np.asarray(item, dtype=self._dtype)
        if value.ndim != 0:
            raise ValueError(
                f"cannot store an item of shape {value.shape} in a {self._dtype.name} buffer"
            )
        return value[()]

    def _vacate(self, slot: int) -> None:
        # Drop references held by object storage so removed items can be collected.
        if self._dtype == object:
            self._data[slot] = None

    def _vacate_tail(self) -> None:
        # Called once the window occupies [0, size).
        if self._dtype == object:
            self._data[self._size :] = None
