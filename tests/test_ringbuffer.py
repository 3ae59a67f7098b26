from __future__ import annotations

import weakref

import numpy as np
import pytest

from circbuf import (
    BufferOverflowError,
    BufferUnderflowError,
    InvalidArgumentError,
    OutOfRangeError,
    RingBuffer,
)


def test_default_buffer_has_no_capacity() -> None:
    buf = RingBuffer()
    assert buf.empty()
    assert buf.full()
    assert buf.get_size() == 0
    assert buf.get_capacity() == 0
    assert buf.reserve() == 0
    assert buf.to_list() == []


def test_default_buffer_rejects_push_and_pop() -> None:
    buf = RingBuffer()
    with pytest.raises(BufferOverflowError):
        buf.push_back(1)
    with pytest.raises(BufferOverflowError):
        buf.push_front(1)
    with pytest.raises(BufferUnderflowError):
        buf.pop_back()


@pytest.mark.parametrize("capacity", [1, 2, 5, 17])
def test_fresh_buffer_is_empty(capacity: int) -> None:
    buf = RingBuffer(capacity)
    assert buf.empty()
    assert not buf.full()
    assert len(buf) == 0
    assert buf.reserve() == capacity


@pytest.mark.parametrize("capacity", [0, -1, -10])
def test_non_positive_capacity_is_rejected(capacity: int) -> None:
    with pytest.raises(InvalidArgumentError):
        RingBuffer(capacity)
    with pytest.raises(ValueError):
        RingBuffer(capacity, 7)


def test_non_integer_capacity_raises_type_error() -> None:
    with pytest.raises(TypeError):
        RingBuffer(2.5)


def test_fill_requires_capacity() -> None:
    with pytest.raises(InvalidArgumentError):
        RingBuffer(None, 5)


def test_unknown_shrink_policy_is_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        RingBuffer(3, shrink_policy="grow")


def test_fill_constructor_fills_every_slot() -> None:
    buf = RingBuffer(3, 7)
    assert buf.get_size() == buf.get_capacity() == 3
    assert buf.full()
    assert all(buf[i] == 7 for i in range(3))
    assert buf.front() == 7
    assert buf.back() == 7
    assert buf.is_linearized()


def test_none_is_a_valid_fill_value() -> None:
    buf = RingBuffer(2, None)
    assert buf.full()
    assert buf.at(0) is None
    assert buf.at(1) is None


def test_push_back_then_front_scenario() -> None:
    buf = RingBuffer(5)
    for value in (1, 2, 3):
        buf.push_back(value)
    assert buf.get_size() == 3
    assert buf.front() == 1
    assert buf.back() == 3

    buf.push_front(0)
    assert buf.get_size() == 4
    assert buf.front() == 0
    assert buf.back() == 3
    assert buf.at(1) == 1

    buf.erase(1, 2)
    assert buf.get_size() == 2
    assert buf.to_list() == [0, 3]


def test_push_front_on_empty_buffer_sets_both_ends() -> None:
    buf = RingBuffer(3)
    buf.push_front(1)
    assert buf.front() == 1
    assert buf.back() == 1

    buf.push_front(0)
    buf.push_back(2)
    assert buf.to_list() == [0, 1, 2]
    assert buf.full()


@pytest.mark.parametrize("capacity", [1, 4, 9])
def test_push_back_pop_front_is_fifo(capacity: int) -> None:
    buf = RingBuffer(capacity)
    items = [f"item-{i}" for i in range(capacity)]
    for item in items:
        buf.push_back(item)

    popped = [buf.pop_front() for _ in range(capacity)]
    assert popped == items
    assert buf.empty()


@pytest.mark.parametrize("capacity", [1, 4, 9])
def test_push_back_pop_back_is_lifo(capacity: int) -> None:
    buf = RingBuffer(capacity)
    for i in range(capacity):
        buf.push_back(i)

    popped = [buf.pop_back() for _ in range(capacity)]
    assert popped == list(reversed(range(capacity)))
    assert buf.empty()


def test_at_returns_pushed_elements_in_order() -> None:
    buf = RingBuffer(6)
    for value in (10, 20, 30, 40):
        buf.push_back(value)
    assert [buf.at(i) for i in range(4)] == [10, 20, 30, 40]


def test_at_is_bounds_checked() -> None:
    buf = RingBuffer(5)
    with pytest.raises(OutOfRangeError):
        buf.at(0)

    buf.push_back(100)
    assert buf.at(0) == 100
    with pytest.raises(OutOfRangeError):
        buf.at(1)
    with pytest.raises(IndexError):
        buf.at(-1)


def test_unchecked_index_supports_assignment() -> None:
    buf = RingBuffer(5)
    for value in (10, 20, 30):
        buf.push_back(value)
    buf[1] = 25
    assert buf[1] == 25
    assert buf.to_list() == [10, 25, 30]


def test_full_buffer_rejects_growth() -> None:
    buf = RingBuffer(2, 0)
    with pytest.raises(BufferOverflowError):
        buf.push_back(1)
    with pytest.raises(BufferOverflowError):
        buf.push_front(1)
    with pytest.raises(BufferOverflowError):
        buf.insert(1, 1)
    assert buf.to_list() == [0, 0]


def test_empty_buffer_rejects_shrinking() -> None:
    buf = RingBuffer(2)
    with pytest.raises(BufferUnderflowError):
        buf.pop_back()
    with pytest.raises(BufferUnderflowError):
        buf.pop_front()
    with pytest.raises(BufferUnderflowError):
        buf.front()
    with pytest.raises(BufferUnderflowError):
        buf.back()


def test_pops_wrap_around_physical_end() -> None:
    buf = RingBuffer(3)
    for value in (1, 2, 3):
        buf.push_back(value)
    assert buf.pop_front() == 1
    buf.push_back(4)
    assert buf.pop_front() == 2
    buf.push_back(5)

    assert buf.to_list() == [3, 4, 5]
    assert buf.pop_back() == 5
    assert buf.pop_back() == 4
    assert buf.pop_back() == 3
    assert buf.empty()

    buf.push_back(6)
    assert buf.front() == buf.back() == 6


def test_clear_keeps_capacity() -> None:
    buf = RingBuffer(4)
    for value in (1, 2, 3):
        buf.push_back(value)
    buf.clear()

    assert buf.empty()
    assert buf.get_capacity() == 4
    assert buf.reserve() == 4
    buf.push_back(9)
    assert buf.front() == buf.back() == 9


def test_numeric_dtype_storage() -> None:
    buf = RingBuffer(3, dtype="float64")
    buf.push_back(1.5)
    buf.push_back(2)

    assert buf.dtype.name == "float64"
    assert buf.at(1) == 2.0
    values = buf.to_list()
    assert values == [1.5, 2.0]
    assert all(isinstance(v, float) for v in values)


def test_iteration_and_repr_follow_logical_order() -> None:
    buf = RingBuffer(3)
    buf.push_back("b")
    buf.push_front("a")
    assert list(buf) == ["a", "b"]
    assert repr(buf) == "RingBuffer(capacity=3, size=2, items=['a', 'b'])"


def test_mutable_items_are_stored_by_reference() -> None:
    buf = RingBuffer(2)
    payload = [1, 2]
    buf.push_back(payload)
    buf.push_back((3, 4))

    assert buf.front() is payload
    assert buf.back() == (3, 4)


def test_removed_objects_are_released() -> None:
    class Payload:
        pass

    first, second = Payload(), Payload()
    refs = [weakref.ref(first), weakref.ref(second)]
    buf = RingBuffer(3)
    buf.push_back(first)
    buf.push_back(second)
    del first, second

    buf.pop_front()
    buf.clear()
    assert [ref() for ref in refs] == [None, None]


def _int_buffer(*values: int, capacity: int = 4) -> RingBuffer:
    buf = RingBuffer(capacity, dtype="int64")
    for value in values:
        buf.push_back(value)
    return buf


@pytest.mark.parametrize("bad", ["x", None, [1, 2]])
def test_push_back_rejects_unconvertible_item_without_mutation(bad: object) -> None:
    buf = _int_buffer(1)
    with pytest.raises((TypeError, ValueError)):
        buf.push_back(bad)

    assert buf.to_list() == [1]
    buf.push_back(2)
    assert buf.to_list() == [1, 2]
    assert buf.back() == 2


def test_push_front_rejects_unconvertible_item_without_mutation() -> None:
    buf = _int_buffer(1)
    with pytest.raises(ValueError):
        buf.push_front("x")

    assert buf.front() == 1
    assert buf.back() == 1
    buf.push_front(0)
    assert buf.to_list() == [0, 1]


def test_push_into_empty_numeric_buffer_rejects_unconvertible_item() -> None:
    buf = _int_buffer()
    with pytest.raises(ValueError):
        buf.push_back("x")
    with pytest.raises(ValueError):
        buf.push_front("x")
    assert buf.empty()
    assert buf.is_linearized()


def test_insert_rejects_unconvertible_item_without_shifting() -> None:
    buf = _int_buffer(1, 2, 3)
    with pytest.raises(ValueError):
        buf.insert(0, "x")

    assert buf.to_list() == [1, 2, 3]
    buf.insert(0, 0)
    assert buf.to_list() == [0, 1, 2, 3]
    assert buf.back() == 3


def test_resize_rejects_unconvertible_fill_without_growing() -> None:
    buf = _int_buffer(1)
    with pytest.raises(ValueError):
        buf.resize(3, "x")
    assert buf.to_list() == [1]


def test_equality_with_array_items() -> None:
    left = RingBuffer(2)
    right = RingBuffer(3)
    left.push_back(np.array([1, 2]))
    right.push_back(np.array([1, 2]))
    assert left == right

    right[0] = np.array([1, 3])
    assert left != right

    right[0] = 5
    assert left != right
