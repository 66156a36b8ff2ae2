from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st
from regex_visualiser.loop_list import LoopList


def test_empty():
    items: LoopList[int] = LoopList()
    assert items.current() is None
    items.inc()
    items.dec()
    assert items.index == 0
    assert not items.try_set_index(0)
    assert len(items) == 0


def test_wrap_around():
    items = LoopList("abc")
    assert items.current() == "a"
    items.dec()
    assert items.current() == "c"
    items.inc()
    items.inc()
    assert items.current() == "b"
    assert items.index == 1


def test_try_set_index():
    items = LoopList("abc")
    assert items.try_set_index(2)
    assert items.current() == "c"
    assert not items.try_set_index(3)
    assert not items.try_set_index(-1)
    assert items.current() == "c"


def test_sequence_access():
    items = LoopList([1, 2, 3])
    assert list(items) == [1, 2, 3]
    assert items[1] == 2
    assert items[1:] == [2, 3]
    assert repr(items) == "LoopList([1, 2, 3], index=0)"


@given(st.lists(st.integers(), min_size=1), st.lists(st.booleans()))
def test_index_stays_in_bounds(values: list[int], steps: list[bool]):
    items = LoopList(values)
    expected = 0
    for forward in steps:
        if forward:
            items.inc()
            expected += 1
        else:
            items.dec()
            expected -= 1
    assert items.index == expected % len(values)
    assert items.current() == values[expected % len(values)]
