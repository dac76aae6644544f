import pytest

from blelink.linked_list import LinkedList


def test_add_and_get_keep_insertion_order():
    items = LinkedList()
    for value in ("a", "b", "c"):
        items.add(value)
    assert len(items) == 3
    assert [items.get(i) for i in range(3)] == ["a", "b", "c"]
    assert list(items) == ["a", "b", "c"]


def test_initial_items():
    items = LinkedList([1, 2, 3])
    assert list(items) == [1, 2, 3]
    assert len(items) == 3


@pytest.mark.parametrize("index", [3, 10, -1])
def test_get_out_of_range_returns_none(index):
    items = LinkedList([1, 2, 3])
    assert items.get(index) is None
    assert len(items) == 3


def test_get_on_empty_list():
    assert LinkedList().get(0) is None


def test_remove_head():
    items = LinkedList([1, 2, 3])
    assert items.remove(0) == 1
    assert list(items) == [2, 3]
    assert items.get(0) == 2


def test_remove_middle():
    items = LinkedList([1, 2, 3])
    assert items.remove(1) == 2
    assert list(items) == [1, 3]
    assert len(items) == 2


def test_remove_tail_then_add_links_correctly():
    items = LinkedList([1, 2, 3])
    assert items.remove(2) == 3
    items.add(4)
    assert list(items) == [1, 2, 4]


def test_remove_only_item_then_add():
    items = LinkedList(["x"])
    assert items.remove(0) == "x"
    assert len(items) == 0
    assert list(items) == []
    items.add("y")
    assert list(items) == ["y"]


def test_remove_out_of_range_leaves_list_unchanged():
    items = LinkedList([1, 2])
    assert items.remove(2) is None
    assert items.remove(-1) is None
    assert list(items) == [1, 2]


def test_clear_empties_list_and_allows_reuse():
    items = LinkedList([1, 2, 3])
    items.clear()
    assert len(items) == 0
    assert items.get(0) is None
    items.add(9)
    assert list(items) == [9]


def test_remove_all_in_order_returns_every_item():
    values = list(range(6))
    items = LinkedList(values)
    removed = [items.remove(0) for _ in values]
    assert removed == values
    assert len(items) == 0