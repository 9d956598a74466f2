"""Tests for MappedCollection."""

from collections.abc import Sequence

import pytest

from mapper_kernel.collection import MappedCollection


class TestMappedCollection:
    def test_is_a_sequence_but_not_a_list(self):
        items = MappedCollection([1, 2, 3])

        assert isinstance(items, Sequence)
        assert not isinstance(items, (list, tuple))

    def test_indexing_and_length(self):
        items = MappedCollection(["a", "b", "c"])

        assert len(items) == 3
        assert items[0] == "a"
        assert items[-1] == "c"

    def test_slicing_keeps_type(self):
        sliced = MappedCollection(["a", "b", "c"])[1:]

        assert isinstance(sliced, MappedCollection)
        assert sliced.all() == ["b", "c"]

    def test_wrapping_a_collection_does_not_nest(self):
        inner = MappedCollection([1, 2])

        outer = MappedCollection(inner)

        assert outer == inner
        assert outer.first() == 1

    def test_first_and_last(self):
        items = MappedCollection([1, 2, 3])

        assert items.first() == 1
        assert items.last() == 3

    def test_first_and_last_on_empty(self):
        empty = MappedCollection()

        assert empty.first() is None
        assert empty.last("none") == "none"

    def test_map_and_filter(self):
        items = MappedCollection([1, 2, 3, 4])

        assert items.map(lambda x: x * 10).all() == [10, 20, 30, 40]
        assert items.filter(lambda x: x % 2 == 0).all() == [2, 4]

    def test_is_immutable(self):
        items = MappedCollection([1])

        with pytest.raises(TypeError):
            items[0] = 2

    def test_all_returns_copy(self):
        items = MappedCollection([1, 2])
        copy = items.all()
        copy.append(3)

        assert len(items) == 2

    def test_not_equal_to_list(self):
        assert MappedCollection([1]) != [1]
