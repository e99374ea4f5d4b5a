"""Tests for the lazy sequence combinators."""

import pytest
from peano import empty, single, flat_map, concat, first, take


def counting(values, log):
    """Yield values, recording each one as it is pulled."""
    for v in values:
        log.append(v)
        yield v


class TestBasics:
    """Tests for empty() and single()."""

    def test_empty(self):
        assert list(empty()) == []

    def test_empty_is_fresh(self):
        """Each call gives an independent iterator."""
        assert empty() is not empty()

    def test_single(self):
        assert list(single(3)) == [3]


class TestFlatMap:
    """Tests for flat_map()."""

    def test_flattens(self):
        result = flat_map(lambda x: [x, x * 10], [1, 2])
        assert list(result) == [1, 10, 2, 20]

    def test_cross_product(self):
        """Nested flat_map enumerates pairs, left sequence outermost."""
        pairs = flat_map(lambda a: flat_map(lambda b: single((a, b)), "xy"), [1, 2])
        assert list(pairs) == [(1, "x"), (1, "y"), (2, "x"), (2, "y")]

    def test_empty_inner_skips(self):
        result = flat_map(lambda x: single(x) if x % 2 else empty(), range(5))
        assert list(result) == [1, 3]

    def test_lazy(self):
        """Nothing is pulled from the source until a result is requested."""
        log = []
        result = flat_map(single, counting([1, 2, 3], log))
        assert log == []
        assert next(result) == 1
        assert log == [1]


class TestConcat:
    """Tests for concat()."""

    def test_sequences_in_order(self):
        result = concat(lambda: [1, 2], lambda: [], lambda: [3])
        assert list(result) == [1, 2, 3]

    def test_thunks_called_on_demand(self):
        """A later sequence is built only once the earlier ones are exhausted."""
        built = []

        def thunk(name, values):
            def build():
                built.append(name)
                return values
            return build

        result = concat(thunk("a", [1]), thunk("b", [2]))
        assert built == []
        assert next(result) == 1
        assert built == ["a"]
        assert next(result) == 2
        assert built == ["a", "b"]

    def test_no_thunks(self):
        assert list(concat()) == []


class TestFirstAndTake:
    """Tests for first() and take()."""

    def test_first(self):
        assert first([4, 5]) == 4

    def test_first_default(self):
        assert first([]) is None
        assert first(empty(), default=0) == 0

    def test_first_stops_early(self):
        log = []
        assert first(counting([1, 2, 3], log)) == 1
        assert log == [1]

    def test_take(self):
        assert take(range(10), 3) == [0, 1, 2]
        assert take(range(3), None) == [0, 1, 2]
        assert take(range(3), 0) == []

    def test_take_negative(self):
        with pytest.raises(ValueError):
            take(range(3), -1)
