"""
Property-based tests for the Peano rules.

Closed expressions are generated together with their value under
ordinary + and * on the naturals. Numerals stay small so successor
chains, and the generator nesting that walks them, stay shallow.
"""

import pytest

hypothesis = pytest.importorskip("hypothesis", reason="hypothesis required for property tests")

from hypothesis import given, settings, strategies as st

from peano import (
    Expr, Zero, Succ, Add, Mul, Reduce,
    derive, derivations, num, to_int, is_num, render,
)


small_ints = st.integers(min_value=0, max_value=3)
numerals = small_ints.map(num)


def _combine(children):
    pairs = st.tuples(children, children)
    return st.one_of(
        pairs.map(lambda p: (Add(p[0][0], p[1][0]), p[0][1] + p[1][1])),
        pairs.map(lambda p: (Mul(p[0][0], p[1][0]), p[0][1] * p[1][1])),
    )


# (expression, value) pairs built only from Zero, Succ, Add and Mul
arithmetic = st.recursive(
    small_ints.map(lambda n: (num(n), n)),
    _combine,
    max_leaves=4,
)

# Any expression, Reduce included; mostly stuck or ill-shaped terms
any_expr = st.recursive(
    numerals,
    lambda children: st.one_of(
        st.builds(Add, children, children),
        st.builds(Mul, children, children),
        st.builds(Reduce, children),
    ),
    max_leaves=4,
)

property_settings = settings(max_examples=60, deadline=None)


class TestNumberProperties:
    """Properties of normal forms."""

    @property_settings
    @given(numerals)
    def test_numbers_have_no_derivations(self, n):
        assert list(derive(n)) == []

    @property_settings
    @given(numerals)
    def test_add_zero_left(self, n):
        assert list(derive(Add(Zero(), n))) == [n]

    @property_settings
    @given(numerals, numerals)
    def test_add_succ_wraps_inner_results(self, a, b):
        expected = [Succ(c) for c in derive(Add(a, b))]
        assert list(derive(Add(Succ(a), b))) == expected

    @property_settings
    @given(any_expr)
    def test_mul_zero_left(self, b):
        assert list(derive(Mul(Zero(), b))) == [Zero()]


class TestReduceProperties:
    """Properties of full normalization."""

    @property_settings
    @given(arithmetic)
    def test_reduce_computes_value(self, pair):
        expr, value = pair
        found = list(derive(Reduce(expr)))
        assert len(found) == 1
        assert is_num(found[0])
        assert to_int(found[0]) == value

    @property_settings
    @given(arithmetic)
    def test_restartable(self, pair):
        expr, _ = pair
        rebuilt = Reduce(expr)
        assert list(derive(Reduce(expr))) == list(derive(rebuilt))

    @property_settings
    @given(arithmetic)
    def test_derivation_concludes_at_source(self, pair):
        expr, _ = pair
        d = next(derivations(Reduce(expr)))
        assert d.source == Reduce(expr)
        assert d.rule in ("reduce-zero", "reduce-succ", "reduce-add", "reduce-mul")


class TestTotality:
    """The engine never raises on well-formed input."""

    @property_settings
    @given(any_expr)
    def test_derive_terminates(self, expr):
        found = list(derive(expr))
        assert all(isinstance(e, Expr) for e in found)
        assert len(found) <= 1

    @property_settings
    @given(any_expr)
    def test_render_round_parentheses(self, expr):
        text = render(expr)
        assert text.count("(") == text.count(")")
