"""Tests for the standard Peano rules."""

import pytest
from peano import (
    E, Zero, Succ, Add, Mul, Reduce,
    PEANO_RULES, derive, derivations, peano_engine, num, to_int, is_num, render,
)


def results(expr):
    return list(derive(expr))


class TestNormalForms:
    """Numbers have no derivations."""

    def test_zero(self):
        assert results(Zero()) == []

    def test_succ(self):
        assert results(num(3)) == []


class TestAddition:
    """Tests for add-zero and add-succ."""

    def test_add_zero(self):
        assert results(Add(Zero(), num(2))) == [num(2)]

    def test_add_zero_with_zero(self):
        assert results(Add(Zero(), Zero())) == [Zero()]

    def test_add_succ(self):
        assert results(Add(num(2), num(3))) == [num(5)]

    def test_add_succ_matches_inner_sum(self):
        """(s a)+b yields the successor of each result of a+b."""
        a, b = num(2), num(1)
        inner = results(Add(a, b))
        assert results(Add(Succ(a), b)) == [Succ(c) for c in inner]

    def test_add_zero_does_not_check_right_operand(self):
        """A compound right operand is passed through unchanged."""
        right = Add(Zero(), Zero())
        assert results(Add(Zero(), right)) == [right]

    def test_add_succ_drops_non_numbers(self):
        """Only numeric inner results get a successor."""
        assert results(Add(num(1), Add(Zero(), Zero()))) == []

    def test_compound_left_operand_is_stuck(self):
        """Add steps only when its left operand is a number."""
        assert results(Add(Add(Zero(), Zero()), Zero())) == []
        assert results(Add(Mul(num(1), num(1)), Zero())) == []
        assert results(Add(Reduce(Zero()), Zero())) == []


class TestMultiplication:
    """Tests for mul-zero and mul-succ."""

    def test_mul_zero(self):
        assert results(Mul(Zero(), num(4))) == [Zero()]

    def test_mul_zero_ignores_right_operand(self):
        """z*b is z even when b is stuck."""
        assert results(Mul(Zero(), Reduce(Reduce(Zero())))) == [Zero()]

    def test_mul_succ(self):
        assert results(Mul(num(2), num(3))) == [num(6)]

    def test_mul_by_zero_on_right(self):
        assert results(Mul(num(3), Zero())) == [Zero()]

    def test_compound_left_operand_is_stuck(self):
        assert results(Mul(Add(Zero(), Zero()), num(1))) == []
        assert results(Mul(Reduce(num(1)), num(1))) == []


class TestReduce:
    """Tests for the ! operator."""

    def test_reduce_zero(self):
        assert results(Reduce(Zero())) == [Zero()]

    def test_reduce_succ(self):
        """A number is returned unchanged."""
        assert results(Reduce(num(3))) == [num(3)]

    def test_reduce_add(self):
        assert results(E.reduce(E.add(E.add(1, 1), 1))) == [num(3)]

    def test_reduce_mul(self):
        assert results(E.reduce(E.mul(E.add(1, 2), E.mul(2, 2)))) == [num(12)]

    def test_reduce_of_reduce_is_stuck(self):
        assert results(Reduce(Reduce(num(1)))) == []

    def test_stuck_operand_makes_whole_term_stuck(self):
        assert results(E.reduce(E.add(1, E.reduce(E.reduce(0))))) == []

    def test_end_to_end(self):
        """(2*2)*1 + 0 normalizes to four."""
        two = Succ(Succ(Zero()))
        one = Succ(Zero())
        expr = Reduce(Add(Mul(Mul(two, two), one), Zero()))

        found = results(expr)
        assert len(found) == 1
        assert is_num(found[0])
        assert render(found[0]) == "(s(s(s(sz))))"
        assert to_int(found[0]) == 4

    def test_original_example(self):
        """!((2*2)*(2+1)) normalizes to six."""
        expr = E.reduce(E.mul(E.mul(2, 2), E.add(2, 1)))
        assert results(expr) == [num(6)]


class TestEvaluationModel:
    """Tests for laziness, purity and restartability."""

    def test_restartable(self):
        """Deriving equal inputs twice gives equal sequences."""
        first_run = results(E.reduce(E.mul(2, 3)))
        second_run = results(E.reduce(E.mul(2, 3)))
        assert first_run == second_run == [num(6)]

    def test_independent_generators(self):
        """Each call returns its own generator."""
        expr = E.reduce(E.add(1, 1))
        g1 = derive(expr)
        g2 = derive(expr)
        assert g1 is not g2
        assert list(g1) == [num(2)]
        assert list(g2) == [num(2)]

    def test_input_not_mutated(self):
        expr = E.reduce(E.mul(2, 2))
        before = repr(expr)
        results(expr)
        assert repr(expr) == before

    def test_no_work_until_pulled(self):
        """Rules run only when a result is requested."""
        calls = []
        engine = peano_engine()

        @engine.rule(Reduce, "spy", tags=["spy"], priority=10)
        def spy(engine, expr):
            calls.append(expr)
            return
            yield

        gen = engine.derive(E.reduce(E.add(1, 1)))
        assert calls == []
        assert list(gen) == [num(2)]
        assert calls

    def test_stopping_early_skips_later_alternatives(self):
        """A consumer that takes one result never runs later rules."""
        calls = []
        engine = peano_engine()

        @engine.rule(Reduce, "late", tags=["late"])
        def late(engine, expr):
            calls.append(expr)
            return
            yield

        expr = E.reduce(E.mul(E.add(1, 1), 2))
        assert engine.normalize(expr) == num(4)
        assert calls == []

        engine.results(expr)
        assert calls

    def test_non_expression_rejected(self):
        with pytest.raises(TypeError):
            derive("(!z)")
        with pytest.raises(TypeError):
            derivations(3)


class TestRuleSet:
    """Tests for the standard rule set itself."""

    def test_rule_names(self):
        names = [meta.name for meta, _ in PEANO_RULES]
        assert names == [
            "add-zero", "add-succ",
            "mul-zero", "mul-succ",
            "reduce-zero", "reduce-succ", "reduce-add", "reduce-mul",
        ]

    def test_groups(self):
        assert PEANO_RULES.groups() == {"add", "mul", "reduce"}

    def test_peano_engine_is_a_copy(self):
        """Reconfiguring a copy leaves the shared rules alone."""
        engine = peano_engine()
        engine.disable_group("mul")
        assert list(engine.derive(E.mul(1, 1))) == []
        assert results(E.mul(1, 1)) == [num(1)]

    def test_disabled_add_blocks_reduce(self):
        engine = peano_engine().disable_group("add")
        assert list(engine.derive(E.reduce(E.add(1, 1)))) == []
        assert list(engine.derive(E.reduce(E.mul(0, 1)))) == [Zero()]


class TestLargeNumbers:
    """Numerals in the hundreds evaluate within the default recursion limit."""

    def test_reduce_twenty_squared(self):
        found = results(E.reduce(E.mul(20, 20)))
        assert len(found) == 1
        assert to_int(found[0]) == 400

    def test_long_left_operand(self):
        found = results(Add(num(500), num(1)))
        assert len(found) == 1
        assert to_int(found[0]) == 501

    def test_long_derivation_walks(self):
        """Every view of a deep derivation tree is computed without recursion."""
        d = next(derivations(Add(num(500), num(1))))
        assert len(d) == 501
        assert d.depth() == 501
        assert d.rules_applied() == ["add-zero"] + ["add-succ"] * 500
        assert len(d.format("verbose").splitlines()) == 501
        assert d.format("rules").count("add-succ") == 500

        as_dict = d.to_dict()
        assert as_dict["step_count"] == 501
        node = as_dict
        for _ in range(500):
            assert node["rule"] == "add-succ"
            (node,) = node["premises"]
        assert node == {"rule": "add-zero", "source": "(z+(sz))",
                        "result": "(sz)", "premises": []}
