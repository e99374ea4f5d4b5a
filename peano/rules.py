"""
The standard Peano rule set.

    @add-zero:    (z+b)       => b
    @add-succ:    ((s a)+b)   => (s c)   for each Num c of (a+b)
    @mul-zero:    (z*b)       => z
    @mul-succ:    ((s a)*b)   => d       for each c of (a*b), each d of (c+b)
    @reduce-zero: (!z)        => z
    @reduce-succ: (!(s a))    => (s a)
    @reduce-add:  (!(a+b))    => c       for each a' of (!a), b' of (!b), c of (a'+b')
    @reduce-mul:  (!(a*b))    => c       for each a' of (!a), b' of (!b), c of (a'*b')

Add and Mul only step when their left operand is already a number;
bringing operands to normal form is the job of Reduce. add-zero does
not check that b is a Num: it relies on Reduce having normalized both
operands before the sum is taken. Every other shape, (!(!e)) included,
is stuck and has no derivations.
"""

from typing import Iterator

from .derivation import Derivation
from .engine import RuleEngine
from .expr import Add, Expr, Mul, Reduce, Succ, Zero, is_num

PEANO_RULES = RuleEngine()


# ============================================================
# Addition
# ============================================================

@PEANO_RULES.rule(Add, "add-zero", "z + b = b", tags=["add"])
def add_zero(engine: RuleEngine, expr: Expr) -> Iterator[Derivation]:
    match expr:
        case Add(Zero(), b):
            yield Derivation("add-zero", expr, b)


@PEANO_RULES.rule(Add, "add-succ", "(s a) + b = s(a + b)", tags=["add"])
def add_succ(engine: RuleEngine, expr: Expr) -> Iterator[Derivation]:
    match expr:
        case Add(Succ(a), b):
            for inner in engine.derivations(Add(a, b)):
                if is_num(inner.result):
                    yield Derivation("add-succ", expr, Succ(inner.result), (inner,))


# ============================================================
# Multiplication
# ============================================================

@PEANO_RULES.rule(Mul, "mul-zero", "z * b = z", tags=["mul"])
def mul_zero(engine: RuleEngine, expr: Expr) -> Iterator[Derivation]:
    match expr:
        case Mul(Zero(), _):
            yield Derivation("mul-zero", expr, Zero())


@PEANO_RULES.rule(Mul, "mul-succ", "(s a) * b = (a * b) + b", tags=["mul"])
def mul_succ(engine: RuleEngine, expr: Expr) -> Iterator[Derivation]:
    match expr:
        case Mul(Succ(a), b):
            for product in engine.derivations(Mul(a, b)):
                for total in engine.derivations(Add(product.result, b)):
                    yield Derivation("mul-succ", expr, total.result, (product, total))


# ============================================================
# Normalization
# ============================================================

@PEANO_RULES.rule(Reduce, "reduce-zero", "!z = z", tags=["reduce"])
def reduce_zero(engine: RuleEngine, expr: Expr) -> Iterator[Derivation]:
    match expr:
        case Reduce(Zero()):
            yield Derivation("reduce-zero", expr, Zero())


@PEANO_RULES.rule(Reduce, "reduce-succ", "!(s a) = (s a)", tags=["reduce"])
def reduce_succ(engine: RuleEngine, expr: Expr) -> Iterator[Derivation]:
    match expr:
        case Reduce(Succ() as n):
            yield Derivation("reduce-succ", expr, n)


def _reduce_binary(engine: RuleEngine, name: str, expr: Reduce,
                   kind: type, left: Expr, right: Expr) -> Iterator[Derivation]:
    """Normalize both operands, left first, then apply kind to the results."""
    for a in engine.derivations(Reduce(left)):
        for b in engine.derivations(Reduce(right)):
            for c in engine.derivations(kind(a.result, b.result)):
                yield Derivation(name, expr, c.result, (a, b, c))


@PEANO_RULES.rule(Reduce, "reduce-add", "!(a + b) = !a + !b", tags=["reduce"])
def reduce_add(engine: RuleEngine, expr: Expr) -> Iterator[Derivation]:
    match expr:
        case Reduce(Add(a, b)):
            yield from _reduce_binary(engine, "reduce-add", expr, Add, a, b)


@PEANO_RULES.rule(Reduce, "reduce-mul", "!(a * b) = !a * !b", tags=["reduce"])
def reduce_mul(engine: RuleEngine, expr: Expr) -> Iterator[Derivation]:
    match expr:
        case Reduce(Mul(a, b)):
            yield from _reduce_binary(engine, "reduce-mul", expr, Mul, a, b)


def peano_engine() -> RuleEngine:
    """A fresh copy of the standard rules, safe to extend or reconfigure."""
    return PEANO_RULES.copy()


def derivations(expr: Expr) -> Iterator[Derivation]:
    """Lazily enumerate derivations of expr under the standard rules."""
    return PEANO_RULES.derivations(expr)


def derive(expr: Expr) -> Iterator[Expr]:
    """Lazily enumerate results of expr under the standard rules."""
    return PEANO_RULES.derive(expr)
