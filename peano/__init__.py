"""
PEANO - rewriting Peano arithmetic by structural rules

A small non-deterministic rewriting interpreter for Peano arithmetic:
zero, successor, addition, multiplication and the "!" operator that
normalizes an expression to a number. Evaluation enumerates every result
the rules can derive, lazily.

Quick Start:
    from peano import E, derive, derivations

    expr = E.reduce(E.add(E.mul(2, 2), 1))   # !((2*2)+1)
    [str(n) for n in derive(expr)]           # ["(s(s(s(s(sz)))))"]

    d = next(derivations(expr))
    print(d.format("rules"))                 # which rules fired, in order

Expressions:
    Zero()        z
    Succ(n)       (sn)      n must be a Num (Zero or Succ)
    Add(a, b)     (a+b)
    Mul(a, b)     (a*b)
    Reduce(e)     (!e)

Custom rule sets:
    from peano import peano_engine, Add, Succ, Derivation

    engine = peano_engine()

    @engine.rule(Add, "add-swap", tags=["extra"])
    def add_swap(engine, expr):
        ...
"""

__version__ = "0.1.0"

# Expression model
from .expr import (
    Expr,
    Num,
    Zero,
    Succ,
    Add,
    Mul,
    Reduce,
    NODE_KINDS,
    COMPOUND_KINDS,
    E,
    is_num,
    equals,
    num,
    to_int,
    size,
    depth,
    render,
)

# Lazy sequences
from .stream import (
    empty,
    single,
    flat_map,
    concat,
    first,
    take,
)

# Engine and rules
from .derivation import Derivation, FORMAT_STYLES
from .engine import RuleEngine, RuleMetadata
from .rules import PEANO_RULES, peano_engine, derive, derivations

# Logging
from .log import configure_logging

# Public API
__all__ = [
    # Version
    "__version__",
    # Expressions
    "Expr",
    "Num",
    "Zero",
    "Succ",
    "Add",
    "Mul",
    "Reduce",
    "NODE_KINDS",
    "COMPOUND_KINDS",
    "E",
    "is_num",
    "equals",
    "num",
    "to_int",
    "size",
    "depth",
    "render",
    # Lazy sequences
    "empty",
    "single",
    "flat_map",
    "concat",
    "first",
    "take",
    # Engine
    "Derivation",
    "FORMAT_STYLES",
    "RuleEngine",
    "RuleMetadata",
    "PEANO_RULES",
    "peano_engine",
    "derive",
    "derivations",
    # Logging
    "configure_logging",
]
