#!/usr/bin/env python3
"""
PEANO Feature Demonstration

This script demonstrates the major features of the PEANO library.
"""

from itertools import islice

from peano import (
    E, Add, Succ, Derivation,
    derive, derivations, peano_engine, render, to_int, single, flat_map,
    configure_logging,
)


def section(title: str):
    """Print a section header."""
    print(f"\n{'='*60}")
    print(f" {title}")
    print('='*60)


def demo_basic_usage():
    """Demonstrate evaluating expressions."""
    section("Basic Usage")

    examples = [
        E.reduce(E.add(2, 3)),
        E.reduce(E.mul(E.mul(2, 2), E.add(2, 1))),
        E.reduce(E.add(E.mul(E.mul(2, 2), 1), 0)),
    ]

    for expr in examples:
        for result in derive(expr):
            print(f"  {render(expr)} => {render(result)} = {to_int(result)}")


def demo_stuck():
    """Demonstrate expressions with no derivation."""
    section("Stuck Expressions")

    examples = [
        (E.add(E.add(1, 1), 1), "left operand of + is not a number"),
        (E.reduce(E.reduce(2)), "no rule for !(!e)"),
        (E.num(3), "numbers are already normal forms"),
    ]

    for expr, why in examples:
        results = list(derive(expr))
        print(f"  {render(expr)}: {len(results)} results ({why})")


def demo_derivations():
    """Demonstrate derivation trees."""
    section("Derivations")

    expr = E.reduce(E.mul(2, 1))
    d = next(derivations(expr))

    print("  Verbose:")
    for line in d.format("verbose").splitlines():
        print(f"    {line}")
    print(f"  Compact: {d.format('compact')}")
    print(f"  Summary: {d.summary()}")


def demo_laziness():
    """Demonstrate that only the requested results are computed."""
    section("Laziness")

    expr = E.reduce(E.mul(E.num(6), E.num(7)))
    results = derive(expr)
    print(f"  Created generator for {render(expr)[:40]}...")
    print(f"  First result value: {to_int(next(results))}")
    print(f"  Remaining: {list(results)}")


def demo_extension():
    """Demonstrate an ambiguous rule set producing several results."""
    section("Extending the Rules")

    engine = peano_engine()

    # Counting down on the right as well as on the left makes the rule set
    # overlap, so sums reach their value along several derivations.
    @engine.rule(Add, "add-succ-right", "a + (s b) = s(a + b)", tags=["extra"])
    def add_succ_right(engine, expr):
        match expr:
            case Add(a, Succ(b)):
                yield from flat_map(
                    lambda inner: single(Derivation(
                        "add-succ-right", expr, Succ(inner.result), (inner,))),
                    engine.derivations(Add(a, b)),
                )

    expr = E.add(2, 2)
    for d in islice(engine.derivations(expr), 5):
        print(f"  {d.format('compact')}")

    engine.disable_group("extra")
    print(f"  With 'extra' disabled: {len(list(engine.derive(expr)))} result")


if __name__ == "__main__":
    configure_logging("warning")
    demo_basic_usage()
    demo_stuck()
    demo_derivations()
    demo_laziness()
    demo_extension()
