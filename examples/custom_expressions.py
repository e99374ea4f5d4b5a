"""
Example custom expressions for PEANO.

Usage:
    peano -l examples/custom_expressions.py factorial-three -v
    peano -l examples/custom_expressions.py --list
"""

from peano import E

EXPRESSIONS = {
    # 3! written out as 1*2*3
    "factorial-three": E.reduce(E.mul(E.mul(1, 2), 3)),
    # (2+3)*(2+3)
    "square-of-sum": E.reduce(E.mul(E.add(2, 3), E.add(2, 3))),
    # 2*(3*(1+1)) with a zero added on the left
    "nested": E.reduce(E.add(0, E.mul(2, E.mul(3, E.add(1, 1))))),
    # Multiplication by zero ignores the right operand
    "times-zero": E.reduce(E.mul(0, E.add(E.num(4), 5))),
}
