"""
Expression model for Peano arithmetic.

PEANO - rewriting Peano arithmetic by structural rules

Expressions are immutable trees built from five node kinds:

    Zero()            z
    Succ(n)           (s n)       n must already be a Num
    Add(a, b)         (a+b)
    Mul(a, b)         (a*b)
    Reduce(e)         (!e)        normalize e to a Num

Num is the refinement of Expr holding normalized numbers (Zero and Succ).
It is a marker base class rather than a separate storage type, so
isinstance(x, Num) is the refinement test.

Examples:
    from peano import E

    two = E.num(2)               # Succ(Succ(Zero()))
    str(two)                     # "(s(sz))"
    expr = E.reduce(E.add(2, 1)) # (!((s(sz))+(sz)))
"""

from dataclasses import dataclass
from typing import Union


class Expr:
    """Base class of every expression node."""

    __slots__ = ()

    def __str__(self) -> str:
        return render(self)


class Num(Expr):
    """Base class of normalized numbers: Zero and Succ."""

    __slots__ = ()


@dataclass(frozen=True, repr=False)
class Zero(Num):
    """The number zero."""

    def __repr__(self) -> str:
        return "Zero()"


@dataclass(frozen=True, repr=False)
class Succ(Num):
    """Successor of a normalized number."""

    pred: Num

    def __post_init__(self):
        if not isinstance(self.pred, Num):
            raise TypeError(
                f"Succ: operand must be a Num, got {type(self.pred).__name__}"
            )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Succ):
            return NotImplemented
        a, b = self.pred, other.pred
        while isinstance(a, Succ) and isinstance(b, Succ):
            a, b = a.pred, b.pred
        if isinstance(a, Succ) or isinstance(b, Succ):
            return False
        return a == b

    def __repr__(self) -> str:
        count, base = 0, self
        while isinstance(base, Succ):
            count += 1
            base = base.pred
        return "Succ(" * count + repr(base) + ")" * count


@dataclass(frozen=True, repr=False)
class Add(Expr):
    """Addition of two expressions."""

    left: Expr
    right: Expr

    def __post_init__(self):
        _check_operands("Add", self.left, self.right)

    def __repr__(self) -> str:
        return f"Add({self.left!r}, {self.right!r})"


@dataclass(frozen=True, repr=False)
class Mul(Expr):
    """Multiplication of two expressions."""

    left: Expr
    right: Expr

    def __post_init__(self):
        _check_operands("Mul", self.left, self.right)

    def __repr__(self) -> str:
        return f"Mul({self.left!r}, {self.right!r})"


@dataclass(frozen=True, repr=False)
class Reduce(Expr):
    """The "!" operator: normalize the operand to a Num."""

    operand: Expr

    def __post_init__(self):
        _check_operands("Reduce", self.operand)

    def __repr__(self) -> str:
        return f"Reduce({self.operand!r})"


NODE_KINDS = (Zero, Succ, Add, Mul, Reduce)
COMPOUND_KINDS = (Add, Mul, Reduce)


def _check_operands(kind: str, *operands) -> None:
    for operand in operands:
        if not isinstance(operand, Expr):
            raise TypeError(
                f"{kind}: operand must be an Expr, got {type(operand).__name__}"
            )


# ============================================================
# Predicates and conversions
# ============================================================

def is_num(expr: Expr) -> bool:
    """
    Check if an expression is a normalized number.

    Args:
        expr: The expression to check

    Returns:
        True if expr is Zero or Succ, False otherwise
    """
    return isinstance(expr, Num)


def equals(a: Expr, b: Expr) -> bool:
    """Structural equality: same variant and equal children."""
    return a == b


def num(n: int) -> Num:
    """
    Build the numeral for a natural number.

    Examples:
        num(0) -> Zero()
        num(2) -> Succ(Succ(Zero()))

    Raises:
        ValueError: If n is negative
    """
    if n < 0:
        raise ValueError(f"num: expected a natural number, got {n}")
    result: Num = Zero()
    for _ in range(n):
        result = Succ(result)
    return result


def to_int(expr: Num) -> int:
    """
    Count the successors of a normalized number.

    Raises:
        TypeError: If expr is not a Num
    """
    count = 0
    while isinstance(expr, Succ):
        count += 1
        expr = expr.pred
    if not isinstance(expr, Zero):
        raise TypeError(f"to_int: expected a Num, got {type(expr).__name__}")
    return count


def size(expr: Expr) -> int:
    """Number of nodes in an expression."""
    count = 0
    stack = [expr]
    while stack:
        node = stack.pop()
        count += 1
        match node:
            case Succ(pred):
                stack.append(pred)
            case Add(left, right) | Mul(left, right):
                stack.append(left)
                stack.append(right)
            case Reduce(operand):
                stack.append(operand)
    return count


def depth(expr: Expr) -> int:
    """Height of an expression tree; a lone Zero has depth 1."""
    best = 0
    stack = [(expr, 1)]
    while stack:
        node, level = stack.pop()
        best = max(best, level)
        match node:
            case Succ(pred):
                stack.append((pred, level + 1))
            case Add(left, right) | Mul(left, right):
                stack.append((left, level + 1))
                stack.append((right, level + 1))
            case Reduce(operand):
                stack.append((operand, level + 1))
    return best


# ============================================================
# Rendering
# ============================================================

def render(expr: Expr) -> str:
    """
    Render an expression in canonical form.

    Examples:
        Zero()                      -> "z"
        Succ(Succ(Zero()))          -> "(s(sz))"
        Add(Zero(), Succ(Zero()))   -> "(z+(sz))"
        Reduce(Mul(Zero(), Zero())) -> "(!(z*z))"
    """
    match expr:
        case Zero():
            return "z"
        case Succ():
            # Successor chains can be long; unwind them without recursion.
            count = 0
            while isinstance(expr, Succ):
                count += 1
                expr = expr.pred
            return "(s" * count + render(expr) + ")" * count
        case Add(left, right):
            return "(" + render(left) + "+" + render(right) + ")"
        case Mul(left, right):
            return "(" + render(left) + "*" + render(right) + ")"
        case Reduce(operand):
            return "(!" + render(operand) + ")"
        case _:
            raise TypeError(f"render: not an expression: {expr!r}")


# ============================================================
# Expression Builder
# ============================================================

Operand = Union[Expr, int]


def _coerce(value: Operand) -> Expr:
    if isinstance(value, Expr):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return num(value)
    raise TypeError(f"expected an Expr or int, got {type(value).__name__}")


class _ExprBuilder:
    """
    Expression builder for PEANO.

    Integers are accepted wherever an operand is expected and are turned
    into numerals, which keeps hand-written expressions short.

    Examples:
        from peano import E

        E.num(3)                         # (s(s(sz)))
        E.add(2, 1)                      # ((s(sz))+(sz))
        E.reduce(E.mul(E.add(1, 1), 2))  # (!(((sz)+(sz))*(s(sz))))
    """

    @property
    def zero(self) -> Zero:
        return Zero()

    def succ(self, n: Operand) -> Succ:
        """Successor; n must be (or coerce to) a Num."""
        return Succ(_coerce(n))

    def num(self, n: int) -> Num:
        return num(n)

    def add(self, a: Operand, b: Operand) -> Add:
        return Add(_coerce(a), _coerce(b))

    def mul(self, a: Operand, b: Operand) -> Mul:
        return Mul(_coerce(a), _coerce(b))

    def reduce(self, e: Operand) -> Reduce:
        return Reduce(_coerce(e))

    def __repr__(self) -> str:
        return "E (expression builder)"


# Singleton instance
E = _ExprBuilder()
