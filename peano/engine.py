"""
Rule Engine for PEANO

PEANO - rewriting Peano arithmetic by structural rules

A RuleEngine holds named rules. Each rule is registered for one compound
node kind (Add, Mul or Reduce) and is a generator function

    rule(engine, expr) -> Iterator[Derivation]

that yields one Derivation per result it can justify for expr, and
nothing when expr does not have the shape it handles. Rules recurse by
asking the engine for the derivations of sub-expressions, so every
nested step goes through the same rule set, including rules added later.

Evaluation is lazy end to end: derive() returns a generator, and no rule
runs until the caller pulls a result. "No rule applies" is an empty
sequence, never an exception.

Example:
    from peano import RuleEngine, Add, Zero, Derivation

    engine = RuleEngine()

    @engine.rule(Add, "add-zero", "z + b = b", tags=["add"])
    def add_zero(engine, expr):
        match expr:
            case Add(Zero(), b):
                yield Derivation("add-zero", expr, b)

    list(engine.derive(Add(Zero(), Zero())))  # => [Zero()]
"""

from functools import partial
from itertools import islice
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .derivation import Derivation
from .expr import COMPOUND_KINDS, Add, Expr, Mul, Reduce, Succ, Zero, render
from .log import get_logger
from .stream import concat, empty, first, take

logger = get_logger(__name__)

RuleFunc = Callable[["RuleEngine", Expr], Iterable[Derivation]]


class RuleMetadata:
    """Metadata for a rule including name, kind, description, tags and priority."""

    def __init__(self, name: str, kind: type, description: Optional[str] = None,
                 tags: Optional[List[str]] = None, priority: int = 0):
        self.name = name
        self.kind = kind
        self.description = description
        self.tags = tags or []
        self.priority = priority  # Higher priority fires first (default: 0)

    def __repr__(self) -> str:
        if self.priority != 0:
            base = f"@{self.name}[{self.priority}]"
        else:
            base = f"@{self.name}"
        base += f" ({self.kind.__name__})"
        if self.description:
            base += f" \"{self.description}\""
        return base


class RuleEngine:
    """
    A rule engine that enumerates derivations of Peano expressions.

    Rules for the same node kind are tried in order of descending
    priority, then registration order, and their result sequences are
    concatenated. With a confluent rule set exactly one result comes out;
    the engine does not rely on that, and rule sets that overlap produce
    every result each rule can justify.

    Example:
        from peano import PEANO_RULES, E

        results = list(PEANO_RULES.derive(E.reduce(E.add(2, 1))))
        # => [Succ(Succ(Succ(Zero())))]
    """

    def __init__(self):
        self._rules: Dict[type, List[Tuple[RuleMetadata, RuleFunc]]] = {
            kind: [] for kind in COMPOUND_KINDS
        }
        self._rule_names: Dict[str, Tuple[RuleMetadata, RuleFunc]] = {}
        self._order: List[str] = []  # Registration order, for listing
        self._disabled_groups: set = set()

    # ============================================================
    # Registration
    # ============================================================

    def rule(self, kind: type, name: str, description: Optional[str] = None,
             tags: Optional[List[str]] = None,
             priority: int = 0) -> Callable[[RuleFunc], RuleFunc]:
        """
        Decorator registering a rule for one compound node kind.

        Raises:
            TypeError: If kind is not Add, Mul or Reduce
            ValueError: If a rule with the same name already exists
        """
        def register(func: RuleFunc) -> RuleFunc:
            self.add_rule(kind, name, func, description=description,
                          tags=tags, priority=priority)
            return func
        return register

    def add_rule(self, kind: type, name: str, func: RuleFunc,
                 description: Optional[str] = None,
                 tags: Optional[List[str]] = None,
                 priority: int = 0) -> 'RuleEngine':
        """Register a rule function; see rule() for the decorator form."""
        if kind not in COMPOUND_KINDS:
            kind_name = getattr(kind, "__name__", repr(kind))
            raise TypeError(
                f"Rules can only be registered for Add, Mul or Reduce, not {kind_name}"
            )
        if name in self._rule_names:
            raise ValueError(f"Duplicate rule name: '{name}'")

        metadata = RuleMetadata(name, kind, description=description,
                                tags=tags, priority=priority)
        entry = (metadata, func)
        self._rules[kind].append(entry)
        # Stable sort keeps registration order among equal priorities.
        self._rules[kind].sort(key=lambda item: -item[0].priority)
        self._rule_names[name] = entry
        self._order.append(name)
        return self

    # ============================================================
    # Group Management
    # ============================================================

    def disable_group(self, group: str) -> 'RuleEngine':
        """Disable all rules in a group."""
        self._disabled_groups.add(group)
        logger.debug("rule_group_disabled", group=group)
        return self

    def enable_group(self, group: str) -> 'RuleEngine':
        """Enable all rules in a group."""
        self._disabled_groups.discard(group)
        logger.debug("rule_group_enabled", group=group)
        return self

    def groups(self) -> set:
        """Return all group names used by rules."""
        all_groups = set()
        for metadata, _ in self._rule_names.values():
            all_groups.update(metadata.tags)
        return all_groups

    def disabled_groups(self) -> set:
        return set(self._disabled_groups)

    def _is_rule_active(self, metadata: RuleMetadata) -> bool:
        return not any(g in self._disabled_groups for g in metadata.tags)

    def active_rules(self, kind: type) -> List[Tuple[RuleMetadata, RuleFunc]]:
        """Rules that currently fire for a node kind, in firing order."""
        return [entry for entry in self._rules.get(kind, [])
                if self._is_rule_active(entry[0])]

    # ============================================================
    # Evaluation
    # ============================================================

    def derivations(self, expr: Expr) -> Iterator[Derivation]:
        """
        Lazily enumerate the derivations of an expression.

        Numbers are normal forms and have no derivations. For compound
        nodes the active rules of that kind are tried in order and their
        sequences concatenated.

        Raises:
            TypeError: If expr is not an expression node
        """
        match expr:
            case Zero() | Succ():
                return empty()
            case Add() | Mul() | Reduce():
                rules = self.active_rules(type(expr))
                return concat(*(partial(func, self, expr) for _, func in rules))
            case _:
                raise TypeError(f"Cannot derive a non-expression: {expr!r}")

    def derive(self, expr: Expr) -> Iterator[Expr]:
        """
        Lazily enumerate the results of an expression.

        Each call returns a fresh, independent generator.
        """
        return (d.result for d in self.derivations(expr))

    def normalize(self, expr: Expr) -> Optional[Expr]:
        """First result of an expression, or None if it is stuck."""
        return first(self.derive(expr))

    def results(self, expr: Expr, limit: Optional[int] = None) -> List[Expr]:
        """Materialize at most limit results (all of them by default)."""
        return take(self.derive(expr), limit)

    def run(self, expr: Expr, limit: Optional[int] = None) -> Iterator[Derivation]:
        """
        Pull derivations for a driver, logging progress.

        Lazy like derivations(); stops after limit results when given.
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        log = logger.bind(expr=render(expr))
        log.debug("evaluation_started", limit=limit)
        count = 0
        for derivation in islice(self.derivations(expr), limit):
            count += 1
            log.debug("derivation_found", index=count,
                      result=render(derivation.result), steps=len(derivation))
            yield derivation
        if count == 0 and limit != 0:
            log.info("evaluation_stuck")
        log.debug("evaluation_finished", results=count)

    # ============================================================
    # Introspection
    # ============================================================

    def list_rules(self) -> List[str]:
        """Describe every rule, in registration order."""
        lines = []
        for name in self._order:
            metadata, _ = self._rule_names[name]
            line = repr(metadata)
            if metadata.tags:
                line += f" [{', '.join(metadata.tags)}]"
            if not self._is_rule_active(metadata):
                line += " (disabled)"
            lines.append(line)
        return lines

    def get_rule(self, name: str) -> Optional[Tuple[RuleMetadata, RuleFunc]]:
        """Get a rule's metadata and function by name."""
        return self._rule_names.get(name)

    def __len__(self) -> int:
        return len(self._rule_names)

    def __repr__(self) -> str:
        return f"RuleEngine({len(self)} rules)"

    def __call__(self, expr: Expr) -> Iterator[Expr]:
        """Make engine callable: engine(expr) is shorthand for engine.derive(expr)."""
        return self.derive(expr)

    def __iter__(self):
        """Iterate over (metadata, rule function) pairs in registration order."""
        return iter([self._rule_names[name] for name in self._order])

    def __contains__(self, name: str) -> bool:
        """Check if a named rule exists: 'add-zero' in engine."""
        return name in self._rule_names

    def __getitem__(self, name: str) -> Tuple[RuleMetadata, RuleFunc]:
        """Get rule by name: engine['add-zero']."""
        if name not in self._rule_names:
            raise KeyError(f"No rule named '{name}'")
        return self._rule_names[name]

    # Combining engines (rule set algebra)
    def copy(self) -> 'RuleEngine':
        """Create a copy of this engine, disabled groups included."""
        new_engine = RuleEngine()
        new_engine |= self
        new_engine._disabled_groups = self._disabled_groups.copy()
        return new_engine

    def __or__(self, other: 'RuleEngine') -> 'RuleEngine':
        """Union of two engines: engine1 | engine2."""
        result = self.copy()
        result |= other
        return result

    def __ior__(self, other: 'RuleEngine') -> 'RuleEngine':
        """In-place union: engine1 |= engine2."""
        for metadata, func in other:
            self.add_rule(metadata.kind, metadata.name, func,
                          description=metadata.description,
                          tags=list(metadata.tags), priority=metadata.priority)
        return self
