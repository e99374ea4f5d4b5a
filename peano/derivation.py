"""
Derivation trees.

Every result the engine produces comes with the tree of rule
applications that justifies it. A rule such as mul-succ derives its
result from two sub-derivations (the recursive product and the final
sum); those appear as premises, in the order they were produced.

Formatting options:
    - format("verbose"): indented tree, one step per line (default)
    - format("compact"): single line showing the rule chain
    - format("rules"): just the rule names, in completion order
    - to_dict(): JSON-serializable dictionary
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

from .expr import Expr, render

FORMAT_STYLES = ("verbose", "compact", "rules")


@dataclass(frozen=True)
class Derivation:
    """One rule application together with the derivations it relied on."""

    rule: str
    source: Expr
    result: Expr
    premises: Tuple["Derivation", ...] = ()

    def __iter__(self) -> Iterator["Derivation"]:
        """Iterate over all steps, pre-order (conclusion first)."""
        stack = [self]
        while stack:
            step = stack.pop()
            yield step
            stack.extend(reversed(step.premises))

    def __len__(self) -> int:
        """Number of rule applications in the tree."""
        return sum(1 for _ in self)

    def __str__(self) -> str:
        return f"{self.rule}: {render(self.source)} => {render(self.result)}"

    def depth(self) -> int:
        """Height of the tree; a step with no premises has depth 1."""
        best = 0
        stack = [(self, 1)]
        while stack:
            step, level = stack.pop()
            best = max(best, level)
            stack.extend((p, level + 1) for p in step.premises)
        return best

    def rules_applied(self) -> List[str]:
        """Rule names in the order the rules completed (post-order)."""
        names: List[str] = []
        # (step, premises already pushed)
        stack = [(self, False)]
        while stack:
            step, expanded = stack.pop()
            if expanded:
                names.append(step.rule)
            else:
                stack.append((step, True))
                stack.extend((p, False) for p in reversed(step.premises))
        return names

    def rule_counts(self) -> Dict[str, int]:
        """Count how many times each rule was applied."""
        counts: Dict[str, int] = {}
        for step in self:
            counts[step.rule] = counts.get(step.rule, 0) + 1
        return counts

    def summary(self) -> str:
        """Get a brief summary of the derivation."""
        counts = self.rule_counts()
        most_used = max(counts.items(), key=lambda x: x[1])
        return (f"{len(self)} steps using {len(counts)} unique rules. "
                f"Most used: {most_used[0]} ({most_used[1]}x)")

    def format(self, style: str = "verbose") -> str:
        """
        Format the derivation in different styles.

        Args:
            style: One of "verbose", "compact", "rules"

        Raises:
            ValueError: For an unknown style
        """
        if style == "compact":
            rules = ", ".join(self.rules_applied())
            return f"{render(self.source)} --[{rules}]--> {render(self.result)}"

        elif style == "rules":
            return " -> ".join(self.rules_applied())

        elif style == "verbose":
            lines: List[str] = []
            stack = [(self, 0)]
            while stack:
                step, indent = stack.pop()
                lines.append("  " * indent + str(step))
                stack.extend((p, indent + 1) for p in reversed(step.premises))
            return "\n".join(lines)

        raise ValueError(
            f"Unknown format style: {style!r}. Options: {', '.join(FORMAT_STYLES)}"
        )

    def to_dict(self) -> Dict:
        """Convert derivation to dictionary for JSON serialization."""
        result: Dict = {}
        stack = [(self, result)]
        while stack:
            step, node = stack.pop()
            children: List[Dict] = [{} for _ in step.premises]
            node.update(
                rule=step.rule,
                source=render(step.source),
                result=render(step.result),
                premises=children,
            )
            stack.extend(zip(step.premises, children))
        result["step_count"] = len(self)
        return result
