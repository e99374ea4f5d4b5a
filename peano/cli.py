#!/usr/bin/env python3
"""
PEANO Command-Line Interface

Evaluates named Peano expressions and prints every result the rules
derive for them.

Usage:
    peano                            # Evaluate the built-in example
    peano four -p                    # Print the expression, then its results
    peano example -t                 # Show the derivation tree of each result
    peano example -t compact -v      # One-line derivation and numeric value
    peano -l my_exprs.py square      # Evaluate a custom expression
    peano --list                     # List available expressions
    peano --rules                    # List the rewrite rules

Custom Expression Files:
    A Python file defining an EXPRESSIONS dict of name -> expression:

        from peano import E

        EXPRESSIONS = {
            "square": E.reduce(E.mul(3, 3)),
        }

    Files are given by path, or by name and searched for in ./expressions
    and ~/.config/peano/expressions.
"""

import argparse
import importlib.util
import sys
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from . import __version__
from .derivation import FORMAT_STYLES
from .engine import RuleEngine
from .expr import E, Expr, depth, is_num, render, size, to_int
from .log import LOG_LEVELS, configure_logging, get_logger
from .rules import peano_engine

logger = get_logger(__name__)

# Built-in expressions
BUILTIN_EXPRESSIONS: Dict[str, Expr] = {
    # !((2*2)*(2+1)) = 6
    "example": E.reduce(E.mul(E.mul(2, 2), E.add(2, 1))),
    # !(((2*2)*1)+0) = 4
    "four": E.reduce(E.add(E.mul(E.mul(2, 2), 1), 0)),
    "zero": E.reduce(0),
    "sum": E.reduce(E.add(2, 3)),
    "product": E.reduce(E.mul(3, 3)),
    "distribute": E.reduce(E.mul(2, E.add(1, 2))),
    # Reduce of a Reduce has no rule
    "stuck": E.reduce(E.reduce(2)),
    # Add only steps once its left operand is a number
    "unreduced": E.add(E.add(1, 1), 1),
}

# Standard expression search paths
EXPRESSION_SEARCH_PATHS = [
    Path("./expressions"),
    Path.home() / ".config" / "peano" / "expressions",
]


def load_custom_expressions(name_or_path: str) -> Optional[Dict[str, Expr]]:
    """
    Load custom expressions from a Python file.

    The file should define an EXPRESSIONS dict.

    Args:
        name_or_path: Either a path to a .py file, or a name to search for

    Returns:
        The EXPRESSIONS dict from the file, or None if not found

    Raises:
        TypeError: If EXPRESSIONS holds something other than expressions
    """
    path = Path(name_or_path)

    # If it's an explicit path
    if path.suffix == ".py" or "/" in name_or_path or "\\" in name_or_path:
        search_paths = [path]
    else:
        # Search for name.py in standard locations
        search_paths = [search_dir / f"{name_or_path}.py"
                        for search_dir in EXPRESSION_SEARCH_PATHS]

    for candidate in search_paths:
        if not candidate.exists():
            continue
        spec = importlib.util.spec_from_file_location("custom_expressions", candidate)
        if spec is None or spec.loader is None:
            continue
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        expressions = getattr(module, "EXPRESSIONS", None)
        if expressions is None:
            logger.warning("expressions_missing", path=str(candidate))
            continue
        for name, expr in expressions.items():
            if not isinstance(expr, Expr):
                raise TypeError(
                    f"{candidate}: EXPRESSIONS['{name}'] is not an expression: {expr!r}"
                )
        logger.debug("expressions_loaded", path=str(candidate), count=len(expressions))
        return dict(expressions)

    return None


class Runner:
    """
    Evaluates expressions and writes everything it prints to the given
    sinks; results go to out, diagnostics to err.
    """

    def __init__(self, engine: Optional[RuleEngine] = None,
                 out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.engine = engine if engine is not None else peano_engine()
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.expressions: Dict[str, Expr] = dict(BUILTIN_EXPRESSIONS)

    def print(self, text: str) -> None:
        print(text, file=self.out)

    def error(self, text: str) -> None:
        print(text, file=self.err)

    def load(self, name_or_path: str) -> bool:
        """Add the expressions of a custom file; False if it was not found."""
        loaded = load_custom_expressions(name_or_path)
        if loaded is None:
            return False
        self.expressions.update(loaded)
        return True

    def lookup(self, name: str) -> Optional[Expr]:
        return self.expressions.get(name)

    def run_expression(self, expr: Expr, print_input: bool = False,
                       first: bool = False, limit: Optional[int] = None,
                       trace: Optional[str] = None, numeric: bool = False) -> int:
        """
        Evaluate an expression and print each result as it is derived.

        Args:
            expr: The expression to evaluate
            print_input: Print the rendered expression before the results
            first: Stop after the first result
            limit: Stop after this many results
            trace: Derivation format style to print under each result
            numeric: Append the integer value to numeric results

        Returns:
            Exit code (0 if at least one result, 1 if the expression is stuck
            or too deeply nested to evaluate)
        """
        if first:
            limit = 1 if limit is None else min(limit, 1)
        if print_input:
            self.print(render(expr))

        count = 0
        try:
            for derivation in self.engine.run(expr, limit=limit):
                count += 1
                line = render(derivation.result)
                if numeric and is_num(derivation.result):
                    line += f" = {to_int(derivation.result)}"
                self.print(line)
                if trace:
                    self.print(derivation.format(trace))
        except RecursionError:
            self.error(f"Expression too deeply nested to evaluate: {render(expr)}")
            return 1

        if count == 0 and limit != 0:
            self.error(f"No derivation for {render(expr)}")
            return 1
        return 0

    def run_named(self, name: str, **kwargs) -> int:
        """Evaluate a named expression; unknown names are an error."""
        expr = self.lookup(name)
        if expr is None:
            available = ", ".join(sorted(self.expressions))
            self.error(f"Unknown expression: {name}\nAvailable: {available}")
            return 1
        return self.run_expression(expr, **kwargs)

    def list_expressions(self) -> int:
        """Print every known expression with its size."""
        for name in sorted(self.expressions):
            expr = self.expressions[name]
            self.print(f"{name}: {render(expr)} "
                       f"({size(expr)} nodes, depth {depth(expr)})")
        return 0

    def list_rules(self) -> int:
        """Print every rule of the engine."""
        for line in self.engine.list_rules():
            self.print(line)
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="peano",
        description="PEANO - rewriting Peano arithmetic by structural rules",
        epilog="Examples:\n"
               "  peano                          Evaluate the built-in example\n"
               "  peano four -p                  Print input, then results\n"
               "  peano example -t compact       Show derivations\n"
               "  peano -l exprs.py square -v    Custom expression with value\n"
               "  peano --list                   List expressions\n",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "expression",
        nargs="?",
        default="example",
        help="Name of the expression to evaluate (default: example)"
    )

    parser.add_argument(
        "-l", "--load",
        action="append",
        default=[],
        help="Load expressions from a Python file (can be specified multiple times)"
    )

    parser.add_argument(
        "-p", "--print-input",
        action="store_true",
        help="Print the expression before its results"
    )

    parser.add_argument(
        "-f", "--first",
        action="store_true",
        help="Stop after the first result"
    )

    parser.add_argument(
        "-n", "--limit",
        type=int,
        help="Stop after N results"
    )

    parser.add_argument(
        "-t", "--trace",
        nargs="?",
        const="verbose",
        choices=FORMAT_STYLES,
        help="Print the derivation of each result (default style: verbose)"
    )

    parser.add_argument(
        "-v", "--value",
        action="store_true",
        help="Show the integer value of each result"
    )

    parser.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="GROUP",
        help="Disable a rule group (can be specified multiple times)"
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="List available expressions and exit"
    )

    parser.add_argument(
        "--rules",
        action="store_true",
        help="List the rewrite rules and exit"
    )

    parser.add_argument(
        "--log-level",
        default="warning",
        choices=list(LOG_LEVELS),
        help="Logging level (default: warning)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.limit is not None and args.limit < 1:
        parser.error("--limit must be a positive integer")

    configure_logging(args.log_level)

    runner = Runner()
    for group in args.disable:
        runner.engine.disable_group(group)

    # Load expression files
    for expressions_file in args.load:
        try:
            found = runner.load(expressions_file)
        except Exception as e:
            runner.error(f"Error loading {expressions_file}: {e}")
            return 1
        if not found:
            runner.error(f"Expressions file not found: {expressions_file}")
            return 1

    if args.list:
        return runner.list_expressions()
    if args.rules:
        return runner.list_rules()

    return runner.run_named(
        args.expression,
        print_input=args.print_input,
        first=args.first,
        limit=args.limit,
        trace=args.trace,
        numeric=args.value,
    )


if __name__ == "__main__":
    sys.exit(main())
