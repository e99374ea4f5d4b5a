"""
Lazy sequence combinators.

Rule results are plain Python iterators. These helpers compose them
without materializing anything: work happens only when the consumer
pulls the next element, so a consumer that stops early never pays for
the alternatives it did not ask for.
"""

from itertools import chain, islice
from typing import Callable, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")


def empty() -> Iterator:
    """A fresh, already exhausted iterator."""
    return iter(())


def single(value: T) -> Iterator[T]:
    """Yield value exactly once."""
    yield value


def flat_map(f: Callable[[T], Iterable[U]], xs: Iterable[T]) -> Iterator[U]:
    """
    For each x pulled from xs, yield everything f(x) yields.

    Nesting flat_map gives the cross product of the inner sequences,
    left sequence outermost:

        flat_map(lambda a: flat_map(lambda b: single((a, b)), bs), as_)
    """
    return chain.from_iterable(map(f, xs))


def concat(*thunks: Callable[[], Iterable[T]]) -> Iterator[T]:
    """
    Sequence several lazily built iterables.

    Each thunk is called only once the previous sequence is exhausted.
    """
    return chain.from_iterable(thunk() for thunk in thunks)


def first(xs: Iterable[T], default: Optional[T] = None) -> Optional[T]:
    """The first element of xs, or default when xs is empty."""
    return next(iter(xs), default)


def take(xs: Iterable[T], n: Optional[int]) -> List[T]:
    """Materialize at most n elements (all of them if n is None)."""
    if n is None:
        return list(xs)
    if n < 0:
        raise ValueError(f"take: count must be non-negative, got {n}")
    return list(islice(xs, n))
