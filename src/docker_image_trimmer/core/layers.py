"""Layer set operations."""

from typing import Iterable

from .types import LayerSet


def layer_set(digests: Iterable[str] = ()) -> LayerSet:
    """Build a LayerSet from already normalized digests."""
    return frozenset(digests)


def difference(a: LayerSet, b: LayerSet) -> LayerSet:
    """Return the digests in ``a`` that are not in ``b`` as a new set."""
    return frozenset(a) - frozenset(b)
