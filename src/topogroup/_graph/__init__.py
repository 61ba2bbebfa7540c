"""Graph module providing the keyed dependency graph.

This module contains:
- Graph: An insertion-ordered keyed graph with duplicate tracking
- KeyResolver: Key derivation from records via a nested path
- in_degrees, kahn_levels, find_cycles: Ordering and cycle algorithms
- DependencyGraph: The declarative nodes / dependencies format
"""

from ._algorithms import find_cycles, in_degrees, kahn_levels
from ._graph import Graph
from ._keys import KeyResolver, is_record
from ._models import DependencyGraph, DuplicateEntry, SortMode, SortResult

__all__ = [
    "DependencyGraph",
    "DuplicateEntry",
    "Graph",
    "KeyResolver",
    "SortMode",
    "SortResult",
    "find_cycles",
    "in_degrees",
    "is_record",
    "kahn_levels",
]
