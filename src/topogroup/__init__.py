"""Grouped topological sorting of keyed dependency graphs."""

__all__ = [
    "DependencyGraph",
    "DuplicateEntry",
    "Graph",
    "GraphError",
    "GraphFileError",
    "InvalidKeyPathError",
    "InvalidSortModeError",
    "KeyResolver",
    "MissingRequiredPathError",
    "NodeNotFoundError",
    "NullOrUndefinedInputError",
    "SortMode",
    "SortResult",
    "UnhashableKeyError",
    "deep_get",
    "dump_dependency_graph",
    "load_graph",
]

from ._errors import (
    GraphError,
    InvalidKeyPathError,
    InvalidSortModeError,
    MissingRequiredPathError,
    NodeNotFoundError,
    NullOrUndefinedInputError,
    UnhashableKeyError,
)
from ._graph import DependencyGraph, DuplicateEntry, Graph, KeyResolver, SortMode, SortResult
from ._io import GraphFileError, dump_dependency_graph, load_graph
from ._path import deep_get
