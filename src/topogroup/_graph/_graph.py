"""Keyed dependency graph with deterministic topological ordering."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Self

from topogroup._errors import (
    InvalidSortModeError,
    NodeNotFoundError,
    NullOrUndefinedInputError,
    UnhashableKeyError,
)

from ._algorithms import find_cycles, in_degrees, kahn_levels
from ._keys import KeyResolver, same_value
from ._models import DependencyGraph, DuplicateEntry, SortMode, SortResult

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Mapping

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Node:
    value: Any
    edges: list[Hashable] = field(default_factory=list)


class Graph:
    """A directed graph of keyed items, sorted with Kahn's algorithm.

    An edge ``a -> b`` means ``a`` must be ordered before ``b`` (``b`` depends
    on ``a``). Nodes, edges and duplicate records all keep insertion order, so
    sorting is deterministic.

    Keys are derived from added items by a ``KeyResolver``: with no ``path``
    every item is its own key; with ``path="package.name"`` the key of a record
    is ``record["package"]["name"]`` while bare keys pass through, so one graph
    can mix full records with references to them.

    Example:
        >>> graph = Graph.from_entries([(1, 3), (2, 3), (3, 4)])
        >>> graph.sort().nodes
        [[1, 2], [3], [4]]
        >>> graph.sort(SortMode.FLAT).nodes
        [1, 2, 3, 4]

    """

    def __init__(self, path: str | None = None) -> None:
        self._resolver = KeyResolver(path)
        self._nodes: dict[Hashable, _Node] = {}
        self._placeholders: set[Hashable] = set()
        self._duplicates: dict[Hashable, list[Any]] = {}

    @property
    def path(self) -> str | None:
        """The key path records are resolved with, if any."""
        return self._resolver.path

    @classmethod
    def from_entries(cls, entries: Iterable[Any], *, path: str | None = None) -> Self:
        """Build a graph from bare values and ``(from, to)`` pairs.

        Args:
            entries: Each entry is either a node value or a 2-element list/tuple
                adding both ends and an edge between them.
            path: Key path, see ``Graph``.

        """
        graph = cls(path)
        for entry in entries:
            if isinstance(entry, (list, tuple)) and len(entry) == 2:
                graph.add_edge_pair(entry[0], entry[1])
            else:
                graph.add_node(entry)
        return graph

    @classmethod
    def from_dependency_graph(cls, graph: DependencyGraph | Mapping[str, Any]) -> Self:
        """Build a graph from the ``nodes`` / ``dependencies`` format.

        ``dependencies[x]`` lists the ids ``x`` depends on; each becomes an edge
        ``dependency -> x``. Ids referenced only in ``dependencies`` are added as
        placeholders.
        """
        if not isinstance(graph, DependencyGraph):
            graph = DependencyGraph.model_validate(graph)
        result = cls()
        for key, value in graph.nodes.items():
            result.add_keyed_node(key, value)
        for dependent, dependencies in graph.dependencies.items():
            for dependency in dependencies:
                result.add_dependency(dependent, dependency)
        return result

    def to_dependency_graph(self) -> DependencyGraph:
        """Export to the ``nodes`` / ``dependencies`` format."""
        dependencies: dict[Hashable, list[Hashable]] = {key: [] for key in self._nodes}
        for key, node in self._nodes.items():
            for target in node.edges:
                dependencies[target].append(key)
        return DependencyGraph(
            nodes={key: node.value for key, node in self._nodes.items()},
            dependencies=dependencies,
        )

    # --- Construction ---

    def key(self, item: Any) -> Hashable:
        """Return the key ``item`` would be stored under."""
        return self._resolver.resolve(item)

    def add_node(self, value: Any) -> Hashable:
        """Add a node, deriving its key from ``value``.

        A value conflicting with the one already stored under the same key is
        recorded as a duplicate and does not change the graph.

        Returns:
            The node's key.

        Raises:
            NullOrUndefinedInputError: If ``value`` is None.
            MissingRequiredPathError: If a key path is configured and ``value`` lacks it.
            UnhashableKeyError: If the derived key cannot be hashed.

        """
        if value is None:
            raise NullOrUndefinedInputError
        key = self._resolver.resolve(value)
        self._put(key, value, reference=self._resolver.is_reference(value))
        return key

    def add_keyed_node(self, key: Hashable, value: Any) -> Hashable:
        """Add a node under an explicit key, bypassing key derivation."""
        if key is None:
            raise NullOrUndefinedInputError("id")
        if value is None:
            raise NullOrUndefinedInputError("value")
        self._put(key, value)
        return key

    def add_dependency(self, dependent: Hashable, dependency: Hashable) -> None:
        """Declare that ``dependent`` must be ordered after ``dependency``.

        Missing ids are added as placeholder nodes whose value is the id.
        """
        if dependent is None:
            raise NullOrUndefinedInputError("dependent")
        if dependency is None:
            raise NullOrUndefinedInputError("dependency")
        self._check_key(dependent)
        self._check_key(dependency)
        self._ensure(dependent)
        self._ensure(dependency)
        self._nodes[dependency].edges.append(dependent)

    def add_edge_pair(self, value: Any, to_value: Any) -> None:
        """Add both values as nodes and an edge from the first to the second.

        The edge is skipped when either value conflicts with an existing node
        and is recorded as a duplicate instead.
        """
        if value is None or to_value is None:
            raise NullOrUndefinedInputError
        key = self._resolver.resolve(value)
        to_key = self._resolver.resolve(to_value)
        self._check_key(key)
        self._check_key(to_key)
        accepted = self._put(key, value, reference=self._resolver.is_reference(value))
        to_accepted = self._put(to_key, to_value, reference=self._resolver.is_reference(to_value))
        if accepted and to_accepted:
            self._nodes[key].edges.append(to_key)

    @staticmethod
    def _check_key(key: Any) -> None:
        try:
            hash(key)
        except TypeError as e:
            raise UnhashableKeyError(key) from e

    def _ensure(self, key: Hashable) -> None:
        self._check_key(key)
        if key not in self._nodes:
            self._nodes[key] = _Node(value=key)
            self._placeholders.add(key)

    def _put(self, key: Hashable, value: Any, *, reference: bool = False) -> bool:
        """Store ``value`` under ``key``; return False if it was recorded as a duplicate."""
        self._check_key(key)
        if reference:
            self._ensure(key)
            return True
        node = self._nodes.get(key)
        if node is None:
            self._nodes[key] = _Node(value=value)
            return True
        if key in self._placeholders:
            node.value = value
            self._placeholders.discard(key)
            return True
        if same_value(node.value, value):
            return True
        logger.warning(f"Conflicting value for key '{key}' recorded as duplicate")
        self._duplicates.setdefault(key, [node.value]).append(value)
        return False

    # --- Queries ---

    def keys(self) -> list[Hashable]:
        """All keys in insertion order."""
        return list(self._nodes)

    def value(self, key: Hashable) -> Any:
        """Get the stored value for ``key``.

        Raises:
            NodeNotFoundError: If ``key`` is not in the graph.

        """
        return self._node(key).value

    def edges(self, key: Hashable) -> list[Hashable]:
        """Get the keys that depend on ``key``, in insertion order.

        Raises:
            NodeNotFoundError: If ``key`` is not in the graph.

        """
        return list(self._node(key).edges)

    def _node(self, key: Hashable) -> _Node:
        try:
            return self._nodes[key]
        except KeyError:
            raise NodeNotFoundError(key) from None

    def _successors(self, key: Hashable) -> list[Hashable]:
        return self._nodes[key].edges

    def degrees(self) -> dict[Hashable, int]:
        """In-degree of every node (number of direct dependencies)."""
        return in_degrees(self._nodes, self._successors)

    def duplicates(self) -> list[DuplicateEntry]:
        """Conflicting values recorded so far, one entry per key."""
        return [DuplicateEntry(key=key, values=list(values)) for key, values in self._duplicates.items()]

    def cycles(self) -> list[list[Hashable]]:
        """Enumerate cycles over the whole graph."""
        return find_cycles(self._nodes, self._successors)

    def sort(self, mode: SortMode | int = SortMode.GROUP) -> SortResult:
        """Order nodes so every dependency precedes its dependents.

        Args:
            mode: ``SortMode.GROUP`` for one list per level, ``SortMode.FLAT``
                for a single list.

        Returns:
            The ordered node values, any cycles blocking the remaining nodes,
            and recorded duplicates.

        Raises:
            InvalidSortModeError: If ``mode`` is not a ``SortMode``.

        """
        if isinstance(mode, bool) or mode not in (SortMode.GROUP, SortMode.FLAT):
            raise InvalidSortModeError(mode)

        keys = self.keys()
        levels = kahn_levels(keys, self._successors)
        processed = sum(len(level) for level in levels)
        groups = [[self._nodes[key].value for key in level] for level in levels]

        cycles: list[list[Hashable]] = []
        if processed != len(keys):
            cycles = self.cycles()
            logger.debug(f"Sorted {processed} of {len(keys)} nodes; {len(cycles)} cycle(s) found")
        else:
            logger.debug(f"Sorted {processed} nodes into {len(levels)} level(s)")

        nodes = [value for group in groups for value in group] if mode == SortMode.FLAT else groups
        return SortResult(nodes=nodes, cycles=cycles, duplicates=self.duplicates())

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._nodes)

    def __contains__(self, key: object) -> bool:
        """Check if a key is in the graph."""
        return key in self._nodes
