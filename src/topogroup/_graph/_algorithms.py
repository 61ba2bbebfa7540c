"""Graph algorithms for dependency graph operations."""

from __future__ import annotations

from collections import deque
from collections.abc import Hashable
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

T = TypeVar("T", bound=Hashable)


def in_degrees(keys: Iterable[T], successors: Callable[[T], Iterable[T]]) -> dict[T, int]:
    """Count the direct predecessors of every node.

    Args:
        keys: All nodes, in the order the result should keep.
        successors: Returns the nodes that depend on a node (outgoing edges).

    Returns:
        Mapping from node to in-degree. Nodes with no predecessors map to 0.

    """
    nodes = list(keys)
    degrees = dict.fromkeys(nodes, 0)
    for node in nodes:
        for successor in successors(node):
            degrees[successor] = degrees.get(successor, 0) + 1
    return degrees


def kahn_levels(keys: Sequence[T], successors: Callable[[T], Iterable[T]]) -> list[list[T]]:
    """Sort a graph into dependency levels (dependencies before dependents).

    Every node in level ``n`` has all of its predecessors in levels below ``n``
    and at least one in level ``n - 1``. Within a level, nodes keep the order
    in which their in-degree reached zero; roots keep the order of ``keys``.

    Nodes on a cycle, or reachable only through one, are left out. Callers
    detect that by comparing the number of placed nodes with ``len(keys)``.

    Args:
        keys: All nodes, in insertion order.
        successors: Returns the nodes that depend on a node, in edge order.

    Returns:
        List of levels, each a list of nodes.

    Example:
        >>> edges = {"a": ["c"], "b": ["c"], "c": []}
        >>> kahn_levels(list(edges), edges.__getitem__)
        [['a', 'b'], ['c']]

    """
    indegree = in_degrees(keys, successors)

    # Start with nodes that have no predecessors (in-degree 0)
    queue: deque[tuple[T, int]] = deque((node, 0) for node in keys if indegree[node] == 0)
    levels: list[list[T]] = []
    current: list[T] = []
    current_level = 0

    while queue:
        node, level = queue.popleft()
        if level > current_level:
            levels.append(current)
            current = []
            current_level = level
        current.append(node)
        for successor in successors(node):
            indegree[successor] -= 1
            if indegree[successor] == 0:
                queue.append((successor, level + 1))

    if current:
        levels.append(current)

    return levels


_DONE = object()


def find_cycles(keys: Iterable[T], successors: Callable[[T], Iterable[T]]) -> list[list[T]]:
    """Enumerate cycles with a depth-first search.

    Roots are taken in ``keys`` order. Whenever the walk reaches a node that is
    still on the current path, the path plus that node is recorded. A node is
    walked at most once, so the same logical cycle can be reported again from a
    different root but a finished acyclic node never is.

    Args:
        keys: All nodes, in insertion order.
        successors: Returns the nodes that depend on a node, in edge order.

    Returns:
        List of cycles, each closing on its repeated node (e.g. ``[1, 2, 1]``).

    """
    visited: set[T] = set()
    marks: set[T] = set()
    cycles: list[list[T]] = []

    for root in keys:
        if root in visited:
            continue
        visited.add(root)
        marks.add(root)
        path: list[T] = [root]
        stack = [iter(successors(root))]

        while stack:
            node = next(stack[-1], _DONE)
            if node is _DONE:
                stack.pop()
                marks.discard(path.pop())
                continue
            if node in marks:
                cycles.append([*path, node])
                continue
            if node in visited:
                continue
            visited.add(node)
            marks.add(node)
            path.append(node)
            stack.append(iter(successors(node)))

    return cycles
