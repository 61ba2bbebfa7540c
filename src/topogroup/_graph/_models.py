"""Result and interchange types for dependency graphs."""

from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

K = TypeVar("K", bound=Hashable)


class SortMode(IntEnum):
    """Output shape of ``Graph.sort``."""

    GROUP = 1  # One list per dependency level
    FLAT = 2  # A single list in level order


@dataclass(frozen=True, slots=True)
class DuplicateEntry(Generic[K]):
    """Conflicting values submitted under one key.

    Attributes:
        key: The key the values collided on.
        values: The authoritative (first) value followed by every later
            conflicting value, in submission order.

    """

    key: K
    values: list[Any] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SortResult(Generic[K]):
    """Result of sorting a graph.

    Attributes:
        nodes: Stored node values. A flat list in ``SortMode.FLAT``, a list of
            levels in ``SortMode.GROUP``. Nodes on or behind a cycle are absent.
        cycles: Key sequences closing on a repeated key, e.g. ``[1, 2, 1]``.
            Empty when every node was placed.
        duplicates: Conflicting values recorded while the graph was built.

    """

    nodes: list[Any] = field(default_factory=list)
    cycles: list[list[K]] = field(default_factory=list)
    duplicates: list[DuplicateEntry[K]] = field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        """Check if any node could not be ordered."""
        return len(self.cycles) > 0


class DependencyGraph(BaseModel):
    """Declarative graph format: node values plus the ids each node depends on.

    ``dependencies[x]`` lists the ids that must be ordered before ``x``. This is
    the inverse of the edge direction ``Graph`` stores internally.

    Example:
        >>> DependencyGraph(nodes={"app": "App", "lib": "Lib"}, dependencies={"app": ["lib"]})
        DependencyGraph(nodes={'app': 'App', 'lib': 'Lib'}, dependencies={'app': ['lib']})

    """

    model_config = ConfigDict(extra="forbid")

    nodes: dict[Any, Any] = Field(default_factory=dict)
    dependencies: dict[Any, list[Any]] = Field(default_factory=dict)
