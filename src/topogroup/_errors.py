"""Exceptions raised by graph construction and sorting."""


class GraphError(Exception):
    """Base class for invalid graph input."""


class NullOrUndefinedInputError(GraphError, ValueError):
    """Raised when a required argument is ``None``."""

    def __init__(self, what: str | None = None) -> None:
        self.what = what
        subject = f"{what} " if what else ""
        super().__init__(f"Cannot add null or undefined {subject}to graph")


class MissingRequiredPathError(GraphError, ValueError):
    """Raised when a key path is configured but an added record lacks that field."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Node is missing required path '{path}'")


class NodeNotFoundError(GraphError, LookupError):
    """Raised when querying a key that was never added."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Node with key '{key}' does not exist in graph")


class InvalidSortModeError(GraphError, ValueError):
    """Raised when ``sort`` receives an unrecognized mode."""

    def __init__(self, mode: object) -> None:
        self.mode = mode
        super().__init__(f"Invalid sort mode: {mode}. Use SortMode.Group (1) or SortMode.Flat (2)")


class InvalidKeyPathError(GraphError, ValueError):
    """Raised when a configured key path cannot be parsed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Invalid key path '{path}': {reason}")


class UnhashableKeyError(GraphError, TypeError):
    """Raised when a node key cannot be hashed, e.g. a record added without a key path."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Cannot use unhashable {type(key).__name__} value as a node key; configure a key path")
