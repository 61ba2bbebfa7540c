"""Nested value lookup by dot / bracket path strings."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Self


class PartBase:
    pass


@dataclass(slots=True, frozen=True)
class AttributePart(PartBase):
    name: str


@dataclass(slots=True, frozen=True)
class ItemPart(PartBase):
    key: str


@dataclass(slots=True, frozen=True)
class Path:
    root: str
    parts: tuple[PartBase, ...] = ()

    def __str__(self) -> str:
        result = self.root
        for part in self.parts:
            match part:
                case AttributePart(name):
                    result += f".{name}"
                case ItemPart(key):
                    result += f"[{key}]"
                case _:
                    msg = f"Unknown part type: {type(part)}"
                    raise TypeError(msg)
        return result

    @property
    def segments(self) -> tuple[str, ...]:
        """All lookup segments, root first."""
        names: list[str] = [self.root] if self.root else []
        for part in self.parts:
            match part:
                case AttributePart(name):
                    names.append(name)
                case ItemPart(key):
                    names.append(key)
        return tuple(names)

    @classmethod
    def parse(cls, path_str: str) -> Self:
        s = path_str.strip()

        # Extract root by partitioning at the first occurrence of '.' or '['
        root_len = len(s)
        root = None
        for sep in (".", "["):
            root_candidate, sep_found, _parts_str_candidate = s.partition(sep)
            if sep_found and len(root_candidate) < root_len:
                root_len = len(root_candidate)
                root = root_candidate

        if root is None:
            return cls(root=s)

        s = s[root_len:]

        parts: list[PartBase] = []
        i = 0
        while i < len(s):
            if s[i] == ".":
                i += 1
                start = i
                while i < len(s) and s[i] not in ".[":
                    i += 1
                parts.append(AttributePart(name=s[start:i]))
            elif s[i] == "[":
                i += 1
                start = i
                while i < len(s) and s[i] != "]":
                    i += 1
                if i == len(s):
                    msg = f"Unclosed '[' in path: {path_str}"
                    raise ValueError(msg)
                parts.append(ItemPart(key=s[start:i].strip()))
                i += 1  # Skip the closing ']'
            else:
                msg = f"Unexpected character at position {i}: {s[i]}"
                raise ValueError(msg)

        return cls(root=root, parts=tuple(parts))


_MISSING = object()


def _index(segment: str) -> int | None:
    if segment.isascii() and segment.isdecimal():
        return int(segment)
    return None


def _step(current: Any, segment: str) -> Any:
    """Descend one segment, returning ``_MISSING`` when it cannot be followed."""
    if isinstance(current, Mapping):
        if segment in current:
            return current[segment]
        index = _index(segment)
        if index is not None and index in current:
            return current[index]
        return _MISSING
    if isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
        index = _index(segment)
        if index is not None and index < len(current):
            return current[index]
        return _MISSING
    if isinstance(current, (str, bytes, int, float)) or current is None:
        return _MISSING
    return getattr(current, segment, _MISSING)


def deep_get(value: Any, path: str | Path, default: Any = None) -> Any:
    """Get a nested field of ``value`` by path, or ``default`` if any segment is missing.

    Segments are separated by ``.`` or written as ``[index]``. Mappings are
    looked up by key (digit segments also try the integer key), sequences by
    index, and any other object by attribute. A segment resolving to ``None``
    counts as missing.

    Example:
        >>> deep_get({"package": {"name": "A"}}, "package.name")
        'A'
        >>> deep_get({"deps": [{"id": 1}]}, "deps[0].id")
        1
        >>> deep_get({"package": {}}, "package.name", "?")
        '?'

    """
    parsed = path if isinstance(path, Path) else Path.parse(path)
    current = value
    for segment in parsed.segments:
        current = _step(current, segment)
        if current is _MISSING or current is None:
            return default
    return current
