"""Key derivation for items added to a graph."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, is_dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from topogroup._errors import InvalidKeyPathError, MissingRequiredPathError
from topogroup._path import Path, deep_get

if TYPE_CHECKING:
    from collections.abc import Hashable


def is_record(item: Any) -> bool:
    """Check if ``item`` is a structured value rather than a bare key."""
    return isinstance(item, (Mapping, BaseModel)) or (is_dataclass(item) and not isinstance(item, type))


def same_value(existing: Any, incoming: Any) -> bool:
    """Check if ``incoming`` is the value already stored.

    Records compare by identity, bare keys by equality.
    """
    if existing is incoming:
        return True
    if is_record(existing) or is_record(incoming):
        return False
    return existing == incoming


@dataclass(frozen=True, slots=True)
class KeyResolver:
    """Derive node keys, optionally from a nested field of each record.

    Attributes:
        path: Dot / bracket path to the key field (e.g. ``"package.name"``).
            ``None`` means items are their own keys.

    """

    path: str | None = None
    _parsed: Path | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.path:
            try:
                parsed = Path.parse(self.path)
            except ValueError as e:
                raise InvalidKeyPathError(self.path, str(e)) from e
            object.__setattr__(self, "_parsed", parsed)

    def is_reference(self, item: Any) -> bool:
        """Check if ``item`` names a node instead of carrying its value."""
        return self._parsed is not None and not is_record(item)

    def resolve(self, item: Any) -> Hashable:
        """Return the key for ``item``.

        Raises:
            MissingRequiredPathError: If a path is configured and the record lacks it.

        """
        if self._parsed is None or not is_record(item):
            return item
        key = deep_get(item, self._parsed)
        if key is None:
            raise MissingRequiredPathError(str(self.path))
        return key
