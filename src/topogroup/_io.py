from __future__ import annotations

import json
import logging
import tomllib
from typing import TYPE_CHECKING, Any

import tomli_w
from pydantic import ValidationError

from ._graph import DependencyGraph, Graph

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".toml", ".json")


class GraphFileError(Exception):
    """Error reading or writing a graph file."""


def _read_document(file: Path) -> dict[str, Any]:
    suffix = file.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        msg = f"Unsupported graph file type '{file.suffix}'. Expected one of: {', '.join(SUPPORTED_SUFFIXES)}"
        raise GraphFileError(msg)

    try:
        if suffix == ".toml":
            with file.open("rb") as f:
                data = tomllib.load(f)
        else:
            with file.open(encoding="utf-8") as f:
                data = json.load(f)
    except OSError as e:
        msg = f"Cannot read graph file {file}: {e}"
        raise GraphFileError(msg) from e
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        msg = f"Invalid {suffix[1:].upper()} in {file}: {e}"
        raise GraphFileError(msg) from e

    if not isinstance(data, dict):
        msg = f"Graph file {file} must contain a table/object at the top level"
        raise GraphFileError(msg)
    return data


def load_graph(file: Path, *, path: str | None = None) -> Graph:
    """Load a graph from a TOML or JSON file.

    Two layouts are accepted:

    - ``entries``: a list of node values and ``[from, to]`` pairs, keyed with
      ``path`` when given (see ``Graph.from_entries``);
    - ``nodes`` / ``dependencies``: the ``DependencyGraph`` format.

    Args:
        file: Path to a ``.toml`` or ``.json`` file.
        path: Key path for the ``entries`` layout.

    Returns:
        The loaded Graph.

    Raises:
        GraphFileError: If the file cannot be read or does not match either layout.

    """
    data = _read_document(file)

    if "entries" in data:
        entries = data["entries"]
        if not isinstance(entries, list):
            msg = f"'entries' in {file} must be a list"
            raise GraphFileError(msg)
        logger.debug(f"Loading {len(entries)} entries from {file}")
        return Graph.from_entries(entries, path=path)

    try:
        dependency_graph = DependencyGraph.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid dependency graph in {file}: {e}"
        raise GraphFileError(msg) from e
    logger.debug(f"Loading {len(dependency_graph.nodes)} nodes from {file}")
    return Graph.from_dependency_graph(dependency_graph)


def _toml_key(key: Any) -> str:
    return key if isinstance(key, str) else str(key)


def dump_dependency_graph(graph: Graph, file: Path) -> None:
    """Write the ``nodes`` / ``dependencies`` form of ``graph`` to a file.

    TOML table keys are always strings, so non-string ids are stringified in
    ``.toml`` output. JSON output keeps ids as list items but stringifies map keys.

    Raises:
        GraphFileError: If the suffix is unsupported, a value cannot be serialized
            or the file cannot be written. Nothing is written when serialization fails.

    """
    dependency_graph = graph.to_dependency_graph()
    suffix = file.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        msg = f"Unsupported graph file type '{file.suffix}'. Expected one of: {', '.join(SUPPORTED_SUFFIXES)}"
        raise GraphFileError(msg)

    document = {
        "nodes": {_toml_key(k): v for k, v in dependency_graph.nodes.items()},
        "dependencies": {_toml_key(k): v for k, v in dependency_graph.dependencies.items()},
    }

    try:
        text = tomli_w.dumps(document) if suffix == ".toml" else json.dumps(document, indent=2) + "\n"
    except (TypeError, ValueError) as e:
        msg = f"Cannot serialize graph to {file}: {e}"
        raise GraphFileError(msg) from e

    try:
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_text(text, encoding="utf-8")
    except OSError as e:
        msg = f"Cannot write graph file {file}: {e}"
        raise GraphFileError(msg) from e
    logger.debug(f"Exported {len(dependency_graph.nodes)} nodes to {file}")
