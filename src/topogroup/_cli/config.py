"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

from topogroup._graph import SortMode


class ConfigError(Exception):
    """Error in topogroup configuration."""


@dataclass(slots=True, frozen=True)
class TopogroupConfig:
    """Configuration loaded from pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    graph: Path | None = None
    path: str | None = None
    mode: SortMode | None = None
    project_root: Path | None = None


_MODE_NAMES = {"group": SortMode.GROUP, "flat": SortMode.FLAT}


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def parse_mode(value: object) -> SortMode:
    """Parse a sort mode name ("group" or "flat").

    Raises:
        ConfigError: If the value is not a known mode name.

    """
    if not isinstance(value, str) or value.lower() not in _MODE_NAMES:
        msg = f"Invalid sort mode '{value}'. Expected 'group' or 'flat'"
        raise ConfigError(msg)
    return _MODE_NAMES[value.lower()]


def load_config(pyproject_path: Path) -> TopogroupConfig:
    """Load and validate [tool.topogroup] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed TopogroupConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("topogroup", {})
    if not section:
        return TopogroupConfig(project_root=project_root)

    graph_path: Path | None = None
    if "graph" in section:
        graph_value = section["graph"]
        if not isinstance(graph_value, str):
            msg = "Invalid [tool.topogroup].graph: expected string path"
            raise ConfigError(msg)
        graph_path = Path(graph_value)
        if not graph_path.is_absolute():
            graph_path = project_root / graph_path

    key_path: str | None = None
    if "path" in section:
        key_path = section["path"]
        if not isinstance(key_path, str):
            msg = "Invalid [tool.topogroup].path: expected string"
            raise ConfigError(msg)

    mode = parse_mode(section["mode"]) if "mode" in section else None

    return TopogroupConfig(
        graph=graph_path,
        path=key_path,
        mode=mode,
        project_root=project_root,
    )


def get_config() -> TopogroupConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        TopogroupConfig (may be empty if no pyproject.toml or no [tool.topogroup] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return TopogroupConfig()
    return load_config(pyproject_path)
