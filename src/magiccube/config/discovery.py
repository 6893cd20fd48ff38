"""Config file discovery and loading.

Walk-up finder locates the nearest ``magiccube.toml``, or a
``pyproject.toml`` carrying a ``[tool.magiccube]`` table, whichever is
closer. A dedicated file wins when both sit in the same directory.
Supports the MAGICCUBE_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from magiccube.config.models import MagicCubeConfig

CONFIG_FILENAME = "magiccube.toml"
PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "MAGICCUBE_CONFIG"


def _pyproject_has_table(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return False
    return isinstance(data.get("tool", {}).get("magiccube"), dict)


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for a config file.

    Returns the path to the config file, or None if not found.
    Checks MAGICCUBE_CONFIG env var first.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        pyproject = current / PYPROJECT_FILENAME
        if pyproject.is_file() and _pyproject_has_table(pyproject):
            return pyproject
        if current.parent == current:
            return None
        current = current.parent


def read_config_data(path: Path) -> dict[str, Any]:
    """Parse *path* and return the magiccube settings table.

    For ``pyproject.toml`` this is the ``[tool.magiccube]`` table; any other
    file is used whole.

    Raises:
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    if path.name == PYPROJECT_FILENAME:
        table = data.get("tool", {}).get("magiccube", {})
        return dict(table) if isinstance(table, dict) else {}
    return data


def load_config(path: Path | None = None, cwd: Path | None = None) -> MagicCubeConfig:
    """Load and validate config from a TOML file.

    If *path* is None, uses find_config(*cwd*) to discover the file.
    Returns default MagicCubeConfig if no file is found.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return MagicCubeConfig()
    return MagicCubeConfig.model_validate(read_config_data(path))
