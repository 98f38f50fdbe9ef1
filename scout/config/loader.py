"""Layered TOML configuration for Scout.

Layers are read in order, later ones winning key by key:

1. ``default.toml`` in the config directory (required)
2. ``{SCOUT_ENV}.toml`` in the same directory (optional)
3. the file named by ``SCOUT_CONFIG_FILE`` (required when set)

The config directory is ``SCOUT_CONFIG_DIR`` or the nearest ``config/``
holding a ``default.toml``, searching upward from the working directory.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_VAR = "SCOUT_CONFIG_DIR"
CONFIG_FILE_VAR = "SCOUT_CONFIG_FILE"
ENVIRONMENT_VAR = "SCOUT_ENV"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_LAYER = "default.toml"


def find_config_dir(start: Path | None = None) -> Path:
    """Locate the directory holding ``default.toml``."""
    override = os.environ.get(CONFIG_DIR_VAR)
    if override:
        path = Path(override)
        if not path.is_dir():
            raise FileNotFoundError(f"{CONFIG_DIR_VAR} does not exist: {override}")
        return path

    here = (start or Path.cwd()).resolve()
    for candidate in (here, *here.parents):
        if (candidate / "config" / DEFAULT_LAYER).is_file():
            return candidate / "config"
    return Path("config")


def current_environment() -> str:
    return os.environ.get(ENVIRONMENT_VAR) or DEFAULT_ENVIRONMENT


def read_layer(path: Path) -> dict[str, Any]:
    """Parse one TOML layer.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Configuration layer not found: {path}") from e


def merge_layers(*layers: dict[str, Any]) -> dict[str, Any]:
    """Merge layers left to right without modifying any of them.

    Tables merge recursively; any other value replaces what came before.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = merge_layers(current, value)
            else:
                merged[key] = value
    return merged


def layer_paths(config_dir: Path, environment: str) -> list[Path]:
    """Paths of the layers that apply, lowest precedence first."""
    default = config_dir / DEFAULT_LAYER
    if not default.is_file():
        raise FileNotFoundError(
            f"{DEFAULT_LAYER} not found in {config_dir}; "
            f"create it or point {CONFIG_DIR_VAR} elsewhere"
        )

    paths = [default]
    env_layer = config_dir / f"{environment}.toml"
    if env_layer.is_file():
        paths.append(env_layer)

    extra = os.environ.get(CONFIG_FILE_VAR)
    if extra:
        paths.append(Path(extra))
    return paths


def load_config() -> dict[str, Any]:
    """Read and merge every configuration layer."""
    paths = layer_paths(find_config_dir(), current_environment())
    return merge_layers(*(read_layer(path) for path in paths))
