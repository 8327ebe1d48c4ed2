"""Loading of the packaged generator catalog and driver defaults.

defaults.yaml holds three sections: `driver` (DriverConfig defaults),
`event_generators` (catalog of named generators) and `generator_lists`
(named profiles). It is parsed once and cached; NUEVG_DEFAULTS_PATH points
the loader at a replacement file. This module imports nothing from the rest
of nuevg.config.

Usage:
    from nuevg.config.yaml_loader import get_default, get_defaults
    n_knots = get_default('driver.spline_knots')
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml

DEFAULTS_ENV_VAR = "NUEVG_DEFAULTS_PATH"
PACKAGED_DEFAULTS = Path(__file__).with_name("defaults.yaml")

_defaults: dict[str, Any] | None = None


def defaults_path() -> Path:
    """Location of the defaults file in use.

    An existing file named by NUEVG_DEFAULTS_PATH wins over the packaged one.

    Raises:
        FileNotFoundError: If neither file exists
    """
    override = os.getenv(DEFAULTS_ENV_VAR)
    if override and Path(override).is_file():
        return Path(override)

    if not PACKAGED_DEFAULTS.is_file():
        raise FileNotFoundError(
            f"Packaged defaults not found at {PACKAGED_DEFAULTS}; "
            f"set {DEFAULTS_ENV_VAR} to a replacement file"
        )
    return PACKAGED_DEFAULTS


def load_yaml_file(path: str | Path) -> dict[str, Any]:
    """Parse a YAML document whose top level is a mapping.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed mapping (empty dict for an empty file).

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the top level of the document is not a mapping
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open(encoding="utf-8") as stream:
        document = yaml.safe_load(stream)

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ValueError(f"Top level of {path} must be a mapping, got {type(document).__name__}")
    return document


def _loaded() -> dict[str, Any]:
    global _defaults
    if _defaults is None:
        _defaults = load_yaml_file(defaults_path())
    return _defaults


def get_defaults() -> dict[str, Any]:
    """Deep copy of the whole defaults document.

    Example:
        >>> get_defaults()['driver']['spline_knots']
        40
    """
    return copy.deepcopy(_loaded())


def get_default(key_path: str, default: Any = None) -> Any:
    """Look up one value by dotted path, e.g. 'driver.max_retry_depth'.

    Missing keys, null values and paths through non-mappings give `default`.

    Example:
        >>> get_default('driver.generator_list')
        'Default'
        >>> get_default('driver.no_such_key', 'fallback')
        'fallback'
    """
    node: Any = _loaded()
    for key in key_path.split("."):
        if not isinstance(node, dict) or node.get(key) is None:
            return default
        node = node[key]
    return node


def reload_defaults() -> None:
    """Re-read the defaults file, picking up a changed NUEVG_DEFAULTS_PATH."""
    global _defaults
    _defaults = load_yaml_file(defaults_path())
