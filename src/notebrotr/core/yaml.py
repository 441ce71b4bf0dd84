"""YAML configuration loading for notebrotr.

Uses ``yaml.safe_load`` so configuration files can only produce plain
strings, numbers, lists, and mappings. Consumed by
[Archiver.from_yaml()][notebrotr.services.archiver.Archiver.from_yaml].

Examples:
    ```python
    from notebrotr.core.yaml import load_yaml

    config = load_yaml("config/archiver.yaml")
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError


def load_yaml(config_path: str | Path) -> dict[str, Any]:
    """Load and parse a YAML configuration file.

    Args:
        config_path: Path to the YAML file (absolute or relative).

    Returns:
        Parsed configuration mapping. An empty file yields an empty dict.

    Raises:
        ConfigurationError: If the file does not exist, is not valid YAML,
            or its top level is not a mapping.

    Warning:
        The returned dictionary is not schema-validated. Pass it to a
        Pydantic model such as
        [ArchiverConfig][notebrotr.services.config.ArchiverConfig].
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a mapping, got {type(data).__name__}"
        )
    return data
