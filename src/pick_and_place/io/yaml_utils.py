"""Define utility functions for importing data from YAML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml_data(yaml_path: Path) -> Any:
    """Load data from a YAML file into Python data structures.

    :param yaml_path: Path to the YAML file to be imported
    :return: Dictionary mapping strings to values, or a list of dictionaries, etc.
    :raises FileNotFoundError: If the YAML file doesn't exist
    :raises RuntimeError: If the file isn't valid YAML
    """
    if not yaml_path.exists():
        raise FileNotFoundError(f"Cannot load data from nonexistent YAML file: {yaml_path}")

    try:
        with yaml_path.open(encoding="utf-8") as yaml_file:
            return yaml.safe_load(yaml_file)
    except yaml.YAMLError as error:
        raise RuntimeError(f"Failed to load from YAML file: {yaml_path}") from error
