"""
Catalog loader utility for Wonbyte.

Loads YAML data catalogs (reward tables, badge lists) such as the
rewards.yaml shipped in the package data/ directory.
"""

from pathlib import Path
from typing import Any
import yaml


def load_catalog_file(file_path: Path) -> dict[str, Any]:
    """
    Load a catalog from a YAML path.

    Args:
        file_path: Path to the .yaml catalog

    Returns:
        Dict containing the parsed YAML document (empty for an empty file)

    Raises:
        FileNotFoundError: If catalog file doesn't exist
        yaml.YAMLError: If YAML parsing fails
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Catalog not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}
