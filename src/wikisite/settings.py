"""
Settings for site configuration extraction.

Settings come from an optional YAML file:

    namespaces:
      category: Category
      file: File
    output:
      indent: true

Missing file or missing keys fall back to the defaults below.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_NAMESPACE = 'Category'
DEFAULT_FILE_NAMESPACE = 'File'


class SettingsError(Exception):
    """A settings file that cannot be used."""


@dataclass(frozen=True)
class Settings:
    category_namespace: str = DEFAULT_CATEGORY_NAMESPACE
    file_namespace: str = DEFAULT_FILE_NAMESPACE
    indent: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        namespaces = _section(data, 'namespaces')
        output = _section(data, 'output')
        settings = cls(
            category_namespace=namespaces.get('category', DEFAULT_CATEGORY_NAMESPACE),
            file_namespace=namespaces.get('file', DEFAULT_FILE_NAMESPACE),
            indent=output.get('indent', False),
        )
        for key in ('category_namespace', 'file_namespace'):
            if not isinstance(getattr(settings, key), str):
                raise SettingsError(f"{key} must be a string")
        if not isinstance(settings.indent, bool):
            raise SettingsError("output.indent must be a boolean")
        return settings


def _section(data: dict, name: str) -> dict:
    section: Any = data.get(name) or {}
    if not isinstance(section, dict):
        raise SettingsError(f"'{name}' must be a mapping")
    return section


def load_settings(path: Optional[Path]) -> Settings:
    """
    Load settings from a YAML file.

    Returns the defaults when no path is given or the file does not exist.

    Raises:
        SettingsError: the file is not valid YAML or has wrongly typed values
    """
    if path is None:
        return Settings()
    if not path.exists():
        logger.info(f"No settings file found at {path}, using defaults")
        return Settings()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"cannot parse {path}: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise SettingsError(f"{path}: top level must be a mapping")

    settings = Settings.from_dict(data)
    logger.info(f"Loaded settings from {path}")
    return settings
