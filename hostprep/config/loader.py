"""
Load a ConfigurationRecord from a YAML or JSON file.

Example file:

    ComputerName: LAB-WIN11-01
    Users: []
    Software: []
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from hostprep.config.record import ConfigurationRecord
from hostprep.errors import ConfigurationLoadError
from hostprep.logging import get_logger

logger = get_logger(__name__)

_NAME_KEYS = ("computer_name", "computername")

_RESERVED_KEYS = {
    "users": "users",
    "groups": "groups",
    "software": "software",
    "services": "services",
    "registry_entries": "registry_entries",
    "registryentries": "registry_entries",
    "registry": "registry_entries",
    "features": "features",
    "network": "network",
    "environment_variables": "environment_variables",
    "environmentvariables": "environment_variables",
    "env": "environment_variables",
}

_MAPPING_FIELDS = ("network", "environment_variables")


def _normalize_key(key: Any) -> str:
    """ComputerName, computerName and computer_name all become computer_name."""
    text = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", str(key))
    return text.replace("-", "_").lower()


def parse_record(data: Any, source: str = "<data>") -> ConfigurationRecord:
    """
    Build a record from an already-parsed document.

    Args:
        data: Parsed mapping
        source: Where the data came from, for error messages

    Raises:
        ConfigurationLoadError: If data is not a mapping or lacks a name
    """
    if not isinstance(data, dict):
        raise ConfigurationLoadError(
            f"{source}: expected a mapping, got {type(data).__name__}"
        )

    name = None
    reserved: Dict[str, Any] = {}

    for key, value in data.items():
        normalized = _normalize_key(key)
        if normalized in _NAME_KEYS:
            name = value
        elif normalized in _RESERVED_KEYS:
            target = _RESERVED_KEYS[normalized]
            if value is None:
                continue
            if target in _MAPPING_FIELDS:
                reserved[target] = dict(value) if isinstance(value, dict) else {}
            else:
                reserved[target] = tuple(value) if isinstance(value, (list, tuple)) else (value,)
        else:
            logger.debug("%s: ignoring unknown key %r", source, key)

    if name is None or (isinstance(name, str) and not name.strip()):
        raise ConfigurationLoadError(f"{source}: missing required field 'ComputerName'")

    if not isinstance(name, str):
        # YAML reads yes, 1234 and 2024-01-01 as bool, int and date
        raise ConfigurationLoadError(
            f"{source}: ComputerName must be a string, got {type(name).__name__} {name!r}"
        )

    return ConfigurationRecord(computer_name=name.strip(), **reserved)


def load_record(path: Union[str, Path]) -> ConfigurationRecord:
    """
    Read and parse a configuration file.

    JSON is used for .json files, YAML for everything else.

    Raises:
        ConfigurationLoadError: If the file is missing, unreadable or invalid
    """
    path = Path(path)

    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise ConfigurationLoadError(f"Configuration file not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationLoadError(f"Could not read {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationLoadError(f"Could not parse {path}: {e}") from e

    record = parse_record(data, source=str(path))
    logger.debug("Loaded record for %s from %s", record.computer_name, path)
    return record
