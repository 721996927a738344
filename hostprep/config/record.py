"""
Configuration record - the declarative target for one run.

Only computer_name is acted on. The remaining fields are part of the
schema so configuration files written for later phases still load.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from hostprep.errors import InvalidConfiguration
from hostprep.logging import get_logger

logger = get_logger(__name__)

MAX_NAME_LENGTH = 63
LEGACY_NAME_LENGTH = 15  # NetBIOS

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")


@dataclass(frozen=True)
class ConfigurationRecord:
    """
    Desired machine configuration.

    Examples:
        ConfigurationRecord(computer_name="LAB-WIN11-01")
    """
    computer_name: str

    # Reserved, always empty in this phase
    users: Tuple[Any, ...] = ()
    groups: Tuple[Any, ...] = ()
    software: Tuple[Any, ...] = ()
    services: Tuple[Any, ...] = ()
    registry_entries: Tuple[Any, ...] = ()
    features: Tuple[Any, ...] = ()
    network: Dict[str, Any] = field(default_factory=dict)
    environment_variables: Dict[str, Any] = field(default_factory=dict)

    def validate(self) -> None:
        """
        Check the record against the host name rules.

        Raises:
            InvalidConfiguration: If computer_name is empty or malformed
        """
        validate_computer_name(self.computer_name)

    def reserved_fields(self) -> Dict[str, Any]:
        """Return reserved fields that carry a value."""
        values = {
            "users": self.users,
            "groups": self.groups,
            "software": self.software,
            "services": self.services,
            "registry_entries": self.registry_entries,
            "features": self.features,
            "network": self.network,
            "environment_variables": self.environment_variables,
        }
        return {k: v for k, v in values.items() if v}


def validate_computer_name(name: Any) -> None:
    """
    Validate a host name.

    Letters, digits and hyphen; no leading or trailing hyphen; not all
    digits; at most 63 characters. Names over 15 characters pass with a
    warning.

    Raises:
        InvalidConfiguration: If the name is not acceptable
    """
    if not isinstance(name, str) or not name.strip():
        raise InvalidConfiguration("computer name must be a non-empty string")

    if len(name) > MAX_NAME_LENGTH:
        raise InvalidConfiguration(
            f"computer name {name!r} is {len(name)} characters "
            f"(maximum {MAX_NAME_LENGTH})"
        )

    if not _NAME_PATTERN.match(name):
        raise InvalidConfiguration(
            f"computer name {name!r} may only contain letters, digits and "
            f"hyphens, and may not start or end with a hyphen"
        )

    if name.isdigit():
        raise InvalidConfiguration(f"computer name {name!r} may not be all digits")

    if len(name) > LEGACY_NAME_LENGTH:
        logger.warning(
            "Computer name %r is longer than %d characters and will be "
            "truncated for NetBIOS", name, LEGACY_NAME_LENGTH,
        )
