"""
Pre-checks run before touching the machine or the network.
"""

import ctypes
import os

import requests

from hostprep.errors import PreflightError
from hostprep.logging import get_logger

logger = get_logger(__name__)


def is_elevated() -> bool:
    """True when running as root (POSIX) or as an elevated administrator (Windows)."""
    if os.name == "nt":
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError):
            return False
    return os.geteuid() == 0


def check_privileges() -> None:
    """
    Raises:
        PreflightError: If the process lacks administrative rights
    """
    if not is_elevated():
        raise PreflightError(
            "Administrative privileges are required to change the host name. "
            "Re-run as root or from an elevated prompt."
        )
    logger.debug("Privilege check passed")


def check_connectivity(url: str, timeout: int = 10) -> None:
    """
    Confirm the source host answers before downloading from it.

    Any HTTP response counts; only connection-level failures raise.

    Raises:
        PreflightError: If the host cannot be reached
    """
    try:
        requests.head(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        raise PreflightError(f"Cannot reach {url}: {e}") from e
    logger.debug("Connectivity check passed for %s", url)
