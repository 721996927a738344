"""
Host name accessor - read and set the machine name.

Supports:
- hostnamectl (Linux, systemd)
- scutil (macOS)
- Rename-Computer (Windows, via PowerShell)
"""

from typing import Dict, List, Optional

from hostprep.accessor.base import SystemAccessor
from hostprep.core.platform import Platform
from hostprep.errors import AccessDenied, AccessorError, InvalidName, Unavailable
from hostprep.logging import get_logger
from hostprep.transport.base import Transport, EXIT_NOT_FOUND, UNREACHABLE_EXIT_CODES

logger = get_logger(__name__)

_DENIED_MARKERS = (
    "access denied",
    "access is denied",
    "permission denied",
    "not permitted",
    "unauthorizedaccess",
    "requires elevation",
    "interactive authentication required",
    "a password is required",
    "must be run as root",
)

_INVALID_MARKERS = (
    "invalid hostname",
    "invalid static hostname",
    "new name is not valid",
    "is not a valid",
    "invalidcomputername",
)

_POWERSHELL = ["powershell", "-NoProfile", "-NonInteractive", "-Command"]

# LocalHostName is the name compared against, so it is written last
_SCUTIL_KEYS = ("ComputerName", "HostName", "LocalHostName")
_SCUTIL_NAME_KEY = "LocalHostName"


class HostnameAccessor(SystemAccessor):
    """
    SystemAccessor backed by the operating system's own tooling.

    Examples:
        # Local machine
        with HostnameAccessor(LocalTransport()) as accessor:
            accessor.get_current_name()

        # Remote machine
        transport = SSHTransport("10.0.0.5", user="admin", sudo=True)
        HostnameAccessor(transport).set_name("LAB-WIN11-01")
    """

    def __init__(self, transport: Transport, platform: Optional[Platform] = None):
        """
        Args:
            transport: Where commands run
            platform: Target platform (detected through the transport if None)
        """
        self.transport = transport
        self._platform = platform

    @property
    def platform(self) -> Platform:
        if self._platform is None:
            try:
                self._platform = Platform.detect(self.transport)
            except OSError as e:
                raise Unavailable(f"Could not detect platform on {self.transport.describe()}: {e}") from e
        return self._platform

    def get_current_name(self) -> str:
        system = self.platform.system

        if system == "Linux":
            output, code = self.transport.run_command(["hostnamectl", "--static"])
            if code == EXIT_NOT_FOUND:
                output, code = self.transport.run_command(["hostname"])
        elif system == "Darwin":
            output, code = self.transport.run_command(["scutil", "--get", _SCUTIL_NAME_KEY])
        elif system == "Windows":
            output, code = self.transport.run_command(_POWERSHELL + ["$env:COMPUTERNAME"])
        else:
            raise Unavailable(f"Unsupported platform: {system}")

        if code != 0:
            raise self._classify(output, code, "read host name")

        name = output.strip()
        if not name:
            raise Unavailable("Host name query returned no output")
        return name

    def set_name(self, name: str) -> None:
        system = self.platform.system

        if system == "Linux":
            self._run(["hostnamectl", "set-hostname", name], "set host name")
        elif system == "Darwin":
            self._set_darwin(name)
        elif system == "Windows":
            script = f"Rename-Computer -NewName '{name}' -Force -ErrorAction Stop"
            self._run(_POWERSHELL + [script], "rename computer")
        else:
            raise Unavailable(f"Unsupported platform: {system}")

        logger.debug("Host name set to %s on %s", name, self.transport.describe())

    def close(self) -> None:
        self.transport.close()

    def _set_darwin(self, name: str) -> None:
        """
        Set every scutil name key, or none of them.

        Keys already written are put back if a later key fails.
        """
        previous = {key: self._scutil_get(key) for key in _SCUTIL_KEYS}
        applied: List[str] = []

        try:
            for key in _SCUTIL_KEYS:
                self._run(["scutil", "--set", key, name], f"set {key}")
                applied.append(key)
        except AccessorError:
            self._restore_darwin(previous, applied)
            raise

    def _scutil_get(self, key: str) -> str:
        """Read one scutil key; an unset key reads as ""."""
        output, code = self.transport.run_command(["scutil", "--get", key])
        if code in UNREACHABLE_EXIT_CODES:
            raise self._classify(output, code, f"read {key}")
        if code != 0:
            return ""
        return output.strip()

    def _restore_darwin(self, previous: Dict[str, str], applied: List[str]) -> None:
        for key in reversed(applied):
            # An empty value clears a key that was not set before
            output, code = self.transport.run_command(["scutil", "--set", key, previous[key]])
            if code != 0:
                logger.error("Could not restore %s to %r: %s", key, previous[key], output.strip())
            else:
                logger.warning("Restored %s to %r after failed rename", key, previous[key])

    def _run(self, args: List[str], what: str) -> str:
        output, code = self.transport.run_command(args)
        if code != 0:
            raise self._classify(output, code, what)
        return output

    def _classify(self, output: str, code: int, what: str) -> Exception:
        """Map a failed command to the accessor error taxonomy."""
        detail = output.strip() or f"exit code {code}"
        message = f"Failed to {what}: {detail}"
        lowered = output.lower()

        if code in UNREACHABLE_EXIT_CODES:
            return Unavailable(message)
        if any(marker in lowered for marker in _DENIED_MARKERS):
            return AccessDenied(message)
        if any(marker in lowered for marker in _INVALID_MARKERS):
            return InvalidName(message)
        return Unavailable(message)
