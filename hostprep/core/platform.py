"""
Platform detection, local or through a transport.
"""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import platform as platform_module

from hostprep.transport.base import EXIT_CONNECTION, EXIT_TIMEOUT

if TYPE_CHECKING:
    from hostprep.transport import Transport


@dataclass
class Platform:
    """Platform information (OS, distro, version)."""
    system: str  # Linux, Darwin, Windows
    distro: str  # ubuntu, debian, macos, windows, etc.
    version: str
    arch: str

    @classmethod
    def detect(cls, transport: Optional["Transport"] = None) -> "Platform":
        """
        Detect platform information.

        Args:
            transport: Transport to use for detection (None = local)

        Returns:
            Platform information
        """
        if transport is None:
            system = platform_module.system()
            arch = platform_module.machine()
            distro = "unknown"
            version = ""

            if system == "Linux":
                try:
                    info = platform_module.freedesktop_os_release()
                    distro = info.get("ID", "unknown")
                    version = info.get("VERSION_ID", "")
                except OSError:
                    pass
            elif system == "Darwin":
                distro = "macos"
                version = platform_module.mac_ver()[0]
            elif system == "Windows":
                distro = "windows"
                version = platform_module.version()

            return cls(system=system, distro=distro, version=version, arch=arch)

        output, code = transport.run_command(["uname", "-s"])
        if code in (EXIT_TIMEOUT, EXIT_CONNECTION):
            raise OSError(output.strip() or f"uname exited {code}")
        if code != 0:
            # No uname: assume a Windows host reached over OpenSSH
            output, code = transport.run_command(
                ["powershell", "-NoProfile", "-Command",
                 "[System.Environment]::OSVersion.Version.ToString()"]
            )
            if code != 0:
                raise OSError(f"Neither uname nor powershell ran on {transport.describe()}")
            return cls(system="Windows", distro="windows", version=output.strip(), arch="")

        system = output.strip()
        output, _ = transport.run_command(["uname", "-m"])
        arch = output.strip()

        distro = "unknown"
        version = ""

        if system == "Linux":
            try:
                content = transport.read_file("/etc/os-release").decode()
                for line in content.split("\n"):
                    if line.startswith("ID="):
                        distro = line.split("=")[1].strip().strip('"')
                    elif line.startswith("VERSION_ID="):
                        version = line.split("=")[1].strip().strip('"')
            except (FileNotFoundError, IOError):
                pass
        elif system == "Darwin":
            distro = "macos"
            output, _ = transport.run_command(["sw_vers", "-productVersion"])
            version = output.strip()

        return cls(system=system, distro=distro, version=version, arch=arch)
