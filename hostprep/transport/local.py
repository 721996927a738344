"""
Local transport - run commands on local machine.
"""

import subprocess
from pathlib import Path
from typing import List, Tuple

from hostprep.transport.base import Transport, EXIT_NOT_FOUND, EXIT_TIMEOUT


class LocalTransport(Transport):
    """
    Local transport for running commands on the local machine.

    Uses subprocess for command execution.
    """

    def __init__(self, timeout: int = 60):
        """
        Args:
            timeout: Seconds before a command is abandoned
        """
        self.timeout = timeout

    def run_command(self, args: List[str]) -> Tuple[str, int]:
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            return f"{args[0]}: command not found ({e})", EXIT_NOT_FOUND
        except subprocess.TimeoutExpired:
            return f"{args[0]}: timed out after {self.timeout}s", EXIT_TIMEOUT

        return result.stdout + result.stderr, result.returncode

    def read_file(self, path: str) -> bytes:
        """Read file content."""
        return Path(path).read_bytes()

    def close(self) -> None:
        """No-op for local transport."""
        pass
