"""
Base transport interface.

All transport implementations (Local, SSH) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import List, Tuple

# Exit codes reported when a command cannot run at all
EXIT_TIMEOUT = 124
EXIT_NOT_FOUND = 127
EXIT_CONNECTION = 255  # as ssh(1) reports a lost connection

UNREACHABLE_EXIT_CODES = (EXIT_TIMEOUT, EXIT_NOT_FOUND, EXIT_CONNECTION)


class Transport(ABC):
    """
    Abstract base class for running commands and reading files.

    Implementations:
    - LocalTransport: Run commands locally
    - SSHTransport: Run commands on remote host via SSH
    """

    @abstractmethod
    def run_command(self, args: List[str]) -> Tuple[str, int]:
        """
        Run a command from list of arguments (no shell).

        Args:
            args: Command and arguments as list

        Returns:
            Tuple of (output, exit_code). A missing executable yields
            EXIT_NOT_FOUND, a timeout yields EXIT_TIMEOUT and a dropped
            connection yields EXIT_CONNECTION.

        Example:
            output, code = transport.run_command(["hostname"])
        """
        pass

    @abstractmethod
    def read_file(self, path: str) -> bytes:
        """
        Read file content.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """
        Close transport connection.

        For LocalTransport this is a no-op.
        For SSHTransport this closes the SSH connection.
        """
        pass

    def describe(self) -> str:
        """Short human-readable target description."""
        return "localhost"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
