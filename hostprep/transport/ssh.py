"""
SSH transport - run commands on remote hosts via SSH.
"""

import os
import shlex
import socket
from pathlib import Path
from typing import List, Optional, Tuple

import paramiko

from hostprep.transport.base import Transport, EXIT_CONNECTION, EXIT_TIMEOUT


class SSHTransport(Transport):
    """
    SSH transport for running commands on remote hosts.

    Uses Paramiko for SSH connectivity.

    Example:
        transport = SSHTransport(
            host="lab-win11-01.example.com",
            user="admin",
            key_file="~/.ssh/id_ed25519"
        )

        with transport:
            output, code = transport.run_command(["hostname"])
    """

    def __init__(
        self,
        host: str,
        port: int = 22,
        user: Optional[str] = None,
        password: Optional[str] = None,
        key_file: Optional[str] = None,
        timeout: int = 30,
        sudo: bool = False,
    ):
        """
        Initialize SSH transport and connect.

        Args:
            host: Remote hostname or IP
            port: SSH port (default: 22)
            user: SSH username (default: current user)
            password: SSH password (not recommended)
            key_file: Path to private key file
            timeout: Connection and command timeout in seconds
            sudo: Use sudo for all commands (default: False)
        """
        self.host = host
        self.port = port
        self.user = user or os.getenv("USER")
        self.password = password
        self.key_file = key_file
        self.timeout = timeout
        self.sudo = sudo
        self.client: Optional[paramiko.SSHClient] = None

        self._connect()

    def _connect(self) -> None:
        """Establish SSH connection."""
        self.client = paramiko.SSHClient()
        self.client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        connect_kwargs = {
            "hostname": self.host,
            "port": self.port,
            "username": self.user,
            "timeout": self.timeout,
        }

        if self.password:
            connect_kwargs["password"] = self.password

        if self.key_file:
            key_path = Path(self.key_file).expanduser()
            connect_kwargs["key_filename"] = str(key_path)

        self.client.connect(**connect_kwargs)

    def run_command(self, args: List[str]) -> Tuple[str, int]:
        """
        Run command from list of arguments on remote host.

        Arguments are shell-quoted since exec_command takes a string.
        """
        command = " ".join(shlex.quote(arg) for arg in args)

        if self.sudo:
            command = f"sudo -n {command}"

        try:
            _, stdout, stderr = self.client.exec_command(command, timeout=self.timeout)
            exit_code = stdout.channel.recv_exit_status()
            output = stdout.read().decode() + stderr.read().decode()
        except socket.timeout:
            return f"{args[0]}: timed out after {self.timeout}s", EXIT_TIMEOUT
        except (paramiko.SSHException, EOFError, OSError) as e:
            return f"{args[0]}: connection to {self.host} lost ({e})", EXIT_CONNECTION

        return output, exit_code

    def read_file(self, path: str) -> bytes:
        """
        Read file content from remote host over SFTP.

        Raises:
            IOError: If the file or the SFTP session is unavailable
        """
        try:
            sftp = self.client.open_sftp()
        except (paramiko.SSHException, EOFError) as e:
            raise IOError(f"SFTP unavailable on {self.host}: {e}") from e

        try:
            with sftp.open(path, "rb") as f:
                return f.read()
        except (paramiko.SSHException, EOFError) as e:
            raise IOError(f"Could not read {path} on {self.host}: {e}") from e
        finally:
            sftp.close()

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}"

    def close(self) -> None:
        """Close SSH connection."""
        if self.client:
            self.client.close()
