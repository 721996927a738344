"""
Unit tests for transports and remote platform detection.

SSHTransport runs against a patched paramiko.SSHClient; LocalTransport
runs real or patched subprocess calls.
"""

import socket
import subprocess
from pathlib import Path
from unittest import mock

import paramiko
import pytest

from hostprep.core import Platform
from hostprep.transport import LocalTransport, SSHTransport
from hostprep.transport.base import EXIT_CONNECTION, EXIT_NOT_FOUND, EXIT_TIMEOUT


class MockTransport:
    """Mock transport for testing."""

    def __init__(self, responses=None, files=None):
        self.commands = []
        self.responses = responses or {}
        self.files = files or {}

    def run_command(self, args):
        self.commands.append(args)
        for prefix, response in self.responses.items():
            if tuple(args[:len(prefix)]) == prefix:
                return response
        return ("", 0)

    def read_file(self, path):
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def describe(self):
        return "mock"


@pytest.fixture
def ssh_client():
    """The SSHClient instance an SSHTransport would create."""
    with mock.patch("hostprep.transport.ssh.paramiko.SSHClient") as client_class:
        yield client_class.return_value


def session(client, output=b"", error=b"", code=0):
    """Make the next exec_command return canned output."""
    stdout = mock.MagicMock()
    stdout.read.return_value = output
    stdout.channel.recv_exit_status.return_value = code
    stderr = mock.MagicMock()
    stderr.read.return_value = error
    client.exec_command.return_value = (mock.MagicMock(), stdout, stderr)
    return stdout


class TestSSHTransport:

    def test_connect_arguments(self, ssh_client):
        SSHTransport("lab-01", user="admin", key_file="~/.ssh/id_ed25519", timeout=10)

        ssh_client.connect.assert_called_once_with(
            hostname="lab-01",
            port=22,
            username="admin",
            timeout=10,
            key_filename=str(Path("~/.ssh/id_ed25519").expanduser()),
        )

    def test_run_command_returns_output_and_code(self, ssh_client):
        session(ssh_client, output=b"lab-01\n", error=b"warning\n", code=0)
        transport = SSHTransport("lab-01", user="admin")

        assert transport.run_command(["hostname"]) == ("lab-01\nwarning\n", 0)

    def test_arguments_are_quoted(self, ssh_client):
        session(ssh_client)
        transport = SSHTransport("lab-01", user="admin")

        transport.run_command(["hostnamectl", "set-hostname", "x; reboot"])

        ssh_client.exec_command.assert_called_once_with(
            "hostnamectl set-hostname 'x; reboot'", timeout=30)

    def test_sudo_prefix(self, ssh_client):
        session(ssh_client)
        transport = SSHTransport("lab-01", user="admin", sudo=True)

        transport.run_command(["scutil", "--set", "HostName", "a b"])

        command = ssh_client.exec_command.call_args[0][0]
        assert command == "sudo -n scutil --set HostName 'a b'"

    def test_command_timeout(self, ssh_client):
        ssh_client.exec_command.side_effect = socket.timeout()
        transport = SSHTransport("lab-01", user="admin", timeout=5)

        output, code = transport.run_command(["hostnamectl", "--static"])

        assert code == EXIT_TIMEOUT
        assert "timed out after 5s" in output

    def test_session_error(self, ssh_client):
        ssh_client.exec_command.side_effect = paramiko.SSHException("SSH session not active")
        transport = SSHTransport("lab-01", user="admin")

        output, code = transport.run_command(["hostnamectl", "--static"])

        assert code == EXIT_CONNECTION
        assert "lost" in output
        assert "not active" in output

    def test_session_closed_while_reading(self, ssh_client):
        stdout = session(ssh_client)
        stdout.channel.recv_exit_status.side_effect = EOFError()
        transport = SSHTransport("lab-01", user="admin")

        _, code = transport.run_command(["hostname"])

        assert code == EXIT_CONNECTION

    def test_read_file(self, ssh_client):
        sftp = ssh_client.open_sftp.return_value
        sftp.open.return_value.__enter__.return_value.read.return_value = b"ID=ubuntu\n"
        transport = SSHTransport("lab-01", user="admin")

        assert transport.read_file("/etc/os-release") == b"ID=ubuntu\n"
        sftp.close.assert_called_once()

    def test_read_file_without_sftp(self, ssh_client):
        ssh_client.open_sftp.side_effect = paramiko.SSHException("subsystem request failed")
        transport = SSHTransport("lab-01", user="admin")

        with pytest.raises(IOError, match="SFTP unavailable"):
            transport.read_file("/etc/os-release")

    def test_describe_and_close(self, ssh_client):
        transport = SSHTransport("lab-01", port=2222, user="admin")

        assert transport.describe() == "admin@lab-01:2222"
        transport.close()
        ssh_client.close.assert_called_once()


class TestLocalTransport:

    def test_missing_binary(self):
        output, code = LocalTransport().run_command(["hostprep-no-such-command"])

        assert code == EXIT_NOT_FOUND
        assert "command not found" in output

    def test_timeout(self):
        expired = subprocess.TimeoutExpired(cmd=["hostnamectl"], timeout=2)

        with mock.patch("hostprep.transport.local.subprocess.run", side_effect=expired):
            output, code = LocalTransport(timeout=2).run_command(["hostnamectl", "--static"])

        assert code == EXIT_TIMEOUT
        assert "timed out after 2s" in output

    def test_runs_without_shell(self):
        completed = subprocess.CompletedProcess(
            args=["hostname"], returncode=0, stdout="lab-01\n", stderr="")

        with mock.patch("hostprep.transport.local.subprocess.run", return_value=completed) as run:
            assert LocalTransport().run_command(["hostname"]) == ("lab-01\n", 0)

        assert run.call_args[0][0] == ["hostname"]
        assert "shell" not in run.call_args[1]

    def test_read_file(self, tmp_path):
        path = tmp_path / "os-release"
        path.write_bytes(b"ID=debian\n")

        assert LocalTransport().read_file(str(path)) == b"ID=debian\n"


class TestRemotePlatformDetect:

    def test_linux_reads_os_release(self):
        transport = MockTransport(
            {("uname", "-s"): ("Linux\n", 0), ("uname", "-m"): ("aarch64\n", 0)},
            files={"/etc/os-release": b'ID=ubuntu\nVERSION_ID="22.04"\n'},
        )

        plat = Platform.detect(transport)

        assert plat == Platform(system="Linux", distro="ubuntu", version="22.04", arch="aarch64")

    def test_linux_without_os_release(self):
        transport = MockTransport({("uname", "-s"): ("Linux\n", 0)})

        assert Platform.detect(transport).distro == "unknown"

    def test_darwin(self):
        transport = MockTransport({
            ("uname", "-s"): ("Darwin\n", 0),
            ("uname", "-m"): ("arm64\n", 0),
            ("sw_vers",): ("14.4\n", 0),
        })

        plat = Platform.detect(transport)

        assert (plat.system, plat.distro, plat.version) == ("Darwin", "macos", "14.4")

    def test_windows_fallback(self):
        transport = MockTransport({
            ("uname",): ("'uname' is not recognized as an internal or external command", 1),
            ("powershell",): ("10.0.22631.0\r\n", 0),
        })

        plat = Platform.detect(transport)

        assert plat.system == "Windows"
        assert plat.version == "10.0.22631.0"
        assert transport.commands[1][0] == "powershell"

    def test_no_uname_and_no_powershell(self):
        transport = MockTransport({
            ("uname",): ("sh: uname: not found", EXIT_NOT_FOUND),
            ("powershell",): ("sh: powershell: not found", EXIT_NOT_FOUND),
        })

        with pytest.raises(OSError, match="Neither uname nor powershell"):
            Platform.detect(transport)

    @pytest.mark.parametrize("code", [EXIT_TIMEOUT, EXIT_CONNECTION])
    def test_unreachable_host_is_not_windows(self, code):
        transport = MockTransport({("uname",): ("uname: connection to lab-01 lost", code)})

        with pytest.raises(OSError):
            Platform.detect(transport)

        assert transport.commands == [["uname", "-s"]]
