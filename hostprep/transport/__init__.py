"""
Transport layer for local and remote command execution.

Provides abstraction for:
- Local command execution
- SSH remote execution
"""

from hostprep.transport.base import Transport
from hostprep.transport.local import LocalTransport
from hostprep.transport.ssh import SSHTransport

__all__ = ["Transport", "LocalTransport", "SSHTransport"]
