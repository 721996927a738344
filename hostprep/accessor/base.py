"""
Base accessor interface.

The applier talks to the machine only through this interface.
"""

from abc import ABC, abstractmethod


class SystemAccessor(ABC):
    """
    Abstract access to a machine's host name.

    Implementations:
    - HostnameAccessor: real machine via a Transport
    - MemoryAccessor: in-process stand-in for dry runs and tests
    """

    @abstractmethod
    def get_current_name(self) -> str:
        """
        Read the current host name.

        Raises:
            AccessDenied: If the caller may not read it
            Unavailable: If the underlying mechanism is not reachable
        """
        pass

    @abstractmethod
    def set_name(self, name: str) -> None:
        """
        Set the host name. Does not restart the machine.

        Raises:
            AccessDenied: If the caller may not change it
            InvalidName: If the operating system rejects the name
            Unavailable: If the underlying mechanism is not reachable
        """
        pass

    def close(self) -> None:
        """Release any held resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
