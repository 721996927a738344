"""
In-memory accessor.
"""

from typing import List, Optional

from hostprep.accessor.base import SystemAccessor


class MemoryAccessor(SystemAccessor):
    """
    Holds a host name in memory and records every call.

    Writes are reflected by later reads, so repeated applies behave like
    a real machine. Errors can be primed for either operation.

    Example:
        accessor = MemoryAccessor("WIN-DEFAULT")
        accessor.set_error = AccessDenied("not elevated")
    """

    def __init__(self, name: str = "localhost"):
        self.name = name
        self.calls: List[str] = []
        self.get_error: Optional[Exception] = None
        self.set_error: Optional[Exception] = None

    def get_current_name(self) -> str:
        self.calls.append("get_current_name")
        if self.get_error is not None:
            raise self.get_error
        return self.name

    def set_name(self, name: str) -> None:
        self.calls.append("set_name")
        if self.set_error is not None:
            raise self.set_error
        self.name = name

    @property
    def set_calls(self) -> int:
        return self.calls.count("set_name")
