"""
System accessors - read and write live machine attributes.
"""

from hostprep.accessor.base import SystemAccessor
from hostprep.accessor.hostname import HostnameAccessor
from hostprep.accessor.memory import MemoryAccessor

__all__ = ["SystemAccessor", "HostnameAccessor", "MemoryAccessor"]
