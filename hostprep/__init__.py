__version__ = "0.1.0"

from hostprep.core import (
    Action,
    ApplyResult,
    ApplyStatus,
    Change,
    DesiredStateApplier,
    Plan,
    Platform,
    apply,
    plan,
)
from hostprep.config import ConfigurationRecord, load_record
from hostprep.accessor import SystemAccessor, HostnameAccessor, MemoryAccessor
from hostprep.bootstrap import Bootstrapper
from hostprep.logging import get_logger, get_host_logger, setup_logging

"""
Foundations of hostprep:
    ConfigurationRecord is the declarative target for a machine.
    SystemAccessor reads and writes the live machine attribute.
    DesiredStateApplier compares the two and changes the machine only on divergence.
    ApplyResult reports what happened: Success, AlreadyCompliant or Failed.
    Bootstrapper fetches configuration artifacts and loads the record.
"""

__all__ = [
    "Action",
    "ApplyResult",
    "ApplyStatus",
    "Change",
    "DesiredStateApplier",
    "Plan",
    "Platform",
    "apply",
    "plan",
    "ConfigurationRecord",
    "load_record",
    "SystemAccessor",
    "HostnameAccessor",
    "MemoryAccessor",
    "Bootstrapper",
    "get_logger",
    "get_host_logger",
    "setup_logging",
]
